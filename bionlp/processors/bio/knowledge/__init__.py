"""Knowledge-base tables (protected terms, gazetteer, stop list) and their loaders."""

from .loader import (
    DEFAULT_GAZETTEERS,
    DEFAULT_KB_DIR,
    DEFAULT_PROTECTED_TERMS,
    DEFAULT_STOP_LIST,
    ResourceLoadError,
    SharedResource,
    clear_shared_resources,
    load_gazetteer,
    load_protected_terms,
    load_stop_list,
    shared_gazetteer,
    shared_protected_terms,
    shared_resource,
    shared_stop_list,
)
from .tables import Gazetteer, ProtectedTermTable

__all__ = [
    "DEFAULT_GAZETTEERS",
    "DEFAULT_KB_DIR",
    "DEFAULT_PROTECTED_TERMS",
    "DEFAULT_STOP_LIST",
    "Gazetteer",
    "ProtectedTermTable",
    "ResourceLoadError",
    "SharedResource",
    "clear_shared_resources",
    "load_gazetteer",
    "load_protected_terms",
    "load_stop_list",
    "shared_gazetteer",
    "shared_protected_terms",
    "shared_resource",
    "shared_stop_list",
]
