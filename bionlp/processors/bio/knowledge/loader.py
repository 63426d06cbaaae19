"""
Knowledge-base loading for the biomedical pipeline.

Files are parsed once per process and shared by every processor through
:func:`shared_resource`. A missing or unreadable file is fatal: it raises
:class:`ResourceLoadError` when the processor is constructed.
"""

from __future__ import annotations

import gzip
import logging
import threading
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterator,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypeVar,
    Union,
)

from .tables import Gazetteer, ProtectedTermTable

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
T = TypeVar("T")

DEFAULT_KB_DIR = Path(__file__).resolve().parents[3] / "data" / "kb"
DEFAULT_PROTECTED_TERMS = DEFAULT_KB_DIR / "protected_terms.txt"
DEFAULT_GAZETTEERS = [DEFAULT_KB_DIR / "gazetteer.tsv"]
DEFAULT_STOP_LIST = DEFAULT_KB_DIR / "ner_stoplist.txt"


class ResourceLoadError(RuntimeError):
    """Raised when a knowledge-base file is missing or unreadable"""

    pass


def _read_lines(path: PathLike) -> Iterator[str]:
    path = Path(path)
    if not path.is_file():
        raise ResourceLoadError(f"Knowledge-base file not found: {path}")
    try:
        if path.suffix == ".gz":
            with gzip.open(path, "rt", encoding="utf-8") as f:
                lines = f.read().splitlines()
        else:
            with open(path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise ResourceLoadError(f"Failed to read knowledge-base file {path}: {exc}") from exc
    return iter(lines)


def _content_lines(path: PathLike) -> Iterator[str]:
    """Non-empty, non-comment lines of *path*, stripped of the line break."""
    for line in _read_lines(path):
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        yield line.rstrip("\r\n")


def load_protected_terms(path: PathLike) -> ProtectedTermTable:
    """Load one protected term per line. Terms keep their case."""
    terms = [line.strip() for line in _content_lines(path)]
    table = ProtectedTermTable(terms)
    logger.info("Loaded %s protected terms from %s", len(table), path)
    return table


def parse_gazetteer_row(line: str) -> Tuple[str, str]:
    """Split a ``surface<TAB>type`` row. Raises ValueError when malformed."""
    fields = line.split("\t")
    if len(fields) != 2:
        raise ValueError(f"expected 2 tab-separated fields, got {len(fields)}")
    surface, entity_type = fields[0].strip(), fields[1].strip()
    if not surface or not entity_type:
        raise ValueError("empty surface form or entity type")
    return surface, entity_type


def load_gazetteer(paths: Union[PathLike, Sequence[PathLike]]) -> Gazetteer:
    """Load gazetteer TSV files; across files the first entry for a key wins."""
    if isinstance(paths, (str, Path)):
        paths = [paths]

    entries: Dict[str, str] = {}
    for path in paths:
        skipped = 0
        count = 0
        for lineno, line in enumerate(_read_lines(path), start=1):
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            try:
                surface, entity_type = parse_gazetteer_row(line)
            except ValueError as exc:
                skipped += 1
                logger.debug("Skipping malformed gazetteer row %s:%s (%s)", path, lineno, exc)
                continue
            entries.setdefault(surface, entity_type)
            count += 1
        if skipped:
            logger.warning("Skipped %s malformed rows in %s", skipped, path)
        logger.info("Loaded %s gazetteer rows from %s", count, path)

    return Gazetteer(entries)


def load_stop_list(path: PathLike) -> Set[str]:
    """Load entity surface forms that must never be labeled (lowercased)."""
    stop = {line.strip().lower() for line in _content_lines(path)}
    logger.info("Loaded %s NER stop-list entries from %s", len(stop), path)
    return stop


# ------------------------------------------------------------------
# Process-wide shared resources
# ------------------------------------------------------------------


class SharedResource(Generic[T]):
    """A value computed at most once, even under concurrent first use."""

    def __init__(self, loader: Callable[[], T]):
        self._loader = loader
        self._lock = threading.Lock()
        self._loaded = False
        self._value: Optional[T] = None

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self) -> T:
        if self._loaded:
            return self._value
        with self._lock:
            if not self._loaded:
                self._value = self._loader()
                self._loaded = True
        return self._value


_REGISTRY: Dict[Hashable, SharedResource[Any]] = {}
_REGISTRY_LOCK = threading.Lock()


def shared_resource(key: Hashable, loader: Callable[[], T]) -> T:
    """Return the value registered under *key*, loading it on first use.

    A failed load is not cached: the error propagates and the next call
    retries.
    """
    with _REGISTRY_LOCK:
        resource = _REGISTRY.get(key)
        if resource is None:
            resource = SharedResource(loader)
            _REGISTRY[key] = resource
    return resource.get()


def clear_shared_resources() -> None:
    """Forget every shared resource (used by tests)."""
    with _REGISTRY_LOCK:
        _REGISTRY.clear()


def _path_key(paths: Union[PathLike, Sequence[PathLike]]) -> Tuple[str, ...]:
    if isinstance(paths, (str, Path)):
        paths = [paths]
    return tuple(str(Path(p).resolve()) for p in paths)


def shared_protected_terms(path: PathLike) -> ProtectedTermTable:
    return shared_resource(("protected_terms",) + _path_key(path), lambda: load_protected_terms(path))


def shared_gazetteer(paths: Union[PathLike, Sequence[PathLike]]) -> Gazetteer:
    return shared_resource(("gazetteer",) + _path_key(paths), lambda: load_gazetteer(paths))


def shared_stop_list(path: PathLike) -> frozenset:
    return shared_resource(("stop_list",) + _path_key(path), lambda: frozenset(load_stop_list(path)))
