"""Hybrid named-entity recognition: gazetteer matcher + statistical labeler."""

from .base import SequenceLabeler
from .engine import NORMALIZED_LABELS, EntityMerger, build_labeler, merge_labels, rename_labels
from .gazetteer import GazetteerMatcher
from .guard import ConsistencyGuard
from .postprocess import EntityPostprocessor, entity_spans

__all__ = [
    "ConsistencyGuard",
    "EntityMerger",
    "EntityPostprocessor",
    "GazetteerMatcher",
    "NORMALIZED_LABELS",
    "SequenceLabeler",
    "build_labeler",
    "entity_spans",
    "merge_labels",
    "rename_labels",
]
