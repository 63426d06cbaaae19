"""Entity post-processing: drops labeled spans that cannot be real entities."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .._text_utils import has_alnum, join_tokens
from ..types import OUTSIDE, Sentence

logger = logging.getLogger(__name__)


def entity_spans(labels: List[str]) -> List[Tuple[int, int, str]]:
    """``(start, end, type)`` of every span opened by a ``B-`` label.

    A span continues over following ``I-`` labels of the same type. ``I-``
    labels with no opening ``B-`` do not start a span.
    """
    spans: List[Tuple[int, int, str]] = []
    i = 0
    n = len(labels)
    while i < n:
        label = labels[i]
        if not label.startswith("B-"):
            i += 1
            continue
        entity_type = label[2:]
        j = i + 1
        while j < n and labels[j] == f"I-{entity_type}":
            j += 1
        spans.append((i, j, entity_type))
        i = j
    return spans


class EntityPostprocessor:
    """Reset spans whose text is in the stop list or has no letter or digit."""

    def __init__(self, stop_list: Optional[Iterable[str]] = None):
        self.stop_list = frozenset(s.lower() for s in (stop_list or ()))

    def process(self, sentence: Sentence) -> None:
        if sentence.entities is None:
            return
        labels = list(sentence.entities)
        removed = 0
        for start, end, _entity_type in entity_spans(labels):
            surface = join_tokens(sentence.tokens[start:end])
            if surface.lower() in self.stop_list or not has_alnum(surface):
                for k in range(start, end):
                    labels[k] = OUTSIDE
                removed += 1
        if removed:
            logger.debug("Removed %s entity spans in post-processing", removed)
            sentence.set_entities(labels)
