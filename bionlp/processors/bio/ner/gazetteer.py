"""Gazetteer matcher: dictionary-based entity labeling over token spans."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .._text_utils import join_tokens, normalize_surface
from ..knowledge import Gazetteer
from ..types import OUTSIDE, LabelSequence, Token

logger = logging.getLogger(__name__)


class GazetteerMatcher:
    """Longest-match-first lookup of contiguous token spans in a Gazetteer."""

    def __init__(self, gazetteer: Gazetteer, max_tokens: Optional[int] = None):
        self.gazetteer = gazetteer
        self.max_tokens = max_tokens

    def find(self, tokens: Sequence[Token]) -> List[Tuple[int, int, str]]:
        """Return non-overlapping ``(start, end, type)`` token spans, end exclusive."""
        if not len(self.gazetteer):
            return []

        max_chars = self.gazetteer.max_length
        n = len(tokens)
        matches: List[Tuple[int, int, str]] = []
        i = 0
        while i < n:
            # Grow the window until the candidate cannot fit any key
            limit = i
            while limit < n:
                if self.max_tokens is not None and limit - i >= self.max_tokens:
                    break
                if len(normalize_surface(join_tokens(tokens[i : limit + 1]))) > max_chars:
                    break
                limit += 1

            hit = None
            for j in range(limit, i, -1):
                entity_type = self.gazetteer.lookup(join_tokens(tokens[i:j]))
                if entity_type is not None:
                    hit = (i, j, entity_type)
                    break

            if hit is None:
                i += 1
                continue
            matches.append(hit)
            i = hit[1]
        return matches

    def label(self, tokens: Sequence[Token]) -> LabelSequence:
        """BIO sequence for *tokens*: matched spans get B-/I-, the rest O."""
        labels: LabelSequence = [OUTSIDE] * len(tokens)
        for start, end, entity_type in self.find(tokens):
            labels[start] = f"B-{entity_type}"
            for k in range(start + 1, end):
                labels[k] = f"I-{entity_type}"
        return labels
