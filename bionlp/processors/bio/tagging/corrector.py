"""POS tag correction for biomedical verbs the generic tagger gets wrong."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Tuple

from ..stages import TagStage
from ..types import Token

logger = logging.getLogger(__name__)

# (suffix of the lowercased word, correct tag); first match wins
SUFFIX_TAG_RULES: Tuple[Tuple[str, str], ...] = (
    ("ubiquitinates", "VBZ"),
    ("ubiquitinate", "VB"),
    ("hydrolyzes", "VBZ"),
    ("sumoylates", "VBZ"),
    ("sumoylate", "VB"),
)


class TagCorrector(TagStage):
    """Overwrite the tag of tokens ending in a known mistagged suffix."""

    def __init__(self, rules: Optional[Sequence[Tuple[str, str]]] = None):
        self.rules: Tuple[Tuple[str, str], ...] = tuple(rules) if rules is not None else SUFFIX_TAG_RULES

    def corrected_tag(self, word: str) -> Optional[str]:
        """Tag the first matching rule assigns to *word*, or None."""
        text = word.lower()
        for suffix, tag in self.rules:
            if text.endswith(suffix):
                return tag
        return None

    def correct_tags(self, tokens: Iterable[Token]) -> None:
        changed = 0
        for token in tokens:
            tag = self.corrected_tag(token.word)
            if tag is not None and tag != token.tag:
                token.tag = tag
                changed += 1
        if changed:
            logger.debug("Corrected %s POS tags", changed)
