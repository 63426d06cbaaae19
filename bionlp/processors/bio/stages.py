"""
Stage interfaces for the generic pipeline driver.

Each stage is a strategy object with one fixed method. The generic pipeline
uses the pass-through implementations below; the biomedical configuration
swaps in its own (see :mod:`.processor`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .types import LabelSequence, Sentence, Token


class TextStage(ABC):
    """Rewrites raw text before tokenization. Must preserve length."""

    @abstractmethod
    def normalize_text(self, text: str) -> str:
        """Return *text* rewritten, with exactly the same length."""


class TokenStage(ABC):
    """Corrects token boundaries of one sentence."""

    @abstractmethod
    def repair_tokens(self, tokens: List[Token]) -> List[Token]:
        """Return the corrected token sequence covering the same span."""


class TagStage(ABC):
    """Patches part-of-speech tags in place."""

    @abstractmethod
    def correct_tags(self, tokens: Iterable[Token]) -> None:
        """Overwrite wrong tags on *tokens*."""


class EntityStage(ABC):
    """Produces the BIO sequence of one sentence."""

    @property
    def enabled(self) -> bool:
        return True

    @abstractmethod
    def merge_entities(self, sentence: Sentence) -> Optional[LabelSequence]:
        """Return one label per token of *sentence*, or None for no labels."""


class PassThroughText(TextStage):
    def normalize_text(self, text: str) -> str:
        return text


class PassThroughTokens(TokenStage):
    def repair_tokens(self, tokens: List[Token]) -> List[Token]:
        return list(tokens)


class PassThroughTags(TagStage):
    def correct_tags(self, tokens: Iterable[Token]) -> None:
        return None


class NoEntities(EntityStage):
    """Entity recognition switched off."""

    @property
    def enabled(self) -> bool:
        return False

    def merge_entities(self, sentence: Sentence) -> Optional[LabelSequence]:
        return None
