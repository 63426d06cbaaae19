"""Abstract base class for statistical sequence labelers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ..types import LabelSequence, Token


class SequenceLabeler(ABC):
    """Interface every statistical labeler must implement.

    The labeler is a black box: one BIO tag per input token, in the model's
    native label vocabulary.
    """

    def load(self) -> None:
        """Load model weights. Called once at construction when eager."""

    @abstractmethod
    def label(self, tokens: Sequence[Token]) -> LabelSequence:
        """Return one tag per token of *tokens*."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier for this labeler (e.g. ``"transformer"``)."""
