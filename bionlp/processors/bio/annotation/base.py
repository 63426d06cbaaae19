"""Abstract base class for the external tokenizer / tagger pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..types import Annotation, Sentence, Token


class Annotator(ABC):
    """Interface every external annotation pipeline must implement."""

    @abstractmethod
    def tokenize(self, text: str) -> List[List[Token]]:
        """Split *text* into sentences of tokens with character offsets.

        Whitespace-only tokens are not returned.
        """

    @abstractmethod
    def tag(self, sentences: Sequence[Sentence]) -> Annotation:
        """POS-tag and lemmatize *sentences*, returning the tagger's own view."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier for this annotator (e.g. ``"spacy"``)."""
