"""External annotation pipeline (tokenizer, sentence splitter, POS tagger)."""

from .base import Annotator

__all__ = ["Annotator"]
