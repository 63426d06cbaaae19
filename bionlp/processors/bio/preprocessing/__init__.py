"""Length-preserving text normalization applied before tokenization."""

from .normalizer import BLANKING_RULES, BlankingRule, TextNormalizer

__all__ = ["TextNormalizer", "BlankingRule", "BLANKING_RULES"]
