"""Part-of-speech tag corrections."""

from .corrector import SUFFIX_TAG_RULES, TagCorrector

__all__ = ["TagCorrector", "SUFFIX_TAG_RULES"]
