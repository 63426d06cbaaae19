"""Post-corrections to the external tokenizer's output."""

from .repairer import SPLIT_RULES, VALID_DASH_SUFFIXES, TokenRepairer

__all__ = ["TokenRepairer", "SPLIT_RULES", "VALID_DASH_SUFFIXES"]
