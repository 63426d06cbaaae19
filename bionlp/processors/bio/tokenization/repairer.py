"""
Token repair: biomedical corrections to the external tokenizer's output.

Two passes over each sentence:

1. Merge: adjacent tokens with no gap between them whose concatenation is a
   protected term become one token (longest run wins).
2. Split: tokens that are not protected terms are split by the configured
   rules (``slash``: ``A/B`` -> ``A / B``; ``dash_suffix``:
   ``Ras-dependent`` -> ``Ras - dependent``). The pieces a rule produces
   are split again, so ``Ras/Raf-dependent`` ends up as five tokens.

The span covered by the sentence never changes: merged tokens span exactly
the tokens they replace, and split pieces are cut from the original token.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..knowledge import ProtectedTermTable
from ..stages import TokenStage
from ..types import Token

logger = logging.getLogger(__name__)

# Second halves of dash compounds that are separate words in biomedical prose
VALID_DASH_SUFFIXES = frozenset(
    {
        "activated", "associated", "binding", "bound", "catalyzed", "containing",
        "controlled", "deficient", "dependent", "derived", "driven", "expressing",
        "independent", "induced", "inducible", "interacting", "lacking", "like",
        "linked", "mediated", "mutant", "negative", "phosphorylated", "positive",
        "regulated", "related", "responsive", "sensitive", "specific", "stimulated",
        "targeted", "transfected", "treated",
    }
)

_SLASH_COMPOUND = re.compile(r"[0-9A-Za-z_.]+(?:/[0-9A-Za-z_.]+)+")
_SLASH_PIECES = re.compile(r"[^/]+|/")
_DASH_SUFFIX = re.compile(r"(?P<head>.*[0-9A-Za-z].*?)(?P<dash>-)(?P<suffix>[A-Za-z]+)")

# Relative (start, end, is_delimiter) pieces of one token
Pieces = List[Tuple[int, int, bool]]


def _split_slash(word: str) -> Optional[Pieces]:
    if not _SLASH_COMPOUND.fullmatch(word):
        return None
    return [(m.start(), m.end(), m.group() == "/") for m in _SLASH_PIECES.finditer(word)]


def _split_dash_suffix(word: str) -> Optional[Pieces]:
    m = _DASH_SUFFIX.fullmatch(word)
    if m is None or m.group("suffix").lower() not in VALID_DASH_SUFFIXES:
        return None
    return [
        (m.start("head"), m.end("head"), False),
        (m.start("dash"), m.end("dash"), True),
        (m.start("suffix"), m.end("suffix"), False),
    ]


SPLIT_RULES = {
    "slash": _split_slash,
    "dash_suffix": _split_dash_suffix,
}


class TokenRepairer(TokenStage):
    """Merge protected terms, then split domain compounds."""

    def __init__(
        self,
        protected_terms: Optional[ProtectedTermTable] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        config = config or {}
        self.protected_terms = protected_terms or ProtectedTermTable()
        self.keep_delimiters = config.get("keep_delimiters", True)
        rule_names: Sequence[str] = config.get("split_rules", list(SPLIT_RULES))
        unknown = [n for n in rule_names if n not in SPLIT_RULES]
        if unknown:
            raise ValueError(
                f"Unknown split rule(s): {unknown}. Available: {list(SPLIT_RULES)}"
            )
        self._split_rules = [(n, SPLIT_RULES[n]) for n in rule_names]

    def repair_tokens(self, tokens: List[Token]) -> List[Token]:
        merged = self.merge_protected(tokens)
        repaired: List[Token] = []
        for token in merged:
            repaired.extend(self.split_token(token))
        return repaired

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def merge_protected(self, tokens: Sequence[Token]) -> List[Token]:
        """Rejoin runs of gapless tokens that spell a protected term."""
        if not len(self.protected_terms):
            return list(tokens)

        max_length = self.protected_terms.max_length
        output: List[Token] = []
        i = 0
        n = len(tokens)
        while i < n:
            best_end = None
            candidate = tokens[i].word
            j = i + 1
            while j < n and tokens[j - 1].end == tokens[j].start:
                candidate += tokens[j].word
                if len(candidate) > max_length:
                    break
                if candidate in self.protected_terms:
                    best_end = j
                j += 1

            if best_end is None:
                output.append(tokens[i])
                i += 1
                continue

            run = tokens[i : best_end + 1]
            merged = Token(
                word="".join(t.word for t in run),
                start=run[0].start,
                end=run[-1].end,
            )
            logger.debug("Merged %s tokens into protected term %r", len(run), merged.word)
            output.append(merged)
            i = best_end + 1
        return output

    # ------------------------------------------------------------------
    # Split
    # ------------------------------------------------------------------

    def split_token(self, token: Token) -> List[Token]:
        """Split *token* by the first matching rule, then split its pieces again.

        ``Ras/Raf-dependent`` becomes ``Ras / Raf - dependent``: the dash rule
        yields ``Ras/Raf``, which the slash rule then splits. Delimiters are
        never split further.
        """
        word = token.word
        if word in self.protected_terms or token.length != len(word):
            return [token]

        for name, rule in self._split_rules:
            pieces = rule(word)
            if not pieces:
                continue
            logger.debug("Split %r with rule %s", word, name)
            output: List[Token] = []
            for s, e, is_delimiter in pieces:
                piece = Token(word=word[s:e], start=token.start + s, end=token.start + e)
                if is_delimiter:
                    if self.keep_delimiters:
                        output.append(piece)
                elif len(piece.word) < len(word):
                    output.extend(self.split_token(piece))
                else:
                    output.append(piece)
            return output
        return [token]
