"""
Text normalization: blanks figure, table and bibliography references.

Every matched span is overwritten with spaces of the same length, so the
normalized text has exactly the length of the input and every offset a
tokenizer computes against it is also an offset into the original text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Pattern, Tuple

from .._text_utils import blank_spans
from ..stages import TextStage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlankingRule:
    """One entry of the blanking table. Lower priority runs first."""

    name: str
    pattern: Pattern[str]
    priority: int
    group: str


_AUTHOR = r"[A-Z][A-Za-z'\-]+"
_YEAR = r"(?:19|20)\d{2}[a-z]?"
_CITATION = rf"{_AUTHOR}(?:\s+(?:et\s+al\.?|and\s+{_AUTHOR}|&\s+{_AUTHOR}))?,?\s+{_YEAR}"

# The pattern with parens must run before the bare one: it is broader and
# claims the whole parenthetical.
BLANKING_RULES: Tuple[BlankingRule, ...] = (
    BlankingRule(
        name="figtab_parens",
        pattern=re.compile(r"\((\s*see)?\s*(figure|table|fig\.|tab\.)[^\)]*\)", re.IGNORECASE),
        priority=10,
        group="figures",
    ),
    BlankingRule(
        name="figtab_bare",
        pattern=re.compile(r"\s*see\s*(figure|table|fig\.|tab\.)\s*[0-9A-Za-z\.]+", re.IGNORECASE),
        priority=20,
        group="figures",
    ),
    BlankingRule(
        name="bib_parens",
        pattern=re.compile(rf"\(\s*{_CITATION}(?:\s*[;,]\s*{_CITATION})*\s*\)"),
        priority=30,
        group="bibliography",
    ),
    BlankingRule(
        name="bib_brackets",
        pattern=re.compile(r"(?<![0-9A-Za-z\]])\[\s*\d+(?:\s*[,\-–]\s*\d+)*\s*\](?![0-9A-Za-z\[(])"),
        priority=40,
        group="bibliography",
    ),
)


class TextNormalizer(TextStage):
    """Blank figure/table (and optionally bibliography) references."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        rules: Optional[Tuple[BlankingRule, ...]] = None,
    ):
        config = config or {}
        self.remove_figure_references = config.get("remove_figure_references", True)
        self.remove_bib_references = config.get("remove_bib_references", True)
        enabled_groups = set()
        if self.remove_figure_references:
            enabled_groups.add("figures")
        if self.remove_bib_references:
            enabled_groups.add("bibliography")
        self._rules = sorted(
            (r for r in (rules or BLANKING_RULES) if r.group in enabled_groups),
            key=lambda r: r.priority,
        )

    @property
    def rules(self) -> List[BlankingRule]:
        return list(self._rules)

    def normalize_text(self, text: str) -> str:
        """Return *text* with reference spans replaced by spaces."""
        result, _spans = self._apply(text)
        return result

    def blanked_spans(self, text: str) -> List[Tuple[int, int]]:
        """The ``(start, end)`` spans :meth:`normalize_text` would blank."""
        _result, spans = self._apply(text)
        return spans

    def _apply(self, text: str) -> Tuple[str, List[Tuple[int, int]]]:
        all_spans: List[Tuple[int, int]] = []
        for rule in self._rules:
            spans = [m.span() for m in rule.pattern.finditer(text) if m.end() > m.start()]
            if not spans:
                continue
            logger.debug("Rule %s blanked %s spans", rule.name, len(spans))
            text = blank_spans(text, spans)
            all_spans.extend(spans)
        all_spans.sort()
        return text, all_spans
