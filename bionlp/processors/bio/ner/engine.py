"""
Entity merger: runs the gazetteer matcher and the statistical labeler over
each sentence and merges their outputs into one BIO sequence.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from ..stages import EntityStage
from ..types import OUTSIDE, LabelSequence, Sentence, Token
from .base import SequenceLabeler
from .gazetteer import GazetteerMatcher

logger = logging.getLogger(__name__)

# Registry of labeler name → class path (lazy imports)
_LABELER_REGISTRY = {
    "transformer": ".transformer_backend:TransformerLabeler",
    "scispacy": ".scispacy_backend:SpacyLabeler",
}

# Statistical model vocabulary → canonical label vocabulary
NORMALIZED_LABELS: Dict[str, str] = {
    "B-GENE": "B-Gene_or_gene_product",
    "I-GENE": "I-Gene_or_gene_product",
    "B-GENE_OR_GENE_PRODUCT": "B-Gene_or_gene_product",
    "I-GENE_OR_GENE_PRODUCT": "I-Gene_or_gene_product",
    "B-SIMPLE_CHEMICAL": "B-Simple_chemical",
    "I-SIMPLE_CHEMICAL": "I-Simple_chemical",
    "B-CELLULAR_COMPONENT": "B-Cellular_component",
    "I-CELLULAR_COMPONENT": "I-Cellular_component",
}


def build_labeler(name: str, config: Optional[Dict[str, Any]] = None) -> SequenceLabeler:
    """Instantiate a statistical labeler by name."""
    config = config or {}
    if name == "transformer":
        from .transformer_backend import TransformerLabeler

        return TransformerLabeler(
            model=config.get("model", "models/bioner"),
            device=config.get("device"),
            max_length=config.get("max_length", 512),
        )
    elif name == "scispacy":
        from .scispacy_backend import SpacyLabeler

        return SpacyLabeler(model=config.get("model", "en_ner_bionlp13cg_md"))
    else:
        raise ValueError(
            f"Unknown statistical labeler: {name!r}. "
            f"Available: {list(_LABELER_REGISTRY)}"
        )


def rename_labels(labels: Sequence[str], table: Mapping[str, str]) -> LabelSequence:
    """Map model labels to canonical labels; unknown labels pass through."""
    return [table.get(label, label) for label in labels]


def merge_labels(gazetteer_labels: Sequence[str], statistical_labels: Sequence[str]) -> LabelSequence:
    """Positional merge: a non-O gazetteer label wins, otherwise the statistical one.

    Not span-aware. A statistical span cut by a gazetteer span may keep a
    dangling ``I-`` label at the boundary; that is left as is.
    """
    if len(gazetteer_labels) != len(statistical_labels):
        raise ValueError(
            f"Cannot merge label sequences of length {len(gazetteer_labels)} "
            f"and {len(statistical_labels)}"
        )
    return [
        rule if rule != OUTSIDE else stat
        for rule, stat in zip(gazetteer_labels, statistical_labels)
    ]


class EntityMerger(EntityStage):
    """Reconcile the gazetteer matcher and the statistical labeler."""

    def __init__(
        self,
        matcher: Optional[GazetteerMatcher] = None,
        labeler: Optional[SequenceLabeler] = None,
        label_map: Optional[Mapping[str, str]] = None,
    ):
        self.matcher = matcher
        self.labeler = labeler
        self.label_map = dict(NORMALIZED_LABELS if label_map is None else label_map)

    @property
    def enabled(self) -> bool:
        return self.matcher is not None or self.labeler is not None

    def merge_entities(self, sentence: Sentence) -> Optional[LabelSequence]:
        tokens = sentence.tokens
        rule_labels = self.matcher.label(tokens) if self.matcher is not None else None
        stat_labels = self.statistical_labels(tokens) if self.labeler is not None else None

        if rule_labels is None:
            return stat_labels
        if stat_labels is None:
            return rule_labels
        return merge_labels(rule_labels, stat_labels)

    def statistical_labels(self, tokens: Sequence[Token]) -> LabelSequence:
        """Labeler output in canonical vocabulary, always one label per token."""
        raw = list(self.labeler.label(tokens))
        if len(raw) != len(tokens):
            logger.error(
                "Labeler %s returned %s labels for %s tokens; using O for this sentence",
                self.labeler.name,
                len(raw),
                len(tokens),
            )
            return [OUTSIDE] * len(tokens)
        return rename_labels(raw, self.label_map)
