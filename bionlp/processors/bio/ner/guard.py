"""
Consistency guard: verifies that the external annotation and the internal
Document agree on sentence and token counts before any position-aligned
labeling happens.
"""

from __future__ import annotations

import logging

from ..types import Annotation, Document, GuardReport

logger = logging.getLogger(__name__)


class ConsistencyGuard:
    """Compare sentence count and per-sentence token counts. Never raises."""

    def check(self, document: Document, annotation: Annotation) -> GuardReport:
        expected = len(document.sentences)
        actual = annotation.sentence_count

        if expected != actual:
            report = GuardReport(
                ok=False,
                reason=f"sentence count mismatch: document has {expected}, annotation has {actual}",
                expected_sentences=expected,
                actual_sentences=actual,
            )
            logger.warning("Skipping entity recognition: %s", report.reason)
            return report

        mismatched = [
            i
            for i, (sentence, count) in enumerate(zip(document.sentences, annotation.token_counts))
            if len(sentence) != count
        ]
        if mismatched:
            first = mismatched[0]
            report = GuardReport(
                ok=False,
                reason=(
                    f"token count mismatch in {len(mismatched)} sentence(s); sentence {first} has "
                    f"{len(document.sentences[first])} tokens, annotation has "
                    f"{annotation.token_counts[first]}"
                ),
                expected_sentences=expected,
                actual_sentences=actual,
                mismatched_sentences=mismatched,
            )
            logger.warning("Skipping entity recognition: %s", report.reason)
            return report

        return GuardReport(ok=True, expected_sentences=expected, actual_sentences=actual)
