"""
Generic pipeline driver.

Fixed stage order per document:

    normalize_text → annotator.tokenize → repair_tokens → annotator.tag
    → correct_tags → ConsistencyGuard → merge_entities → post-processing

Stages are strategy objects (see :mod:`.stages`); anything not supplied
falls back to a pass-through implementation. One document is processed
synchronously start to finish. The driver holds no per-document state, so
one instance can serve concurrent callers as long as its stages are
read-only.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .annotation import Annotator
from .ner.guard import ConsistencyGuard
from .ner.postprocess import EntityPostprocessor
from .stages import (
    EntityStage,
    NoEntities,
    PassThroughTags,
    PassThroughText,
    PassThroughTokens,
    TagStage,
    TextStage,
    TokenStage,
)
from .types import Annotation, Document, Sentence, Token

logger = logging.getLogger(__name__)


class Pipeline:
    """Run the annotation stages over one document at a time."""

    def __init__(
        self,
        annotator: Annotator,
        text_stage: Optional[TextStage] = None,
        token_stage: Optional[TokenStage] = None,
        tag_stage: Optional[TagStage] = None,
        entity_stage: Optional[EntityStage] = None,
        guard: Optional[ConsistencyGuard] = None,
        postprocessor: Optional[EntityPostprocessor] = None,
    ):
        self.annotator = annotator
        self.text_stage = text_stage or PassThroughText()
        self.token_stage = token_stage or PassThroughTokens()
        self.tag_stage = tag_stage or PassThroughTags()
        self.entity_stage = entity_stage or NoEntities()
        self.guard = guard or ConsistencyGuard()
        self.postprocessor = postprocessor

    def run(self, text: str) -> Document:
        """Annotate *text* and return the Document."""
        # 1. Length-preserving rewrite
        normalized = self.text_stage.normalize_text(text)
        if len(normalized) != len(text):
            raise ValueError(
                f"{type(self.text_stage).__name__} changed text length "
                f"from {len(text)} to {len(normalized)}"
            )

        # 2. External tokenization, then repair per sentence
        sentences: List[Sentence] = []
        for raw_tokens in self.annotator.tokenize(normalized):
            repaired = self.token_stage.repair_tokens(raw_tokens)
            if repaired:
                sentences.append(Sentence(tokens=repaired))

        document = Document(
            text=text,
            sentences=sentences,
            metadata={
                "annotator": self.annotator.name,
                "changed_characters": sum(
                    1 for a, b in zip(text, normalized) if a != b
                ),
            },
        )

        # 3. External tagging, then tag correction on the tagger's tokens
        annotation = self.annotator.tag(document.sentences)
        self.tag_stage.correct_tags(annotation.iter_tokens())
        self._copy_tags(annotation, document)

        # 4. Coreference is disabled for this domain
        document.coreference_chains = None

        # 5. Entity recognition, only when the structures agree
        self.recognize_entities(document, annotation)
        return document

    def recognize_entities(self, document: Document, annotation: Annotation) -> None:
        if not self.entity_stage.enabled:
            document.metadata["ner_skipped"] = True
            document.metadata["ner_skip_reason"] = "entity recognition disabled"
            return

        report = self.guard.check(document, annotation)
        if not report.ok:
            for sentence in document.sentences:
                sentence.clear_entities()
            document.metadata["ner_skipped"] = True
            document.metadata["ner_skip_reason"] = report.reason
            return

        for sentence in document.sentences:
            labels = self.entity_stage.merge_entities(sentence)
            if labels is None:
                continue
            sentence.set_entities(labels)
            if self.postprocessor is not None:
                self.postprocessor.process(sentence)

        document.metadata["ner_skipped"] = False
        document.metadata["ner_skip_reason"] = None

    @staticmethod
    def _copy_tags(annotation: Annotation, document: Document) -> None:
        """Write tags and lemmas back by character offsets.

        Offsets rather than positions, so tags survive even when the tagger
        segmented sentences differently.
        """
        by_span: Dict[Tuple[int, int], Token] = {
            (t.start, t.end): t for t in annotation.iter_tokens()
        }
        missing = 0
        for token in document.iter_tokens():
            tagged = by_span.get((token.start, token.end))
            if tagged is None:
                missing += 1
                continue
            token.tag = tagged.tag
            token.lemma = tagged.lemma
        if missing:
            logger.debug("%s tokens have no counterpart in the annotation", missing)
