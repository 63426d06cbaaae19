"""SciSpacy labeler: per-token IOB output of a scispaCy NER model."""

from __future__ import annotations

import logging
import threading
from typing import Sequence

from ..types import OUTSIDE, LabelSequence, Token
from .base import SequenceLabeler

logger = logging.getLogger(__name__)


class SpacyLabeler(SequenceLabeler):
    """Label tokens with a scispacy model (e.g. ``en_ner_bionlp13cg_md``)."""

    @property
    def name(self) -> str:
        return "scispacy"

    def __init__(self, model: str = "en_ner_bionlp13cg_md"):
        self._model_name = model
        self._nlp = None
        self._lock = threading.Lock()

    def load(self) -> None:
        if self._nlp is not None:
            return
        with self._lock:
            if self._nlp is not None:
                return
            try:
                import spacy

                self._nlp = spacy.load(self._model_name)
            except ImportError:
                raise ImportError(
                    "scispacy labeler requires spacy and a scispacy model. "
                    "Install with: pip install scispacy && "
                    "pip install https://s3-us-west-2.amazonaws.com/ai2-s2-scispacy/"
                    "releases/v0.5.4/en_ner_bionlp13cg_md-0.5.4.tar.gz"
                )
            except OSError:
                raise ImportError(
                    f"spaCy model '{self._model_name}' not found. "
                    "Install with: pip install https://s3-us-west-2.amazonaws.com/"
                    f"ai2-s2-scispacy/releases/v0.5.4/{self._model_name}-0.5.4.tar.gz"
                )
            logger.info("Loaded scispacy NER model %s", self._model_name)

    def label(self, tokens: Sequence[Token]) -> LabelSequence:
        if not tokens:
            return []
        self.load()
        from spacy.tokens import Doc

        tokens = list(tokens)
        words = [t.word for t in tokens]
        spaces = [a.end < b.start for a, b in zip(tokens, tokens[1:])] + [False]
        doc = Doc(self._nlp.vocab, words=words, spaces=spaces)
        for _name, proc in self._nlp.pipeline:
            doc = proc(doc)

        labels = []
        for t in doc:
            if t.ent_iob_ in ("B", "I") and t.ent_type_:
                labels.append(f"{t.ent_iob_}-{t.ent_type_}")
            else:
                labels.append(OUTSIDE)
        return labels
