"""spaCy annotator: tokenization, sentence splitting, POS tags and lemmas."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence

from ..types import Annotation, Sentence, Token
from .base import Annotator

logger = logging.getLogger(__name__)

# Components that never contribute to tokens, tags, lemmas or sentences
_EXCLUDED_PIPES = ("ner", "entity_linker", "entity_ruler", "textcat", "textcat_multilabel")


class SpacyAnnotator(Annotator):
    """Annotator backed by a spaCy (or scispaCy) pipeline.

    Tokenization uses the model's tokenizer plus a rule-based sentencizer.
    Tagging rebuilds a ``Doc`` from the (repaired) words with the sentence
    starts preset and runs the model's remaining components over it. If the
    model's parser disagrees with the preset boundaries, the returned
    Annotation reflects the parser's segmentation.
    """

    @property
    def name(self) -> str:
        return "spacy"

    def __init__(self, model: str = "en_core_web_sm", punct_chars: Optional[List[str]] = None):
        self._model_name = model
        self._punct_chars = punct_chars
        self._nlp = None
        self._sentencizer = None
        self._lock = threading.Lock()

    def load(self) -> None:
        if self._nlp is not None:
            return
        with self._lock:
            if self._nlp is not None:
                return
            try:
                import spacy
                from spacy.pipeline import Sentencizer
            except ImportError:
                raise ImportError(
                    "spacy annotator requires spacy. Install with: pip install spacy"
                )
            try:
                nlp = spacy.load(self._model_name, exclude=list(_EXCLUDED_PIPES))
            except OSError:
                raise ImportError(
                    f"spaCy model '{self._model_name}' not found. "
                    f"Install with: python -m spacy download {self._model_name}"
                )
            self._sentencizer = Sentencizer(punct_chars=self._punct_chars)
            self._nlp = nlp
            logger.info("Loaded spaCy pipeline %s (%s)", self._model_name, ", ".join(nlp.pipe_names))

    def tokenize(self, text: str) -> List[List[Token]]:
        self.load()
        doc = self._sentencizer(self._nlp.make_doc(text))
        sentences: List[List[Token]] = []
        for sent in doc.sents:
            tokens = [
                Token(word=t.text, start=t.idx, end=t.idx + len(t.text))
                for t in sent
                if not t.is_space
            ]
            if tokens:
                sentences.append(tokens)
        return sentences

    def tag(self, sentences: Sequence[Sentence]) -> Annotation:
        self.load()
        from spacy.tokens import Doc

        flat: List[Token] = [t for s in sentences for t in s.tokens]
        if not flat:
            return Annotation(sentences=[], metadata={"annotator": self.name})

        words = [t.word for t in flat]
        spaces = [a.end < b.start for a, b in zip(flat, flat[1:])] + [False]
        sent_starts = [i == 0 for s in sentences for i in range(len(s.tokens))]

        doc = Doc(self._nlp.vocab, words=words, spaces=spaces, sent_starts=sent_starts)
        for _name, proc in self._nlp.pipeline:
            doc = proc(doc)

        tagged: List[List[Token]] = []
        for sent in doc.sents:
            tagged.append(
                [
                    Token(
                        word=t.text,
                        start=flat[t.i].start,
                        end=flat[t.i].end,
                        tag=t.tag_ or None,
                        lemma=t.lemma_ or t.text.lower(),
                    )
                    for t in sent
                ]
            )
        return Annotation(sentences=tagged, metadata={"annotator": self.name, "model": self._model_name})
