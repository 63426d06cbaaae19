"""
Shared data types for the biomedical processing pipeline.

All stages of the pipeline (normalization, token repair, tag correction,
entity recognition) use these dataclasses to pass data between each other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# One BIO tag per token: "O", "B-<Type>" or "I-<Type>"
LabelSequence = List[str]

OUTSIDE = "O"


@dataclass
class Token:
    """A single token with offsets into the original (pre-normalization) text."""

    word: str
    start: int
    end: int
    tag: Optional[str] = None
    lemma: Optional[str] = None
    entity: Optional[str] = None

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "word": self.word,
            "start": self.start,
            "end": self.end,
            "tag": self.tag,
            "lemma": self.lemma,
            "entity": self.entity,
        }


@dataclass
class Sentence:
    """An ordered sequence of tokens with an optional BIO entity sequence."""

    tokens: List[Token] = field(default_factory=list)
    entities: Optional[LabelSequence] = None

    def __len__(self) -> int:
        return len(self.tokens)

    @property
    def words(self) -> List[str]:
        return [t.word for t in self.tokens]

    @property
    def tags(self) -> List[Optional[str]]:
        return [t.tag for t in self.tokens]

    @property
    def lemmas(self) -> List[Optional[str]]:
        return [t.lemma for t in self.tokens]

    @property
    def start_offsets(self) -> List[int]:
        return [t.start for t in self.tokens]

    @property
    def end_offsets(self) -> List[int]:
        return [t.end for t in self.tokens]

    def set_entities(self, labels: LabelSequence) -> None:
        """Attach a BIO sequence; its length must match the token count."""
        if len(labels) != len(self.tokens):
            raise ValueError(
                f"Entity sequence has {len(labels)} labels for {len(self.tokens)} tokens"
            )
        self.entities = list(labels)
        for token, label in zip(self.tokens, self.entities):
            token.entity = label

    def clear_entities(self) -> None:
        self.entities = None
        for token in self.tokens:
            token.entity = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "words": self.words,
            "start_offsets": self.start_offsets,
            "end_offsets": self.end_offsets,
            "tags": self.tags,
            "lemmas": self.lemmas,
            "entities": list(self.entities) if self.entities is not None else None,
        }


@dataclass
class Document:
    """An annotated document. Owns its sentences."""

    text: str
    sentences: List[Sentence] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    # Coreference resolution is disabled for biomedical text
    coreference_chains: Optional[List[Any]] = None

    @property
    def token_count(self) -> int:
        return sum(len(s) for s in self.sentences)

    def iter_tokens(self):
        for sentence in self.sentences:
            yield from sentence.tokens

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "text": self.text,
            "metadata": self.metadata,
            "sentences": [s.to_dict() for s in self.sentences],
            "coreference_chains": self.coreference_chains,
        }


@dataclass
class Annotation:
    """The external pipeline's view of a tagged document.

    ``sentences`` holds the tokens exactly as the external tagger segmented
    them, which may differ from the internal Document when the tagger
    re-splits sentences.
    """

    sentences: List[List[Token]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def sentence_count(self) -> int:
        return len(self.sentences)

    @property
    def token_counts(self) -> List[int]:
        return [len(s) for s in self.sentences]

    def iter_tokens(self):
        for sentence in self.sentences:
            yield from sentence


@dataclass
class GuardReport:
    """Outcome of comparing an Annotation with a Document."""

    ok: bool
    reason: Optional[str] = None
    expected_sentences: int = 0
    actual_sentences: int = 0
    mismatched_sentences: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "reason": self.reason,
            "expected_sentences": self.expected_sentences,
            "actual_sentences": self.actual_sentences,
            "mismatched_sentences": self.mismatched_sentences,
        }
