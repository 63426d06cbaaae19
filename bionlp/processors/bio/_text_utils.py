"""String helpers shared by the normalizer, token repairer and gazetteer."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .types import Token


def blank_spans(text: str, spans: Iterable[Tuple[int, int]]) -> str:
    """Replace every character inside *spans* with a space.

    The result always has the same length as *text*, so offsets computed
    against the output remain valid for the input.
    """
    chars: List[str] = []
    previous_end = 0
    for start, end in sorted(spans):
        if start < previous_end:
            start = previous_end
        if end <= start:
            continue
        chars.append(text[previous_end:start])
        chars.append(" " * (end - start))
        previous_end = end
    chars.append(text[previous_end:])
    return "".join(chars)


def join_tokens(tokens: Sequence[Token]) -> str:
    """Rebuild the surface of *tokens*: one space per gap, nothing otherwise."""
    parts: List[str] = []
    previous_end = None
    for token in tokens:
        if previous_end is not None and token.start > previous_end:
            parts.append(" ")
        parts.append(token.word)
        previous_end = token.end
    return "".join(parts)


def is_contiguous(tokens: Sequence[Token]) -> bool:
    """True when no characters separate consecutive tokens."""
    return all(a.end == b.start for a, b in zip(tokens, tokens[1:]))


def normalize_surface(text: str) -> str:
    """Lowercase and collapse whitespace (gazetteer key form)."""
    return " ".join(text.lower().split())


def has_alnum(text: str) -> bool:
    return any(ch.isalnum() for ch in text)
