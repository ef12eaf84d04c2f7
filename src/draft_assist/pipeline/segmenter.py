"""Sentence segmentation for draft text."""

from __future__ import annotations

import re

_NEWLINES = re.compile(r"\n+")

# First alternative prefers boundaries followed by something that looks like a
# sentence start; the second catches any remaining punctuation + whitespace.
_BOUNDARY = re.compile(
    r"(?<=[.!?])\s+(?=[A-Z0-9\"'(\[])"
    r"|(?<=[.!?])\s+"
)


def segment(text: str) -> list[str]:
    """Split ``text`` into trimmed, non-empty sentences in reading order.

    Paragraph breaks are folded into spaces first. Input without terminal
    punctuation comes back as a single sentence.
    """
    flattened = _NEWLINES.sub(" ", text)
    parts = [p.strip() for p in _BOUNDARY.split(flattened)]
    sentences = [p for p in parts if p]
    if not sentences and text.strip():
        return [text.strip()]
    return sentences
