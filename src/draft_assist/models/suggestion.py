"""Pydantic models for reconciled suggestions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Tone(str, Enum):
    """Tones offered to the writer. Passed through to the channels as-is."""

    NEUTRAL = "neutral"
    FRIENDLY = "friendly"
    FORMAL = "formal"
    CONCISE = "concise"
    CASUAL = "casual"


class Suggestion(BaseModel):
    """Correction and rewrite variants for one sentence of the draft."""

    sentence: str
    corrected: str = ""            # empty when the corrector changed nothing
    variants: list[str] = []       # tone-adjusted rewrites, original order
