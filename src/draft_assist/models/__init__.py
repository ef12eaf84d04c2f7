"""Data models for the suggestion engine."""

from draft_assist.models.availability import ChannelName, ChannelStatus, EngineAvailability
from draft_assist.models.suggestion import Suggestion, Tone

__all__ = [
    "ChannelName",
    "ChannelStatus",
    "EngineAvailability",
    "Suggestion",
    "Tone",
]
