"""Pydantic models for channel availability."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ChannelName(str, Enum):
    CORRECTOR = "corrector"
    VARIANT_GENERATOR = "variant_generator"
    POLISHER = "polisher"


class ChannelStatus(str, Enum):
    """Result of a capability probe on one channel."""

    AVAILABLE = "available"
    DOWNLOADABLE = "downloadable"
    DOWNLOADING = "downloading"
    UNAVAILABLE = "unavailable"

    @property
    def usable(self) -> bool:
        return self in (ChannelStatus.AVAILABLE, ChannelStatus.DOWNLOADABLE)


class EngineAvailability(BaseModel):
    """Which channels ended up with a live session."""

    corrector: bool = False
    variant_generator: bool = False
    polisher: bool = False

    model_config = {"frozen": True}

    def is_available(self, channel: ChannelName | str) -> bool:
        return bool(getattr(self, ChannelName(channel).value))
