"""Contract between the engine and a text-generation service.

A service exposes one factory per channel. A factory answers a capability
probe and creates long-lived sessions bound to an instruction preamble; a
session turns a list of chat messages into one text reply.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from draft_assist.models.availability import ChannelName, ChannelStatus


@runtime_checkable
class Session(Protocol):
    async def prompt(self, messages: list[dict]) -> str: ...

    async def destroy(self) -> None: ...


@runtime_checkable
class ChannelFactory(Protocol):
    async def availability(self) -> ChannelStatus: ...

    async def create(self, preamble: str) -> Session: ...


@dataclass
class GenerationService:
    """One optional factory per channel. ``None`` means the host lacks it."""

    corrector: ChannelFactory | None = None
    variant_generator: ChannelFactory | None = None
    polisher: ChannelFactory | None = None

    def factory_for(self, channel: ChannelName) -> ChannelFactory | None:
        return getattr(self, channel.value)
