"""Generation channels backed by the Claude API."""

from __future__ import annotations

import logging

from draft_assist.clients.generation import GenerationService
from draft_assist.clients.llm_client import LLMClient
from draft_assist.config import AppConfig
from draft_assist.models.availability import ChannelStatus

logger = logging.getLogger(__name__)


class AnthropicSession:
    """A preamble-bound conversation handle on top of a shared LLMClient.

    Every prompt is sent with the preamble as system prompt. The session keeps
    no transcript between prompts so batches stay independent. Each prompt is
    a single request; retrying is left to the batch orchestrator.
    """

    def __init__(
        self,
        llm: LLMClient,
        preamble: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ):
        self.llm = llm
        self.preamble = preamble
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.closed = False

    async def prompt(self, messages: list[dict]) -> str:
        if self.closed:
            raise RuntimeError("Session already destroyed")
        response = await self.llm.generate(
            messages,
            system=self.preamble,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            retry_transport=False,
        )
        return response.text

    async def destroy(self) -> None:
        self.closed = True


class AnthropicChannel:
    """Channel factory: available whenever the client has an API key."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        model: str = "claude-haiku-4-5-20251001",
        temperature: float = 0.0,
        max_tokens: int = 2048,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def availability(self) -> ChannelStatus:
        if not self.llm.has_credentials:
            logger.info("No Anthropic API key configured; channel unavailable")
            return ChannelStatus.UNAVAILABLE
        return ChannelStatus.AVAILABLE

    async def create(self, preamble: str) -> AnthropicSession:
        return AnthropicSession(
            self.llm,
            preamble,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )


def build_service(config: AppConfig, llm: LLMClient | None = None) -> GenerationService:
    """Wire one Claude-backed channel per slot, sharing a single client."""
    if llm is None:
        llm = LLMClient(timeout=config.llm.timeout)

    def _channel(temperature: float) -> AnthropicChannel:
        return AnthropicChannel(
            llm,
            model=config.llm.model,
            temperature=temperature,
            max_tokens=config.llm.max_tokens,
        )

    return GenerationService(
        corrector=_channel(config.llm.corrector_temperature),
        variant_generator=_channel(config.llm.variant_temperature),
        polisher=_channel(config.llm.polish_temperature),
    )
