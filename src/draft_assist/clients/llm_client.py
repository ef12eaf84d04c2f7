"""Claude API wrapper with async support and retry logic."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client with optional exponential-backoff retries."""

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)

    @property
    def has_credentials(self) -> bool:
        return bool(getattr(self.client, "api_key", None))

    async def _create(
        self,
        messages: list[dict],
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        """Make a single API call."""
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        return await self.client.messages.create(**kwargs)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _call_api(self, **kwargs) -> anthropic.types.Message:
        """Make the API call, retrying transport errors."""
        return await self._create(**kwargs)

    async def generate(
        self,
        messages: list[dict] | str,
        system: str = "",
        model: str = "claude-haiku-4-5-20251001",
        temperature: float = 0.0,
        max_tokens: int = 2048,
        retry_transport: bool = True,
    ) -> LLMResponse:
        """Send chat messages (or a bare prompt) and return the text response with usage.

        With ``retry_transport=False`` exactly one request is made; callers
        that run their own retry loop use this so attempts are not multiplied.
        """
        if isinstance(messages, str):
            messages = [{"role": "user", "content": messages}]
        logger.debug("LLM call: model=%s, messages=%d", model, len(messages))
        call = self._call_api if retry_transport else self._create
        try:
            message = await call(
                messages=messages,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        text = "".join(
            block.text for block in message.content if isinstance(getattr(block, "text", None), str)
        )
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
