"""Bounded retry policy built on tenacity."""

from __future__ import annotations

from dataclasses import dataclass, field

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
    wait_none,
)
from tenacity.wait import wait_base

from draft_assist.errors import GenerationFailed, MalformedResponse

RETRYABLE = (MalformedResponse, GenerationFailed)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times a batch is re-sent and how long to wait in between.

    ``max_retries`` counts retries, so a batch is attempted
    ``max_retries + 1`` times in total.
    """

    max_retries: int = 5
    wait: wait_base = field(default_factory=wait_none)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @classmethod
    def fixed(cls, max_retries: int, seconds: float) -> RetryPolicy:
        return cls(max_retries=max_retries, wait=wait_fixed(seconds) if seconds else wait_none())

    def retrying(self) -> AsyncRetrying:
        # reraise=False: exhaustion surfaces as tenacity.RetryError
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.wait,
            retry=retry_if_exception_type(RETRYABLE),
            reraise=False,
        )
