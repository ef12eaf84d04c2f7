"""Tests for the bounded retry policy."""

import pytest
from tenacity import RetryError, wait_fixed, wait_none

from draft_assist.errors import GenerationFailed, MalformedResponse
from draft_assist.utils.retry import RetryPolicy


async def _run(policy: RetryPolicy, outcomes: list):
    calls = 0
    result = None
    async for attempt in policy.retrying():
        with attempt:
            calls += 1
            item = outcomes.pop(0)
            if isinstance(item, Exception):
                raise item
            result = item
    return result, calls


class TestRetryPolicy:
    def test_attempts_include_first_try(self):
        assert RetryPolicy(max_retries=5).max_attempts == 6
        assert RetryPolicy(max_retries=0).max_attempts == 1

    def test_fixed_zero_means_no_wait(self):
        assert isinstance(RetryPolicy.fixed(3, 0).wait, wait_none)

    def test_fixed_delay(self):
        assert isinstance(RetryPolicy.fixed(3, 0.5).wait, wait_fixed)

    async def test_retries_malformed_then_succeeds(self):
        outcomes = [MalformedResponse("syntax", "x"), GenerationFailed("boom"), "ok"]
        result, calls = await _run(RetryPolicy(max_retries=5), outcomes)
        assert result == "ok"
        assert calls == 3

    async def test_exhaustion_raises_retry_error(self):
        outcomes = [MalformedResponse("shape", "x")] * 3
        with pytest.raises(RetryError) as info:
            await _run(RetryPolicy(max_retries=2), outcomes)
        assert info.value.last_attempt.attempt_number == 3

    async def test_other_errors_are_not_retried(self):
        outcomes = [KeyError("bug"), "never"]
        with pytest.raises(KeyError):
            await _run(RetryPolicy(max_retries=5), outcomes)
        assert outcomes == ["never"]
