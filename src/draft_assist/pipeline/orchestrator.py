"""Batch request orchestrator: batching, bounded retry and shape validation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from tenacity import RetryError

from draft_assist.clients.generation import Session
from draft_assist.config import EngineConfig
from draft_assist.errors import BatchGenerationExhausted, GenerationFailed, MalformedResponse
from draft_assist.utils.json_parser import SHAPE, parse_batch
from draft_assist.utils.retry import RetryPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchTask:
    """What one channel expects: how to build a request, what a valid item
    looks like, and what to substitute when a batch gives up."""

    name: str
    build_messages: Callable[[list[str], Any], list[dict]]
    item_check: Callable[[Any], bool]
    fallback_item: Callable[[], Any]

    def fallback(self, size: int) -> list:
        return [self.fallback_item() for _ in range(size)]


class BatchOrchestrator:
    """Send sentences to a channel session in fixed-size batches.

    Each batch is retried as a whole until it yields an array of the right
    length and element type, or the retry policy gives up, in which case the
    batch falls back to one empty item per sentence. A failed batch never
    affects its neighbours.
    """

    def __init__(
        self,
        batch_size: int = 5,
        retry_policy: RetryPolicy | None = None,
        *,
        attempt_timeout: float | None = None,
        parallel: bool = False,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.batch_size = batch_size
        self.retry_policy = retry_policy or RetryPolicy()
        self.attempt_timeout = attempt_timeout
        self.parallel = parallel

    @classmethod
    def from_config(cls, config: EngineConfig) -> BatchOrchestrator:
        return cls(
            batch_size=config.batch_size,
            retry_policy=RetryPolicy.fixed(config.max_retries, config.retry_wait),
            attempt_timeout=config.attempt_timeout,
            parallel=config.parallel_batches,
        )

    def batches(self, sentences: list[str]) -> list[tuple[int, list[str]]]:
        size = self.batch_size
        return [(start, sentences[start : start + size]) for start in range(0, len(sentences), size)]

    async def run_channel(
        self,
        task: BatchTask,
        session: Session,
        sentences: list[str],
        extra: Any = None,
    ) -> list:
        """Return one result item per sentence, in sentence order."""
        batches = self.batches(list(sentences))
        if self.parallel:
            pending = [
                asyncio.ensure_future(self._run_or_fallback(task, session, start, batch, extra))
                for start, batch in batches
            ]
            try:
                results = await asyncio.gather(*pending)
            except BaseException:
                for future in pending:
                    future.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                raise
        else:
            results = []
            for start, batch in batches:
                results.append(await self._run_or_fallback(task, session, start, batch, extra))

        merged: list = []
        for items in results:
            merged.extend(items)
        return merged

    async def _run_or_fallback(
        self,
        task: BatchTask,
        session: Session,
        start: int,
        batch: list[str],
        extra: Any,
    ) -> list:
        try:
            return await self._run_batch(task, session, start, batch, extra)
        except BatchGenerationExhausted as exc:
            logger.warning("%s; using fallback", exc)
            return task.fallback(len(batch))

    async def _run_batch(
        self,
        task: BatchTask,
        session: Session,
        start: int,
        batch: list[str],
        extra: Any,
    ) -> list:
        result: list = []
        try:
            async for attempt in self.retry_policy.retrying():
                with attempt:
                    result = await self._attempt(
                        task, session, batch, extra, attempt.retry_state.attempt_number
                    )
        except RetryError as exc:
            last = exc.last_attempt
            raise BatchGenerationExhausted(
                task.name, start, len(batch), last.attempt_number
            ) from last.exception()
        return result

    async def _attempt(
        self,
        task: BatchTask,
        session: Session,
        batch: list[str],
        extra: Any,
        attempt_number: int,
    ) -> list:
        messages = task.build_messages(batch, extra)
        try:
            if self.attempt_timeout is not None:
                raw = await asyncio.wait_for(session.prompt(messages), self.attempt_timeout)
            else:
                raw = await session.prompt(messages)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "%s: attempt %d timed out after %.1fs", task.name, attempt_number, self.attempt_timeout
            )
            raise GenerationFailed(f"{task.name} attempt timed out") from exc
        except Exception as exc:
            logger.warning("%s: attempt %d failed: %s", task.name, attempt_number, exc)
            raise GenerationFailed(f"{task.name} prompt failed: {exc}") from exc

        parsed = parse_batch(raw, len(batch), task.item_check)
        if not parsed.success:
            if parsed.kind == SHAPE:
                logger.warning(
                    "%s: attempt %d returned wrong shape: %s", task.name, attempt_number, parsed.error
                )
            else:
                logger.info(
                    "%s: attempt %d returned invalid JSON: %s", task.name, attempt_number, parsed.error
                )
            raise MalformedResponse(parsed.kind, parsed.error)
        logger.debug("%s: batch of %d ok on attempt %d", task.name, len(batch), attempt_number)
        return parsed.value
