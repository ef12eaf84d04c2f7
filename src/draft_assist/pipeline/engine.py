"""Suggestion engine: channel lifecycle plus the two public operations."""

from __future__ import annotations

import asyncio
import logging

from draft_assist.clients.generation import GenerationService, Session
from draft_assist.config import EngineConfig
from draft_assist.errors import ChannelUnavailable, DraftAssistError, UserGestureMissing
from draft_assist.models.availability import ChannelName, ChannelStatus, EngineAvailability
from draft_assist.models.suggestion import Suggestion
from draft_assist.pipeline.orchestrator import BatchOrchestrator
from draft_assist.pipeline.polisher import DraftPolisher
from draft_assist.pipeline.prompts import (
    CORRECTION_TASK,
    POLISH_PREAMBLE,
    VARIANT_TASK,
    corrector_preamble,
    variant_preamble,
)
from draft_assist.pipeline.reconciler import reconcile
from draft_assist.pipeline.segmenter import segment

logger = logging.getLogger(__name__)


class SuggestionEngine:
    """Long-lived context object owning one session per generation channel.

    Construct it once, call :meth:`initialize` from a user action, then reuse
    it for every suggestion and polish request. Concurrent first callers share
    a single initialization task.
    """

    def __init__(
        self,
        service: GenerationService,
        config: EngineConfig | None = None,
        *,
        orchestrator: BatchOrchestrator | None = None,
    ):
        self.service = service
        self.config = config or EngineConfig()
        self.orchestrator = orchestrator or BatchOrchestrator.from_config(self.config)
        self._sessions: dict[ChannelName, Session] = {}
        self._availability = EngineAvailability()
        self._init_task: asyncio.Future | None = None
        self._closed = False

    @property
    def availability(self) -> EngineAvailability:
        return self._availability

    @property
    def initialized(self) -> bool:
        task = self._init_task
        return task is not None and task.done() and not task.cancelled() and task.exception() is None

    async def initialize(self, *, user_activated: bool) -> None:
        """Probe every channel and open sessions for the usable ones.

        Raises UserGestureMissing, leaving every channel unavailable, when
        called without a user activation. No-op once initialized.
        A failed initialization is forgotten so a later call can retry it.
        """
        if self._closed:
            raise DraftAssistError("Engine has been closed; create a new one")
        if self._init_task is None:
            if not user_activated:
                logger.warning("Initialization refused: no user activation")
                raise UserGestureMissing()
            self._init_task = asyncio.ensure_future(self._open_channels())
        task = self._init_task
        try:
            await asyncio.shield(task)
        except Exception:
            if self._init_task is task and task.done():
                logger.warning("Initialization failed; it will be retried on the next call")
                self._init_task = None
            raise

    async def _open_channels(self) -> None:
        preambles = {
            ChannelName.CORRECTOR: corrector_preamble(self.config.expected_input_languages),
            ChannelName.VARIANT_GENERATOR: variant_preamble(self.config.variants_per_sentence),
            ChannelName.POLISHER: POLISH_PREAMBLE,
        }
        channels = list(ChannelName)
        sessions = await asyncio.gather(
            *(self._open_channel(channel, preambles[channel]) for channel in channels)
        )
        for channel, session in zip(channels, sessions):
            if session is not None:
                self._sessions[channel] = session
        self._availability = EngineAvailability(
            **{channel.value: channel in self._sessions for channel in channels}
        )
        logger.info("Engine initialized: %s", self._availability.model_dump())

    async def _open_channel(self, channel: ChannelName, preamble: str) -> Session | None:
        factory = self.service.factory_for(channel)
        if factory is None:
            logger.info("%s: not provided by the host", channel.value)
            return None
        try:
            status = ChannelStatus(await factory.availability())
        except Exception:
            logger.warning("%s: availability probe failed", channel.value, exc_info=True)
            return None
        if not status.usable:
            logger.info("%s: %s, skipping", channel.value, status.value)
            return None
        try:
            return await factory.create(preamble)
        except Exception:
            logger.warning("%s: session creation failed", channel.value, exc_info=True)
            return None

    def _require(self, *channels: ChannelName) -> None:
        missing = [c.value for c in channels if c not in self._sessions]
        if missing:
            raise ChannelUnavailable(missing)

    async def get_suggestions(self, sentences: list[str], tone: str) -> list[Suggestion]:
        """Correct and rewrite ``sentences``, returning only useful suggestions."""
        self._require(ChannelName.CORRECTOR, ChannelName.VARIANT_GENERATOR)
        sentences = list(sentences)
        if not sentences:
            return []

        corrections, variant_sets = await asyncio.gather(
            self.orchestrator.run_channel(
                CORRECTION_TASK, self._sessions[ChannelName.CORRECTOR], sentences
            ),
            self.orchestrator.run_channel(
                VARIANT_TASK, self._sessions[ChannelName.VARIANT_GENERATOR], sentences, tone
            ),
        )
        suggestions = reconcile(sentences, corrections, variant_sets)
        logger.debug("%d sentences -> %d suggestions", len(sentences), len(suggestions))
        return suggestions

    async def suggest_text(self, text: str, tone: str) -> list[Suggestion]:
        """Segment a raw draft and run :meth:`get_suggestions` on it."""
        return await self.get_suggestions(segment(text), tone)

    async def polish_draft(self, draft: str, tone: str) -> str:
        self._require(ChannelName.POLISHER)
        return await DraftPolisher(self._sessions[ChannelName.POLISHER]).polish(draft, tone)

    async def close(self) -> None:
        """Destroy every open session. The engine cannot be reused afterwards."""
        self._closed = True
        if self._init_task is not None and not self._init_task.done():
            try:
                await asyncio.shield(self._init_task)
            except Exception:
                logger.warning("Initialization failed while closing", exc_info=True)
        sessions, self._sessions = self._sessions, {}
        self._availability = EngineAvailability()
        for channel, session in sessions.items():
            try:
                await session.destroy()
            except Exception:
                logger.warning("%s: failed to destroy session", channel.value, exc_info=True)

    async def __aenter__(self) -> SuggestionEngine:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
