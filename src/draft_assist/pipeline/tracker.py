"""Keep only the newest suggestion request authoritative."""

from __future__ import annotations

import logging

from draft_assist.models.suggestion import Suggestion
from draft_assist.pipeline.engine import SuggestionEngine
from draft_assist.pipeline.segmenter import segment

logger = logging.getLogger(__name__)


class SuggestionTracker:
    """Wrap an engine for a caller that re-requests as the writer types.

    Every request takes the next epoch number. A response whose epoch is no
    longer the newest is dropped instead of replacing ``latest``.
    """

    def __init__(self, engine: SuggestionEngine):
        self.engine = engine
        self.latest: list[Suggestion] = []
        self.latest_epoch = 0
        self._epoch = 0

    @property
    def epoch(self) -> int:
        return self._epoch

    def is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    async def request(self, sentences: list[str], tone: str) -> list[Suggestion] | None:
        """Return suggestions, or None if a newer request started meanwhile."""
        self._epoch += 1
        epoch = self._epoch
        result = await self.engine.get_suggestions(sentences, tone)
        if not self.is_current(epoch):
            logger.debug("Dropping stale suggestions (epoch %d, newest %d)", epoch, self._epoch)
            return None
        self.latest = result
        self.latest_epoch = epoch
        return result

    async def request_text(self, text: str, tone: str) -> list[Suggestion] | None:
        return await self.request(segment(text), tone)
