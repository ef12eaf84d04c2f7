"""Whole-draft tone rewrite."""

from __future__ import annotations

import logging

from draft_assist.clients.generation import Session
from draft_assist.pipeline.prompts import polish_messages
from draft_assist.utils.json_parser import strip_code_fences

logger = logging.getLogger(__name__)


class DraftPolisher:
    """Rewrite a full draft in one call. No batching, no retry."""

    def __init__(self, session: Session):
        self.session = session

    async def polish(self, draft: str, tone: str) -> str:
        """Return the polished draft. Errors from the session propagate."""
        if not draft or not draft.strip():
            return ""

        try:
            raw = await self.session.prompt(polish_messages(draft, tone))
        except Exception:
            logger.exception("Draft polishing failed")
            raise
        return strip_code_fences(raw)
