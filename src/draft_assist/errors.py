"""Error taxonomy for the suggestion engine."""

from __future__ import annotations


class DraftAssistError(Exception):
    """Base class for every error raised by draft_assist."""


class UserGestureMissing(DraftAssistError):
    """Engine initialization was attempted without a user activation."""

    def __init__(self, message: str = "Generation requires an explicit user action"):
        super().__init__(message)


class ChannelUnavailable(DraftAssistError):
    """One or more required generation channels were never initialized."""

    def __init__(self, channels: list[str] | tuple[str, ...] | str):
        if isinstance(channels, str):
            channels = [channels]
        self.channels = list(channels)
        super().__init__(f"Channel unavailable: {', '.join(self.channels)}")


class MalformedResponse(DraftAssistError):
    """The generation service answered with text that does not fit the contract.

    ``kind`` is ``"syntax"`` when the text is not JSON at all and ``"shape"``
    when it parsed but has the wrong structure. Both are retried the same way.
    """

    def __init__(self, kind: str, detail: str):
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind} error: {detail}")


class GenerationFailed(DraftAssistError):
    """A session call raised or timed out inside the retry loop."""


class BatchGenerationExhausted(DraftAssistError):
    """A batch used up its retry budget. Absorbed by the orchestrator."""

    def __init__(self, channel: str, start: int, size: int, attempts: int):
        self.channel = channel
        self.start = start
        self.size = size
        self.attempts = attempts
        super().__init__(
            f"{channel}: batch at {start} ({size} sentences) "
            f"exhausted after {attempts} attempts"
        )
