"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Callable
from unittest.mock import AsyncMock

import pytest

from draft_assist.clients.generation import GenerationService
from draft_assist.clients.llm_client import LLMClient, LLMResponse
from draft_assist.config import EngineConfig
from draft_assist.models.availability import ChannelStatus
from draft_assist.pipeline.engine import SuggestionEngine


def request_payload(messages: list[dict]):
    """Decode the JSON payload of the last user message."""
    return json.loads(messages[-1]["content"])


class FakeSession:
    """Scripted session. Replies come from ``handler`` or a queue of responses;
    exceptions in the queue are raised instead of returned."""

    def __init__(self, responses: list | None = None, handler: Callable | None = None):
        self.responses = list(responses or [])
        self.handler = handler
        self.calls: list[list[dict]] = []
        self.destroyed = False

    async def prompt(self, messages: list[dict]) -> str:
        self.calls.append(messages)
        if self.handler is not None:
            return self.handler(messages)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def destroy(self) -> None:
        self.destroyed = True


class FakeChannel:
    def __init__(
        self,
        session: FakeSession | None = None,
        status: ChannelStatus | str = ChannelStatus.AVAILABLE,
        create_error: Exception | None = None,
    ):
        self.session = session or FakeSession()
        self.status = status
        self.create_error = create_error
        self.preambles: list[str] = []

    async def availability(self):
        return self.status

    async def create(self, preamble: str) -> FakeSession:
        self.preambles.append(preamble)
        if self.create_error is not None:
            raise self.create_error
        return self.session


def _correct(sentence: str) -> str:
    return sentence.replace("I are", "I am").replace("teh", "the")


def corrector_handler(messages: list[dict]) -> str:
    return json.dumps([_correct(s) for s in request_payload(messages)])


def variant_handler(messages: list[dict]) -> str:
    payload = request_payload(messages)
    tone = payload["tone"]
    return json.dumps([[f"{s} ({tone})", s] for s in payload["sentences"]])


def polish_handler(messages: list[dict]) -> str:
    return "```\nPolished draft.\n```"


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_channel():
    return FakeChannel


@pytest.fixture
def corrector_session() -> FakeSession:
    return FakeSession(handler=corrector_handler)


@pytest.fixture
def variant_session() -> FakeSession:
    return FakeSession(handler=variant_handler)


@pytest.fixture
def polish_session() -> FakeSession:
    return FakeSession(handler=polish_handler)


@pytest.fixture
def fake_service(corrector_session, variant_session, polish_session) -> GenerationService:
    return GenerationService(
        corrector=FakeChannel(corrector_session),
        variant_generator=FakeChannel(variant_session),
        polisher=FakeChannel(polish_session),
    )


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(batch_size=2, max_retries=5)


@pytest.fixture
async def ready_engine(fake_service, engine_config) -> SuggestionEngine:
    engine = SuggestionEngine(fake_service, engine_config)
    await engine.initialize(user_activated=True)
    return engine


@pytest.fixture
def sample_draft() -> str:
    return (
        "I are happy to share teh news.\n\n"
        "Our team shipped the release on time! "
        "Thanks to everyone who helped. "
        "Questions? Reply to this email"
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="[]", input_tokens=100, output_tokens=50)
    )
    client.has_credentials = True
    return client
