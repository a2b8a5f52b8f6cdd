"""Pytest configuration and shared fixtures."""
import asyncio
import json
import os

import pytest

from healthchat.errors import GatewayError
from healthchat.gateway import CompletionGateway, GatewayContext
from healthchat.history import InMemoryConversationStore, LocalConversationStore, Message
from healthchat.storage import InMemoryStorage


class FakeGateway(CompletionGateway):
    """Gateway returning scripted replies and recording every call."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls: list[tuple[list[Message], GatewayContext]] = []
        self.closed = False

    async def send(self, messages, context):
        self.check_messages(messages)
        self.calls.append((list(messages), context))
        reply = self.replies.pop(0) if self.replies else "ok"
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def close(self):
        self.closed = True


class BlockingGateway(FakeGateway):
    """Gateway that waits until released, to observe the in-flight state."""

    def __init__(self, reply="ok"):
        super().__init__([reply])
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def send(self, messages, context):
        self.started.set()
        await self.release.wait()
        return await super().send(messages, context)


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "ai_gateway": os.getenv("AI_GATEWAY_API_KEY"),
        "function_url": os.getenv("HEALTHCHAT_FUNCTION_URL"),
    }


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def local_store(storage):
    return LocalConversationStore(storage)


@pytest.fixture
def memory_store():
    return InMemoryConversationStore()


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def make_gateway():
    """Factory for gateways with scripted replies (strings or exceptions)."""
    return FakeGateway


@pytest.fixture
def make_blocking_gateway():
    return BlockingGateway


@pytest.fixture
def gateway_error():
    return GatewayError("AI gateway error", status_code=500)


@pytest.fixture
def knee_answer():
    """Structured reply for a knee question."""
    return json.dumps({
        "anatomical_name": "Patella",
        "confidence_score": 82,
        "urgency": "MEDIUM",
        "possible_causes": ["Patellofemoral pain syndrome", "Meniscus tear"],
        "red_flags": ["Unable to bear weight"],
        "self_care": ["Rest", "Ice for 15 minutes"],
        "yoga_suggestions": ["Bridge pose"],
        "diet_suggestions": ["Omega-3 rich foods"],
        "recommended_tests": ["Knee X-ray"],
        "sources": [
            {"title": "Mayo Clinic", "link": "https://mayoclinic.org", "excerpt": "Knee pain is common"},
            {"title": "WHO"},
        ],
        "disclaimer": "This is not medical advice.",
    })
