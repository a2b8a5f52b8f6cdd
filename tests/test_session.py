"""Unit tests for the conversation session."""
import asyncio

import pytest

from healthchat.config import DEFAULT_GREETING
from healthchat.errors import GatewayError
from healthchat.gateway import Language
from healthchat.history import Message
from healthchat.session import ConversationSession, TurnState


class TestStartTurn:
    """Tests for ConversationSession.start_turn."""

    @pytest.mark.asyncio
    async def test_knee_pain_end_to_end(self, make_gateway, local_store):
        gateway = make_gateway(['{"urgency":"LOW","self_care":["rest","ice"]}'])
        session = ConversationSession(gateway, local_store)
        assert session.state is TurnState.IDLE

        reply = await session.start_turn("knee pain")

        sent_messages, _ = gateway.calls[0]
        assert sent_messages[-1] == Message(role="user", content="knee pain")
        assert "ℹ️ Urgency: LOW" in reply.content
        assert "• rest\n• ice" in reply.content
        assert session.state is TurnState.IDLE

        stored = local_store.list()
        assert len(stored) == 1
        assert len(stored[0].messages) == 3
        assert stored[0].id == session.conversation_id

    @pytest.mark.asyncio
    async def test_empty_input_is_noop(self, fake_gateway, memory_store):
        session = ConversationSession(fake_gateway, memory_store)

        assert await session.start_turn("") is None
        assert await session.start_turn("   \n") is None

        assert session.state is TurnState.IDLE
        assert len(session.messages) == 1
        assert fake_gateway.calls == []

    @pytest.mark.asyncio
    async def test_image_without_text_is_sent(self, fake_gateway, memory_store):
        session = ConversationSession(fake_gateway, memory_store)

        await session.start_turn("", image="data:image/png;base64,AAAA")

        _, context = fake_gateway.calls[0]
        assert context.image == "data:image/png;base64,AAAA"
        assert memory_store.list()[0].preview == "Image"

    @pytest.mark.asyncio
    async def test_gateway_failure_rolls_back(self, make_gateway, memory_store, gateway_error):
        gateway = make_gateway([gateway_error])
        session = ConversationSession(gateway, memory_store)

        with pytest.raises(GatewayError):
            await session.start_turn("chest pain")

        assert session.state is TurnState.IDLE
        assert [m.role for m in session.messages] == ["assistant", "user"]
        assert memory_store.list() == []

    @pytest.mark.asyncio
    async def test_unparseable_reply_shown_verbatim(self, make_gateway, memory_store):
        nested = "[" * 100000 + "]" * 100000
        session = ConversationSession(make_gateway([nested]), memory_store)

        reply = await session.start_turn("knee pain")

        assert reply.content == nested
        assert session.state is TurnState.IDLE
        assert len(memory_store.load(session.conversation_id).messages) == 3

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, make_gateway, memory_store, gateway_error):
        gateway = make_gateway([gateway_error, "Drink water."])
        session = ConversationSession(gateway, memory_store)

        with pytest.raises(GatewayError):
            await session.start_turn("headache")
        reply = await session.start_turn("headache")

        assert reply.content == "Drink water."
        assert len(memory_store.list()) == 1

    @pytest.mark.asyncio
    async def test_concurrent_turn_rejected(self, make_blocking_gateway, memory_store):
        gateway = make_blocking_gateway("first answer")
        session = ConversationSession(gateway, memory_store)

        first = asyncio.create_task(session.start_turn("first"))
        await gateway.started.wait()
        assert session.state is TurnState.AWAITING_RESPONSE

        assert await session.start_turn("second") is None

        gateway.release.set()
        reply = await first
        assert reply.content == "first answer"
        assert [m.content for m in session.messages if m.role == "user"] == ["first"]
        assert len(gateway.calls) == 1

    @pytest.mark.asyncio
    async def test_full_history_sent_each_turn(self, fake_gateway, memory_store):
        session = ConversationSession(fake_gateway, memory_store)

        await session.start_turn("one")
        await session.start_turn("two")

        sent, _ = fake_gateway.calls[1]
        assert [m.content for m in sent] == [DEFAULT_GREETING, "one", "ok", "two"]

    @pytest.mark.asyncio
    async def test_preview_and_created_at_fixed_at_first_persist(self, fake_gateway, memory_store):
        session = ConversationSession(fake_gateway, memory_store)

        await session.start_turn("first question")
        first = memory_store.load(session.conversation_id)
        await session.start_turn("second question")
        second = memory_store.load(session.conversation_id)

        assert second.preview == first.preview == "first question"
        assert second.created_at == first.created_at
        assert len(second.messages) == 5
        assert len(memory_store.list()) == 1

    @pytest.mark.asyncio
    async def test_context_language_and_focus(self, fake_gateway, memory_store):
        session = ConversationSession(fake_gateway, memory_store, language="fr")
        session.select_focus("Knee")

        await session.start_turn("it hurts")
        await session.start_turn("still hurts", focus_topic="Ankle")

        assert fake_gateway.calls[0][1].focus_topic == "Knee"
        assert fake_gateway.calls[0][1].language is Language.FR
        assert fake_gateway.calls[1][1].focus_topic == "Ankle"


class TestFocus:
    """Tests for focus selection."""

    def test_select_focus_prefills_without_turn(self, fake_gateway, memory_store):
        session = ConversationSession(fake_gateway, memory_store)

        text = session.select_focus("Heart")

        assert text == "Tell me about the Heart and common health issues related to it."
        assert session.focus_topic == "Heart"
        assert fake_gateway.calls == []
        assert len(session.messages) == 1

    def test_blank_focus_clears(self, fake_gateway, memory_store):
        session = ConversationSession(fake_gateway, memory_store)
        session.select_focus("Heart")

        assert session.select_focus("  ") == ""
        assert session.focus_topic is None


class TestLifecycle:
    """Tests for reset and resume."""

    @pytest.mark.asyncio
    async def test_reset_starts_new_conversation(self, fake_gateway, memory_store):
        session = ConversationSession(fake_gateway, memory_store)
        await session.start_turn("first")
        old_id = session.conversation_id

        assert session.reset() is True

        assert session.conversation_id != old_id
        assert [m.content for m in session.messages] == [DEFAULT_GREETING]

    @pytest.mark.asyncio
    async def test_reset_rejected_while_awaiting(self, make_blocking_gateway, memory_store):
        gateway = make_blocking_gateway()
        session = ConversationSession(gateway, memory_store)
        task = asyncio.create_task(session.start_turn("first"))
        await gateway.started.wait()

        assert session.reset() is False

        gateway.release.set()
        await task

    @pytest.mark.asyncio
    async def test_resume_keeps_identity(self, make_gateway, memory_store):
        first = ConversationSession(make_gateway(["a1"]), memory_store)
        await first.start_turn("original question")
        stored = memory_store.load(first.conversation_id)

        resumed = ConversationSession.resume(stored, make_gateway(["a2"]), memory_store)
        await resumed.start_turn("follow up")

        updated = memory_store.load(first.conversation_id)
        assert updated.preview == "original question"
        assert updated.created_at == stored.created_at
        assert [m.content for m in updated.messages][-2:] == ["follow up", "a2"]
        assert len(memory_store.list()) == 1
