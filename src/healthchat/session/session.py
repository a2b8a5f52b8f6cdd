"""Conversation session: drives one chat turn at a time.

A turn appends the user message, awaits the completion gateway, formats
the reply, appends the assistant message and persists the conversation.
The gateway call is the only suspension point; a second turn started
while one is in flight is rejected, not queued.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from ..answers import format_response
from ..config import DEFAULT_GREETING, FOCUS_PREFILL_TEMPLATE
from ..errors import GatewayError
from ..gateway import CompletionGateway, GatewayContext, Language
from ..history import Conversation, ConversationStore, Message, new_conversation_id
from .states import TurnState

logger = logging.getLogger(__name__)


class ConversationSession:
    """Owns one conversation's messages and turn state.

    Sessions share nothing but the conversation store.
    """

    def __init__(
        self,
        gateway: CompletionGateway,
        store: ConversationStore,
        language: Language | str = Language.EN,
        greeting: str = DEFAULT_GREETING,
        formatter: Callable[[str], str] = format_response,
    ):
        self._gateway = gateway
        self._store = store
        self._language = Language(language)
        self._greeting = greeting
        self._formatter = formatter
        self._state = TurnState.IDLE
        self._focus_topic: str | None = None
        self._start_conversation()

    def _start_conversation(self) -> None:
        self._conversation_id = new_conversation_id()
        self._messages: list[Message] = [Message(role="assistant", content=self._greeting)]
        self._created_at: datetime | None = None
        self._preview: str | None = None

    @classmethod
    def resume(
        cls,
        conversation: Conversation,
        gateway: CompletionGateway,
        store: ConversationStore,
        **kwargs
    ) -> "ConversationSession":
        """Continue a stored conversation.

        The conversation keeps its id, creation time and preview.
        """
        session = cls(gateway, store, **kwargs)
        session._conversation_id = conversation.id
        session._messages = list(conversation.messages)
        session._created_at = conversation.created_at
        session._preview = conversation.preview
        return session

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def conversation_id(self) -> str:
        return self._conversation_id

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def focus_topic(self) -> str | None:
        return self._focus_topic

    @property
    def language(self) -> Language:
        return self._language

    def set_language(self, language: Language | str) -> None:
        self._language = Language(language)

    def select_focus(self, topic: str) -> str:
        """Record a focus topic and return the suggested next input.

        Selecting a focus never starts a turn by itself.
        """
        self._focus_topic = topic.strip() or None
        if self._focus_topic is None:
            return ""
        return FOCUS_PREFILL_TEMPLATE.format(topic=self._focus_topic)

    def clear_focus(self) -> None:
        self._focus_topic = None

    def reset(self) -> bool:
        """Start a new conversation. Rejected while a turn is in flight."""
        if self._state is TurnState.AWAITING_RESPONSE:
            return False
        self._start_conversation()
        return True

    def snapshot(self) -> Conversation:
        """Current conversation as it would be persisted."""
        return Conversation.from_messages(
            self._messages,
            conversation_id=self._conversation_id,
            created_at=self._created_at,
            preview=self._preview,
        )

    async def start_turn(
        self,
        user_text: str,
        focus_topic: str | None = None,
        image: str | None = None,
    ) -> Message | None:
        """Run one turn.

        Args:
            user_text: The user's message
            focus_topic: Focus for this turn (defaults to the selected focus)
            image: Optional image as a data URI

        Returns:
            The appended assistant message, or None if the turn was rejected
            (blank input without an image, or a turn already in flight)

        Raises:
            GatewayError: If the gateway fails; the user message stays,
                no assistant message is added and nothing is persisted
        """
        if not user_text.strip() and not image:
            return None
        if self._state is TurnState.AWAITING_RESPONSE:
            logger.debug("Turn rejected: session %s is awaiting a response", self._conversation_id)
            return None

        self._messages.append(Message(role="user", content=user_text))
        self._state = TurnState.AWAITING_RESPONSE
        context = GatewayContext(
            focus_topic=focus_topic or self._focus_topic,
            language=self._language,
            image=image,
        )
        logger.info("Starting turn %d of conversation %s", len(self._messages) // 2, self._conversation_id)

        try:
            raw_text = await self._gateway.send(list(self._messages), context)
        except GatewayError:
            logger.warning("Turn failed for conversation %s", self._conversation_id)
            raise
        finally:
            self._state = TurnState.IDLE

        reply = Message(role="assistant", content=self._formatter(raw_text))
        self._messages.append(reply)
        self._persist()
        return reply

    def _persist(self) -> None:
        if len(self._messages) <= 1:
            return
        if self._created_at is None:
            conversation = Conversation.from_messages(self._messages, conversation_id=self._conversation_id)
            self._created_at = conversation.created_at
            self._preview = conversation.preview
        else:
            conversation = self.snapshot()
        self._store.save(conversation)
