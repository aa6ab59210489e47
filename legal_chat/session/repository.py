"""In-memory conversation repository backed by a persistent store.

The repository keeps an immutable tuple of frozen conversations. Every
mutation builds a new tuple, swaps it in, and saves the whole list, so two
completions for different conversations can interleave without touching
each other's data.
"""

import logging
from collections.abc import Iterator

from legal_chat.models.schemas import (
    Conversation,
    Message,
    RouteMode,
    SearchScope,
    utcnow,
)
from legal_chat.session.ids import IdFactory
from legal_chat.session.store import ConversationStore

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 30
TITLE_ELLIPSIS = "..."


def derive_title(text: str) -> str:
    """Build a conversation title from the first user message."""
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + TITLE_ELLIPSIS
    return text


class ConversationRepository:
    """Owns all conversations and their messages."""

    def __init__(
        self,
        store: ConversationStore,
        conversations: list[Conversation] | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._store = store
        self._ids = id_factory or IdFactory()
        unique: dict[str, Conversation] = {}
        for conversation in conversations or []:
            unique.setdefault(conversation.id, conversation)
        self._conversations: tuple[Conversation, ...] = tuple(unique.values())

    @classmethod
    def from_store(
        cls, store: ConversationStore, id_factory: IdFactory | None = None
    ) -> "ConversationRepository":
        """Create a repository holding whatever the store has persisted."""
        conversations = store.load()
        logger.info(f"Loaded {len(conversations)} conversation(s) from store")
        return cls(store, conversations, id_factory)

    def __len__(self) -> int:
        return len(self._conversations)

    def __contains__(self, conversation_id: object) -> bool:
        return self.get(conversation_id) is not None  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Conversation]:
        return iter(self._conversations)

    def all(self) -> tuple[Conversation, ...]:
        return self._conversations

    def ids(self) -> list[str]:
        return [c.id for c in self._conversations]

    def get(self, conversation_id: str) -> Conversation | None:
        for conversation in self._conversations:
            if conversation.id == conversation_id:
                return conversation
        return None

    def _commit(self, conversations: tuple[Conversation, ...]) -> None:
        # Memory only moves once the store has accepted the write.
        self._store.save(conversations)
        self._conversations = conversations

    def _replace(self, updated: Conversation) -> None:
        self._commit(
            tuple(updated if c.id == updated.id else c for c in self._conversations)
        )

    def create(
        self,
        initial_scope: SearchScope,
        seed_message: Message,
        title: str = "New Chat",
    ) -> Conversation:
        """Insert a new conversation seeded with one assistant message.

        Args:
            initial_scope: Search scope for the new conversation.
            seed_message: Greeting shown as the first message.
            title: Initial display title.

        Returns:
            The stored conversation.
        """
        conversation_id = self._ids.conversation_id()
        while conversation_id in self:
            conversation_id = self._ids.conversation_id()

        now = utcnow()
        conversation = Conversation(
            id=conversation_id,
            title=title,
            created_at=now,
            updated_at=now,
            search_scope=initial_scope,
            route_mode=RouteMode.DEFAULT,
            messages=(seed_message,),
        )
        self._commit((*self._conversations, conversation))
        logger.info(f"Created conversation {conversation_id} (scope={initial_scope.value})")
        return conversation

    def close(self, conversation_id: str) -> bool:
        """Remove a conversation.

        Returns:
            True if a conversation was removed.
        """
        remaining = tuple(c for c in self._conversations if c.id != conversation_id)
        if len(remaining) == len(self._conversations):
            return False
        self._commit(remaining)
        logger.info(f"Closed conversation {conversation_id}")
        return True

    def append_exchange(
        self,
        conversation_id: str,
        user_message: Message,
        assistant_message: Message,
    ) -> Conversation | None:
        """Append a user message and its reply as one update.

        The first exchange of a conversation also sets its title from the
        user's text. If the conversation no longer exists the exchange is
        dropped.

        Args:
            conversation_id: Target conversation.
            user_message: The submitted user message.
            assistant_message: The answer or diagnostic reply.

        Returns:
            The updated conversation, or None if it was closed.
        """
        current = self.get(conversation_id)
        if current is None:
            logger.info(f"Dropping exchange for closed conversation {conversation_id}")
            return None

        title = current.title
        if not current.has_user_messages():
            title = derive_title(user_message.content)

        updated = current.model_copy(
            update={
                "messages": (*current.messages, user_message, assistant_message),
                "updated_at": utcnow(),
                "title": title,
            }
        )
        self._replace(updated)
        return updated

    def set_scope(self, conversation_id: str, scope: SearchScope) -> Conversation | None:
        current = self.get(conversation_id)
        if current is None:
            return None
        updated = current.model_copy(update={"search_scope": scope})
        self._replace(updated)
        return updated

    def set_route_mode(self, conversation_id: str, mode: RouteMode) -> Conversation | None:
        current = self.get(conversation_id)
        if current is None:
            return None
        updated = current.model_copy(update={"route_mode": mode})
        self._replace(updated)
        return updated
