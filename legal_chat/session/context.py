"""Per-browser session context for the conversation manager.

Holds everything the UI would otherwise keep as ambient state: the
repository, transient drafts and flags, the active conversation pointer,
the signed-in user, and the scope and route mode currently selected.
"""

import logging
from dataclasses import dataclass, field

from legal_chat.models.schemas import (
    Conversation,
    Message,
    RouteMode,
    SearchScope,
    Sender,
    User,
)
from legal_chat.session.ids import IdFactory
from legal_chat.session.repository import ConversationRepository
from legal_chat.session.transient import TransientState

logger = logging.getLogger(__name__)

WELCOME_TITLE = "Welcome Chat"
WELCOME_MESSAGE = (
    "Hello! I'm your legal research assistant. I can help you analyze legal "
    "documents, search through precedents and statutes, and answer questions "
    "about corporate law, contracts, and more. Please select your search scope "
    "and start asking questions!"
)


class AuthenticationRequiredError(Exception):
    """Raised when a session operation needs a signed-in user."""


def greeting_for(scope: SearchScope) -> str:
    """Greeting used to seed a conversation created for a given scope."""
    target = "both precedents and statutes" if scope == SearchScope.BOTH else scope.value
    return (
        "Hello! I'm ready to help you with legal research. I'll search through "
        f"{target} based on your current selection. What would you like to know?"
    )


@dataclass
class SessionContext:
    """State for one user session, passed explicitly to every core operation."""

    repository: ConversationRepository
    transient: TransientState = field(default_factory=TransientState)
    ids: IdFactory = field(default_factory=IdFactory)
    user: User | None = None
    active_id: str | None = None
    search_scope: SearchScope = SearchScope.BOTH
    route_mode: RouteMode = RouteMode.DEFAULT

    @property
    def active(self) -> Conversation | None:
        if self.active_id is None:
            return None
        return self.repository.get(self.active_id)

    def _require_user(self) -> User:
        if self.user is None:
            raise AuthenticationRequiredError("Sign in to manage conversations")
        return self.user

    def _seed(self, text: str) -> Message:
        return Message(id=self.ids.message_id(), content=text, sender=Sender.ASSISTANT)

    def initialize(self) -> Conversation | None:
        """Make sure a signed-in session has an active conversation.

        Seeds the welcome conversation on first use, or activates the first
        stored conversation when none is active yet.

        Returns:
            The active conversation, or None without a user.
        """
        if self.user is None:
            return None
        if len(self.repository) == 0:
            welcome = self.repository.create(
                SearchScope.BOTH, self._seed(WELCOME_MESSAGE), title=WELCOME_TITLE
            )
            self.select(welcome.id)
        elif self.active is None:
            self.select(self.repository.ids()[0])
        return self.active

    def set_user(self, user: User | None) -> None:
        """Session-change notification target for the auth provider."""
        self.user = user
        if user is not None:
            self.initialize()

    def new_conversation(self) -> Conversation:
        self._require_user()
        conversation = self.repository.create(
            self.search_scope, self._seed(greeting_for(self.search_scope))
        )
        self.select(conversation.id)
        self.transient.set_draft(conversation.id, "")
        return conversation

    def close_conversation(self, conversation_id: str) -> None:
        """Close a conversation and drop its transient state.

        When the active conversation is closed, the first remaining one
        becomes active, or nothing if none remain.
        """
        self._require_user()
        if not self.repository.close(conversation_id):
            return
        self.transient.clear(conversation_id)
        if self.active_id == conversation_id:
            remaining = self.repository.ids()
            if remaining:
                self.select(remaining[0])
            else:
                self.active_id = None

    def select(self, conversation_id: str) -> None:
        conversation = self.repository.get(conversation_id)
        if conversation is None:
            return
        self.active_id = conversation.id
        self.search_scope = conversation.search_scope
        self.route_mode = conversation.route_mode

    def change_scope(self, scope: SearchScope) -> None:
        self._require_user()
        self.search_scope = scope
        if self.active_id is not None:
            self.repository.set_scope(self.active_id, scope)

    def change_route_mode(self, mode: RouteMode) -> None:
        # Advisory only: route() decides from query text and scope.
        self._require_user()
        self.route_mode = mode
        if self.active_id is not None:
            self.repository.set_route_mode(self.active_id, mode)

    def set_draft(self, text: str) -> None:
        if self.active_id is not None:
            self.transient.set_draft(self.active_id, text)

    @property
    def draft(self) -> str:
        return self.transient.get_draft(self.active_id) if self.active_id else ""

    @property
    def is_pending(self) -> bool:
        return self.transient.is_pending(self.active_id) if self.active_id else False
