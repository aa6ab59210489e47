"""Multi-conversation session manager.

Keeps concurrent conversation threads, persists them, and routes each
submitted query to the right backend operation.

Components:
    - store: Whole-document persistence of the conversation list
    - repository: Copy-on-write conversation collection
    - transient: Draft text and pending flags per conversation
    - router: Query → backend operation decision
    - context: Active pointer, user and UI selections for one session
    - dispatch: Submit / completion pipeline
"""

from legal_chat.session.router import OperationKind, route
from legal_chat.session.store import (
    BrowserStorageStore,
    ConversationStore,
    JsonFileStore,
    MemoryStore,
    create_store,
)
from legal_chat.session.transient import TransientState
from legal_chat.session.repository import ConversationRepository, derive_title
from legal_chat.session.context import AuthenticationRequiredError, SessionContext
from legal_chat.session.dispatch import Dispatcher

__all__ = [
    "AuthenticationRequiredError",
    "BrowserStorageStore",
    "ConversationRepository",
    "ConversationStore",
    "Dispatcher",
    "JsonFileStore",
    "MemoryStore",
    "OperationKind",
    "SessionContext",
    "TransientState",
    "create_store",
    "derive_title",
    "route",
]
