"""Pydantic models shared by the session core, the backend client and the UI.

Provides type safety, validation, and lossless JSON round-tripping for
persisted conversations.

Models:
    - Conversation: One chat thread with history and search configuration
    - Message: Individual immutable chat message
    - Source: Citation attached to an assistant answer
    - AskRequest / AskResponse: Backend answering wire shapes
    - User: Authenticated user identity
"""

from legal_chat.models.schemas import (
    AskRequest,
    AskResponse,
    Conversation,
    Document,
    Message,
    RouteMode,
    SearchScope,
    Sender,
    Source,
    UploadedFileStatus,
    UploadResponse,
    User,
    utcnow,
)

__all__ = [
    "AskRequest",
    "AskResponse",
    "Conversation",
    "Document",
    "Message",
    "RouteMode",
    "SearchScope",
    "Sender",
    "Source",
    "UploadResponse",
    "UploadedFileStatus",
    "User",
    "utcnow",
]
