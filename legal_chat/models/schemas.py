from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class SearchScope(str, Enum):
    """Document category a query is answered against."""

    PRECEDENTS = "precedents"
    STATUTES = "statutes"
    BOTH = "both"


class RouteMode(str, Enum):
    """Advisory query-handling style selected in the UI."""

    DEFAULT = "default"
    LANGGRAPH = "langgraph"
    GENERATE_REPORT = "generate-report"


class Sender(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class Source(BaseModel):
    """A citation attached to an assistant message.

    Attributes:
        document: Identifier of the originating document.
        page: Page number the excerpt comes from.
        relevance: Retrieval relevance score.
        excerpt: Quoted passage.
        metadata: Free-form backend metadata, if any.
    """

    model_config = ConfigDict(frozen=True)

    document: str
    page: int
    relevance: float
    excerpt: str
    metadata: dict[str, Any] | None = None


class Message(BaseModel):
    """A single immutable chat message.

    Attributes:
        id: Unique message identifier.
        content: Message text.
        sender: Who wrote it (user or assistant).
        timestamp: When the message was created.
        sources: Citations, only ever set on assistant messages.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    sender: Sender
    timestamp: datetime = Field(default_factory=utcnow)
    sources: tuple[Source, ...] | None = None


class Conversation(BaseModel):
    """One chat thread with its own history and search configuration.

    Conversations are frozen. Every update goes through ``model_copy`` so
    that concurrent completions never share a mutable object.

    Attributes:
        id: Opaque unique identifier.
        title: Display label, derived from the first user message.
        created_at: Creation timestamp.
        updated_at: Timestamp of the latest change.
        search_scope: Scope used for outgoing queries.
        route_mode: Advisory route mode shown in the UI.
        messages: Ordered, append-only message history.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = "New Chat"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    search_scope: SearchScope = SearchScope.BOTH
    route_mode: RouteMode = RouteMode.DEFAULT
    messages: tuple[Message, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def message_count(self) -> int:
        """Number of messages, always derived from the history."""
        return len(self.messages)

    def has_user_messages(self) -> bool:
        return any(m.sender is Sender.USER for m in self.messages)


class User(BaseModel):
    """Authenticated user as exposed by the auth provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None


class AskRequest(BaseModel):
    """Request body for the backend answering endpoints."""

    query: str = Field(..., min_length=1)
    source: SearchScope


class AskResponse(BaseModel):
    """Answer payload returned by the backend.

    The backend names the answer either ``answer`` or ``response``, and may
    omit sources entirely. ``answer_text`` and ``source_list`` collapse that
    into one canonical shape.
    """

    model_config = ConfigDict(extra="ignore")

    answer: str | None = None
    response: str | None = None
    sources: list[Source] | None = None

    def answer_text(self, placeholder: str = "No response received") -> str:
        return self.answer or self.response or placeholder

    def source_list(self) -> tuple[Source, ...]:
        return tuple(self.sources or ())


class UploadedFileStatus(BaseModel):
    """Outcome of one uploaded file."""

    filename: str
    status: str
    message: str | None = None


class UploadResponse(BaseModel):
    """Response after a document upload."""

    files: list[UploadedFileStatus] = Field(default_factory=list)


class Document(BaseModel):
    """A document held by the backend knowledge base."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    size: int | None = None
    uploaded_at: datetime | None = Field(default=None, alias="uploadedAt")
    status: str | None = None
    type: str | None = None
    category: str | None = None
