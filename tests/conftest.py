"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - user: Signed-in user for session operations
    - memory_store: In-process conversation store
    - repository: Conversation repository over the memory store
    - context: Initialized session context with the welcome conversation
    - fake_service: Scriptable answering service recording its calls
    - dispatcher: Dispatcher wired to the fake service
"""

import asyncio

import pytest

from legal_chat.models.schemas import AskResponse, SearchScope, Source, User
from legal_chat.session.context import SessionContext
from legal_chat.session.dispatch import Dispatcher
from legal_chat.session.repository import ConversationRepository
from legal_chat.session.router import OperationKind
from legal_chat.session.store import MemoryStore


class FakeAnsweringService:
    """Answering service double.

    Records every call. Set ``error`` to raise instead of answering, or
    ``gate`` to hold the call open until the test releases it.
    """

    def __init__(self, response: AskResponse | None = None) -> None:
        self.response = response or AskResponse(
            answer="A contract requires offer, acceptance and consideration.",
            sources=[
                Source(
                    document="contracts_act.pdf",
                    page=12,
                    relevance=0.91,
                    excerpt="An agreement is a contract if made by free consent",
                )
            ],
        )
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[str, SearchScope, OperationKind]] = []

    async def ask(
        self, query: str, scope: SearchScope, operation: OperationKind
    ) -> AskResponse:
        self.calls.append((query, scope, operation))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def user() -> User:
    """Return the signed-in test user."""
    return User(id="user-1", email="counsel@example.com")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def repository(memory_store: MemoryStore) -> ConversationRepository:
    return ConversationRepository(memory_store)


@pytest.fixture
def context(repository: ConversationRepository, user: User) -> SessionContext:
    """Session context after first-run initialization.

    Returns:
        Context holding the seeded welcome conversation as active.
    """
    session = SessionContext(repository=repository, user=user)
    session.initialize()
    return session


@pytest.fixture
def fake_service() -> FakeAnsweringService:
    return FakeAnsweringService()


@pytest.fixture
def dispatcher(fake_service: FakeAnsweringService) -> Dispatcher:
    return Dispatcher(fake_service)
