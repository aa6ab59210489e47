"""Integration tests for the full submit → backend → history flow.

Drives the real LegalRAGClient and Dispatcher against an in-process FastAPI
backend over ASGITransport. No mocks in the session path.
"""

from pathlib import Path
from typing import Any

import pytest
import pytest_check as check
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from legal_chat.api.app import create_app
from legal_chat.client.api import LegalRAGClient
from legal_chat.client.config import ClientConfig
from legal_chat.documents import documents_by_category
from legal_chat.models.schemas import SearchScope, Sender, User
from legal_chat.session.context import SessionContext
from legal_chat.session.dispatch import Dispatcher
from legal_chat.session.repository import ConversationRepository
from legal_chat.session.store import JsonFileStore, MemoryStore, create_store


def create_backend() -> FastAPI:
    """Minimal stand-in for the legal RAG backend."""
    backend = FastAPI()
    backend.state.received = []

    @backend.post("/api/ask")
    async def ask(body: dict[str, Any]) -> dict[str, Any]:
        backend.state.received.append(("/api/ask", body))
        return {
            "answer": "Consideration is something of value exchanged.",
            "sources": [
                {
                    "document": "currie_v_misa.pdf",
                    "page": 2,
                    "relevance": 0.94,
                    "excerpt": "some right, interest, profit or benefit",
                }
            ],
        }

    @backend.post("/api/ask/langgraph")
    async def ask_langgraph(body: dict[str, Any]) -> dict[str, Any]:
        backend.state.received.append(("/api/ask/langgraph", body))
        return {"response": "Section 2(d) defines consideration."}

    @backend.post("/api/ask/generate-report")
    async def generate_report(body: dict[str, Any]) -> dict[str, Any]:
        backend.state.received.append(("/api/ask/generate-report", body))
        return {"answer": "## Case summary\n\nThe appeal was allowed.", "sources": []}

    @backend.post("/api/upload")
    async def upload(request: Request) -> dict[str, Any]:
        body = await request.body()
        status = "success" if b"brief.pdf" in body else "error"
        return {"files": [{"filename": "brief.pdf", "status": status}]}

    backend.state.documents = [
        {"id": "d1", "name": "brief.pdf", "size": 14, "status": "ready", "category": "precedents"},
        {"id": "d2", "name": "act.pdf", "size": 2048, "status": "processing", "category": "statutes"},
    ]

    @backend.get("/api/documents")
    async def documents() -> list[dict[str, Any]]:
        return backend.state.documents

    @backend.delete("/api/documents/{document_id}")
    async def delete_document(document_id: str) -> dict[str, Any]:
        backend.state.documents = [
            d for d in backend.state.documents if d["id"] != document_id
        ]
        return {"message": "Document deleted", "id": document_id}

    return backend


def create_failing_backend() -> FastAPI:
    backend = FastAPI()

    @backend.post("/api/ask")
    async def ask() -> JSONResponse:
        return JSONResponse({"detail": "index unavailable"}, status_code=503)

    return backend


def make_client(backend: FastAPI) -> LegalRAGClient:
    config = ClientConfig(api_base_url="http://rag-backend.test")
    return LegalRAGClient(config=config, transport=ASGITransport(app=backend))


@pytest.fixture
def backend() -> FastAPI:
    return create_backend()


@pytest.fixture
def signed_in(user: User) -> SessionContext:
    session = SessionContext(repository=ConversationRepository(MemoryStore()), user=user)
    session.initialize()
    return session


class TestSessionFlow:
    """End-to-end exchanges across the three backend operations."""

    async def test_three_routes_in_one_conversation(
        self, backend: FastAPI, signed_in: SessionContext
    ) -> None:
        """Basic, graph and report answers land in one conversation."""
        dispatcher = Dispatcher(make_client(backend))

        signed_in.set_draft("What is Consideration?")
        await dispatcher.submit(signed_in)
        signed_in.change_scope(SearchScope.STATUTES)
        signed_in.set_draft("Where is it defined?")
        await dispatcher.submit(signed_in)
        signed_in.set_draft("Summarize the leading case")
        await dispatcher.submit(signed_in)

        paths = [path for path, _ in backend.state.received]
        check.equal(paths, ["/api/ask", "/api/ask/langgraph", "/api/ask/generate-report"])
        check.equal(
            backend.state.received[0][1], {"query": "What is Consideration?", "source": "both"}
        )
        check.equal(backend.state.received[1][1]["source"], "statutes")

        conversation = signed_in.active
        replies = [m for m in conversation.messages[1:] if m.sender is Sender.ASSISTANT]
        check.equal(conversation.message_count, 7)
        check.equal(conversation.title, "What is Consideration?")
        check.equal(replies[0].sources[0].document, "currie_v_misa.pdf")
        check.equal(replies[1].content, "Section 2(d) defines consideration.")
        check.is_in("Case summary", replies[2].content)
        check.is_false(signed_in.is_pending)

    async def test_backend_error_status_is_recorded(self, signed_in: SessionContext) -> None:
        """An HTTP error from the backend is shown as a diagnostic."""
        dispatcher = Dispatcher(make_client(create_failing_backend()))
        signed_in.set_draft("Is the index up?")

        await dispatcher.submit(signed_in)

        question, reply = signed_in.active.messages[-2:]
        assert question.content == "Is the index up?"
        assert reply.content == "Error: Backend returned HTTP 503"
        assert signed_in.is_pending is False

    async def test_history_survives_reload(
        self, backend: FastAPI, tmp_path: Path, user: User
    ) -> None:
        """A fresh session over the same store sees the earlier exchange."""
        store = JsonFileStore(tmp_path / "conversations.json")
        first = SessionContext(repository=ConversationRepository.from_store(store), user=user)
        first.initialize()
        first.set_draft("What is Consideration?")
        await Dispatcher(make_client(backend)).submit(first)

        reloaded = SessionContext(repository=ConversationRepository.from_store(store), user=user)
        reloaded.initialize()

        assert reloaded.repository.all() == first.repository.all()
        assert reloaded.active.message_count == 3
        assert reloaded.draft == ""

    async def test_users_sharing_a_directory_stay_separate(
        self, backend: FastAPI, tmp_path: Path
    ) -> None:
        """Two users on one server neither see nor overwrite each other's history."""
        alice = SessionContext(
            repository=ConversationRepository.from_store(
                create_store(str(tmp_path), {}, "u-alice")
            ),
            user=User(id="u-alice"),
        )
        alice.initialize()
        alice.set_draft("What is Consideration?")
        await Dispatcher(make_client(backend)).submit(alice)

        bob = SessionContext(
            repository=ConversationRepository.from_store(create_store(str(tmp_path), {}, "u-bob")),
            user=User(id="u-bob"),
        )
        bob.initialize()
        bob.new_conversation()

        alice_reloaded = ConversationRepository.from_store(
            create_store(str(tmp_path), {}, "u-alice")
        )
        check.equal(bob.active.message_count, 1)
        check.equal(len(bob.repository), 2)
        check.equal(alice_reloaded.all(), alice.repository.all())


class TestDocumentCalls:
    """Tests for the document panel's backend calls."""

    async def test_upload_and_list(self, backend: FastAPI) -> None:
        """Uploaded documents show up in the document list."""
        client = make_client(backend)

        uploaded = await client.upload_documents([("brief.pdf", b"%PDF-1.4")], user_id="user-1")
        documents = await client.list_documents()

        assert uploaded.files[0].status == "success"
        assert documents[0].name == "brief.pdf"

    async def test_delete_then_regroup(self, backend: FastAPI) -> None:
        """A deleted document disappears from its category list."""
        client = make_client(backend)

        before = documents_by_category(await client.list_documents())
        await client.delete_document("d2")
        after = documents_by_category(await client.list_documents())

        check.equal([d.id for d in before[SearchScope.STATUTES]], ["d2"])
        check.equal(after[SearchScope.STATUTES], [])
        check.equal([d.id for d in after[SearchScope.PRECEDENTS]], ["d1"])


class TestHostApp:
    """Tests for the FastAPI host of the chat page."""

    @pytest.fixture
    async def client(self) -> AsyncClient:
        """Create async HTTP client with ASGI transport."""
        transport = ASGITransport(app=create_app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    async def test_health(self, client: AsyncClient) -> None:
        """The host app reports healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "legal-chat"}

    async def test_cors_headers_present(self, client: AsyncClient) -> None:
        """Cross-origin requests get CORS headers."""
        response = await client.get("/health", headers={"Origin": "http://localhost:3000"})

        assert "access-control-allow-origin" in response.headers
