"""HTTP client for the legal RAG backend.

Wraps httpx with:
- One endpoint per answering operation (basic, scoped graph, report)
- A single timeout bound taken from configuration
- Translation of transport, timeout and protocol failures into BackendError subclasses
- Document management calls used by the upload panel
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from legal_chat.client.config import ClientConfig, get_client_config
from legal_chat.client.errors import (
    BackendProtocolError,
    BackendTimeoutError,
    BackendUnavailableError,
)
from legal_chat.models.schemas import (
    AskRequest,
    AskResponse,
    Document,
    SearchScope,
    UploadResponse,
)
from legal_chat.session.router import OperationKind

logger = logging.getLogger(__name__)

_document_list = TypeAdapter(list[Document])


class LegalRAGClient:
    """Async client for the answering and document endpoints."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport, used to plug in test backends.
        """
        self._config = config or get_client_config()
        self._transport = transport

    @property
    def timeout_seconds(self) -> float:
        return self._config.request_timeout_seconds

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.request_timeout_seconds,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            BackendTimeoutError: The request exceeded the configured timeout.
            BackendUnavailableError: The backend could not be reached.
            BackendProtocolError: Non-success status or a non-JSON body.
        """
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
            except httpx.TimeoutException as e:
                logger.warning(f"{method} {path} timed out: {e!r}")
                raise BackendTimeoutError(self.timeout_seconds) from e
            except httpx.HTTPStatusError as e:
                logger.warning(f"{method} {path} returned HTTP {e.response.status_code}")
                raise BackendProtocolError(e.response.status_code) from e
            except httpx.RequestError as e:
                logger.warning(f"{method} {path} failed to connect: {e!r}")
                raise BackendUnavailableError() from e

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{method} {path} returned a non-JSON body")
            raise BackendProtocolError() from e

    async def ask(
        self,
        query: str,
        scope: SearchScope,
        operation: OperationKind = OperationKind.BASIC,
    ) -> AskResponse:
        """Ask the backend a legal research question.

        Args:
            query: The user's question, unmodified.
            scope: Document category to search.
            operation: Which answering pipeline to use.

        Returns:
            The backend's answer payload.
        """
        payload = AskRequest(query=query, source=scope).model_dump(mode="json")
        logger.info(f"Asking backend via {operation.endpoint} (scope={scope.value})")
        body = await self._request("POST", operation.endpoint, json=payload)
        try:
            return AskResponse.model_validate(body)
        except ValidationError as e:
            raise BackendProtocolError() from e

    async def upload_documents(
        self,
        files: Sequence[tuple[str, bytes]],
        user_id: str | None = None,
        access_token: str | None = None,
    ) -> UploadResponse:
        """Upload documents to the backend knowledge base.

        Args:
            files: (filename, content) pairs.
            user_id: Owner of the documents, if signed in.
            access_token: Bearer token forwarded to the backend.

        Returns:
            Per-file upload status.
        """
        multipart = [("files", (name, content)) for name, content in files]
        data = {"user_id": user_id} if user_id else None
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
        body = await self._request(
            "POST", "/api/upload", files=multipart, data=data, headers=headers
        )
        try:
            return UploadResponse.model_validate(body)
        except ValidationError as e:
            raise BackendProtocolError() from e

    async def list_documents(self) -> list[Document]:
        body = await self._request("GET", "/api/documents")
        if isinstance(body, dict):
            body = body.get("documents", [])
        try:
            return _document_list.validate_python(body)
        except ValidationError as e:
            raise BackendProtocolError() from e

    async def delete_document(self, document_id: str) -> dict[str, Any]:
        body = await self._request("DELETE", f"/api/documents/{document_id}")
        return body if isinstance(body, dict) else {"result": body}


# Module-level singleton instance
_backend_client: LegalRAGClient | None = None


def get_backend_client() -> LegalRAGClient:
    """Get or create the global backend client.

    Returns:
        The LegalRAGClient instance.
    """
    global _backend_client
    if _backend_client is None:
        _backend_client = LegalRAGClient()
    return _backend_client
