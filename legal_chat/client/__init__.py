"""Client for the remote legal retrieval/answering backend.

Responsibilities:
    - Configuration loading from environment and .env
    - Routing answering requests to the basic, graph and report endpoints
    - Translating transport, timeout and protocol failures into typed errors
    - Document upload and listing for the knowledge base panel

Has no knowledge of conversations. The dispatcher decides what to ask.
"""

from legal_chat.client.api import LegalRAGClient, get_backend_client
from legal_chat.client.config import ClientConfig, get_client_config
from legal_chat.client.errors import (
    BackendError,
    BackendProtocolError,
    BackendTimeoutError,
    BackendUnavailableError,
)

__all__ = [
    "BackendError",
    "BackendProtocolError",
    "BackendTimeoutError",
    "BackendUnavailableError",
    "ClientConfig",
    "LegalRAGClient",
    "get_backend_client",
    "get_client_config",
]
