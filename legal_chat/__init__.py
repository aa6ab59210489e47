"""LegalAI Assistant - browser chat client for a legal research backend.

Combines NiceGUI for the chat interface, FastAPI for hosting, httpx for
backend calls, and Pydantic for data validation and persistence.

Components:
    - session: Multi-conversation manager (store, repository, router, dispatch)
    - client: HTTP client for the retrieval/answering backend
    - auth: Current-user providers (Supabase or local)
    - ui: Web interface for chat interactions
    - models: Conversation, message and wire schemas
"""

__version__ = "0.1.0"
