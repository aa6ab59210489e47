"""FastAPI host for the chat client.

Endpoints:
    - GET /health: Service health status
    - /: NiceGUI chat page (mounted at startup)
"""

from legal_chat.api.app import create_app

__all__ = ["create_app"]
