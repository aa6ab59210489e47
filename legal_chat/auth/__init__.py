"""Authentication providers exposing the current user to the session core."""

from legal_chat.auth.provider import (
    SESSION_KEY,
    AuthProvider,
    StaticAuthProvider,
    SupabaseAuthProvider,
    create_auth_provider,
)

__all__ = [
    "SESSION_KEY",
    "AuthProvider",
    "StaticAuthProvider",
    "SupabaseAuthProvider",
    "create_auth_provider",
]
