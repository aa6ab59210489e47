"""Authentication collaborators.

The session core only needs to know whether a user is present and to be
told when that changes. Supabase provides the real sign-in flow; a static
provider covers local development and tests.

Providers are built per browser session. A Supabase client keeps the
signed-in session in memory, so each page gets its own client and the
tokens are carried between page loads in that browser's storage.
"""

import logging
from collections.abc import Callable, MutableMapping
from typing import Any, Protocol

from supabase import AuthError, Client, create_client
from supabase.lib.client_options import SyncClientOptions

from legal_chat.client.config import ClientConfig
from legal_chat.models.schemas import User

logger = logging.getLogger(__name__)

SESSION_KEY = "auth-session"

UserCallback = Callable[[User | None], None]
Unsubscribe = Callable[[], None]


class AuthProvider(Protocol):
    """Source of the current user and session-change notifications."""

    def current_user(self) -> User | None: ...

    def subscribe(self, callback: UserCallback) -> Unsubscribe: ...


class StaticAuthProvider:
    """Auth provider with a fixed, locally chosen user."""

    def __init__(self, user: User | None = None) -> None:
        self._user = user
        self._callbacks: list[UserCallback] = []

    def current_user(self) -> User | None:
        return self._user

    def set_user(self, user: User | None) -> None:
        self._user = user
        for callback in list(self._callbacks):
            callback(user)

    def subscribe(self, callback: UserCallback) -> Unsubscribe:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe


def _to_user(supabase_user: Any) -> User | None:
    if supabase_user is None:
        return None
    return User(id=str(supabase_user.id), email=getattr(supabase_user, "email", None))


class SupabaseAuthProvider:
    """Auth provider backed by Supabase email/password sessions.

    Network calls (``restore``, ``sign_in``, ``sign_up``, ``sign_out``) never
    touch the browser storage; ``persist`` copies the client's current tokens
    there and is meant to run on the event loop.
    """

    def __init__(self, client: Client, storage: MutableMapping[str, Any]) -> None:
        """Initialize the provider.

        Args:
            client: Supabase client owned by this browser session.
            storage: Browser-scoped mapping holding the session tokens.
        """
        self._client = client
        self._storage = storage

    def current_user(self) -> User | None:
        session = self._client.auth.get_session()
        return _to_user(session.user) if session else None

    def access_token(self) -> str | None:
        session = self._client.auth.get_session()
        return session.access_token if session else None

    def restore(self) -> User | None:
        """Re-establish the session saved by an earlier page load."""
        tokens = self._storage.get(SESSION_KEY)
        if not tokens:
            return None
        try:
            response = self._client.auth.set_session(
                tokens["access_token"], tokens["refresh_token"]
            )
        except (AuthError, KeyError) as e:
            logger.warning(f"Stored auth session could not be restored: {e}")
            return None
        return _to_user(response.user)

    def persist(self) -> None:
        """Save the client's session tokens, or forget them when signed out."""
        session = self._client.auth.get_session()
        if session is None:
            self._storage.pop(SESSION_KEY, None)
            return
        self._storage[SESSION_KEY] = {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
        }

    def subscribe(self, callback: UserCallback) -> Unsubscribe:
        def on_change(event: Any, session: Any) -> None:
            user = _to_user(session.user) if session else None
            logger.info(f"Auth state changed: {event} ({user.email if user else 'signed out'})")
            callback(user)

        subscription = self._client.auth.on_auth_state_change(on_change)
        return subscription.unsubscribe

    def sign_in(self, email: str, password: str) -> User | None:
        response = self._client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        return _to_user(response.user)

    def sign_up(self, email: str, password: str) -> User | None:
        response = self._client.auth.sign_up({"email": email, "password": password})
        return _to_user(response.user)

    def sign_out(self) -> None:
        # Local scope ends this browser's session only.
        self._client.auth.sign_out({"scope": "local"})


def create_auth_provider(
    config: ClientConfig, storage: MutableMapping[str, Any]
) -> AuthProvider:
    """Build the auth provider for one browser session.

    Falls back to a static local user when Supabase credentials are missing.

    Args:
        config: Client configuration.
        storage: Browser-scoped storage, e.g. NiceGUI's ``app.storage.user``.

    Returns:
        A provider whose signed-in state belongs to this browser only.
    """
    if config.supabase_configured:
        client = create_client(
            config.supabase_url,
            config.supabase_anon_key,
            options=SyncClientOptions(auto_refresh_token=False),
        )
        return SupabaseAuthProvider(client, storage)

    logger.warning(
        "Supabase environment variables not configured. "
        "Set SUPABASE_URL and SUPABASE_ANON_KEY in .env to enable sign-in."
    )
    return StaticAuthProvider(User(id="local-user", email="local@localhost"))
