"""Durable storage for the conversation list.

Each user has their own document. Writes are whole-document overwrites
(last writer wins). Loading tolerates a missing document by returning an
empty list.
"""

import logging
import re
from collections.abc import MutableMapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from legal_chat.models.schemas import Conversation

logger = logging.getLogger(__name__)

STORAGE_KEY = "legal-conversations"

_conversation_list = TypeAdapter(list[Conversation])


class ConversationStore(Protocol):
    """Persistence boundary used by the conversation repository."""

    def load(self) -> list[Conversation]: ...

    def save(self, conversations: Sequence[Conversation]) -> None: ...


class MemoryStore:
    """In-process store. Keeps serialized JSON so round-trips match real storage."""

    def __init__(self) -> None:
        self._document: bytes | None = None

    def load(self) -> list[Conversation]:
        if self._document is None:
            return []
        return _conversation_list.validate_json(self._document)

    def save(self, conversations: Sequence[Conversation]) -> None:
        self._document = _conversation_list.dump_json(list(conversations))


class BrowserStorageStore:
    """Store backed by a JSON-compatible mapping such as NiceGUI's ``app.storage.user``.

    NiceGUI keeps ``app.storage.user`` per browser and persists it across page
    reloads, which makes it the server-side counterpart of localStorage.
    """

    def __init__(self, storage: MutableMapping[str, Any], key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key

    def load(self) -> list[Conversation]:
        raw = self._storage.get(self._key)
        if raw is None:
            return []
        try:
            return _conversation_list.validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable conversations under '{self._key}': {e}")
            return []

    def save(self, conversations: Sequence[Conversation]) -> None:
        self._storage[self._key] = _conversation_list.dump_python(
            list(conversations), mode="json"
        )


class JsonFileStore:
    """Store backed by a single JSON file on disk."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Conversation]:
        if not self._path.exists():
            return []
        try:
            return _conversation_list.validate_json(self._path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(f"Discarding unreadable conversation file {self._path}: {e}")
            return []

    def save(self, conversations: Sequence[Conversation]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_bytes(_conversation_list.dump_json(list(conversations), indent=2))
        tmp_path.replace(self._path)


def storage_key_for(user_id: str) -> str:
    return f"{STORAGE_KEY}:{user_id}"


def conversation_file_for(conversations_dir: Path | str, user_id: str) -> Path:
    """Per-user JSON file inside the conversations directory."""
    safe_name = re.sub(r"[^A-Za-z0-9_.-]", "_", user_id)
    return Path(conversations_dir) / f"{safe_name}.json"


def create_store(
    conversations_dir: str | None,
    browser_storage: MutableMapping[str, Any],
    user_id: str,
) -> ConversationStore:
    """Pick the store for a signed-in user.

    A configured conversations directory wins; otherwise conversations live in
    the browser-scoped storage mapping. Either way each user gets a separate
    document, so users never see or overwrite each other's conversations.
    """
    if conversations_dir:
        return JsonFileStore(conversation_file_for(conversations_dir, user_id))
    return BrowserStorageStore(browser_storage, key=storage_key_for(user_id))
