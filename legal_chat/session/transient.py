"""Volatile per-conversation draft text and pending flags. Never persisted."""


class TransientState:
    """Draft text and in-flight flags keyed by conversation id.

    Lookups for unknown ids return defaults instead of raising.
    """

    def __init__(self) -> None:
        self._drafts: dict[str, str] = {}
        self._pending: dict[str, bool] = {}

    def get_draft(self, conversation_id: str) -> str:
        return self._drafts.get(conversation_id, "")

    def set_draft(self, conversation_id: str, text: str) -> None:
        self._drafts[conversation_id] = text

    def is_pending(self, conversation_id: str) -> bool:
        return self._pending.get(conversation_id, False)

    def set_pending(self, conversation_id: str, pending: bool) -> None:
        self._pending[conversation_id] = pending

    def clear(self, conversation_id: str) -> None:
        """Forget both entries for a closed conversation."""
        self._drafts.pop(conversation_id, None)
        self._pending.pop(conversation_id, None)

    def tracked_ids(self) -> set[str]:
        return set(self._drafts) | set(self._pending)
