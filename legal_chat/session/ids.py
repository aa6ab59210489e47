"""Timestamp-derived identifiers for conversations and messages."""

import time
from collections.abc import Callable


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


class IdFactory:
    """Hands out millisecond-timestamp ids that never repeat.

    Two ids requested within the same millisecond are bumped forward, so a
    user message and its reply (offsets 0 and 1) never collide with the next
    exchange.
    """

    def __init__(self, clock: Callable[[], int] = _now_millis) -> None:
        self._clock = clock
        self._last = 0

    def _reserve(self, width: int = 1) -> int:
        base = max(self._clock(), self._last + 1)
        self._last = base + width - 1
        return base

    def message_id(self) -> str:
        return str(self._reserve())

    def exchange_ids(self) -> tuple[str, str]:
        """Return ids for a user message and its assistant reply."""
        base = self._reserve(width=2)
        return str(base), str(base + 1)

    def conversation_id(self) -> str:
        return f"conv-{self._reserve()}"
