"""Plain-text transcript export for a conversation."""

import re
from datetime import date

from legal_chat.models.schemas import Conversation


def can_export(conversation: Conversation | None) -> bool:
    """A conversation is worth exporting once it has more than its greeting."""
    return conversation is not None and conversation.message_count > 1


def export_transcript(conversation: Conversation) -> str:
    """Render messages as alternating ``SENDER: text`` blocks."""
    return "\n\n".join(
        f"{message.sender.value.upper()}: {message.content}"
        for message in conversation.messages
    )


def export_filename(conversation: Conversation, today: date | None = None) -> str:
    """Download name, e.g. ``legal-consultation-Welcome Chat-2024-05-01.txt``."""
    today = today or date.today()
    # Path separators would turn the title into a directory.
    title = re.sub(r"[\\/]+", "-", conversation.title)
    return f"legal-consultation-{title}-{today.isoformat()}.txt"
