"""Presentation helpers for the knowledge base document panel."""

from collections.abc import Iterable

from legal_chat.models.schemas import Document, SearchScope

DOCUMENT_CATEGORIES = (SearchScope.PRECEDENTS, SearchScope.STATUTES)
SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def documents_by_category(documents: Iterable[Document]) -> dict[SearchScope, list[Document]]:
    """Split documents into the precedents and statutes lists.

    Documents without one of those categories are left out. Backend order is
    kept within each list.
    """
    grouped: dict[SearchScope, list[Document]] = {c: [] for c in DOCUMENT_CATEGORIES}
    for document in documents:
        for category in DOCUMENT_CATEGORIES:
            if document.category == category.value:
                grouped[category].append(document)
    return grouped


def format_file_size(size: int | None) -> str:
    if not size:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {SIZE_UNITS[unit]}"
