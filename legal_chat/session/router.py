"""Maps a submitted query to the backend operation that should answer it."""

from enum import Enum

from legal_chat.models.schemas import SearchScope

REPORT_PREFIX = "summarize"


class OperationKind(str, Enum):
    """Backend answering operations."""

    BASIC = "basic"
    SCOPED_GRAPH = "scoped-graph"
    REPORT = "report"

    @property
    def endpoint(self) -> str:
        return _ENDPOINTS[self]


_ENDPOINTS = {
    OperationKind.BASIC: "/api/ask",
    OperationKind.SCOPED_GRAPH: "/api/ask/langgraph",
    OperationKind.REPORT: "/api/ask/generate-report",
}


def route(query_text: str, search_scope: SearchScope) -> OperationKind:
    """Select the backend operation for a query.

    Report requests ("summarize ...") win over scope; statute-only searches
    go to the graph pipeline; everything else uses the basic endpoint.
    The conversation's route mode is not consulted.

    Args:
        query_text: Raw user query.
        search_scope: Active search scope.

    Returns:
        The operation to invoke.
    """
    if query_text.strip().casefold().startswith(REPORT_PREFIX):
        return OperationKind.REPORT
    if search_scope == SearchScope.STATUTES:
        return OperationKind.SCOPED_GRAPH
    return OperationKind.BASIC
