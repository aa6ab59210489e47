"""Failures raised by the backend client.

Each error carries the diagnostic text shown to the user in place of an
answer.
"""

CONNECTION_ERROR_MESSAGE = (
    "Connection error: Could not reach the backend server. "
    "Please ensure the FastAPI server is running."
)
PARSE_ERROR_MESSAGE = "Error: Could not parse the backend response."


def timeout_message(timeout_seconds: float) -> str:
    minutes = max(1, round(timeout_seconds / 60))
    return (
        "Request timed out. The backend is taking longer than expected "
        f"({minutes}+ minutes). Please try again or check if the server is responding."
    )


class BackendError(Exception):
    """Base class for backend call failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BackendUnavailableError(BackendError):
    """The backend could not be reached (refused, DNS, aborted transport)."""

    def __init__(self, message: str = CONNECTION_ERROR_MESSAGE) -> None:
        super().__init__(message)


class BackendTimeoutError(BackendError):
    """The backend did not answer within the configured timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(timeout_message(timeout_seconds))
        self.timeout_seconds = timeout_seconds


class BackendProtocolError(BackendError):
    """The backend answered with an error status or an unreadable body."""

    def __init__(self, status_code: int | None = None) -> None:
        if status_code is not None:
            message = f"Error: Backend returned HTTP {status_code}"
        else:
            message = PARSE_ERROR_MESSAGE
        super().__init__(message)
        self.status_code = status_code
