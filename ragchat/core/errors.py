"""
Application errors for clean API error handling.

Services raise these; the API layer maps them to HTTP status codes
(InvalidInputError -> 400, DownstreamFailureError -> 500).
"""


class InvalidInputError(Exception):
    """Raised when the chat request carries a missing, empty, or non-string message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ServiceUnavailableError(Exception):
    """Raised when a required service (e.g. the LLM backend) is unavailable or misconfigured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DownstreamFailureError(Exception):
    """Raised when retrieval, prompt building, or the chat/agent call fails for a request."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
