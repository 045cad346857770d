"""Exceptions raised by the analysis, chat and completion services."""


class RemoteServiceError(RuntimeError):
    """The completion endpoint could not be reached or returned a non-success status.

    Attributes:
        status_code: HTTP status returned by the endpoint, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnalysisError(RuntimeError):
    """An analysis could not be started, or its initial call failed."""


class SessionStateError(RuntimeError):
    """The requested operation is not allowed in the session's current state."""
