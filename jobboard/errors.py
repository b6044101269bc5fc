"""
Typed failures raised by the data-access layer.

The transport layer maps these onto responses using ``status_code``.
Store-level errors are never wrapped in these.
"""


class JobboardError(Exception):
    """Base class for domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(JobboardError):
    """Raised when a request is structurally or semantically invalid."""

    status_code = 400


class ConflictError(JobboardError):
    """Raised when a create request collides with an existing business key."""

    status_code = 400


class NotFoundError(JobboardError):
    """Raised when no row matches the requested business key."""

    status_code = 404
