"""Exception hierarchy shared by services and translated to HTTP errors in the routers."""

from typing import Optional


class JobTrackerError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInputError(JobTrackerError, ValueError):
    """Input rejected before any side effect (empty/oversized job text, incomplete resume)."""


class NotFoundError(JobTrackerError, LookupError):
    """A referenced record (job, application, interview, reminder) does not exist."""


class GenerationError(JobTrackerError):
    """
    The external text-generation service failed.

    Attributes:
        message: Safe, user-facing description
        status_code: Upstream HTTP status when known
        rate_limited: True when the provider reported quota/rate limiting
        detail: Raw upstream error, for logs only
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        rate_limited: bool = False,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.rate_limited = rate_limited
        self.detail = detail

    @property
    def retryable(self) -> bool:
        return True


class GenerationInProgressError(JobTrackerError):
    """A generation request for the same draft is already outstanding."""


class PersistenceError(JobTrackerError):
    """Writing a record to storage failed. In-memory state is left as-is."""
