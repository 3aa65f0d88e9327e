"""Error types for the scope harvester."""

from enum import Enum
from typing import Self


class HarvestErrorClass(str, Enum):
    """Classification of harvest errors.

    - INVALID_CREDENTIALS: Credential string is not ``username:key``
    - CLIENT_ERROR: Non-retryable 4xx response
    - SERVICE_UNAVAILABLE: Retryable 5xx response
    - TIMEOUT: Single request timed out (retryable)
    - NETWORK: Connection or protocol failure
    - RESPONSE_TOO_LARGE: Response body exceeded the size limit
    - DECODE: Response body is not the expected JSON shape
    - CANCELLED: Run context was cancelled
    - DEADLINE_EXCEEDED: Run context deadline passed
    - RETRIES_EXHAUSTED: Every attempt of a retried request failed
    - NOT_IMPLEMENTED: Platform has no fetcher yet
    """

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    CLIENT_ERROR = "CLIENT_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    NETWORK = "NETWORK"
    RESPONSE_TOO_LARGE = "RESPONSE_TOO_LARGE"
    DECODE = "DECODE"
    CANCELLED = "CANCELLED"
    DEADLINE_EXCEEDED = "DEADLINE_EXCEEDED"
    RETRIES_EXHAUSTED = "RETRIES_EXHAUSTED"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


class HarvestError(Exception):
    """Base exception for harvest errors.

    Carries a classification, a retry flag and structured details so that
    callers can log the failure and decide whether to try again.
    """

    retryable: bool = False

    def __init__(
        self,
        error_class: HarvestErrorClass,
        message: str,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        """Initialize the harvest error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.details = details or {}

    def wrap(self, prefix: str, **details: str | int | bool | None) -> Self:
        """Prefix the message with context, keeping the error class.

        Args:
            prefix: Context to prepend (e.g. ``handle acme failed``).
            **details: Identifiers to record alongside the error.

        Returns:
            The same error, with the prefixed message.
        """
        self.message = f"{prefix}: {self.message}"
        self.args = (self.message,)
        self.details.update(details)
        return self

    def to_dict(
        self,
    ) -> dict[str, str | bool | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }


class InvalidCredentialFormatError(HarvestError):
    """Credential string is missing the ``:`` separator."""

    def __init__(
        self,
        message: str = "invalid credential format, expected username:apikey",
    ) -> None:
        super().__init__(HarvestErrorClass.INVALID_CREDENTIALS, message)


class ClientError(HarvestError):
    """The API answered with a 4xx status."""

    def __init__(self, status_code: int, message: str, url: str | None = None) -> None:
        super().__init__(
            HarvestErrorClass.CLIENT_ERROR,
            message,
            details={"status_code": status_code, "url": url},
        )
        self.status_code = status_code


class ServiceUnavailableError(HarvestError):
    """The API answered with a 5xx status."""

    retryable = True

    def __init__(self, status_code: int, message: str, url: str | None = None) -> None:
        super().__init__(
            HarvestErrorClass.SERVICE_UNAVAILABLE,
            message,
            details={"status_code": status_code, "url": url},
        )
        self.status_code = status_code


class RequestTimeoutError(HarvestError):
    """A single request ran past its own timeout."""

    retryable = True

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(HarvestErrorClass.TIMEOUT, message, details={"url": url})


class NetworkError(HarvestError):
    """Connection or protocol failure below HTTP."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(HarvestErrorClass.NETWORK, message, details={"url": url})


class ResponseTooLargeError(HarvestError):
    """Response body exceeded the configured size limit."""

    def __init__(self, limit: int, url: str | None = None) -> None:
        super().__init__(
            HarvestErrorClass.RESPONSE_TOO_LARGE,
            f"response exceeded limit of {limit} bytes",
            details={"limit": limit, "url": url},
        )
        self.limit = limit


class DecodeError(HarvestError):
    """Response body could not be decoded into the expected shape."""

    def __init__(self, message: str, context: str | None = None) -> None:
        super().__init__(
            HarvestErrorClass.DECODE, message, details={"context": context}
        )


class CancelledError(HarvestError):
    """The run context was cancelled explicitly."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(HarvestErrorClass.CANCELLED, message)


class DeadlineExceededError(HarvestError):
    """The run context deadline passed."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(HarvestErrorClass.DEADLINE_EXCEEDED, message)


class RetriesExhaustedError(HarvestError):
    """Every attempt of a retried request failed.

    The last failure is available as ``last_error`` and as ``__cause__``.
    """

    def __init__(self, attempts: int, last_error: HarvestError) -> None:
        super().__init__(
            HarvestErrorClass.RETRIES_EXHAUSTED,
            f"after {attempts} attempts: {last_error.message}",
            details={
                "attempts": attempts,
                "last_error_class": last_error.error_class.value,
            },
        )
        self.attempts = attempts
        self.last_error = last_error


class PlatformNotImplementedError(HarvestError):
    """The requested platform has no fetcher yet."""

    def __init__(self, platform_name: str) -> None:
        super().__init__(
            HarvestErrorClass.NOT_IMPLEMENTED,
            f"fetcher for {platform_name} not implemented yet",
            details={"platform": platform_name},
        )
