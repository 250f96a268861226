"""Core exception hierarchy for docgate.

This module defines all custom exceptions raised by the gate and the
document submitters. All exceptions inherit from DocGateError for unified
error handling. Errors raised by a task run through the gate are never
wrapped; they reach the caller unchanged.
"""


class DocGateError(Exception):
    """Base exception for all docgate errors.

    All custom exceptions in the package inherit from this class,
    allowing callers to catch every docgate-specific error with a single
    except clause.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            cause: Optional underlying exception that triggered this error.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class ConfigError(DocGateError):
    """Raised when configuration validation fails.

    This includes invalid YAML files, missing required fields,
    type mismatches, or out-of-range gate limits.
    """

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        cause: Exception | None = None,
    ):
        """Initialize the configuration error.

        Args:
            message: Human-readable error description.
            field_path: Optional dotted path to the problematic field (e.g., "gate.limit").
            cause: Optional underlying exception.
        """
        super().__init__(message, cause)
        self.field_path = field_path

    def __str__(self) -> str:
        """Return string representation including field path."""
        base_msg = super().__str__()
        if self.field_path:
            return f"{base_msg} (field: {self.field_path})"
        return base_msg


class ConfigOverrideError(ConfigError):
    """Raised when applying invalid configuration overrides.

    This occurs when attempting to override non-existent fields
    or with incompatible types.
    """

    pass


class PreconditionError(DocGateError, ValueError):
    """Raised when a public entry point receives an invalid argument.

    Signals a programmer error (a missing collaborator, a None payload,
    a non-positive limit) rather than a runtime failure.
    """

    pass


class GateCancelledError(DocGateError):
    """Raised when a caller's wait for a permit is cancelled.

    No permit is held when this error is raised, so nothing has to be
    released by the caller.
    """

    pass


class SubmissionError(DocGateError):
    """Base class for failures while creating a document.

    Raised by submitters for every stage of a document submission:
    serialization, URL composition, transport, and response decoding.
    """

    pass


class EncodingError(SubmissionError):
    """Raised when a document payload cannot be serialized."""

    pass


class UrlError(SubmissionError):
    """Raised when the composed request URL is invalid."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ):
        """Initialize the URL error.

        Args:
            message: Human-readable error description.
            url: Optional offending URL.
            cause: Optional underlying exception.
        """
        super().__init__(message, cause)
        self.url = url

    def __str__(self) -> str:
        """Return string representation including the URL."""
        base_msg = super().__str__()
        if self.url:
            return f"{base_msg} (url: {self.url})"
        return base_msg


class TransportError(SubmissionError):
    """Raised when the HTTP request fails or returns a non-success status.

    Connection errors, timeouts and HTTP error statuses all surface as
    this error. status_code is set only when a response was received.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        """Initialize the transport error.

        Args:
            message: Human-readable error description.
            status_code: Optional HTTP status code of the failed response.
            cause: Optional underlying exception.
        """
        super().__init__(message, cause)
        self.status_code = status_code

    def __str__(self) -> str:
        """Return string representation including the status code."""
        base_msg = super().__str__()
        if self.status_code is not None:
            return f"{base_msg} (status: {self.status_code})"
        return base_msg


class DecodingError(SubmissionError):
    """Raised when a response body cannot be decoded into a response record."""

    pass
