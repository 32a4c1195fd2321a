"""Custom exception hierarchy for rfcsections configuration and operations."""


class RfcSectionsError(Exception):
    """Base exception for all rfcsections errors.

    All rfcsections-specific exceptions inherit from this class, enabling
    centralized exception handling in the CLI.
    """

    pass


class ConfigError(RfcSectionsError):
    """Exception raised for configuration errors.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class DocumentError(RfcSectionsError):
    """Base exception for failures that abort a single document.

    The batch driver catches these, reports them, and moves on to the
    next document.

    Attributes:
        locator: Resolved document URL, if known
        message: Human-readable error message
    """

    def __init__(self, locator: str | None, message: str) -> None:
        """Create a document error.

        Args:
            locator: Resolved document URL (None when raised below the pipeline)
            message: Descriptive error message
        """
        self.locator = locator
        self.message = message
        if locator:
            super().__init__(f"{locator}: {message}")
        else:
            super().__init__(message)


class RetrievalError(DocumentError):
    """Exception raised when the document server returns a non-success status.

    Attributes:
        locator: URL that was requested
        status_code: HTTP status code (None for transport failures)
        reason: Status reason phrase or error detail
    """

    def __init__(
        self,
        locator: str,
        status_code: int | None,
        reason: str | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize RetrievalError with status details.

        Args:
            locator: URL that was requested
            status_code: HTTP status code returned by the server
            reason: Optional reason phrase
            message: Override for the generated message
        """
        self.status_code = status_code
        self.reason = reason
        if message is None:
            message = f"retrieval failed with status {status_code}"
            if reason:
                message += f" ({reason})"
        super().__init__(locator, message)


class DocumentConnectionError(RetrievalError):
    """Error raised when the document server is unreachable.

    Attributes:
        locator: URL that failed
        original_error: The underlying transport exception
    """

    def __init__(self, locator: str, original_error: Exception | None = None) -> None:
        """Initialize DocumentConnectionError with the underlying cause.

        Args:
            locator: URL that failed to connect
            original_error: The exception that caused the connection failure
        """
        self.original_error = original_error
        message = "could not retrieve document"
        if original_error:
            message += f": {original_error}"
        super().__init__(
            locator,
            None,
            reason=str(original_error) if original_error else None,
            message=message,
        )


class UnsupportedContentType(DocumentError):
    """Exception raised when the retrieved document is not HTML.

    Attributes:
        locator: URL that was requested
        content_type: The declared Content-Type header value
    """

    def __init__(self, locator: str, content_type: str) -> None:
        """Create an unsupported content type error."""
        self.content_type = content_type
        super().__init__(
            locator, f"content type must be html, got '{content_type or 'unknown'}'"
        )


class StreamError(DocumentError):
    """Exception raised when the token stream fails before a clean end.

    Covers transport failures mid-body and undecodable input.
    """

    def __init__(self, message: str, locator: str | None = None) -> None:
        """Create a stream error."""
        super().__init__(locator, message)


class MalformedDocument(DocumentError):
    """Exception raised when a bounded scan exceeds its iteration cap.

    Attributes:
        tokens_scanned: Number of tokens consumed before giving up
    """

    def __init__(
        self,
        message: str,
        tokens_scanned: int = 0,
        locator: str | None = None,
    ) -> None:
        """Create a malformed document error."""
        self.tokens_scanned = tokens_scanned
        super().__init__(locator, message)


class OutputError(RfcSectionsError):
    """Exception raised when writing the CSV output fails.

    Output failures are fatal to the whole run.

    Attributes:
        path: Output file path
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str) -> None:
        """Initialize OutputError with path and message."""
        self.path = path
        self.message = message
        super().__init__(f"Failed to write {path}: {message}")
