"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when caller input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a document is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class MalformedDocumentError(AppError):
    """Raised when a stored document is missing a field or has the wrong shape."""

    def __init__(self, message="Improperly formatted metadata."):
        """Initialize the error."""
        super().__init__(message, 422)


class InvariantViolationError(AppError):
    """Raised when an operation would break a relationship invariant."""

    def __init__(self, message="Operation rejected."):
        """Initialize the error."""
        super().__init__(message, 409)


class TransportError(AppError):
    """Raised when a call to the remote store fails."""

    def __init__(self, message="Unable to reach the database."):
        """Initialize the error."""
        super().__init__(message, 502)
