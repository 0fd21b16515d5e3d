"""Error taxonomy for Sleeper Analyzer.

Every error carries a stable ``error_code`` so the boundary layer can pick an
HTTP status without looking at anything else.
"""

from typing import Any, Optional, Tuple


class AnalyzerError(Exception):
    """Base exception for all Sleeper Analyzer errors."""

    error_code = "FANTASY_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        super().__init__(message)

    def to_error_pair(self) -> Tuple[str, str]:
        """Get the (error_code, message) pair used by response envelopes."""
        return self.error_code, self.message


class InvalidArgumentError(AnalyzerError):
    """Raised when a caller passes a malformed or out-of-range parameter."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation failed for field '{field}': {message}")


class NotFoundError(AnalyzerError):
    """Raised when the provider signals that a resource does not exist."""

    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource: str, field: str, value: Any):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} not found with {field}: '{value}'")


class ProviderUnavailableError(AnalyzerError):
    """Raised for any transport or decoding failure talking to Sleeper.

    The underlying exception is kept on ``cause`` (and ``__cause__``) for
    logging; the message shown to callers stays opaque.
    """

    error_code = "PROVIDER_UNAVAILABLE"

    def __init__(self, operation: str, reason: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.reason = reason
        self.cause = cause
        super().__init__(f"Sleeper API unavailable during {operation}")


class BusinessRuleError(AnalyzerError):
    """Raised when a business rule is violated."""

    error_code = "BUSINESS_RULE_VIOLATION"


class UnauthorizedError(AnalyzerError):
    """Raised when the caller is not allowed to perform an action."""

    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "You are not authorized to perform this action"):
        super().__init__(message)
