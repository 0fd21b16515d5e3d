"""Response envelope and error-code to HTTP status mapping."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_serializer

from sleeper_analyzer.errors import AnalyzerError

STATUS_BY_ERROR_CODE = {
    "RESOURCE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "BUSINESS_RULE_VIOLATION": 400,
    "UNAUTHORIZED": 403,
    "PROVIDER_UNAVAILABLE": 503,
}


def status_for_error_code(error_code: str) -> int:
    """Get the HTTP status for an error code; unknown codes map to 500."""
    return STATUS_BY_ERROR_CODE.get(error_code, 500)


class ErrorDetails(BaseModel):
    """Error block of a failed response."""

    code: str
    message: str
    details: Optional[str] = None
    validation_errors: Optional[Dict[str, str]] = None


class ApiResponse(BaseModel):
    """Uniform success/error envelope."""

    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[ErrorDetails] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @field_serializer("timestamp")
    def _format_timestamp(self, value: datetime) -> str:
        return value.strftime("%Y-%m-%dT%H:%M:%S")

    @classmethod
    def ok(cls, data: Any, message: Optional[str] = None) -> "ApiResponse":
        """Create a successful response."""
        return cls(success=True, data=data, message=message)

    @classmethod
    def failure(cls, error_code: str, message: str, details: Optional[str] = None) -> "ApiResponse":
        """Create an error response from an (error_code, message) pair."""
        return cls(
            success=False,
            message=message,
            error=ErrorDetails(code=error_code, message=message, details=details),
        )

    @classmethod
    def from_error(cls, error: AnalyzerError) -> "ApiResponse":
        """Create an error response from an AnalyzerError."""
        error_code, message = error.to_error_pair()
        return cls.failure(error_code, message)

    @property
    def status_code(self) -> int:
        """HTTP status this envelope would be sent with."""
        if self.success or self.error is None:
            return 200
        return status_for_error_code(self.error.code)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize, omitting null members."""
        return self.model_dump_json(exclude_none=True, indent=indent)
