import os
from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class ValidationError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details
        )

class InvalidInputError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="INVALID_INPUT",
            details=details
        )

class NotFoundError(AppException):
    def __init__(self, message: str = "Resource not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            message=message,
            status_code=404,
            error_code=error_code
        )

class ResumeFileNotFoundError(NotFoundError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(
            message=f"Resume file not found: {os.path.basename(path)}",
            error_code="FILE_NOT_FOUND"
        )

class ConflictError(AppException):
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT"
        )

class UnsupportedFormatError(AppException):
    """Raised before any parsing when the file extension is not PDF or DOCX."""
    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(
            message=f"Unsupported file format: {extension or '(none)'}. Only PDF and DOCX are supported.",
            status_code=400,
            error_code="UNSUPPORTED_FORMAT",
            details={"extension": extension}
        )

class ExtractionError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code="EXTRACTION_FAILED",
            details=details
        )

class ProviderError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=503,
            error_code="AI_SERVICE_UNAVAILABLE",
            details=details
        )

class AIKillSwitchError(ProviderError):
    def __init__(self):
        super().__init__(message="AI services are currently offline for maintenance.")
        self.error_code = "AI_KILL_SWITCH_ACTIVE"

class ParseError(AppException):
    """
    The provider answered, but not with JSON.
    `raw_text` keeps the offending response for diagnostics.
    """
    def __init__(self, message: str, raw_text: Optional[str] = None, reason: str = "invalid_json"):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(
            message=message,
            status_code=502,
            error_code="AI_RESPONSE_UNPARSEABLE",
            details={"reason": reason}
        )

class PersistenceError(AppException):
    def __init__(self, message: str = "Failed to save data."):
        super().__init__(
            message=message,
            status_code=500,
            error_code="PERSISTENCE_ERROR"
        )

class AuthenticationError(AppException):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )

class AccessDeniedError(AppException):
    """Custom permission error. Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )
