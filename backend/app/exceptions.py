"""
FitLog Backend - Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for each failure class the API reports.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right status code.
Who:   Raised by services and request dependencies; caught by global handlers.

Exception Hierarchy:
    FitLogError (base)
    ├── ValidationError          → 400 Bad Request (malformed input)
    ├── UploadReadError          → 500 Internal Server Error
    ├── SheetsServiceError       → 500 Internal Server Error (detail logged only)
    ├── LLMServiceError          → 500 Internal Server Error (detail returned)
    └── ConfigurationError       → fatal at startup, never reaches a client
"""

from typing import Any, Dict, Optional


class FitLogError(Exception):
    """
    Base exception for all FitLog application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FitLogError):
    """
    Raised when client input cannot be used.

    When:    Body is not valid JSON, the `image` form field is missing,
             or the uploaded image exceeds the size limit.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UploadReadError(FitLogError):
    """The uploaded image bytes could not be read from the request stream."""

    def __init__(
        self,
        message: str = "Read error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SheetsServiceError(FitLogError):
    """
    Raised when a Google Sheets append or read fails.

    What:    Authentication, transport, or API errors from the Sheets service.
    HTTP:    500 Internal Server Error

    The message returned to the client is the per-operation generic text
    ("Failed to save", "Failed to read sheet"); `detail` keeps the
    underlying service message for the server log.
    """

    def __init__(
        self,
        message: str = "Spreadsheet operation failed",
        detail: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if detail:
            ctx["detail"] = detail
        super().__init__(message=message, context=ctx)
        self.detail = detail


class LLMServiceError(FitLogError):
    """
    Raised when the Gemini call cannot produce text.

    When:    Missing/placeholder API key, client construction failure,
             or a failed generate_content call.
    HTTP:    500 Internal Server Error, body message "AI Error: <detail>"
    """

    def __init__(
        self,
        message: str = "AI service call failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(FitLogError):
    """Required configuration is missing or malformed; the server must not start."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
