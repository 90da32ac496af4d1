"""
Exception hierarchy for PageTran.

Every stage raises one of these; the pipeline wraps whatever escapes a stage
into a single ``PipelineError`` that the request boundary reports.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List


TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class PageTranError(Exception):
    """Base exception for all PageTran errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
        suggestion: Optional[str] = None
    ):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            details: Additional error details
            recoverable: Whether error can be recovered from
            suggestion: Suggested fix or workaround
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
            "suggestion": self.suggestion
        }

    def __str__(self) -> str:
        return self.message


class BackendError(PageTranError):
    """Raised when a translation backend call fails."""

    def __init__(
        self,
        backend: str,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize backend error.

        Args:
            backend: Backend name
            message: Error message
            status_code: HTTP-style status reported by the remote service
            original_error: Original SDK exception if any
        """
        full_message = f"Backend '{backend}' failed: {message}"
        if status_code is not None:
            full_message += f" (status {status_code})"
        details = {
            "backend": backend,
            "status_code": status_code,
            "original_error": str(original_error) if original_error else None
        }

        suggestion = None
        if status_code == 429:
            suggestion = "The service is rate limiting requests. Lower --concurrency or retry later."
        elif status_code in (401, 403):
            suggestion = f"Check the API key for {backend}. Set it in the config file or environment."

        transient = status_code in TRANSIENT_STATUS_CODES
        super().__init__(full_message, details, recoverable=transient, suggestion=suggestion)
        self.backend = backend
        self.status_code = status_code
        self.original_error = original_error

    @property
    def transient(self) -> bool:
        return self.status_code in TRANSIENT_STATUS_CODES


class ExtractionError(PageTranError):
    """Raised when the input document cannot be read."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {"original_error": str(original_error) if original_error else None}
        suggestion = "Make sure the upload is a valid, unencrypted PDF file."
        super().__init__(message, details, recoverable=False, suggestion=suggestion)
        self.original_error = original_error


class RenderingError(PageTranError):
    """Raised when the output PDF cannot be built."""

    def __init__(
        self,
        message: str,
        page: Optional[int] = None,
        font_path: Optional[str] = None
    ):
        """
        Initialize rendering error.

        Args:
            message: Error message
            page: Translated page index being drawn
            font_path: Font file in use, if any
        """
        details = {
            "page": page,
            "font_path": font_path
        }
        suggestion = "Check that the configured font file exists and covers the target script."
        super().__init__(message, details, recoverable=False, suggestion=suggestion)
        self.page = page
        self.font_path = font_path


class ConfigurationError(PageTranError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        invalid_value: Optional[Any] = None,
        valid_values: Optional[List[Any]] = None
    ):
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that's invalid
            invalid_value: Invalid value provided
            valid_values: List of valid values
        """
        details = {
            "config_key": config_key,
            "invalid_value": invalid_value,
            "valid_values": valid_values
        }

        suggestion = None
        if config_key and valid_values:
            suggestion = f"Valid values for {config_key}: {', '.join(map(str, valid_values))}"
        elif config_key:
            suggestion = f"Check configuration for '{config_key}'"

        super().__init__(message, details, recoverable=True, suggestion=suggestion)
        self.config_key = config_key
        self.invalid_value = invalid_value
        self.valid_values = valid_values


class PipelineError(PageTranError):
    """
    Terminal failure of a translation run.

    Wraps the stage failure that aborted the run. Reported at the request
    boundary as ``{"error": "translate_failed", "detail": <cause message>}``.
    """

    code = "translate_failed"

    def __init__(self, cause: BaseException, stage: Optional[str] = None):
        message = str(cause) or cause.__class__.__name__
        details = {
            "stage": stage,
            "cause_type": cause.__class__.__name__
        }
        suggestion = getattr(cause, "suggestion", None)
        super().__init__(message, details, recoverable=False, suggestion=suggestion)
        self.cause = cause
        self.stage = stage

    def to_payload(self) -> Dict[str, str]:
        return {"error": self.code, "detail": self.message}
