"""Error taxonomy and error-code registry for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import status


@dataclass(frozen=True)
class ErrorCodeSpec:
    code: str
    message: str
    http_status: int


class ErrorRegistry:
    def __init__(self) -> None:
        self._codes: Dict[str, ErrorCodeSpec] = {}

    def register(self, spec: ErrorCodeSpec) -> None:
        if spec.code in self._codes:
            raise ValueError(f"Error code {spec.code} already registered")
        self._codes[spec.code] = spec

    def get(self, code: str) -> ErrorCodeSpec:
        if code not in self._codes:
            raise KeyError(f"Unknown error code: {code}")
        return self._codes[code]


ERRORS = ErrorRegistry()


def register_default_errors() -> None:
    for spec in (
        ErrorCodeSpec("ERR_FORM_PARSE", "Error parsing form data", status.HTTP_500_INTERNAL_SERVER_ERROR),
        ErrorCodeSpec("ERR_MISSING_FILE", "No file uploaded", status.HTTP_400_BAD_REQUEST),
        ErrorCodeSpec("ERR_PROTOCOL", "Platform API request failed", status.HTTP_500_INTERNAL_SERVER_ERROR),
        ErrorCodeSpec("ERR_STAGING", "Failed to stage upload", 422),
        ErrorCodeSpec("ERR_TRANSMISSION", "Upload to staging target failed", status.HTTP_500_INTERNAL_SERVER_ERROR),
        ErrorCodeSpec("ERR_REGISTRATION", "Failed to create file", 422),
        ErrorCodeSpec("ERR_POLL_TIMEOUT", "File did not become READY", status.HTTP_500_INTERNAL_SERVER_ERROR),
        ErrorCodeSpec("ERR_CONFIGURATION", "Upload service is not configured", status.HTTP_500_INTERNAL_SERVER_ERROR),
    ):
        ERRORS.register(spec)


register_default_errors()


class UploadError(RuntimeError):
    """Base class for failures surfaced by the upload pipeline."""

    code = "ERR_PROTOCOL"

    def __init__(self, message: Optional[str] = None, *, details: Any = None) -> None:
        self.message = message or ERRORS.get(self.code).message
        self.details = details
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return ERRORS.get(self.code).http_status


class FormParseError(UploadError):
    code = "ERR_FORM_PARSE"


class MissingFileError(UploadError):
    code = "ERR_MISSING_FILE"


class ConfigurationError(UploadError):
    code = "ERR_CONFIGURATION"


class ProtocolError(UploadError):
    """Raised when the platform answers with application-level errors."""

    code = "ERR_PROTOCOL"

    def __init__(self, message: Optional[str] = None, *, errors: Optional[list] = None) -> None:
        self.errors = list(errors or [])
        super().__init__(message, details=self.errors or None)


class StagingError(UploadError):
    code = "ERR_STAGING"


class TransmissionError(UploadError):
    code = "ERR_TRANSMISSION"

    def __init__(
        self, message: Optional[str] = None, *, status_code: Optional[int] = None, body: str = ""
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message, details=body)


class RegistrationError(UploadError):
    code = "ERR_REGISTRATION"


class PollTimeoutError(UploadError, TimeoutError):
    """Raised when an asset never reports READY within the poll budget."""

    code = "ERR_POLL_TIMEOUT"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        last_state: Optional[str] = None,
        attempts: int = 0,
        reason: str = "exhausted",
    ) -> None:
        self.last_state = last_state
        self.attempts = attempts
        self.reason = reason
        super().__init__(message)


def error_response_body(exc: UploadError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": exc.message}
    if isinstance(exc, PollTimeoutError):
        body["status"] = exc.last_state
    elif exc.details not in (None, "", []):
        body["details"] = exc.details
    return body
