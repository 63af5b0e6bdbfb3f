"""Custom exceptions for resume-forms."""

from typing import Any


class ResumeFormsError(Exception):
    """Base exception for all resume-forms errors."""

    pass


class ConfigurationError(ResumeFormsError):
    """Raised when a form template or field schema is malformed."""

    pass


class SubmissionError(ResumeFormsError):
    """Raised when a request to the resume service fails."""

    pass


class ServiceError(SubmissionError):
    """Raised when the resume service answers with an error or is unreachable."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        service_message: str | None = None,
        service_error: str | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.service_message = service_message
        self.service_error = service_error
        self.body = body


class RateLimitError(ServiceError):
    """Raised when the resume service rejects a request with HTTP 429."""

    pass
