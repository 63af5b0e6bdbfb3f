"""Submission pipeline: validated form values in, resume document out."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from resume_forms.core.exceptions import RateLimitError, ServiceError, SubmissionError
from resume_forms.core.fields import FieldPath, FieldSchema
from resume_forms.core.validator import is_form_valid
from resume_forms.schemas.resume import ResumeDocument, normalize_document
from resume_forms.submission.client import ResumeServiceClient, ServiceResponse
from resume_forms.submission.payload import build_payload

logger = logging.getLogger(__name__)

INVALID_FORM_MESSAGE = "Please fix the errors before generating your resume"
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a minute before trying again."
GENERIC_FAILURE_MESSAGE = "Failed to generate/update resume. Please try again."


class SubmissionStatus(str, Enum):
    """Where a submission stands."""

    IDLE = "idle"
    GENERATING = "generating"
    EDITING = "editing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SubmissionOutcome(BaseModel):
    """Result of one submission attempt."""

    success: bool = Field(description="Whether the service returned a document")
    message: str = Field(description="User-facing notification text")
    document: ResumeDocument | None = Field(
        default=None,
        description="Normalized document (None unless success)",
    )
    edited: bool = Field(default=False, description="Whether an existing document was edited")
    refused: bool = Field(
        default=False,
        description="Whether the submission was refused before any request",
    )
    rate_limited: bool = Field(default=False, description="Whether the service rate limited")
    status_code: int | None = Field(default=None, description="HTTP status of a failure")

    @model_validator(mode="after")
    def _validate_document_presence(self) -> SubmissionOutcome:
        """Ensure a document is present when the submission succeeded."""
        if self.success and self.document is None:
            raise ValueError("document must be provided when success is True")
        return self


class SubmissionPipeline:
    """Sends validated form values to the resume service.

    ``submit`` moves ``status`` from IDLE (or a previous terminal state) to
    GENERATING, or to EDITING when an ``edit_id`` is given, and then to
    SUCCEEDED or FAILED. Failures never raise: they come back as an
    outcome, and the pipeline accepts the next ``submit`` right away.

    The pipeline does not deduplicate calls; callers check ``is_busy``
    before submitting.
    """

    def __init__(self, client: ResumeServiceClient) -> None:
        self._client = client
        self.status = SubmissionStatus.IDLE

    @property
    def is_busy(self) -> bool:
        """True while a request is outstanding."""
        return self.status in (SubmissionStatus.GENERATING, SubmissionStatus.EDITING)

    async def submit(
        self,
        values: Mapping[str, Any],
        errors: Mapping[FieldPath, str],
        fields: Sequence[FieldSchema],
        edit_id: str | None = None,
    ) -> SubmissionOutcome:
        """Submit form values for generation, or as an edit of ``edit_id``.

        Args:
            values: Current form values.
            errors: Current error map; must be empty.
            fields: Top-level fields of the form.
            edit_id: Id of the document being edited, if any.

        Returns:
            SubmissionOutcome describing the result.
        """
        editing = edit_id is not None
        if not is_form_valid(errors):
            logger.warning("Refusing submission: form has %d error(s)", len(errors))
            return SubmissionOutcome(success=False, message=INVALID_FORM_MESSAGE, refused=True)

        payload = build_payload(values, fields)
        self.status = SubmissionStatus.EDITING if editing else SubmissionStatus.GENERATING
        logger.info("Submitting resume (%s)", "edit " + str(edit_id) if editing else "generate")

        try:
            if editing:
                response = await self._client.edit(str(edit_id), payload)
            else:
                response = await self._client.generate(payload)
        except RateLimitError as e:
            logger.error("Submission rate limited: %s", e)
            return self._fail(
                e.service_message or RATE_LIMIT_MESSAGE,
                editing,
                rate_limited=True,
                status_code=e.status_code,
            )
        except ServiceError as e:
            logger.error("Submission failed: %s", e)
            return self._fail(_service_error_message(e), editing, status_code=e.status_code)
        except SubmissionError as e:
            logger.error("Submission failed: %s", e)
            return self._fail(GENERIC_FAILURE_MESSAGE, editing)

        return self._finish(response, editing)

    def _finish(self, response: ServiceResponse, editing: bool) -> SubmissionOutcome:
        if not response.success:
            fallback = "Failed to update resume" if editing else "Failed to generate resume"
            logger.error("Service declined submission: %s", response.message or response.error)
            return self._fail(
                response.message or fallback, editing, status_code=response.status_code
            )

        try:
            data = response.data if isinstance(response.data, Mapping) else None
            document = normalize_document(data)
        except ValidationError as e:
            logger.error("Service returned a malformed document: %s", e)
            return self._fail(GENERIC_FAILURE_MESSAGE, editing, status_code=response.status_code)

        self.status = SubmissionStatus.SUCCEEDED
        message = "Resume updated successfully!" if editing else "Resume generated successfully!"
        logger.info(message)
        return SubmissionOutcome(success=True, message=message, document=document, edited=editing)

    def _fail(
        self,
        message: str,
        editing: bool,
        rate_limited: bool = False,
        status_code: int | None = None,
    ) -> SubmissionOutcome:
        self.status = SubmissionStatus.FAILED
        return SubmissionOutcome(
            success=False,
            message=message,
            edited=editing,
            rate_limited=rate_limited,
            status_code=status_code,
        )


def _service_error_message(error: ServiceError) -> str:
    """The service's own message and error detail, or a generic fallback."""
    if error.service_message or error.service_error:
        detail = f" - {error.service_error}" if error.service_error else ""
        return f"{error.service_message or ''}{detail}".strip()
    return GENERIC_FAILURE_MESSAGE
