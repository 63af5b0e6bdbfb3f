"""Submission of form values to the resume service."""

from resume_forms.submission.client import ResumeServiceClient, ServiceResponse
from resume_forms.submission.payload import build_payload, prefill_values, split_list
from resume_forms.submission.pipeline import (
    SubmissionOutcome,
    SubmissionPipeline,
    SubmissionStatus,
)

__all__ = [
    "ResumeServiceClient",
    "ServiceResponse",
    "SubmissionOutcome",
    "SubmissionPipeline",
    "SubmissionStatus",
    "build_payload",
    "prefill_values",
    "split_list",
]
