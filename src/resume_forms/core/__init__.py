"""Core form engine: field schema, rules, validation and state."""

from resume_forms.core.config import FormConfig, ServiceConfig
from resume_forms.core.exceptions import (
    ConfigurationError,
    RateLimitError,
    ResumeFormsError,
    ServiceError,
    SubmissionError,
)
from resume_forms.core.fields import FieldKind, FieldPath, FieldSchema, SelectOption, UploadedFile
from resume_forms.core.rules import (
    NumericRangeRule,
    PatternRule,
    RuleRegistry,
    ValidationRule,
    check_file,
)
from resume_forms.core.state import FormState
from resume_forms.core.templates import FormTemplate, TemplateRegistry
from resume_forms.core.validator import ErrorMap, errors_under, is_form_valid, validate_form

__all__ = [
    "ConfigurationError",
    "ErrorMap",
    "FieldKind",
    "FieldPath",
    "FieldSchema",
    "FormConfig",
    "FormState",
    "FormTemplate",
    "NumericRangeRule",
    "PatternRule",
    "RateLimitError",
    "ResumeFormsError",
    "RuleRegistry",
    "SelectOption",
    "ServiceConfig",
    "ServiceError",
    "SubmissionError",
    "TemplateRegistry",
    "UploadedFile",
    "ValidationRule",
    "check_file",
    "errors_under",
    "is_form_valid",
    "validate_form",
]
