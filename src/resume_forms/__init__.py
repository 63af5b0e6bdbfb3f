"""
resume-forms: A schema-driven form engine for building resumes.
"""

from resume_forms.builder import Notification, ResumeBuilder, ResumeDashboard
from resume_forms.core.config import FormConfig, ServiceConfig
from resume_forms.core.exceptions import (
    ConfigurationError,
    RateLimitError,
    ResumeFormsError,
    ServiceError,
    SubmissionError,
)
from resume_forms.core.fields import FieldKind, FieldPath, FieldSchema, SelectOption, UploadedFile
from resume_forms.core.rules import NumericRangeRule, PatternRule, RuleRegistry
from resume_forms.core.state import FormState
from resume_forms.core.templates import FormTemplate, TemplateRegistry
from resume_forms.core.validator import ErrorMap, is_form_valid, validate_form

# Rendering
from resume_forms.rendering import (
    FileUpload,
    FormCallbacks,
    GroupItem,
    RepeatableGroup,
    Select,
    TextArea,
    TextInput,
    Widget,
    render_field,
    render_form,
)

# Resume document schema
from resume_forms.schemas import ResumeDocument, normalize_document

# Submission
from resume_forms.submission import (
    ResumeServiceClient,
    ServiceResponse,
    SubmissionOutcome,
    SubmissionPipeline,
    SubmissionStatus,
    build_payload,
)

# Built-in templates
from resume_forms.templates import BuiltinTemplates

__version__ = "0.1.0"

__all__ = [
    # Core
    "FieldKind",
    "FieldPath",
    "FieldSchema",
    "SelectOption",
    "UploadedFile",
    "FormTemplate",
    "TemplateRegistry",
    "FormState",
    "ErrorMap",
    "validate_form",
    "is_form_valid",
    "PatternRule",
    "NumericRangeRule",
    "RuleRegistry",
    # Errors
    "ResumeFormsError",
    "ConfigurationError",
    "SubmissionError",
    "ServiceError",
    "RateLimitError",
    # Config
    "FormConfig",
    "ServiceConfig",
    # Rendering
    "FormCallbacks",
    "Widget",
    "TextInput",
    "TextArea",
    "Select",
    "FileUpload",
    "RepeatableGroup",
    "GroupItem",
    "render_field",
    "render_form",
    # Built-in Templates
    "BuiltinTemplates",
    # Documents
    "ResumeDocument",
    "normalize_document",
    # Submission
    "ResumeServiceClient",
    "ServiceResponse",
    "SubmissionPipeline",
    "SubmissionStatus",
    "SubmissionOutcome",
    "build_payload",
    # Sessions
    "ResumeBuilder",
    "ResumeDashboard",
    "Notification",
]
