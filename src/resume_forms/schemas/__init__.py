"""Resume document schema exchanged with the resume service."""

from resume_forms.schemas.resume import (
    Education,
    Language,
    PersonalInfo,
    Project,
    ResumeDocument,
    WorkExperience,
    normalize_document,
)

__all__ = [
    "Education",
    "Language",
    "PersonalInfo",
    "Project",
    "ResumeDocument",
    "WorkExperience",
    "normalize_document",
]
