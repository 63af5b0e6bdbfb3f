"""Resume document schema.

The shape of a resume as stored and returned by the resume service. The
service speaks camelCase; attributes are snake_case with camelCase
aliases, and unknown keys are kept. Numbers the service sends for text
fields (years, dates, ids) are read as strings.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ServiceModel(BaseModel):
    """Base for models exchanged with the resume service."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


class PersonalInfo(ServiceModel):
    """Contact block at the top of a resume."""

    full_name: str | None = Field(default=None, description="Candidate's full name")
    email: str | None = Field(default=None, description="Email address")
    phone: str | None = Field(default=None, description="Phone number")
    address: str | None = Field(default=None, description="City or postal address")
    linkedin: str | None = Field(default=None, description="LinkedIn profile URL")
    website: str | None = Field(default=None, description="Personal website URL")


class Education(ServiceModel):
    """Education entry in a resume."""

    institution: str | None = Field(default=None, description="School/university name")
    degree: str | None = Field(default=None, description="Degree or certification")
    field_of_study: str | None = Field(default=None, description="Major/field of study")
    start_date: str | None = Field(default=None, description="Start date")
    end_date: str | None = Field(default=None, description="End or expected graduation date")
    gpa: str | float | None = Field(default=None, description="GPA if given")
    description: str | None = Field(default=None, description="Coursework, honours")


class WorkExperience(ServiceModel):
    """Work experience entry in a resume."""

    company: str | None = Field(default=None, description="Company or organization name")
    position: str | None = Field(default=None, description="Job title/position")
    location: str | None = Field(default=None, description="Office location")
    start_date: str | None = Field(default=None, description="Start date")
    end_date: str | None = Field(default=None, description="End date")
    current: bool = Field(default=False, description="Whether this is the current job")
    description: str | None = Field(default=None, description="Role description")
    achievements: list[str] = Field(default_factory=list, description="Key achievements")


class Project(ServiceModel):
    """Project entry in a resume."""

    name: str | None = Field(default=None, description="Project name")
    description: str | None = Field(default=None, description="What the project does")
    technologies: list[str] = Field(default_factory=list, description="Technologies used")
    url: str | None = Field(default=None, description="Link to the project")


class Language(ServiceModel):
    """Spoken language with proficiency."""

    name: str | None = Field(default=None, description="Language name")
    proficiency: str | None = Field(default=None, description="Proficiency level")


class ResumeDocument(ServiceModel):
    """A resume as returned by the resume service.

    Example:
        ```python
        document = normalize_document(response.data)
        print(document.personal_info.full_name)
        for job in document.work_experience:
            print(f"{job.position} at {job.company}")
        ```
    """

    id: str | None = Field(default=None, alias="_id", description="Service-assigned id")
    resume_type: str | None = Field(default=None, description="FRESHER or EXPERIENCED")
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str | None = Field(default=None, description="Professional summary")
    skills: list[str] = Field(default_factory=list, description="Skills")
    education: list[Education] = Field(default_factory=list)
    work_experience: list[WorkExperience] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    languages: list[Language] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, description="Creation timestamp")
    is_generated: bool = Field(default=False, description="Whether the AI generated it")
    pdf_url: str | None = Field(default=None, description="URL of the rendered PDF")

    @property
    def pdf_filename(self) -> str:
        """File name of the downloaded PDF, derived from the person's name."""
        name = self.personal_info.full_name or "generated"
        safe = re.sub(r'[\\/:*?"<>|]+', "_", name).strip() or "generated"
        return f"resume-{safe}.pdf"


# Collections the preview reads, with the response keys tried in order and
# the value used when none is present.
COLLECTION_FALLBACKS: tuple[tuple[str, tuple[str, ...], type], ...] = (
    ("workExperience", ("workExperience", "experience"), list),
    ("education", ("education",), list),
    ("skills", ("skills",), list),
    ("projects", ("projects",), list),
    ("languages", ("languages",), list),
    ("personalInfo", ("personalInfo",), dict),
)


def normalize_document(data: Mapping[str, Any] | None) -> ResumeDocument:
    """Fill absent collections of a service response and parse it.

    Args:
        data: The ``data`` member of a service response.

    Returns:
        ResumeDocument whose collections are never None.
    """
    raw = dict(data or {})
    if "id" in raw and "_id" not in raw:
        raw["_id"] = raw.pop("id")
    for target, sources, factory in COLLECTION_FALLBACKS:
        value = next((raw[s] for s in sources if raw.get(s) is not None), None)
        raw[target] = value if value is not None else factory()
    raw.pop("experience", None)
    return ResumeDocument.model_validate(raw)
