"""Built-in form templates factory.

Provides the forms of the two resume types the tool offers: FRESHER for
students and recent graduates, EXPERIENCED for professionals.
"""

from resume_forms.core.config import DEFAULT_MAX_FILE_SIZE
from resume_forms.core.fields import FieldKind, FieldSchema, SelectOption
from resume_forms.core.templates import FormTemplate, TemplateRegistry

PROFICIENCY_LEVELS = ("Native", "Fluent", "Professional", "Intermediate", "Basic")


def _personal_fields() -> list[FieldSchema]:
    return [
        FieldSchema(
            id="fullName",
            label="Full Name",
            required=True,
            placeholder="Jane Doe",
        ),
        FieldSchema(
            id="email",
            label="Email",
            kind=FieldKind.EMAIL,
            required=True,
            validation="email",
            placeholder="jane@example.com",
        ),
        FieldSchema(
            id="phone",
            label="Phone",
            kind=FieldKind.TEL,
            required=True,
            validation="phone",
            placeholder="+1 555 123 4567",
        ),
        FieldSchema(id="address", label="Address", placeholder="City, Country"),
        FieldSchema(
            id="linkedin",
            label="LinkedIn",
            kind=FieldKind.URL,
            validation="url",
            placeholder="https://linkedin.com/in/janedoe",
        ),
        FieldSchema(
            id="website",
            label="Website",
            kind=FieldKind.URL,
            validation="url",
            placeholder="https://janedoe.dev",
        ),
    ]


def _summary_field(placeholder: str) -> FieldSchema:
    return FieldSchema(
        id="summary",
        label="Professional Summary",
        kind=FieldKind.TEXTAREA,
        rows=4,
        placeholder=placeholder,
    )


def _skills_field() -> FieldSchema:
    return FieldSchema(
        id="skills",
        label="Skills",
        required=True,
        separator=",",
        placeholder="Python, SQL, Git",
        description="Separate skills with commas",
    )


def _education_field(min_items: int) -> FieldSchema:
    return FieldSchema(
        id="education",
        label="Education",
        kind=FieldKind.ARRAY,
        required=min_items > 0,
        min_items=min_items,
        template={
            "institution": FieldSchema(label="Institution", required=True),
            "degree": FieldSchema(label="Degree", required=True),
            "fieldOfStudy": FieldSchema(label="Field of Study"),
            "startDate": FieldSchema(label="Start Date", kind=FieldKind.DATE),
            "endDate": FieldSchema(label="End Date", kind=FieldKind.DATE),
            "gpa": FieldSchema(label="GPA", validation="gpa", placeholder="8.5"),
            "description": FieldSchema(label="Description", kind=FieldKind.TEXTAREA),
        },
    )


def _work_experience_field() -> FieldSchema:
    return FieldSchema(
        id="workExperience",
        label="Work Experience",
        kind=FieldKind.ARRAY,
        required=True,
        min_items=1,
        template={
            "company": FieldSchema(label="Company", required=True),
            "position": FieldSchema(label="Position", required=True),
            "location": FieldSchema(label="Location"),
            "startDate": FieldSchema(label="Start Date", kind=FieldKind.DATE, required=True),
            "endDate": FieldSchema(
                label="End Date",
                kind=FieldKind.DATE,
                description="Leave empty for your current job",
            ),
            "description": FieldSchema(label="Description", kind=FieldKind.TEXTAREA),
            "achievements": FieldSchema(
                label="Achievements",
                kind=FieldKind.TEXTAREA,
                separator="\n",
                description="One achievement per line",
            ),
        },
    )


def _projects_field() -> FieldSchema:
    return FieldSchema(
        id="projects",
        label="Projects",
        kind=FieldKind.ARRAY,
        template={
            "name": FieldSchema(label="Project Name", required=True),
            "description": FieldSchema(label="Description", kind=FieldKind.TEXTAREA),
            "technologies": FieldSchema(
                label="Technologies",
                separator=",",
                placeholder="React, Node.js, MongoDB",
            ),
            "url": FieldSchema(label="URL", kind=FieldKind.URL, validation="url"),
        },
    )


def _languages_field() -> FieldSchema:
    return FieldSchema(
        id="languages",
        label="Languages",
        kind=FieldKind.ARRAY,
        template={
            "name": FieldSchema(label="Language", required=True),
            "proficiency": FieldSchema(
                label="Proficiency",
                kind=FieldKind.SELECT,
                required=True,
                options=tuple(
                    SelectOption(value=level, label=level) for level in PROFICIENCY_LEVELS
                ),
            ),
        },
    )


def _existing_resume_field() -> FieldSchema:
    return FieldSchema(
        id="existingResume",
        label="Existing Resume",
        kind=FieldKind.FILE,
        accept=".pdf",
        max_size=DEFAULT_MAX_FILE_SIZE,
        description="Optional: upload your current resume to reuse its content",
    )


class BuiltinTemplates:
    """Factory class for built-in form templates.

    Example:
        ```python
        from resume_forms import BuiltinTemplates, FormState

        state = FormState(BuiltinTemplates.fresher())
        registry = BuiltinTemplates.registry()
        ```
    """

    @staticmethod
    def fresher() -> FormTemplate:
        """Create the form for students and recent graduates.

        Returns:
            FormTemplate named FRESHER; education needs at least one entry.
        """
        return FormTemplate(
            name="FRESHER",
            title="Fresher Resume",
            description="Perfect for students and recent graduates",
            fields=[
                *_personal_fields(),
                _summary_field("A short introduction: your studies, interests and goals"),
                _skills_field(),
                _education_field(min_items=1),
                _projects_field(),
                _languages_field(),
                _existing_resume_field(),
            ],
            tags=["fresher", "student", "graduate"],
        )

    @staticmethod
    def experienced() -> FormTemplate:
        """Create the form for professionals with work experience.

        Returns:
            FormTemplate named EXPERIENCED; work experience needs at least
            one entry.
        """
        return FormTemplate(
            name="EXPERIENCED",
            title="Experienced Professional Resume",
            description="Perfect for professionals with work experience",
            fields=[
                *_personal_fields(),
                _summary_field("Your experience, strengths and what you are looking for"),
                _skills_field(),
                _work_experience_field(),
                _education_field(min_items=0),
                _projects_field(),
                _languages_field(),
                _existing_resume_field(),
            ],
            tags=["experienced", "professional"],
        )

    @classmethod
    def registry(cls) -> TemplateRegistry:
        """Create a registry holding every built-in template."""
        registry = TemplateRegistry()
        registry.register(cls.fresher())
        registry.register(cls.experienced())
        return registry
