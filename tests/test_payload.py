"""Tests for payload building and edit prefill."""

from resume_forms import BuiltinTemplates, FieldKind, FieldSchema, FormState, build_payload
from resume_forms.submission.payload import prefill_values, split_list

SKILLS = FieldSchema(id="skills", label="Skills", separator=",")
PROJECTS = FieldSchema(
    id="projects",
    label="Projects",
    kind=FieldKind.ARRAY,
    template={
        "name": FieldSchema(label="Project Name"),
        "technologies": FieldSchema(label="Technologies", separator=","),
    },
)


class TestSplitList:
    """Tests for delimited text splitting."""

    def test_split(self):
        """Test entries are trimmed and blanks dropped."""
        assert split_list("Go, Rust, C++", ",") == ["Go", "Rust", "C++"]
        assert split_list(" Go ,, ,Rust,", ",") == ["Go", "Rust"]
        assert split_list("", ",") == []

    def test_newlines(self):
        """Test line-separated text."""
        assert split_list("Led team\n\nCut costs 20%\n", "\n") == ["Led team", "Cut costs 20%"]


class TestBuildPayload:
    """Tests for building request bodies."""

    def test_separator_fields_become_lists(self):
        """Test delimited text fields are split."""
        payload = build_payload({"fullName": "Jane", "skills": "Go, Rust, C++"}, [SKILLS])

        assert payload == {"fullName": "Jane", "skills": ["Go", "Rust", "C++"]}

    def test_empty_separator_field(self):
        """Test empty delimited fields become empty lists."""
        assert build_payload({"skills": ""}, [SKILLS]) == {"skills": []}
        assert build_payload({"skills": None}, [SKILLS]) == {"skills": []}

    def test_lists_pass_through(self):
        """Test values that are already lists are kept."""
        assert build_payload({"skills": ["Go"]}, [SKILLS]) == {"skills": ["Go"]}

    def test_array_items(self):
        """Test sub-fields of array items are split too."""
        values = {"projects": [{"name": "Site", "technologies": "React, Node.js"}]}

        payload = build_payload(values, [PROJECTS])

        assert payload == {"projects": [{"name": "Site", "technologies": ["React", "Node.js"]}]}

    def test_values_not_modified(self):
        """Test the form values are left untouched."""
        values = {"skills": "Go", "projects": [{"name": "Site", "technologies": "React"}]}

        build_payload(values, [SKILLS, PROJECTS])

        assert values == {"skills": "Go", "projects": [{"name": "Site", "technologies": "React"}]}

    def test_from_state(self):
        """Test a payload built from a filled built-in form."""
        state = FormState(BuiltinTemplates.experienced())
        state.set_scalar("skills", "Python, SQL")
        state.set_array_item_field("workExperience", 0, "achievements", "Led team\nShipped v2")

        payload = build_payload(state.values, state.template.fields)

        assert payload["skills"] == ["Python", "SQL"]
        assert payload["workExperience"][0]["achievements"] == ["Led team", "Shipped v2"]
        assert payload["education"] == []


class TestPrefillValues:
    """Tests for mapping stored documents onto form values."""

    def test_personal_info_lifted(self):
        """Test personalInfo entries become top-level values."""
        document = {
            "resumeType": "FRESHER",
            "personalInfo": {"fullName": "Jane Doe", "email": "jane@example.com"},
            "email": "top@example.com",
        }

        values = prefill_values(document, BuiltinTemplates.fresher())

        assert values["fullName"] == "Jane Doe"
        assert values["email"] == "top@example.com"

    def test_experience_alias(self):
        """Test experience is read as workExperience."""
        document = {"experience": [{"company": "Acme"}]}

        values = prefill_values(document, BuiltinTemplates.experienced())

        assert values["workExperience"] == [{"company": "Acme"}]

    def test_iso_dates_trimmed(self):
        """Test timestamps in date fields become plain dates."""
        document = {
            "workExperience": [
                {"company": "Acme", "startDate": "2020-01-15T00:00:00.000Z", "endDate": "2022-03"}
            ]
        }

        values = prefill_values(document, BuiltinTemplates.experienced())

        assert values["workExperience"][0]["startDate"] == "2020-01-15"
        assert values["workExperience"][0]["endDate"] == "2022-03"

    def test_load_into_state(self):
        """Test prefilled values load into a valid form."""
        template = BuiltinTemplates.experienced()
        document = {
            "_id": "abc",
            "personalInfo": {
                "fullName": "Jane Doe",
                "email": "jane@example.com",
                "phone": "+1 555 123 4567",
            },
            "skills": ["Python", "SQL"],
            "experience": [
                {
                    "company": "Acme",
                    "position": "Engineer",
                    "startDate": "2020-01-15T00:00:00.000Z",
                    "achievements": ["Led team", "Shipped v2"],
                }
            ],
        }

        state = FormState(template, values=prefill_values(document, template))

        assert state.values["skills"] == "Python, SQL"
        job = state.values["workExperience"][0]
        assert job["achievements"] == "Led team\nShipped v2"
        assert job["startDate"] == "2020-01-15"
        assert job["location"] == ""
        assert state.is_valid
