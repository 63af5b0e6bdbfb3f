"""Tests for the form state store."""

import pytest

from resume_forms import FieldKind, FieldPath, FieldSchema, FormConfig, FormState, FormTemplate

EDU = FieldPath.of("education")


@pytest.fixture
def template():
    return FormTemplate(
        name="fresher",
        fields=[
            FieldSchema(id="fullName", label="Full Name", required=True),
            FieldSchema(id="skills", label="Skills", separator=","),
            FieldSchema(
                id="education",
                label="Education",
                kind=FieldKind.ARRAY,
                required=True,
                min_items=1,
                template={
                    "institution": FieldSchema(label="Institution", required=True),
                    "gpa": FieldSchema(label="GPA", validation="gpa"),
                    "courses": FieldSchema(
                        label="Courses",
                        kind=FieldKind.ARRAY,
                        template={"title": FieldSchema(label="Title", required=True)},
                    ),
                },
            ),
            FieldSchema(
                id="projects",
                label="Projects",
                kind=FieldKind.ARRAY,
                template={"name": FieldSchema(label="Project Name", required=True)},
            ),
        ],
    )


@pytest.fixture
def state(template):
    return FormState(template)


class TestInitialState:
    """Tests for a freshly opened form."""

    def test_initial_values(self, state):
        """Test every field starts empty and arrays start at min_items."""
        assert dict(state.values) == {
            "fullName": "",
            "skills": "",
            "education": [{"institution": "", "gpa": "", "courses": []}],
            "projects": [],
        }

    def test_initial_errors(self, state):
        """Test a fresh form is already validated."""
        assert state.errors == {
            FieldPath.of("fullName"): "Full Name is required",
            EDU.child(0, "institution"): "Institution is required",
        }
        assert not state.is_valid

    def test_values_read_only(self, state):
        """Test the values view cannot be written."""
        with pytest.raises(TypeError):
            state.values["fullName"] = "Jane"

    def test_errors_copy(self, state):
        """Test mutating the returned errors leaves the store intact."""
        state.errors.clear()

        assert len(state.errors) == 2

    def test_min_items_item_not_removable(self, state):
        """Test the single required education item cannot be removed."""
        assert not state.can_remove_item(EDU)


class TestScalarOperations:
    """Tests for top-level field updates."""

    def test_set_scalar(self, state):
        """Test setting a value revalidates."""
        state.set_scalar("fullName", "Jane Doe")

        assert state.values["fullName"] == "Jane Doe"
        assert FieldPath.of("fullName") not in state.errors

    def test_set_scalar_back_to_empty(self, state):
        """Test clearing a required field brings its error back."""
        state.set_scalar("fullName", "Jane Doe")
        state.set_scalar("fullName", "")

        assert state.errors[FieldPath.of("fullName")] == "Full Name is required"

    def test_set_undeclared_field(self, state):
        """Test values of undeclared fields are stored but not validated."""
        state.set_scalar("nickname", "JD")

        assert state.values["nickname"] == "JD"
        assert len(state.errors) == 2

    def test_set_value_top_level(self, state):
        """Test set_value on a top-level path."""
        assert state.set_value(FieldPath.of("skills"), "Go, Rust") is True
        assert state.values["skills"] == "Go, Rust"


class TestArrayOperations:
    """Tests for repeatable group updates."""

    def test_add_item(self, state):
        """Test added items have every template key empty."""
        assert state.add_array_item("projects") is True

        assert state.values["projects"] == [{"name": ""}]
        assert state.errors[FieldPath.of("projects").child(0, "name")] == "Project Name is required"

    def test_add_item_to_non_array(self, state):
        """Test adding to a scalar is rejected."""
        assert state.add_array_item("fullName") is False
        assert state.add_array_item("unknown") is False

    def test_set_item_field(self, state):
        """Test updating one sub-field of one item."""
        assert state.set_array_item_field("education", 0, "institution", "MIT") is True

        assert state.values["education"][0]["institution"] == "MIT"
        assert state.is_valid is False
        assert EDU.child(0, "institution") not in state.errors

    def test_set_item_field_rejected(self, state):
        """Test updates to missing items or unknown keys are ignored."""
        assert state.set_array_item_field("education", 5, "institution", "MIT") is False
        assert state.set_array_item_field("education", 0, "nope", "x") is False
        assert state.set_array_item_field("fullName", 0, "institution", "MIT") is False
        assert state.values["education"] == [{"institution": "", "gpa": "", "courses": []}]

    def test_copy_on_write(self, state):
        """Test updates replace the list and the touched item only."""
        state.add_array_item("education")
        before = state.values["education"]

        state.set_array_item_field("education", 1, "gpa", "9")
        after = state.values["education"]

        assert after is not before
        assert after[0] is before[0]
        assert after[1] is not before[1]
        assert before[1]["gpa"] == ""

    def test_remove_item(self, state):
        """Test removing an item shifts the later ones."""
        state.add_array_item("projects")
        state.add_array_item("projects")
        state.set_array_item_field("projects", 0, "name", "A")
        state.set_array_item_field("projects", 1, "name", "B")

        assert state.remove_array_item("projects", 0) is True
        assert state.values["projects"] == [{"name": "B"}]

    def test_remove_item_out_of_range(self, state):
        """Test removing a missing item is rejected."""
        assert state.remove_array_item("projects", 0) is False
        assert state.remove_array_item("education", -1) is False

    def test_remove_below_min_items_allowed(self, state):
        """Test the store itself does not enforce min_items."""
        assert state.remove_array_item("education", 0) is True

        assert state.values["education"] == []
        assert state.errors[EDU] == "Please add at least one Education"

    def test_can_remove_item(self, state):
        """Test removal is offered only above min_items."""
        state.add_array_item("education")

        assert state.can_remove_item(EDU)
        assert not state.can_remove_item(FieldPath.of("fullName"))

    def test_add_then_remove_restores_values(self, state):
        """Test adding then removing the last item restores the previous values."""
        state.set_scalar("fullName", "Jane")
        state.set_array_item_field("education", 0, "institution", "MIT")
        before = {k: v for k, v in state.values.items()}
        errors_before = state.errors

        state.add_array_item("education")
        state.remove_array_item("education", len(state.values["education"]) - 1)

        assert dict(state.values) == before
        assert state.errors == errors_before


class TestNestedArrays:
    """Tests for arrays inside array items."""

    def test_add_nested_item(self, state):
        """Test adding to an array sub-field of an item."""
        courses = EDU.child(0, "courses")

        assert state.add_item(courses) is True
        assert state.values["education"][0]["courses"] == [{"title": ""}]
        assert state.errors[courses.child(0, "title")] == "Title is required"

    def test_set_nested_value(self, state):
        """Test updating a sub-field of a nested item."""
        courses = EDU.child(0, "courses")
        state.add_item(courses)

        assert state.set_value(courses.child(0, "title"), "Compilers") is True
        assert state.get(courses.child(0, "title")) == "Compilers"

    def test_nested_add_requires_parent_item(self, state):
        """Test nested arrays of missing items cannot be extended."""
        assert state.add_item(EDU.child(3, "courses")) is False

    def test_remove_nested_item(self, state):
        """Test removing from a nested array."""
        courses = EDU.child(0, "courses")
        state.add_item(courses)

        assert state.remove_item(courses, 0) is True
        assert state.get(courses) == []


class TestGet:
    """Tests for path lookups."""

    def test_get(self, state):
        """Test reading values by path."""
        assert state.get(FieldPath.of("fullName")) == ""
        assert state.get(EDU.child(0, "gpa")) == ""

    def test_get_missing(self, state):
        """Test missing paths return the default."""
        assert state.get(FieldPath.of("nope"), "d") == "d"
        assert state.get(EDU.child(4, "gpa"), "d") == "d"
        assert state.get(FieldPath.of("fullName").child(0, "x"), "d") == "d"


class TestLoadAndReset:
    """Tests for bulk loading and reset."""

    def test_load(self, state):
        """Test loading values of an existing document."""
        state.load(
            {
                "fullName": "Jane Doe",
                "skills": ["Python", "SQL"],
                "education": [{"institution": "MIT", "gpa": None}],
                "unknown": "ignored",
            }
        )

        assert state.values["fullName"] == "Jane Doe"
        assert state.values["skills"] == "Python, SQL"
        assert state.values["education"] == [{"institution": "MIT", "gpa": "", "courses": []}]
        assert state.values["projects"] == []
        assert "unknown" not in state.values
        assert state.is_valid

    def test_load_newline_separator(self):
        """Test whitespace separators are used as-is when joining."""
        template = FormTemplate(
            name="x",
            fields=[FieldSchema(id="achievements", label="Achievements", separator="\n")],
        )

        state = FormState(template, values={"achievements": ["Led team", "Cut costs"]})

        assert state.values["achievements"] == "Led team\nCut costs"

    def test_load_list_separator_from_config(self):
        """Test fields without a separator join lists with the configured one."""
        template = FormTemplate(name="x", fields=[FieldSchema(id="tags", label="Tags")])

        state = FormState(template, config=FormConfig(list_separator=";"))
        state.load({"tags": ["a", "b"]})

        assert state.values["tags"] == "a; b"

    def test_reset(self, state):
        """Test reset returns to the initial values."""
        state.set_scalar("fullName", "Jane")
        state.add_array_item("projects")

        state.reset()

        assert state.values["fullName"] == ""
        assert state.values["projects"] == []
        assert len(state.errors) == 2
