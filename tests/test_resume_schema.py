"""Tests for the resume document schema."""

from datetime import datetime

from resume_forms import ResumeDocument, normalize_document


class TestNormalizeDocument:
    """Tests for filling absent collections."""

    def test_empty(self):
        """Test missing data gives a document with empty collections."""
        document = normalize_document(None)

        assert document.work_experience == []
        assert document.education == []
        assert document.skills == []
        assert document.projects == []
        assert document.languages == []
        assert document.personal_info.full_name is None

    def test_null_collections(self):
        """Test null collections are replaced."""
        document = normalize_document({"skills": None, "personalInfo": None})

        assert document.skills == []
        assert document.personal_info.full_name is None

    def test_experience_fallback(self):
        """Test experience is read when workExperience is absent."""
        document = normalize_document(
            {"experience": [{"company": "Acme", "achievements": ["Led team"]}]}
        )

        assert document.work_experience[0].company == "Acme"
        assert document.work_experience[0].achievements == ["Led team"]

    def test_work_experience_preferred(self):
        """Test workExperience wins over experience."""
        document = normalize_document(
            {"workExperience": [{"company": "New"}], "experience": [{"company": "Old"}]}
        )

        assert [job.company for job in document.work_experience] == ["New"]

    def test_camel_case_fields(self):
        """Test service keys map onto attributes."""
        document = normalize_document(
            {
                "_id": "r1",
                "resumeType": "FRESHER",
                "personalInfo": {"fullName": "Jane Doe", "linkedin": "linkedin.com/in/jd"},
                "education": [{"institution": "MIT", "fieldOfStudy": "CS", "gpa": 9.1}],
                "createdAt": "2024-05-01T10:00:00Z",
                "isGenerated": True,
                "pdfUrl": "http://files/r1.pdf",
            }
        )

        assert document.id == "r1"
        assert document.resume_type == "FRESHER"
        assert document.personal_info.full_name == "Jane Doe"
        assert document.education[0].field_of_study == "CS"
        assert document.education[0].gpa == 9.1
        assert isinstance(document.created_at, datetime)
        assert document.is_generated is True
        assert document.pdf_url == "http://files/r1.pdf"

    def test_plain_id(self):
        """Test an ``id`` key is accepted for ``_id``."""
        assert normalize_document({"id": "r2"}).id == "r2"

    def test_unknown_keys_kept(self):
        """Test keys the schema does not know are preserved."""
        document = normalize_document({"certifications": ["AWS"]})

        assert document.model_dump(by_alias=True)["certifications"] == ["AWS"]


class TestPdfFilename:
    """Tests for download file names."""

    def test_named(self):
        """Test the file is named after the person."""
        document = ResumeDocument(personal_info={"full_name": "Jane Doe"})

        assert document.pdf_filename == "resume-Jane Doe.pdf"

    def test_unnamed(self):
        """Test documents without a name."""
        assert ResumeDocument().pdf_filename == "resume-generated.pdf"

    def test_unsafe_characters(self):
        """Test path separators are replaced."""
        document = ResumeDocument(personal_info={"full_name": "A/B: C"})

        assert document.pdf_filename == "resume-A_B_ C.pdf"
