"""Tests for the resume dashboard and notifications."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from resume_forms import ResumeDashboard, ServiceConfig, ServiceError, ServiceResponse
from resume_forms.builder.common import Notifier
from resume_forms.schemas.resume import normalize_document

RESUMES = [
    {
        "_id": "a",
        "resumeType": "FRESHER",
        "personalInfo": {"fullName": "Jane Doe"},
        "pdfUrl": "http://files/a.pdf",
    },
    {"_id": "b", "resumeType": "EXPERIENCED", "experience": [{"company": "Acme"}]},
]


@pytest.fixture
def client(tmp_path):
    client = MagicMock()
    client.config = ServiceConfig(download_dir=tmp_path)
    client.list_documents = AsyncMock(
        return_value=ServiceResponse(success=True, data={"resumes": RESUMES})
    )
    client.delete = AsyncMock(return_value=ServiceResponse(success=True))
    client.download = AsyncMock(return_value=b"%PDF")
    return client


@pytest.fixture
def dashboard(client):
    return ResumeDashboard(client)


class TestNotifier:
    """Tests for user notifications."""

    def test_push_and_latest(self):
        """Test notifications are kept in order."""
        notifier = Notifier()
        notifier.success("Saved")
        notifier.error("Failed")

        assert len(notifier) == 2
        assert [n.level for n in notifier] == ["success", "error"]
        assert notifier.latest.message == "Failed"

    def test_clear(self):
        """Test clearing notifications."""
        notifier = Notifier()
        notifier.warning("Careful")

        notifier.clear()

        assert notifier.latest is None
        assert len(notifier) == 0

    def test_logged(self, caplog):
        """Test notifications are logged at a matching level."""
        with caplog.at_level(logging.INFO, logger="resume_forms.builder.common"):
            Notifier().error("Failed to fetch resumes")

        assert caplog.records[-1].levelno == logging.ERROR
        assert "Failed to fetch resumes" in caplog.records[-1].getMessage()


class TestRefresh:
    """Tests for listing saved resumes."""

    def test_refresh(self, dashboard):
        """Test documents are loaded and normalized."""
        asyncio.run(dashboard.refresh())

        assert [d.id for d in dashboard.documents] == ["a", "b"]
        assert dashboard.documents[1].work_experience[0].company == "Acme"
        assert dashboard.documents[1].skills == []
        assert not dashboard.loading

    def test_refresh_declined(self, dashboard, client):
        """Test a declined listing notifies."""
        client.list_documents.return_value = ServiceResponse(success=False)

        asyncio.run(dashboard.refresh())

        assert dashboard.documents == []
        assert dashboard.notifications.latest.message == "Failed to fetch resumes"

    def test_refresh_error(self, dashboard, client):
        """Test service errors while listing notify."""
        client.list_documents.side_effect = ServiceError("down")

        asyncio.run(dashboard.refresh())

        assert dashboard.notifications.latest.message == "Failed to fetch resumes"
        assert not dashboard.loading

    def test_refresh_skips_malformed_entries(self, dashboard, client, caplog):
        """Test unparseable resumes are skipped and the rest are listed."""
        resumes = [{"_id": "bad", "skills": "not a list"}, "junk", *RESUMES]
        client.list_documents.return_value = ServiceResponse(
            success=True, data={"resumes": resumes}
        )

        with caplog.at_level(logging.WARNING, logger="resume_forms.builder.dashboard"):
            asyncio.run(dashboard.refresh())

        assert [d.id for d in dashboard.documents] == ["a", "b"]
        assert any("bad" in r.getMessage() for r in caplog.records)
        assert not dashboard.loading

    def test_refresh_numeric_dates(self, dashboard, client):
        """Test numeric years in saved resumes are read as text."""
        resume = {"_id": "c", "education": [{"institution": "MIT", "startDate": 2020}]}
        client.list_documents.return_value = ServiceResponse(
            success=True, data={"resumes": [resume]}
        )

        asyncio.run(dashboard.refresh())

        assert dashboard.documents[0].education[0].start_date == "2020"


class TestDelete:
    """Tests for deleting resumes."""

    def test_confirmation_flow(self, dashboard, client):
        """Test deletion waits for confirmation."""
        dashboard.request_delete("a")

        assert dashboard.show_delete_confirmation
        client.delete.assert_not_called()

        assert asyncio.run(dashboard.confirm_delete()) is True

        client.delete.assert_awaited_once_with("a")
        client.list_documents.assert_awaited_once()
        assert dashboard.pending_delete_id is None
        assert not dashboard.show_delete_confirmation
        messages = [n.message for n in dashboard.notifications]
        assert "Resume deleted successfully" in messages

    def test_cancel(self, dashboard, client):
        """Test cancelling a deletion."""
        dashboard.request_delete("a")
        dashboard.cancel_delete()

        assert asyncio.run(dashboard.confirm_delete()) is False
        client.delete.assert_not_called()

    def test_delete_declined(self, dashboard, client):
        """Test a declined deletion notifies and keeps the list."""
        client.delete.return_value = ServiceResponse(success=False, message="Not allowed")
        dashboard.request_delete("a")

        assert asyncio.run(dashboard.confirm_delete()) is False
        assert dashboard.notifications.latest.message == "Not allowed"
        client.list_documents.assert_not_called()

    def test_delete_error(self, dashboard, client):
        """Test service errors while deleting notify."""
        client.delete.side_effect = ServiceError("down")
        dashboard.request_delete("a")

        assert asyncio.run(dashboard.confirm_delete()) is False
        assert dashboard.notifications.latest.message == "Failed to delete resume"
        assert dashboard.deleting_id is None


class TestViewAndDownload:
    """Tests for opening and downloading PDFs."""

    def test_view_url(self, dashboard):
        """Test the PDF URL of a document."""
        document = normalize_document(RESUMES[0])

        assert dashboard.view_url(document) == "http://files/a.pdf"

    def test_view_url_missing(self, dashboard):
        """Test documents without a PDF."""
        assert dashboard.view_url(normalize_document(RESUMES[1])) is None
        assert dashboard.notifications.latest.message == "PDF URL not available"

    def test_download(self, dashboard, tmp_path):
        """Test downloading a saved resume."""
        path = asyncio.run(dashboard.download(normalize_document(RESUMES[0])))

        assert path == tmp_path / "resume-Jane Doe.pdf"
        assert path.read_bytes() == b"%PDF"

    def test_download_missing(self, dashboard, client):
        """Test downloading a document without a PDF."""
        assert asyncio.run(dashboard.download(normalize_document(RESUMES[1]))) is None
        assert (
            dashboard.notifications.latest.message == "No backend PDF available for this resume."
        )
        client.download.assert_not_called()
