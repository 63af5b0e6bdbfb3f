"""Dashboard: the user's saved resumes."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from resume_forms.builder.common import Notifier, save_pdf
from resume_forms.core.exceptions import SubmissionError
from resume_forms.schemas.resume import ResumeDocument, normalize_document
from resume_forms.submission.client import ResumeServiceClient

logger = logging.getLogger(__name__)


class ResumeDashboard:
    """Lists, deletes and downloads saved resumes.

    Deleting takes two steps, ``request_delete`` then ``confirm_delete``
    (or ``cancel_delete``), matching the confirmation dialog.
    """

    def __init__(self, client: ResumeServiceClient, download_dir: Path | None = None) -> None:
        self._client = client
        self.download_dir = download_dir or client.config.download_dir
        self.notifications = Notifier()
        self.documents: list[ResumeDocument] = []
        self.loading = False
        self.deleting_id: str | None = None
        self.pending_delete_id: str | None = None

    @property
    def show_delete_confirmation(self) -> bool:
        return self.pending_delete_id is not None and self.deleting_id is None

    async def refresh(self) -> None:
        """Reload the list of saved resumes."""
        self.loading = True
        try:
            response = await self._client.list_documents()
            if response.success:
                data = response.data if isinstance(response.data, dict) else {}
                self.documents = _parse_documents(data.get("resumes") or [])
            else:
                self.notifications.error("Failed to fetch resumes")
        except SubmissionError as e:
            logger.error("Fetching resumes failed: %s", e)
            self.notifications.error("Failed to fetch resumes")
        finally:
            self.loading = False

    def request_delete(self, document_id: str) -> None:
        """Ask for confirmation before deleting a resume."""
        self.pending_delete_id = document_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> bool:
        """Delete the resume awaiting confirmation.

        Returns:
            True if the service deleted it.
        """
        document_id = self.pending_delete_id
        if document_id is None:
            logger.warning("confirm_delete called with no pending deletion")
            return False

        self.deleting_id = document_id
        deleted = False
        try:
            response = await self._client.delete(document_id)
            if response.success:
                deleted = True
                self.notifications.success("Resume deleted successfully")
            else:
                self.notifications.error(response.message or "Failed to delete resume")
        except SubmissionError as e:
            logger.error("Deleting resume %s failed: %s", document_id, e)
            self.notifications.error("Failed to delete resume")
        finally:
            self.deleting_id = None
            self.pending_delete_id = None

        if deleted:
            await self.refresh()
        return deleted

    def view_url(self, document: ResumeDocument) -> str | None:
        """URL to open a resume's PDF in the browser."""
        if not document.pdf_url:
            self.notifications.error("PDF URL not available")
        return document.pdf_url

    async def download(
        self, document: ResumeDocument, directory: Path | None = None
    ) -> Path | None:
        """Save a resume's PDF, named after the person."""
        return await save_pdf(
            self._client,
            document,
            directory or self.download_dir,
            self.notifications,
            "No backend PDF available for this resume.",
        )


def _parse_documents(entries: list) -> list[ResumeDocument]:
    """Normalize listed resumes, skipping entries that cannot be parsed."""
    documents = []
    for raw in entries:
        if not isinstance(raw, dict):
            logger.warning("Skipping resume entry of type %s", type(raw).__name__)
            continue
        try:
            documents.append(normalize_document(raw))
        except ValidationError as e:
            logger.warning("Skipping malformed resume %r: %s", raw.get("_id", raw.get("id")), e)
    return documents
