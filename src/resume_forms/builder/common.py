"""Notifications and artifact download shared by the builder and the dashboard."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from resume_forms.core.exceptions import ServiceError
from resume_forms.schemas.resume import ResumeDocument
from resume_forms.submission.client import ResumeServiceClient

logger = logging.getLogger(__name__)

Level = Literal["success", "error", "warning"]

_LOG_LEVELS = {"success": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


class Notification(BaseModel):
    """A transient message for the user."""

    level: Level
    message: str


class Notifier:
    """Ordered log of notifications shown to the user."""

    def __init__(self) -> None:
        self._items: list[Notification] = []

    def push(self, level: Level, message: str) -> None:
        logger.log(_LOG_LEVELS[level], "Notify user (%s): %s", level, message)
        self._items.append(Notification(level=level, message=message))

    def success(self, message: str) -> None:
        self.push("success", message)

    def warning(self, message: str) -> None:
        self.push("warning", message)

    def error(self, message: str) -> None:
        self.push("error", message)

    @property
    def latest(self) -> Notification | None:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Notification]:
        return iter(self._items)


async def save_pdf(
    client: ResumeServiceClient,
    document: ResumeDocument,
    directory: Path,
    notifier: Notifier,
    missing_message: str,
) -> Path | None:
    """Download a document's rendered PDF into ``directory``.

    The file is named after the person (``resume-Jane Doe.pdf``).

    Returns:
        Path of the saved file, or None if there was nothing to download
        or the download failed (the user is notified either way).
    """
    if not document.pdf_url:
        notifier.error(missing_message)
        return None
    try:
        content = await client.download(document.pdf_url)
    except ServiceError as e:
        logger.error("PDF download failed: %s", e)
        notifier.error("Failed to download PDF")
        return None

    directory.mkdir(parents=True, exist_ok=True)
    target = directory / document.pdf_filename
    target.write_bytes(content)
    notifier.success("PDF download started!")
    return target
