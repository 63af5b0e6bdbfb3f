"""Configuration classes for the form engine and the resume service."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class FormConfig(BaseModel):
    """Configuration for form behaviour."""

    default_resume_type: str = Field(
        default="FRESHER",
        description="Resume type used when a loaded document does not declare one",
    )
    list_separator: str = Field(
        default=",",
        min_length=1,
        description="Separator used to join list values back into text fields",
    )

    @field_validator("default_resume_type")
    @classmethod
    def normalize_resume_type(cls, v: str) -> str:
        """Resume type keys are stored upper-case."""
        if not v or not v.strip():
            raise ValueError("default_resume_type cannot be empty")
        return v.strip().upper()


class ServiceConfig(BaseModel):
    """Connection settings for the remote resume service."""

    base_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the resume generation/storage API",
    )
    api_token: str | None = Field(
        default=None,
        description="Bearer token sent with every request",
    )
    timeout: float = Field(
        default=120.0,
        gt=0.0,
        description="Request timeout in seconds (generation can be slow)",
    )
    download_dir: Path = Field(
        default=Path("."),
        description="Directory where rendered PDFs are saved",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Validate base URL is non-empty and drop trailing slashes."""
        if not v or not v.strip():
            raise ValueError("base_url cannot be empty")
        return v.strip().rstrip("/")

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> ServiceConfig:
        """Build a config from environment variables.

        A ``.env`` file is loaded first (values already present in the
        environment win).

        Args:
            env_file: Optional path to a specific ``.env`` file.

        Returns:
            ServiceConfig populated from ``RESUME_SERVICE_URL``,
            ``RESUME_SERVICE_TOKEN``, ``RESUME_SERVICE_TIMEOUT`` and
            ``RESUME_DOWNLOAD_DIR``.
        """
        load_dotenv(env_file)

        values: dict[str, object] = {}
        if url := os.getenv("RESUME_SERVICE_URL"):
            values["base_url"] = url
        if token := os.getenv("RESUME_SERVICE_TOKEN"):
            values["api_token"] = token
        if timeout := os.getenv("RESUME_SERVICE_TIMEOUT"):
            values["timeout"] = float(timeout)
        if download_dir := os.getenv("RESUME_DOWNLOAD_DIR"):
            values["download_dir"] = Path(download_dir)
        return cls(**values)
