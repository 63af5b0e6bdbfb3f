"""Async client for the remote resume generation/storage service."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from resume_forms.core.config import ServiceConfig
from resume_forms.core.exceptions import RateLimitError, ServiceError
from resume_forms.core.fields import UploadedFile

logger = logging.getLogger(__name__)


class ServiceResponse(BaseModel):
    """Envelope returned by every service endpoint."""

    success: bool = Field(default=False, description="Whether the service handled the call")
    data: Any = Field(default=None, description="Endpoint-specific payload")
    message: str | None = Field(default=None, description="Human-readable message")
    error: str | None = Field(default=None, description="Error detail")
    status_code: int | None = Field(default=None, description="HTTP status code")

    @classmethod
    def from_body(cls, body: Any, status_code: int) -> ServiceResponse:
        if not isinstance(body, dict):
            return cls(success=True, data=body, status_code=status_code)
        return cls(
            success=bool(body.get("success", True)),
            data=body.get("data"),
            message=_as_text(body.get("message")),
            error=_as_text(body.get("error")),
            status_code=status_code,
        )


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


class ResumeServiceClient:
    """Thin async wrapper over the resume service's REST endpoints.

    HTTP 429 raises RateLimitError; any other error status or transport
    failure raises ServiceError. Successful calls return ServiceResponse.

    Example:
        ```python
        async with ResumeServiceClient(ServiceConfig.from_env()) as client:
            response = await client.list_documents()
            for raw in response.data["resumes"]:
                print(normalize_document(raw).personal_info.full_name)
        ```
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Connection settings. Defaults to ServiceConfig().
            http_client: Pre-configured httpx client. If provided, the base
                URL, timeout and token of ``config`` are not applied to it
                and the client is not closed by ``aclose``.
        """
        self.config = config or ServiceConfig()
        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            headers = {}
            if self.config.api_token:
                headers["Authorization"] = f"Bearer {self.config.api_token}"
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                headers=headers,
            )
            self._owns_client = True

    async def __aenter__(self) -> ResumeServiceClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # =========================================================================
    # Endpoints
    # =========================================================================

    async def list_documents(self) -> ServiceResponse:
        """Fetch the current user's saved resumes."""
        return await self._request("GET", "/ai-resume")

    async def get_document(self, document_id: str) -> ServiceResponse:
        """Fetch one resume by id."""
        return await self._request("GET", f"/ai-resume/{document_id}")

    async def generate(self, payload: dict[str, Any]) -> ServiceResponse:
        """Submit a new generation request."""
        return await self._request("POST", "/ai-resume/generate", **_encode(payload))

    async def edit(self, document_id: str, payload: dict[str, Any]) -> ServiceResponse:
        """Submit an edit of an existing resume."""
        return await self._request("PUT", f"/ai-resume/{document_id}", **_encode(payload))

    async def delete(self, document_id: str) -> ServiceResponse:
        """Delete a resume by id."""
        return await self._request("DELETE", f"/ai-resume/{document_id}")

    async def download(self, url: str) -> bytes:
        """Fetch a rendered artifact (PDF) as raw bytes.

        Raises:
            ServiceError: If the artifact cannot be fetched.
        """
        logger.debug("Downloading %s", url)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise ServiceError(f"Download of {url} failed: {e}") from e
        if response.status_code >= 400:
            raise ServiceError(
                f"Download of {url} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.content

    # =========================================================================
    # Internals
    # =========================================================================

    async def _request(self, method: str, path: str, **kwargs: Any) -> ServiceResponse:
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ServiceError(f"{method} {path} failed: {e}") from e

        body = _json_or_none(response)
        service_message = service_error = None
        if isinstance(body, dict):
            service_message = _as_text(body.get("message"))
            service_error = _as_text(body.get("error"))

        if response.status_code == 429:
            raise RateLimitError(
                f"{method} {path} was rate limited",
                status_code=429,
                service_message=service_message,
                service_error=service_error,
                body=body,
            )
        if response.status_code >= 400:
            raise ServiceError(
                f"{method} {path} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                service_message=service_message,
                service_error=service_error,
                body=body,
            )
        return ServiceResponse.from_body(body, response.status_code)


def _json_or_none(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _encode(payload: dict[str, Any]) -> dict[str, Any]:
    """Request keyword arguments for a payload: JSON, or multipart if it holds files."""
    files: dict[str, tuple[str, bytes, str]] = {}
    data = _extract_files(payload, "", files)
    if not files:
        return {"json": data}
    return {"data": {"payload": json.dumps(data)}, "files": files}


def _extract_files(value: Any, prefix: str, files: dict[str, tuple[str, bytes, str]]) -> Any:
    """Copy of ``value`` with UploadedFile values moved into ``files``."""
    if isinstance(value, UploadedFile):
        files[prefix] = (
            value.filename,
            value.content or b"",
            value.content_type or "application/octet-stream",
        )
        return None
    if isinstance(value, dict):
        return {
            key: _extract_files(item, f"{prefix}.{key}" if prefix else str(key), files)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_extract_files(item, f"{prefix}.{i}", files) for i, item in enumerate(value)]
    return value
