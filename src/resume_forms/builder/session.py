"""Resume builder session: one user filling, submitting and downloading a resume."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from resume_forms.builder.common import Notifier, save_pdf
from resume_forms.core.config import FormConfig
from resume_forms.core.exceptions import SubmissionError
from resume_forms.core.state import FormState
from resume_forms.core.templates import FormTemplate, TemplateRegistry
from resume_forms.rendering.dispatcher import FormCallbacks, render_form
from resume_forms.rendering.widgets import Widget
from resume_forms.schemas.resume import ResumeDocument
from resume_forms.submission.client import ResumeServiceClient
from resume_forms.submission.payload import prefill_values
from resume_forms.submission.pipeline import SubmissionOutcome, SubmissionPipeline
from resume_forms.templates.builtins import BuiltinTemplates

logger = logging.getLogger(__name__)

NO_PDF_MESSAGE = "No backend PDF available. Please generate your resume first."


class ResumeBuilder:
    """State of the resume builder page.

    The builder owns the FormState of the selected resume type and is its
    only writer. Every selection, reset or edit load starts a new epoch;
    a service response that arrives for an older epoch is dropped.

    Example:
        ```python
        builder = ResumeBuilder(client)
        builder.select_resume_type("FRESHER")
        builder.state.set_scalar("fullName", "Jane Doe")
        ...
        outcome = await builder.submit()
        if outcome and outcome.success:
            await builder.download_pdf()
        ```
    """

    def __init__(
        self,
        client: ResumeServiceClient,
        registry: TemplateRegistry | None = None,
        config: FormConfig | None = None,
        download_dir: Path | None = None,
    ) -> None:
        self._client = client
        self.registry = registry if registry is not None else BuiltinTemplates.registry()
        self.config = config or FormConfig()
        self.download_dir = download_dir or client.config.download_dir
        self.notifications = Notifier()
        self.state: FormState | None = None
        self.edit_id: str | None = None
        self.generated: ResumeDocument | None = None
        self.pipeline = SubmissionPipeline(client)
        self._epoch = 0
        self._is_generating = False

    @property
    def template(self) -> FormTemplate | None:
        return self.state.template if self.state else None

    @property
    def resume_type(self) -> str | None:
        return self.template.name if self.template else None

    @property
    def is_generating(self) -> bool:
        return self._is_generating

    @property
    def can_submit(self) -> bool:
        return self.state is not None and self.state.is_valid and not self._is_generating

    def _new_epoch(self) -> None:
        self._epoch += 1
        self._is_generating = False
        self.pipeline = SubmissionPipeline(self._client)

    def select_resume_type(self, name: str) -> FormState:
        """Open an empty form for a resume type.

        Raises:
            KeyError: If no template is registered under ``name``.
        """
        template = self.registry.get_or_raise(name)
        self._new_epoch()
        self.state = FormState(template, rules=self.registry.rules, config=self.config)
        self.generated = None
        self.edit_id = None
        logger.debug("Selected resume type %s", template.name)
        return self.state

    def change_type(self) -> None:
        """Go back to resume type selection, discarding the form."""
        self._new_epoch()
        self.state = None

    def reset(self) -> None:
        """Start over after a generation ("generate another")."""
        self._new_epoch()
        self.state = None
        self.generated = None
        self.edit_id = None

    def render(self) -> list[Widget]:
        """Widgets for the open form (empty while no type is selected)."""
        if self.state is None:
            return []
        callbacks = FormCallbacks.for_state(self.state, notify=self.notifications.error)
        return render_form(self.state.template, self.state.values, self.state.errors, callbacks)

    def error_summary(self) -> str:
        """Status line shown next to the submit button."""
        count = len(self.state.errors) if self.state else 0
        if count:
            return f"Please fix {count} error{'s' if count > 1 else ''} to continue"
        return "All required fields are completed"

    async def submit(self) -> SubmissionOutcome | None:
        """Submit the open form.

        Returns:
            The outcome, or None if nothing was sent (no form open, a
            submission already in flight) or the response went stale.
        """
        if self.state is None:
            logger.warning("Submit called with no form open")
            return None
        if self._is_generating:
            logger.warning("Submit called while a submission is in progress")
            return None

        epoch = self._epoch
        state = self.state
        pipeline = self.pipeline
        self._is_generating = True
        try:
            outcome = await pipeline.submit(
                state.values,
                state.errors,
                state.template.fields,
                edit_id=self.edit_id,
            )
        finally:
            if epoch == self._epoch:
                self._is_generating = False

        if epoch != self._epoch:
            logger.info("Ignoring stale submission response")
            return None

        if outcome.success:
            self.generated = outcome.document
            self.notifications.success(outcome.message)
        elif outcome.refused:
            self.notifications.warning(outcome.message)
        else:
            self.notifications.error(outcome.message)
        return outcome

    async def load_for_edit(self, document_id: str) -> bool:
        """Open the form of an existing resume, prefilled with its values.

        Returns:
            True if the form was loaded.
        """
        epoch = self._epoch
        try:
            response = await self._client.get_document(document_id)
        except SubmissionError as e:
            logger.error("Loading resume %s failed: %s", document_id, e)
            self.notifications.error("Error loading resume for editing")
            return False

        if epoch != self._epoch:
            logger.info("Ignoring stale resume load for %s", document_id)
            return False
        if not response.success or not isinstance(response.data, Mapping):
            self.notifications.error("Failed to load resume for editing")
            return False

        data = response.data
        template = self._template_for(data.get("resumeType"))
        state = self.select_resume_type(template.name)
        state.load(prefill_values(data, template))
        self.edit_id = document_id
        logger.debug("Loaded resume %s for editing", document_id)
        return True

    def _template_for(self, resume_type: str | None) -> FormTemplate:
        if not resume_type:
            logger.warning(
                "resumeType missing from resume data, defaulting to %s",
                self.config.default_resume_type,
            )
        else:
            template = self.registry.get(resume_type)
            if template is not None:
                return template
            logger.warning(
                "Unknown resumeType %s, defaulting to %s",
                resume_type,
                self.config.default_resume_type,
            )
        return self.registry.get_or_raise(self.config.default_resume_type)

    async def download_pdf(self, directory: Path | None = None) -> Path | None:
        """Save the generated resume's PDF.

        Returns:
            Path of the saved file, or None if nothing was saved.
        """
        if self.generated is None:
            self.notifications.error(NO_PDF_MESSAGE)
            return None
        return await save_pdf(
            self._client,
            self.generated,
            directory or self.download_dir,
            self.notifications,
            NO_PDF_MESSAGE,
        )
