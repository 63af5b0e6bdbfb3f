"""Builder and dashboard sessions driving the form engine."""

from resume_forms.builder.common import Notification, Notifier
from resume_forms.builder.dashboard import ResumeDashboard
from resume_forms.builder.session import ResumeBuilder

__all__ = ["Notification", "Notifier", "ResumeBuilder", "ResumeDashboard"]
