"""Built-in form templates for the supported resume types."""

from resume_forms.templates.builtins import BuiltinTemplates

__all__ = ["BuiltinTemplates"]
