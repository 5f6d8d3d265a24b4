"""Form builder models - re-exports all models and Base.metadata."""

from .base import Base, IDMixin, TimestampMixin
from .form import Form, FormField, FormSubmission

__all__ = [
    "Base",
    "IDMixin",
    "TimestampMixin",
    "Form",
    "FormField",
    "FormSubmission",
]
