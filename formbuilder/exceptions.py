"""Exceptions raised by the form builder core."""

from __future__ import annotations


class FormBuilderError(Exception):
    """Base class for form builder errors."""


class RuleConfigurationError(FormBuilderError):
    """Raised when a stored validation rule cannot be evaluated.

    Covers malformed regex patterns, non-integer ``min``/``max`` arguments
    and unknown rule names. Surfaces at validation time for the offending
    field and is never downgraded to a validation message.
    """

    def __init__(self, field_key: str, token: str, reason: str):
        self.field_key = field_key
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid validation rule {token!r} on field {field_key!r}: {reason}")
