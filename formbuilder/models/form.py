"""Form, FormField, and FormSubmission models."""

from __future__ import annotations

import re
import unicodedata
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import (
    JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..config import settings
from ..fields import is_option_bearing, type_label
from ..rules import compile_rules
from .base import Base, IDMixin, TimestampMixin


def slugify(text: str, separator: str = "-") -> str:
    """Lowercase ASCII slug; runs of anything else collapse to ``separator``."""
    slug = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = slug.lower().strip()
    slug = re.sub(r"[^a-z0-9]+", separator, slug)
    return slug.strip(separator)


FORMS_TABLE = settings.table_name("forms")
FIELDS_TABLE = settings.table_name("form_fields")
SUBMISSIONS_TABLE = settings.table_name("form_submissions")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Form(IDMixin, TimestampMixin, Base):
    __tablename__ = FORMS_TABLE

    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    success_message: Mapped[str] = mapped_column(
        String(255), default="Thank you! Your form has been submitted successfully."
    )
    submit_button_text: Mapped[str] = mapped_column(String(255), default="Submit")
    columns: Mapped[int] = mapped_column(Integer, default=1)
    custom_route: Mapped[str | None] = mapped_column(String(255), default=None)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    settings: Mapped[dict | None] = mapped_column(JSON, default=None)

    # Relationships
    fields: Mapped[list["FormField"]] = relationship(
        back_populates="form", cascade="all, delete-orphan",
        order_by=lambda: [FormField.sort_order, FormField.id],
    )
    submissions: Mapped[list["FormSubmission"]] = relationship(
        back_populates="form", cascade="all, delete-orphan",
        order_by=lambda: [FormSubmission.submitted_at.desc(), FormSubmission.id.desc()],
    )

    def public_url(self, prefix: str = "/forms") -> str:
        return f"{prefix.rstrip('/')}/{self.slug}"

    def submission_url(self, prefix: str = "/forms") -> str:
        """Form action: the custom route when set, else the public submit URL."""
        if self.custom_route:
            return self.custom_route
        return self.public_url(prefix)

    def visible_fields(self) -> list["FormField"]:
        """Visible fields by sort_order; ties keep their loaded (id) order."""
        return sorted(
            (f for f in self.fields if f.is_visible),
            key=lambda f: f.sort_order or 0,
        )


class FormField(IDMixin, TimestampMixin, Base):
    __tablename__ = FIELDS_TABLE
    __table_args__ = (UniqueConstraint("form_id", "key", name="uq_form_fields_form_key"),)

    form_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(f"{FORMS_TABLE}.id", ondelete="CASCADE"), index=True
    )
    key: Mapped[str] = mapped_column(String(255), index=True)
    label: Mapped[str] = mapped_column(String(255))
    field_type: Mapped[str] = mapped_column("type", String(20), default="text")
    # text, textarea, email, select, checkbox, radio, date, number
    validation_rules: Mapped[str | None] = mapped_column(Text, default=None)
    default_value: Mapped[str | None] = mapped_column(Text, default=None)
    options: Mapped[list | None] = mapped_column(JSON, default=None)
    placeholder: Mapped[str | None] = mapped_column(String(255), default=None)
    help_text: Mapped[str | None] = mapped_column(Text, default=None)
    column_span: Mapped[int] = mapped_column(Integer, default=1)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False)
    is_visible: Mapped[bool] = mapped_column(Boolean, default=True)
    # Reserved for conditional visibility; stored but never evaluated
    conditional_logic: Mapped[dict | None] = mapped_column(JSON, default=None)

    # Relationships
    form: Mapped["Form"] = relationship(back_populates="fields")

    def validation_rules_list(self) -> list[str]:
        return compile_rules(self.validation_rules, bool(self.is_required))

    def type_label(self, labels: dict[str, str] | None = None) -> str:
        return type_label(self.field_type, labels)

    def options_for_select(self) -> list[tuple[str, str]]:
        """Ordered (value, label) pairs for select, radio and checkbox fields.

        Options may be stored as ``{"value", "label"}`` dicts or bare strings.
        """
        if not is_option_bearing(self.field_type) or not self.options:
            return []
        pairs: list[tuple[str, str]] = []
        for option in self.options:
            if isinstance(option, dict) and "value" in option and "label" in option:
                pairs.append((str(option["value"]), str(option["label"])))
            elif isinstance(option, str):
                pairs.append((option, option))
        return pairs


class FormSubmission(IDMixin, TimestampMixin, Base):
    __tablename__ = SUBMISSIONS_TABLE
    __table_args__ = (Index("ix_form_submissions_form_submitted", "form_id", "submitted_at"),)

    form_id: Mapped[int] = mapped_column(
        Integer, ForeignKey(f"{FORMS_TABLE}.id", ondelete="CASCADE"), index=True
    )
    data: Mapped[dict] = mapped_column(JSON, default=dict)
    ip_address: Mapped[str | None] = mapped_column(String(45), default=None)
    user_agent: Mapped[str | None] = mapped_column(Text, default=None)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    form: Mapped["Form"] = relationship(back_populates="submissions")

    def field_value(self, key: str) -> Any:
        return (self.data or {}).get(key)

    def has_field(self, key: str) -> bool:
        return key in (self.data or {})

    def formatted_data(self) -> dict[str, str]:
        """Label -> display string against the owning form's current fields."""
        from ..services.display_svc import format_submission

        if not self.data or self.form is None:
            return {}
        return format_submission(self.data, self.form.fields)


@event.listens_for(Form, "before_insert")
@event.listens_for(Form, "before_update")
def _fill_form_slug(mapper, connection, target: Form) -> None:
    if not target.slug and target.name:
        target.slug = slugify(target.name)


@event.listens_for(FormField, "before_insert")
@event.listens_for(FormField, "before_update")
def _fill_field_key(mapper, connection, target: FormField) -> None:
    if not target.key and target.label:
        target.key = slugify(target.label, "_")
