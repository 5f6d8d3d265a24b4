"""Form, field and submission schemas for the admin API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..fields import FieldType


class FieldOption(BaseModel):
    value: str
    label: str


class FormCreate(BaseModel):
    name: str
    slug: str | None = None
    description: str | None = None
    success_message: str | None = None
    submit_button_text: str | None = None
    columns: int | None = Field(default=None, ge=1, le=3)
    custom_route: str | None = None
    is_active: bool = True
    settings: dict[str, Any] | None = None


class FormUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    success_message: str | None = None
    submit_button_text: str | None = None
    columns: int | None = Field(default=None, ge=1, le=3)
    custom_route: str | None = None
    is_active: bool | None = None
    settings: dict[str, Any] | None = None

    @field_validator(
        "name", "success_message", "submit_button_text", "columns", "is_active",
    )
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} may be omitted but not null")
        return v


class FieldCreate(BaseModel):
    label: str
    key: str | None = Field(default=None, pattern=r"^[A-Za-z0-9_-]+$")
    field_type: FieldType = FieldType.TEXT
    validation_rules: str | None = None
    default_value: str | None = None
    options: list[FieldOption] | None = None
    placeholder: str | None = None
    help_text: str | None = None
    column_span: int = Field(default=1, ge=1, le=3)
    sort_order: int | None = None
    is_required: bool = False
    is_visible: bool = True
    conditional_logic: dict[str, Any] | None = None

    @field_validator("options")
    @classmethod
    def _no_empty_options(cls, v):
        return v or None


class FieldUpdate(BaseModel):
    label: str | None = None
    key: str | None = Field(default=None, pattern=r"^[A-Za-z0-9_-]+$")
    field_type: FieldType | None = None
    validation_rules: str | None = None
    default_value: str | None = None
    options: list[FieldOption] | None = None
    placeholder: str | None = None
    help_text: str | None = None
    column_span: int | None = Field(default=None, ge=1, le=3)
    sort_order: int | None = None
    is_required: bool | None = None
    is_visible: bool | None = None
    conditional_logic: dict[str, Any] | None = None

    @field_validator(
        "label", "key", "field_type", "column_span", "sort_order", "is_required", "is_visible",
    )
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} may be omitted but not null")
        return v


class FieldReorder(BaseModel):
    field_ids: list[int]


class FieldOut(BaseModel):
    id: int
    key: str
    label: str
    field_type: str
    type_label: str
    validation_rules: str | None
    compiled_rules: list[str]
    default_value: str | None
    options: list[Any] | None
    placeholder: str | None
    help_text: str | None
    column_span: int
    sort_order: int
    is_required: bool
    is_visible: bool


class FormOut(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None
    success_message: str
    submit_button_text: str
    columns: int
    custom_route: str | None
    is_active: bool
    public_url: str
    submission_url: str
    fields: list[FieldOut] = []


class SubmissionOut(BaseModel):
    id: int
    form_id: int
    data: dict[str, Any]
    formatted: dict[str, str]
    ip_address: str | None
    user_agent: str | None
    submitted_at: datetime | None


class SubmissionPage(BaseModel):
    total: int
    offset: int
    limit: int
    items: list[SubmissionOut]
