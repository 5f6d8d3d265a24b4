"""Tests for model helpers and derived columns."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from formbuilder.models.form import Form, FormField, FormSubmission, slugify
from formbuilder.services import form_svc


def test_slugify():
    assert slugify("Contact Us!") == "contact-us"
    assert slugify("  Café Menu  ") == "cafe-menu"
    assert slugify("First Name", "_") == "first_name"


def test_form_urls():
    form = Form(name="Contact", slug="contact")
    assert form.public_url() == "/forms/contact"
    assert form.submission_url("/apply/") == "/apply/contact"
    form.custom_route = "/custom/contact"
    assert form.submission_url() == "/custom/contact"
    assert form.public_url() == "/forms/contact"


def test_options_for_select_accepts_dicts_and_strings():
    field = FormField(
        key="size", field_type="select",
        options=[{"value": 1, "label": "Small"}, "Large", {"bad": True}],
    )
    assert field.options_for_select() == [("1", "Small"), ("Large", "Large")]


def test_options_ignored_for_text_fields():
    assert FormField(key="name", field_type="text", options=["a"]).options_for_select() == []


def test_submission_field_access():
    sub = FormSubmission(data={"name": "Jane", "notes": None})
    assert sub.field_value("name") == "Jane"
    assert sub.field_value("missing") is None
    assert sub.has_field("notes")
    assert not sub.has_field("missing")


@pytest.mark.asyncio
async def test_slug_and_key_derived_on_insert(db, make_form):
    form = await make_form(name="Job Application", fields=[{"label": "Phone Number"}])
    assert form.slug == "job-application"
    loaded = await form_svc.get_form(db, form.id)
    assert [f.key for f in loaded.fields] == ["phone_number"]


@pytest.mark.asyncio
async def test_explicit_slug_kept(db, make_form):
    form = await make_form(name="Contact", slug="talk-to-us")
    assert form.slug == "talk-to-us"


@pytest.mark.asyncio
async def test_duplicate_slug_rejected(db, make_form):
    await make_form(name="Contact")
    with pytest.raises(IntegrityError):
        await make_form(name="Contact")


@pytest.mark.asyncio
async def test_duplicate_field_key_rejected_within_form(db, make_form):
    form = await make_form(fields=[{"key": "email", "label": "Email"}])
    other = await make_form(name="Other", fields=[{"key": "email", "label": "Email"}])
    assert other.id != form.id
    with pytest.raises(IntegrityError):
        await form_svc.add_field(db, form.id, key="email", label="Email again")


@pytest.mark.asyncio
async def test_visible_fields_sorted_with_ties_in_id_order(db, make_form):
    form = await make_form(fields=[
        {"key": "b", "label": "B", "sort_order": 1},
        {"key": "a", "label": "A", "sort_order": 0},
        {"key": "c", "label": "C", "sort_order": 1},
        {"key": "hidden", "label": "Hidden", "sort_order": 0, "is_visible": False},
    ])
    loaded = await form_svc.get_form(db, form.id)
    assert [f.key for f in loaded.visible_fields()] == ["a", "b", "c"]


def test_table_names_come_from_settings():
    from formbuilder.config import settings

    assert Form.__table__.name == settings.table_name("forms")
    assert FormField.__table__.name == settings.table_name("form_fields")
    assert FormSubmission.__table__.name == settings.table_name("form_submissions")
    fk = next(iter(FormField.__table__.c.form_id.foreign_keys))
    assert fk.column.table.name == settings.table_name("forms")
    assert settings.table_name("unknown") == "unknown"
