"""Tests for submission display formatting."""

from __future__ import annotations

from formbuilder.models.form import FormField
from formbuilder.services.display_svc import format_submission, format_value


def _field(key, label, field_type="text", sort_order=0, options=None):
    return FormField(
        key=key, label=label, field_type=field_type, sort_order=sort_order, options=options,
    )


def test_lists_are_comma_joined():
    field = _field("interests", "Interests", "checkbox", options=["newsletter", "updates"])
    assert format_value(field, ["newsletter", "updates"]) == "newsletter, updates"


def test_boolean_checkbox_is_yes_no():
    field = _field("agree", "Agree", "checkbox")
    assert format_value(field, True) == "Yes"
    assert format_value(field, False) == "No"


def test_select_shows_option_label():
    field = _field("country", "Country", "select", options=[{"value": "us", "label": "United States"}])
    assert format_value(field, "us") == "United States"
    assert format_value(field, "zz") == "zz"


def test_other_values_are_stringified():
    assert format_value(_field("age", "Age", "number"), 42) == "42"


def test_format_submission_follows_sort_order():
    fields = [
        _field("email", "Email", "email", sort_order=1),
        _field("name", "Name", sort_order=0),
    ]
    formatted = format_submission({"email": "jane@example.com", "name": "Jane"}, fields)
    assert list(formatted.items()) == [("Name", "Jane"), ("Email", "jane@example.com")]


def test_format_submission_skips_missing_null_and_unknown_keys():
    fields = [_field("name", "Name"), _field("phone", "Phone", sort_order=1)]
    data = {"name": "Jane", "phone": None, "legacy": "x"}
    assert format_submission(data, fields) == {"Name": "Jane"}
    assert format_submission({}, fields) == {}
