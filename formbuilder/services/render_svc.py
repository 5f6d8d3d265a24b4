"""Render service - builds the structural render model for a public form.

The model is what ``templates/forms/_form.html`` walks to produce markup;
it carries every decision (ordering, widget, current value, selection,
error annotation, grid classes) so the template stays logic-free.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from ..fields import FieldType, coerce_type

LAYOUT_FULL = "full"
LAYOUT_CELL = "cell"

_COLUMN_CLASSES = {
    2: "grid-cols-1 md:grid-cols-2",
    3: "grid-cols-1 md:grid-cols-2 lg:grid-cols-3",
}

_CELL_CLASSES = {
    2: "col-span-1 md:col-span-1",
    3: "col-span-1 md:col-span-1 lg:col-span-1",
}

# Semantic <input type> for single-line widgets
_INPUT_TYPES = {
    FieldType.TEXT: "text",
    FieldType.EMAIL: "email",
    FieldType.NUMBER: "number",
    FieldType.DATE: "date",
}


@dataclass
class RenderedOption:
    value: str
    label: str
    selected: bool = False


@dataclass
class RenderedField:
    key: str
    label: str
    widget: FieldType | None
    input_type: str | None
    required: bool
    value: Any
    placeholder: str | None
    help_text: str | None
    layout: str
    css_class: str
    options: list[RenderedOption] = field(default_factory=list)
    multiple: bool = False
    checked: bool = False
    has_error: bool = False
    error: str | None = None

    @property
    def dom_id(self) -> str:
        return f"field_{self.key}"


@dataclass
class RenderedForm:
    title: str
    description: str | None
    action: str
    columns: int
    column_class: str
    submit_label: str
    fields: list[RenderedField] = field(default_factory=list)


def column_class(columns: int) -> str:
    return _COLUMN_CLASSES.get(columns, "grid-cols-1")


def field_layout(columns: int, column_span: int) -> tuple[str, str]:
    """(layout, css class) for a field within the form grid.

    A one-column form puts every field at full width. In a multi-column
    form a span of 1 also means full width while spans of 2 and 3 occupy
    exactly one grid cell.
    """
    if columns == 1:
        return LAYOUT_FULL, "col-span-1"
    if column_span in _CELL_CLASSES:
        return LAYOUT_CELL, _CELL_CLASSES[column_span]
    return LAYOUT_FULL, "col-span-full" if columns > 1 else "col-span-1"


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _matches(current: Any, value: str) -> bool:
    if current is None or isinstance(current, (list, tuple, dict)):
        return False
    return _text(current) == value


def render_field(
    form_columns: int,
    form_field,
    old: dict | None = None,
    errors: dict[str, list[str]] | None = None,
) -> RenderedField:
    old = old or {}
    errors = errors or {}
    messages = errors.get(form_field.key) or []

    current = old.get(form_field.key)
    if current is None:
        current = form_field.default_value

    widget = coerce_type(form_field.field_type)
    layout, css_class = field_layout(form_columns, form_field.column_span or 1)
    rendered = RenderedField(
        key=form_field.key,
        label=form_field.label,
        widget=widget,
        input_type=_INPUT_TYPES.get(widget),
        required=bool(form_field.is_required),
        value=current,
        placeholder=form_field.placeholder,
        help_text=form_field.help_text,
        layout=layout,
        css_class=css_class,
        has_error=bool(messages),
        error=messages[0] if messages else None,
    )

    choices = form_field.options_for_select()
    if widget in (FieldType.SELECT, FieldType.RADIO):
        rendered.options = [
            RenderedOption(value, label, _matches(current, value)) for value, label in choices
        ]
    elif widget is FieldType.CHECKBOX:
        if choices:
            selected = (
                {_text(v) for v in current} if isinstance(current, (list, tuple)) else set()
            )
            rendered.multiple = True
            rendered.options = [
                RenderedOption(value, label, value in selected) for value, label in choices
            ]
        else:
            rendered.checked = _matches(current, "1")
    return rendered


def render_form(
    form,
    fields: Iterable,
    old: dict | None = None,
    errors: dict[str, list[str]] | None = None,
    route_prefix: str = "/forms",
) -> RenderedForm:
    """Build the render model for ``form`` using its visible ``fields``.

    ``old`` is the previously posted input (re-display after a failed
    submission); ``errors`` maps field keys to messages, only the first of
    which is shown.
    """
    columns = form.columns or 1
    visible = sorted((f for f in fields if f.is_visible), key=lambda f: f.sort_order or 0)
    return RenderedForm(
        title=form.name,
        description=form.description or None,
        action=form.submission_url(route_prefix),
        columns=columns,
        column_class=column_class(columns),
        submit_label=form.submit_button_text,
        fields=[render_field(columns, f, old, errors) for f in visible],
    )
