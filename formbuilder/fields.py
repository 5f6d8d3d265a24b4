"""Field type registry - the closed set of field types and their affordances."""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"
    NUMBER = "number"


FIELD_TYPE_LABELS: dict[FieldType, str] = {
    FieldType.TEXT: "Text Input",
    FieldType.TEXTAREA: "Textarea",
    FieldType.EMAIL: "Email",
    FieldType.SELECT: "Select Dropdown",
    FieldType.CHECKBOX: "Checkbox",
    FieldType.RADIO: "Radio Button",
    FieldType.DATE: "Date Picker",
    FieldType.NUMBER: "Number Input",
}

OPTION_BEARING_TYPES = frozenset({FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX})
TEXT_LIKE_TYPES = frozenset({FieldType.TEXT, FieldType.TEXTAREA, FieldType.EMAIL, FieldType.NUMBER})


def coerce_type(field_type: FieldType | str) -> FieldType | None:
    """Return the FieldType for a stored type id, or None if it is not one."""
    if isinstance(field_type, FieldType):
        return field_type
    try:
        return FieldType(field_type)
    except ValueError:
        return None


def list_types(labels: dict[str, str] | None = None) -> list[tuple[str, str]]:
    """Ordered (type_id, display_label) pairs.

    ``labels`` overrides display labels (e.g. ``settings.field_types``);
    ids it names that are not registered types are ignored.
    """
    overrides = labels or {}
    return [(ft.value, overrides.get(ft.value, FIELD_TYPE_LABELS[ft])) for ft in FieldType]


def type_label(field_type: FieldType | str, labels: dict[str, str] | None = None) -> str:
    value = field_type.value if isinstance(field_type, FieldType) else str(field_type)
    if labels and value in labels:
        return labels[value]
    known = coerce_type(value)
    if known is not None:
        return FIELD_TYPE_LABELS[known]
    return value[:1].upper() + value[1:]


def is_option_bearing(field_type: FieldType | str) -> bool:
    return coerce_type(field_type) in OPTION_BEARING_TYPES


def is_text_like(field_type: FieldType | str) -> bool:
    return coerce_type(field_type) in TEXT_LIKE_TYPES
