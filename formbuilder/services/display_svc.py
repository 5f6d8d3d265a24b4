"""Display service - turns stored submission data into label/value pairs."""

from __future__ import annotations

from typing import Any, Iterable

from ..fields import FieldType, coerce_type


def format_value(field, value: Any) -> str:
    """Render one stored value for review screens."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)

    ftype = coerce_type(field.field_type)
    if ftype is FieldType.CHECKBOX and isinstance(value, bool):
        return "Yes" if value else "No"

    if ftype in (FieldType.SELECT, FieldType.RADIO) and field.options:
        labels = dict(field.options_for_select())
        return labels.get(str(value), str(value))

    return str(value)


def format_submission(data: dict, fields: Iterable) -> dict[str, str]:
    """Ordered label -> display string for every field present in ``data``.

    Fields follow sort_order (stable for ties); keys with no matching field and fields
    whose key is absent (or stored as null) are left out.
    """
    formatted: dict[str, str] = {}
    if not data:
        return formatted
    for field in sorted(fields, key=lambda f: f.sort_order or 0):
        if field.key not in data or data[field.key] is None:
            continue
        formatted[field.label] = format_value(field, data[field.key])
    return formatted
