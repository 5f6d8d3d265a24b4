"""Validation rules - compile, parse and evaluate per-field rule strings.

A field stores its rules as a pipe-delimited string such as
``"required|email|max:255"``. :func:`compile_rules` turns that string plus
the field's ``is_required`` flag into the ordered token list, and
:func:`parse_rules` converts the tokens into typed rule objects once, at
validation time. :func:`check_value` runs the typed rules against one
submitted value and returns the failure messages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, TypeAdapter, ValidationError

from .exceptions import RuleConfigurationError
from .fields import FieldType, coerce_type

_url_adapter = TypeAdapter(AnyUrl)

# PHP is_numeric: optional sign, digits with optional fraction, optional exponent
_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")

_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE, "u": 0}
# Bare patterns may start with ( or [, so those never act as delimiters
_CLOSING_DELIMITERS = {"{": "}", "<": ">"}
_DELIMITERS = "/#~!%@;`{<"

_DATE_FORMATS = ("%m/%d/%Y", "%d %B %Y", "%B %d, %Y", "%d %b %Y", "%b %d, %Y", "%Y/%m/%d")


# ---------------------------------------------------------------------------
# Rule variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Required:
    pass


@dataclass(frozen=True)
class Nullable:
    pass


@dataclass(frozen=True)
class Bail:
    pass


@dataclass(frozen=True)
class Email:
    pass


@dataclass(frozen=True)
class Numeric:
    pass


@dataclass(frozen=True)
class Min:
    limit: int


@dataclass(frozen=True)
class Max:
    limit: int


@dataclass(frozen=True)
class InSet:
    values: tuple[str, ...]


@dataclass(frozen=True)
class Regex:
    pattern: re.Pattern


@dataclass(frozen=True)
class IsArray:
    pass


@dataclass(frozen=True)
class IsDate:
    pass


@dataclass(frozen=True)
class Url:
    pass


@dataclass(frozen=True)
class Alpha:
    pass


@dataclass(frozen=True)
class AlphaNum:
    pass


@dataclass(frozen=True)
class Unknown:
    raw: str


Rule = Union[
    Required, Nullable, Bail, Email, Numeric, Min, Max, InSet, Regex,
    IsArray, IsDate, Url, Alpha, AlphaNum, Unknown,
]

_KEYWORDS: dict[str, Rule] = {
    "required": Required(),
    "nullable": Nullable(),
    "bail": Bail(),
    "email": Email(),
    "numeric": Numeric(),
    "array": IsArray(),
    "date": IsDate(),
    "url": Url(),
    "alpha": Alpha(),
    "alpha_num": AlphaNum(),
}


# ---------------------------------------------------------------------------
# Compiling and parsing
# ---------------------------------------------------------------------------


def compile_rules(rule_string: str | None, is_required: bool) -> list[str]:
    """Split a stored rule string and put ``required`` first when needed.

    Tokens are otherwise kept verbatim: no reordering, no de-duplication.
    A rule string that already repeats ``required`` keeps both copies.
    """
    tokens = rule_string.split("|") if rule_string else []
    if is_required and "required" not in tokens:
        tokens.insert(0, "required")
    return tokens


def _parse_limit(arg: str) -> int:
    return int(arg.strip())


def _compile_regex(arg: str) -> re.Pattern:
    """Compile a regex argument, honouring ``/pattern/flags`` delimiters."""
    if len(arg) >= 2 and arg[0] in _DELIMITERS:
        opener = arg[0]
        closer = _CLOSING_DELIMITERS.get(opener, opener)
        end = arg.rfind(closer)
        if end <= 0:
            raise ValueError("missing ending delimiter")
        body, modifiers = arg[1:end], arg[end + 1:]
        flags = 0
        for modifier in modifiers:
            if modifier not in _REGEX_FLAGS:
                raise ValueError(f"unsupported modifier {modifier!r}")
            flags |= _REGEX_FLAGS[modifier]
        return re.compile(body, flags)
    return re.compile(arg)


def parse_rule(token: str) -> Rule | None:
    """Parse one rule token. Empty tokens parse to None.

    Raises ValueError (or re.error) when a known rule carries a malformed
    argument. Unrecognized names come back as :class:`Unknown`.
    """
    name, sep, arg = token.partition(":")
    name = name.strip()
    if not name:
        return None
    if not sep:
        return _KEYWORDS.get(name, Unknown(token))
    if name == "min":
        return Min(_parse_limit(arg))
    if name == "max":
        return Max(_parse_limit(arg))
    if name == "in":
        return InSet(tuple(v.strip() for v in arg.split(",")))
    if name == "regex":
        return Regex(_compile_regex(arg))
    return Unknown(token)


def parse_rules(field_key: str, tokens: list[str]) -> list[Rule]:
    """Parse compiled tokens for one field.

    Raises RuleConfigurationError for malformed or unknown tokens.
    """
    rules: list[Rule] = []
    for token in tokens:
        try:
            rule = parse_rule(token)
        except (ValueError, re.error) as exc:
            raise RuleConfigurationError(field_key, token, str(exc)) from exc
        if rule is None:
            continue
        if isinstance(rule, Unknown):
            raise RuleConfigurationError(field_key, token, "unknown rule")
        rules.append(rule)
    return rules


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC_RE.match(value) is not None


def is_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    text = value.strip()
    for parse in (date.fromisoformat, datetime.fromisoformat):
        try:
            parse(text)
            return True
        except ValueError:
            pass
    for fmt in _DATE_FORMATS:
        try:
            datetime.strptime(text, fmt)
            return True
        except ValueError:
            pass
    return False


def _as_text(value: Any) -> str | None:
    """Scalar value as text; None for lists, dicts and booleans."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _measure(value: Any, field_type: FieldType | None, numeric: bool) -> tuple[float, str]:
    """Size of a value for min/max and the unit it is measured in."""
    if isinstance(value, (list, tuple)):
        return len(value), "items"
    if (numeric or field_type is FieldType.NUMBER) and is_numeric(value):
        return float(value), "value"
    text = _as_text(value)
    return len(text if text is not None else str(value)), "characters"


def _min_message(label: str, limit: int, unit: str) -> str:
    if unit == "items":
        return f"The {label} field must have at least {limit} items."
    if unit == "value":
        return f"The {label} field must be at least {limit}."
    return f"The {label} field must be at least {limit} characters."


def _max_message(label: str, limit: int, unit: str) -> str:
    if unit == "items":
        return f"The {label} field must not have more than {limit} items."
    if unit == "value":
        return f"The {label} field must not be greater than {limit}."
    return f"The {label} field must not be greater than {limit} characters."


def _passes_email(value: Any) -> bool:
    text = _as_text(value)
    if text is None:
        return False
    try:
        # Syntax only: dotless hosts and .test domains pass; localhost, .local,
        # .invalid, .onion and .arpa are still rejected by email-validator
        validate_email(
            text,
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
        )
    except EmailNotValidError:
        return False
    return True


def _passes_url(value: Any) -> bool:
    text = _as_text(value)
    if text is None:
        return False
    try:
        _url_adapter.validate_python(text)
    except ValidationError:
        return False
    return True


def _passes_in(value: Any, allowed: tuple[str, ...]) -> bool:
    if isinstance(value, (list, tuple)):
        return all(_as_text(v) in allowed for v in value)
    return _as_text(value) in allowed


def check_value(
    label: str,
    field_type: FieldType | str,
    value: Any,
    rules: list[Rule],
) -> list[str]:
    """Evaluate parsed rules against one value; return failure messages.

    An empty value fails ``required`` and skips every other rule.
    """
    if is_empty(value):
        if any(isinstance(r, Required) for r in rules):
            return [f"The {label} field is required."]
        return []

    ftype = coerce_type(field_type)
    numeric = any(isinstance(r, Numeric) for r in rules)
    bail = any(isinstance(r, Bail) for r in rules)
    messages: list[str] = []

    for rule in rules:
        message = None
        if isinstance(rule, Email):
            if not _passes_email(value):
                message = f"The {label} field must be a valid email address."
        elif isinstance(rule, Numeric):
            if not is_numeric(value):
                message = f"The {label} field must be a number."
        elif isinstance(rule, Min):
            size, unit = _measure(value, ftype, numeric)
            if size < rule.limit:
                message = _min_message(label, rule.limit, unit)
        elif isinstance(rule, Max):
            size, unit = _measure(value, ftype, numeric)
            if size > rule.limit:
                message = _max_message(label, rule.limit, unit)
        elif isinstance(rule, InSet):
            if not _passes_in(value, rule.values):
                message = f"The selected {label} is invalid."
        elif isinstance(rule, Regex):
            text = _as_text(value)
            if text is None or rule.pattern.search(text) is None:
                message = f"The {label} field format is invalid."
        elif isinstance(rule, IsArray):
            if not isinstance(value, (list, tuple, dict)):
                message = f"The {label} field must be an array."
        elif isinstance(rule, IsDate):
            if not is_date(value):
                message = f"The {label} field must be a valid date."
        elif isinstance(rule, Url):
            if not _passes_url(value):
                message = f"The {label} field must be a valid URL."
        elif isinstance(rule, Alpha):
            text = _as_text(value)
            if text is None or not text.isalpha():
                message = f"The {label} field must only contain letters."
        elif isinstance(rule, AlphaNum):
            text = _as_text(value)
            if text is None or not text.isalnum():
                message = f"The {label} field must only contain letters and numbers."

        if message:
            messages.append(message)
            if bail:
                break

    return messages
