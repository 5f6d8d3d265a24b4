"""Submission service - validate, normalize, store and announce submissions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..fields import FieldType, coerce_type
from ..hooks import FormSubmitted, RequestContext, SubmissionHooks
from ..models.form import Form, FormField, FormSubmission
from ..rules import Rule, check_value, parse_rules
from . import form_svc

logger = logging.getLogger(__name__)


class SubmissionOutcome(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"


@dataclass
class SubmissionResult:
    outcome: SubmissionOutcome
    form: Form | None = None
    data: dict[str, Any] = field(default_factory=dict)
    submission: FormSubmission | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    old: dict[str, Any] = field(default_factory=dict)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is SubmissionOutcome.SUCCESS


def multi_value_keys(fields: Iterable[FormField]) -> set[str]:
    """Keys of checkbox fields with options; these always submit lists."""
    return {
        f.key for f in fields
        if coerce_type(f.field_type) is FieldType.CHECKBOX and f.options_for_select()
    }


def payload_from_form(
    form_data, multi_value_keys: Iterable[str] = (),
) -> dict[str, Any]:
    """Flatten a Starlette FormData multi-dict into a submission payload.

    ``name[]`` parts, repeated names and any name in ``multi_value_keys``
    become lists under ``name``; everything else keeps its single string
    value. Non-string parts (uploaded files) are dropped.
    """
    list_keys = set(multi_value_keys)
    grouped: dict[str, list[str]] = {}
    for key, value in form_data.multi_items():
        if not isinstance(value, str):
            continue
        grouped.setdefault(key, []).append(value)

    payload: dict[str, Any] = {}
    for key, values in grouped.items():
        if key.endswith("[]"):
            payload[key[:-2]] = values
        elif len(values) > 1 or key in list_keys:
            payload[key] = values
        else:
            payload[key] = values[0]
    return payload


def compile_field_rules(
    fields: Iterable[FormField],
) -> tuple[dict[str, list[Rule]], dict[str, str]]:
    """Parsed rules per field key plus the key -> label map for messages.

    Raises RuleConfigurationError when any field carries a bad rule.
    """
    rules: dict[str, list[Rule]] = {}
    attributes: dict[str, str] = {}
    for f in fields:
        parsed = parse_rules(f.key, f.validation_rules_list())
        if parsed:
            rules[f.key] = parsed
        attributes[f.key] = f.label
    return rules, attributes


def validate_submission(fields: list[FormField], payload: dict[str, Any]) -> dict[str, list[str]]:
    """Field key -> ordered messages for every visible field that fails."""
    rules, attributes = compile_field_rules(fields)
    by_key = {f.key: f for f in fields}
    errors: dict[str, list[str]] = {}
    for key, field_rules in rules.items():
        messages = check_value(
            attributes[key], by_key[key].field_type, payload.get(key), field_rules
        )
        if messages:
            errors[key] = messages
    return errors


def normalize_submission(fields: Iterable[FormField], payload: dict[str, Any]) -> dict[str, Any]:
    """Canonical stored data: payload values for schema keys present in the payload.

    Values are taken as-is. Fields missing from the payload are omitted and
    payload keys with no visible field are dropped.
    """
    data: dict[str, Any] = {}
    for f in fields:
        if f.key in payload:
            data[f.key] = payload[f.key]
    return data


class SubmissionPipeline:
    """Runs one public submission: lookup, validate, normalize, store, notify.

    ``store_submissions`` and ``hooks`` are injected so the pipeline never
    reads global configuration.
    """

    def __init__(
        self,
        db: AsyncSession,
        store_submissions: bool = True,
        hooks: SubmissionHooks | None = None,
    ):
        self.db = db
        self.store_submissions = store_submissions
        self.hooks = hooks if hooks is not None else SubmissionHooks()

    async def submit(
        self,
        slug: str,
        payload: dict[str, Any],
        context: RequestContext | None = None,
    ) -> SubmissionResult:
        if context is None:
            context = RequestContext(input=dict(payload))

        form = await form_svc.get_active_form(self.db, slug)
        if form is None:
            logger.warning("Submission for unknown or inactive form %r", slug)
            return SubmissionResult(SubmissionOutcome.NOT_FOUND)

        fields = form.visible_fields()
        errors = validate_submission(fields, payload)
        if errors:
            logger.info(
                "Submission to form %r failed validation on %s", slug, ", ".join(errors)
            )
            return SubmissionResult(
                SubmissionOutcome.VALIDATION_FAILED,
                form=form,
                errors=errors,
                old=dict(payload),
            )

        data = normalize_submission(fields, payload)

        submission = None
        if self.store_submissions:
            try:
                submission = await form_svc.create_submission(
                    self.db,
                    form.id,
                    data,
                    ip_address=context.ip_address,
                    user_agent=context.user_agent,
                )
            except SQLAlchemyError:
                logger.exception("Failed to store submission for form %r", slug)
                await self.db.rollback()
                raise

        await self.hooks.dispatch(FormSubmitted(form, data, submission, context))

        logger.info(
            "Accepted submission to form %r (stored=%s)", slug, submission is not None
        )
        return SubmissionResult(
            SubmissionOutcome.SUCCESS,
            form=form,
            data=data,
            submission=submission,
            message=form.success_message,
        )
