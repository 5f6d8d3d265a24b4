"""JSON API for admin and review tooling (forms, fields, submissions)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..fields import list_types
from ..models.form import Form, FormField, FormSubmission
from ..schemas.form import (
    FieldCreate, FieldOut, FieldReorder, FieldUpdate, FormCreate, FormOut, FormUpdate,
    SubmissionOut, SubmissionPage,
)
from ..services import form_svc
from ..services.display_svc import format_submission

router = APIRouter(prefix="/api")


def _field_out(f: FormField) -> FieldOut:
    return FieldOut(
        id=f.id,
        key=f.key,
        label=f.label,
        field_type=f.field_type,
        type_label=f.type_label(settings.field_types),
        validation_rules=f.validation_rules,
        compiled_rules=f.validation_rules_list(),
        default_value=f.default_value,
        options=f.options,
        placeholder=f.placeholder,
        help_text=f.help_text,
        column_span=f.column_span,
        sort_order=f.sort_order,
        is_required=f.is_required,
        is_visible=f.is_visible,
    )


def _form_out(form: Form, fields: list[FormField] | None = None) -> FormOut:
    return FormOut(
        id=form.id,
        name=form.name,
        slug=form.slug,
        description=form.description,
        success_message=form.success_message,
        submit_button_text=form.submit_button_text,
        columns=form.columns,
        custom_route=form.custom_route,
        is_active=form.is_active,
        public_url=form.public_url(settings.public_prefix),
        submission_url=form.submission_url(settings.public_prefix),
        fields=[_field_out(f) for f in (fields or [])],
    )


def _submission_out(sub: FormSubmission, fields: list[FormField]) -> SubmissionOut:
    return SubmissionOut(
        id=sub.id,
        form_id=sub.form_id,
        data=sub.data or {},
        formatted=format_submission(sub.data or {}, fields),
        ip_address=sub.ip_address,
        user_agent=sub.user_agent,
        submitted_at=sub.submitted_at,
    )


async def _require_form(db: AsyncSession, form_id: int) -> Form:
    form = await form_svc.get_form(db, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.get("/field-types")
async def field_types():
    return [{"type": t, "label": label} for t, label in list_types(settings.field_types)]


@router.get("/forms", response_model=list[FormOut])
async def list_forms(db: AsyncSession = Depends(get_db)):
    forms = await form_svc.list_forms(db)
    return [_form_out(f, list(f.fields)) for f in forms]


@router.post("/forms", response_model=FormOut, status_code=201)
async def create_form(body: FormCreate, db: AsyncSession = Depends(get_db)):
    values = body.model_dump(exclude_none=True)
    try:
        form = await form_svc.create_form(db, **values)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="A form with this slug already exists")
    return _form_out(form)


@router.get("/forms/{form_id}", response_model=FormOut)
async def get_form(form_id: int, db: AsyncSession = Depends(get_db)):
    form = await _require_form(db, form_id)
    return _form_out(form, list(form.fields))


@router.patch("/forms/{form_id}", response_model=FormOut)
async def update_form(form_id: int, body: FormUpdate, db: AsyncSession = Depends(get_db)):
    await _require_form(db, form_id)
    await form_svc.update_form(db, form_id, **body.model_dump(exclude_unset=True))
    form = await _require_form(db, form_id)
    return _form_out(form, list(form.fields))


@router.delete("/forms/{form_id}", status_code=204)
async def delete_form(form_id: int, db: AsyncSession = Depends(get_db)):
    if not await form_svc.delete_form(db, form_id):
        raise HTTPException(status_code=404, detail="Form not found")


@router.post("/forms/{form_id}/fields", response_model=FieldOut, status_code=201)
async def add_field(form_id: int, body: FieldCreate, db: AsyncSession = Depends(get_db)):
    await _require_form(db, form_id)
    values = body.model_dump()
    values["field_type"] = body.field_type.value
    if body.options is not None:
        values["options"] = [o.model_dump() for o in body.options]
    try:
        field = await form_svc.add_field(db, form_id, **values)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="A field with this key already exists")
    return _field_out(field)


@router.patch("/forms/{form_id}/fields/{field_id}", response_model=FieldOut)
async def update_field(
    form_id: int,
    field_id: int,
    body: FieldUpdate,
    db: AsyncSession = Depends(get_db),
):
    existing = await form_svc.get_field(db, field_id)
    if not existing or existing.form_id != form_id:
        raise HTTPException(status_code=404, detail="Field not found")
    values = body.model_dump(exclude_unset=True)
    if body.field_type is not None:
        values["field_type"] = body.field_type.value
    if body.options is not None:
        values["options"] = [o.model_dump() for o in body.options]
    try:
        field = await form_svc.update_field(db, field_id, **values)
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="A field with this key already exists")
    return _field_out(field)


@router.delete("/forms/{form_id}/fields/{field_id}", status_code=204)
async def delete_field(form_id: int, field_id: int, db: AsyncSession = Depends(get_db)):
    existing = await form_svc.get_field(db, field_id)
    if not existing or existing.form_id != form_id:
        raise HTTPException(status_code=404, detail="Field not found")
    await form_svc.delete_field(db, field_id)


@router.post("/forms/{form_id}/fields/reorder", response_model=list[FieldOut])
async def reorder_fields(form_id: int, body: FieldReorder, db: AsyncSession = Depends(get_db)):
    await _require_form(db, form_id)
    await form_svc.reorder_fields(db, form_id, body.field_ids)
    form = await _require_form(db, form_id)
    return [_field_out(f) for f in sorted(form.fields, key=lambda f: (f.sort_order, f.id))]


@router.get("/forms/{form_id}/submissions", response_model=SubmissionPage)
async def list_submissions(
    form_id: int,
    offset: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(get_db),
):
    form = await _require_form(db, form_id)
    subs, total = await form_svc.list_submissions(db, form_id, offset=offset, limit=limit)
    fields = list(form.fields)
    return SubmissionPage(
        total=total,
        offset=offset,
        limit=limit,
        items=[_submission_out(s, fields) for s in subs],
    )


@router.get("/submissions/{submission_id}", response_model=SubmissionOut)
async def get_submission(submission_id: int, db: AsyncSession = Depends(get_db)):
    sub = await form_svc.get_submission(db, submission_id)
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")
    return _submission_out(sub, list(sub.form.fields))
