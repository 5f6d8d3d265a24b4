"""Form service - CRUD forms, fields, submissions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..config import settings
from ..models.form import Form, FormField, FormSubmission


async def list_forms(db: AsyncSession) -> list[Form]:
    stmt = (
        select(Form)
        .options(selectinload(Form.fields))
        .order_by(Form.created_at.desc(), Form.id.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_form(db: AsyncSession, form_id: int) -> Form | None:
    stmt = (
        select(Form)
        .where(Form.id == form_id)
        .options(selectinload(Form.fields))
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_active_form(db: AsyncSession, slug: str) -> Form | None:
    """Published form by slug with its fields loaded; None if missing or inactive."""
    stmt = (
        select(Form)
        .where(Form.slug == slug, Form.is_active.is_(True))
        .options(selectinload(Form.fields))
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def create_form(db: AsyncSession, **kwargs) -> Form:
    kwargs.setdefault("success_message", settings.default_success_message)
    kwargs.setdefault("submit_button_text", settings.default_submit_button_text)
    kwargs.setdefault("columns", settings.default_columns)
    form = Form(**kwargs)
    db.add(form)
    await db.commit()
    await db.refresh(form)
    return form


async def update_form(db: AsyncSession, form_id: int, **kwargs) -> Form | None:
    stmt = select(Form).where(Form.id == form_id)
    form = (await db.execute(stmt)).scalar_one_or_none()
    if not form:
        return None
    for k, v in kwargs.items():
        setattr(form, k, v)
    await db.commit()
    await db.refresh(form)
    return form


async def delete_form(db: AsyncSession, form_id: int) -> bool:
    stmt = (
        select(Form)
        .where(Form.id == form_id)
        .options(selectinload(Form.fields), selectinload(Form.submissions))
    )
    form = (await db.execute(stmt)).scalar_one_or_none()
    if not form:
        return False
    await db.delete(form)
    await db.commit()
    return True


async def get_field(db: AsyncSession, field_id: int) -> FormField | None:
    stmt = select(FormField).where(FormField.id == field_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def add_field(db: AsyncSession, form_id: int, **kwargs) -> FormField:
    if kwargs.get("sort_order") is None:
        # Append after the current last field
        stmt = select(func.max(FormField.sort_order)).where(FormField.form_id == form_id)
        result = (await db.execute(stmt)).scalar()
        kwargs["sort_order"] = result + 1 if result is not None else 0
    field = FormField(form_id=form_id, **kwargs)
    db.add(field)
    await db.commit()
    await db.refresh(field)
    return field


async def update_field(db: AsyncSession, field_id: int, **kwargs) -> FormField | None:
    field = await get_field(db, field_id)
    if not field:
        return None
    for k, v in kwargs.items():
        setattr(field, k, v)
    await db.commit()
    await db.refresh(field)
    return field


async def delete_field(db: AsyncSession, field_id: int) -> bool:
    field = await get_field(db, field_id)
    if not field:
        return False
    await db.delete(field)
    await db.commit()
    return True


async def reorder_fields(db: AsyncSession, form_id: int, field_ids: list[int]) -> None:
    for i, fid in enumerate(field_ids):
        stmt = select(FormField).where(FormField.id == fid, FormField.form_id == form_id)
        field = (await db.execute(stmt)).scalar_one_or_none()
        if field:
            field.sort_order = i
    await db.commit()


async def create_submission(
    db: AsyncSession,
    form_id: int,
    data: dict,
    ip_address: str | None = None,
    user_agent: str | None = None,
    submitted_at: datetime | None = None,
) -> FormSubmission:
    sub = FormSubmission(
        form_id=form_id,
        data=data,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    if submitted_at is not None:
        sub.submitted_at = submitted_at
    db.add(sub)
    await db.commit()
    await db.refresh(sub)
    return sub


async def list_submissions(
    db: AsyncSession, form_id: int, offset: int = 0, limit: int = 50,
) -> tuple[list[FormSubmission], int]:
    stmt = select(FormSubmission).where(FormSubmission.form_id == form_id)
    count_stmt = select(func.count()).select_from(stmt.subquery())
    total = (await db.execute(count_stmt)).scalar() or 0
    stmt = (
        stmt.order_by(FormSubmission.submitted_at.desc(), FormSubmission.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all()), total


async def get_submission(db: AsyncSession, submission_id: int) -> FormSubmission | None:
    """Submission with its form and the form's fields loaded for display."""
    stmt = (
        select(FormSubmission)
        .where(FormSubmission.id == submission_id)
        .options(selectinload(FormSubmission.form).selectinload(Form.fields))
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()
