"""Public form routes - render a published form and accept submissions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..hooks import RequestContext, SubmissionHooks
from ..services import form_svc
from ..services.render_svc import render_form
from ..services.submission_svc import (
    SubmissionOutcome, SubmissionPipeline, multi_value_keys, payload_from_form,
)

router = APIRouter(prefix=settings.public_prefix, tags=["public"])
templates = Jinja2Templates(directory=str(settings.templates_dir))

NOT_FOUND_HTML = "<h1>Form not found</h1>"


def get_submission_hooks(request: Request) -> SubmissionHooks:
    return request.app.state.submission_hooks


def get_pipeline(
    db: AsyncSession = Depends(get_db),
    hooks: SubmissionHooks = Depends(get_submission_hooks),
) -> SubmissionPipeline:
    return SubmissionPipeline(db, store_submissions=settings.store_submissions, hooks=hooks)


def _wants_json(request: Request) -> bool:
    return request.headers.get("content-type", "").startswith("application/json")


async def _read_payload(request: Request, list_keys: set[str]) -> dict | None:
    if _wants_json(request):
        body = await request.json()
        return body if isinstance(body, dict) else None
    return payload_from_form(await request.form(), list_keys)


def _request_context(request: Request, payload: dict) -> RequestContext:
    return RequestContext(
        input=dict(payload),
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        headers=dict(request.headers),
    )


@router.get("/{slug}")
async def show_form(
    request: Request,
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    form_obj = await form_svc.get_active_form(db, slug)
    if not form_obj:
        return HTMLResponse(NOT_FOUND_HTML, status_code=404)
    view = render_form(form_obj, form_obj.visible_fields(), route_prefix=settings.public_prefix)
    return templates.TemplateResponse(request, "forms/public.html", {"form_view": view})


@router.post("/{slug}")
async def submit_form(
    request: Request,
    slug: str,
    pipeline: SubmissionPipeline = Depends(get_pipeline),
):
    form_obj = await form_svc.get_active_form(pipeline.db, slug)
    list_keys = multi_value_keys(form_obj.visible_fields()) if form_obj else set()
    payload = await _read_payload(request, list_keys)
    if payload is None:
        return JSONResponse({"detail": "Expected a JSON object"}, status_code=422)

    result = await pipeline.submit(slug, payload, _request_context(request, payload))

    if result.outcome is SubmissionOutcome.NOT_FOUND:
        if _wants_json(request):
            return JSONResponse({"detail": "Form not found"}, status_code=404)
        return HTMLResponse(NOT_FOUND_HTML, status_code=404)

    if result.outcome is SubmissionOutcome.VALIDATION_FAILED:
        if _wants_json(request):
            return JSONResponse(
                {
                    "message": "The given data was invalid.",
                    "errors": result.errors,
                    "old": result.old,
                },
                status_code=422,
            )
        view = render_form(
            result.form,
            result.form.visible_fields(),
            old=result.old,
            errors=result.errors,
            route_prefix=settings.public_prefix,
        )
        return templates.TemplateResponse(
            request,
            "forms/public.html",
            {"form_view": view},
            status_code=422,
        )

    if _wants_json(request):
        return JSONResponse({
            "message": result.message,
            "submission_id": result.submission.id if result.submission else None,
        })
    return templates.TemplateResponse(request, "forms/public_thanks.html", {
        "form_obj": result.form,
        "message": result.message,
    })
