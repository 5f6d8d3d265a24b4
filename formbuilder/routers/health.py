"""Liveness and readiness probes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..models.form import Form

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

SERVICE = "formbuilder"


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    await db.execute(text("SELECT 1"))
    return {"status": "healthy", "service": SERVICE}


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Ready once the form tables exist; reports what the public routes serve."""
    try:
        active = (
            await db.execute(select(func.count(Form.id)).where(Form.is_active.is_(True)))
        ).scalar() or 0
    except SQLAlchemyError:
        logger.warning("Readiness check failed: form tables are not available")
        return JSONResponse(
            {"status": "not_ready", "service": SERVICE, "reason": "schema missing"},
            status_code=503,
        )
    return {
        "status": "ready",
        "service": SERVICE,
        "active_forms": active,
        "route_prefix": settings.public_prefix,
        "store_submissions": settings.store_submissions,
    }
