"""FastAPI application factory for the form builder."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .hooks import SubmissionHooks


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Auto-create tables for SQLite (local dev); PostgreSQL uses Alembic migrations
    if "sqlite" in settings.database_url:
        from .database import engine
        from .models import Base
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield


app = FastAPI(title=settings.app_title, lifespan=lifespan)

# Listeners registered here run after every accepted submission
app.state.submission_hooks = SubmissionHooks()

# Import and register routers
from .routers import api, health, public  # noqa: E402

app.include_router(api.router)
app.include_router(health.router)
app.include_router(public.router)
