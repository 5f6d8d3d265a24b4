"""Async test fixtures for form builder tests using SQLite."""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from formbuilder.database import get_db
from formbuilder.models.base import Base
from formbuilder.services import form_svc


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_form(db: AsyncSession):
    """Factory: create a form and its fields in one call."""

    async def _make(fields=(), **kwargs):
        kwargs.setdefault("name", "Contact")
        form = await form_svc.create_form(db, **kwargs)
        for field_values in fields:
            await form_svc.add_field(db, form.id, **field_values)
        return form

    return _make


@pytest_asyncio.fixture
async def contact_form(make_form):
    """One-column contact form: required name plus an email-checked email."""
    return await make_form(
        name="Contact",
        slug="contact",
        columns=1,
        fields=[
            {"key": "name", "label": "Name", "field_type": "text", "is_required": True},
            {"key": "email", "label": "Email", "field_type": "email", "validation_rules": "email"},
        ],
    )


@pytest.fixture
def hooks():
    """The app's submission hook registry, emptied after each test."""
    from formbuilder.app import app

    registry = app.state.submission_hooks
    registry.clear()
    yield registry
    registry.clear()


@pytest_asyncio.fixture
async def client(engine):
    """HTTPX async test client against the form builder app."""
    from formbuilder.app import app

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
