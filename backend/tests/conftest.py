"""
Posts & Comments API — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine:          SQLite file database (aiosqlite) with tables created
    ├── session_factory:    async_sessionmaker bound to db_engine
    ├── post_collection:    SqlCollection for posts
    ├── comment_collection: SqlCollection for comments
    ├── mock_collection:    AsyncMock standing in for any Collection
    ├── app:                create_app() wired to session_factory
    ├── test_client:        HTTPX AsyncClient talking to `app` over ASGI
    └── sample_post_data / sample_comment_data: request bodies
"""

import os
import tempfile
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before any posts_api import: settings and the module engine are
# built at import time
_scratch_dir = tempfile.mkdtemp(prefix="posts_api_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_scratch_dir}/module.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "*"

from posts_api.database import build_engine, build_session_factory, create_tables  # noqa: E402
from posts_api.main import create_app  # noqa: E402
from posts_api.models.comment import Comment  # noqa: E402
from posts_api.models.post import Post  # noqa: E402
from posts_api.schemas.comment import CommentCreate, CommentRecord, CommentUpdate  # noqa: E402
from posts_api.schemas.post import PostCreate, PostRecord, PostUpdate  # noqa: E402
from posts_api.services.collection import SqlCollection  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    A fresh SQLite database file per test, with every table created.

    Disposed after the test so no connections leak between tests.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest.fixture
def post_collection(session_factory):
    return SqlCollection(
        name="post",
        model=Post,
        record_schema=PostRecord,
        create_schema=PostCreate,
        update_schema=PostUpdate,
        session_factory=session_factory,
    )


@pytest.fixture
def comment_collection(session_factory):
    return SqlCollection(
        name="comment",
        model=Comment,
        record_schema=CommentRecord,
        create_schema=CommentCreate,
        update_schema=CommentUpdate,
        session_factory=session_factory,
    )


@pytest.fixture
def mock_collection():
    """
    An AsyncMock with the five Collection operations.

    Usage:
        mock_collection.find_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await ResourceController(mock_collection).get_by_id("abc")
    """
    collection = AsyncMock()
    collection.name = "post"
    collection.find = AsyncMock(return_value=[])
    collection.find_by_id = AsyncMock(return_value=None)
    collection.create = AsyncMock()
    collection.find_by_id_and_update = AsyncMock(return_value=None)
    collection.find_by_id_and_delete = AsyncMock(return_value=None)
    return collection


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    return create_app(session_factory=session_factory)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server, no lifespan).

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Sample Data
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sample_post_data():
    return {
        "title": "My First Post",
        "content": "This is the content of my first post",
        "sender": "user123",
    }


@pytest.fixture
def sample_comment_data():
    return {
        "content": "Great post!",
        "postId": "60d0fe4f5311236168a109ca",
        "sender": "user456",
    }
