"""
Posts & Comments API — FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires collections → controllers →
       routers, registers middleware and exception handlers, and returns the app.
Who:   Called by uvicorn (uvicorn posts_api.main:app) or the `posts-api` script.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Request ID → Logging → CORS                │
    │                                                          │
    │  Routes:                                                 │
    │  ┌─────────────┐ ┌───────────────┐ ┌───────────────────┐ │
    │  │ /post ...   │ │ /comment ...  │ │ GET / , /health   │ │
    │  └──────┬──────┘ └───────┬───────┘ └───────────────────┘ │
    │         ▼                ▼                               │
    │  ResourceController  ResourceController                  │
    │         ▼                ▼                               │
    │  SqlCollection(Post) SqlCollection(Comment)              │
    │                                                          │
    │  Exception Handlers → {"error": message}:                │
    │  NotFound→404 │ OperationFailed→400/500 │ other→500      │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate database configuration
    3. Verify database connectivity (optionally create tables)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from posts_api import __version__
from posts_api.config import settings
from posts_api.database import (
    async_session_factory,
    check_connection,
    create_tables,
    dispose_engine,
)
from posts_api.exceptions import (
    UNKNOWN_ERROR_MESSAGE,
    NotFoundError,
    OperationFailedError,
    ValidationError,
)
from posts_api.middleware.logging import RequestLoggingMiddleware
from posts_api.middleware.request_id import RequestIDMiddleware, request_id_var
from posts_api.models.comment import Comment
from posts_api.models.post import Post
from posts_api.routes import comments, health, posts
from posts_api.schemas.comment import CommentCreate, CommentRecord, CommentUpdate
from posts_api.schemas.post import PostCreate, PostRecord, PostUpdate
from posts_api.services.collection import SqlCollection
from posts_api.services.resource_controller import ResourceController

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup, before any other initialization.
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check, database connectivity.
    Shutdown: dispose the engine.

    A database that cannot be reached aborts startup.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Posts & Comments API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    try:
        await check_connection()
        if settings.db_auto_create:
            await create_tables()
            logger.info("Database tables ensured")
    except Exception as e:
        logger.error("Failed to connect to database: %s", str(e))
        await dispose_engine()
        raise

    logger.info("Connected to database")
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Posts & Comments API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes. Every body is {"error": message}.

    Handler hierarchy:
        NotFoundError           → 404 "Resource not found"
        OperationFailedError    → status chosen by the controller (400 / 500)
        ValidationError         → 400
        RequestValidationError  → 400 (body is not a JSON object)
        Exception (fallback)    → 500 "An unknown error occurred"
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info("[%s] Not found: %s", request_id_var.get(), exc.context)
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(OperationFailedError)
    async def handle_operation_failed(request: Request, exc: OperationFailedError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(), exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        problems = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err.get("loc", ()))
            problems.append(f"{location}: {err.get('msg', 'invalid')}")
        message = "Invalid request: " + "; ".join(problems) if problems else "Invalid request"
        logger.warning("[%s] %s", request_id_var.get(), message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace is logged server-side only."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": UNKNOWN_ERROR_MESSAGE})


# ══════════════════════════════════════════════════════════════════════════
# Startup Wiring
# ══════════════════════════════════════════════════════════════════════════

def build_controllers(
    session_factory: async_sessionmaker[AsyncSession],
) -> tuple[ResourceController, ResourceController]:
    """One collection and one controller per resource, sharing the session factory."""
    post_controller = ResourceController(
        SqlCollection(
            name="post",
            model=Post,
            record_schema=PostRecord,
            create_schema=PostCreate,
            update_schema=PostUpdate,
            session_factory=session_factory,
        )
    )
    comment_controller = ResourceController(
        SqlCollection(
            name="comment",
            model=Comment,
            record_schema=CommentRecord,
            create_schema=CommentCreate,
            update_schema=CommentUpdate,
            session_factory=session_factory,
        )
    )
    return post_controller, comment_controller


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        session_factory: Sessions for the collections; defaults to the one
                         bound to the engine from settings. Tests inject
                         their own.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    session_factory = session_factory or async_session_factory

    app = FastAPI(
        title="Posts & Comments API",
        description="REST API for posts and the comments on them.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    post_controller, comment_controller = build_controllers(session_factory)

    app.include_router(health.router)
    app.include_router(posts.build_router(post_controller))
    app.include_router(comments.build_router(comment_controller))

    return app


def serve() -> None:
    """Run the API under uvicorn on BACKEND_HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "posts_api.main:app",
        host=settings.backend_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `posts_api.main:app` to be importable
app = create_app()


if __name__ == "__main__":
    serve()
