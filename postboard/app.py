"""
Postboard - FastAPI Application Entrypoint

This module initializes the FastAPI application with:
- CORS (credentials allowed for the session cookie) and security middleware
- Authentication and post routes
- Database lifecycle management
- Exception handlers for storage failures
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from postboard.auth.errors import FatalError
from postboard.auth.routes import router as auth_router
from postboard.config import settings
from postboard.database import get_engine, init_db, get_session_factory
from postboard.gateway.middleware import SecurityMiddleware
from postboard.posts.routes import router as posts_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
        - Configure logging
        - Initialize database (users, sessions, reset tokens, posts)

    Shutdown:
        - Dispose the engine created at startup
    """
    configure_logging()

    # Tests install their own engine before startup
    engine = None
    if app.state.db_session_factory is None:
        engine = get_engine(settings.DATABASE_URL)
        init_db(engine)
        app.state.db_engine = engine
        app.state.db_session_factory = get_session_factory(engine)
        logger.info("Database initialized")

    yield

    if engine is not None:
        engine.dispose()
        app.state.db_session_factory = None


app = FastAPI(
    title="Postboard",
    description="User accounts, session auth, password reset and posts",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.db_session_factory = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "PATCH"],
    allow_headers=["Content-Type"],
)

app.add_middleware(SecurityMiddleware)


@app.exception_handler(FatalError)
async def fatal_error_handler(request: Request, exc: FatalError) -> JSONResponse:
    logger.error("Fatal error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable"},
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unexpected storage error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable"},
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Postboard",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
