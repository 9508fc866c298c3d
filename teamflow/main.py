"""
TEAMFLOW Core API - Main Application

REST authentication under /auth and the project/task GraphQL API under /graphql.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from teamflow.auth import auth_router
from teamflow.auth.passwords import PasswordHasher
from teamflow.auth.repository import MongoUserRepository
from teamflow.auth.tokens import TokenService
from teamflow.config import Settings
from teamflow.database import Database
from teamflow.errors import AppError, ErrorKind, rest_status_code
from teamflow.gql import create_graphql_router
from teamflow.projects.repository import ProjectRepository
from teamflow.security import validate_security_config
from teamflow.tasks.repository import TaskRepository

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings: Settings = app.state.settings
    validate_security_config(settings)

    database: Database = app.state.database
    await database.connect()
    db = database.get_database()
    await MongoUserRepository(db).ensure_indexes()
    await ProjectRepository(db).ensure_indexes()
    await TaskRepository(db).ensure_indexes()

    yield

    await database.disconnect()


def _error_response(status_code: int, message: str, kind: ErrorKind, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "code": kind.value},
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map domain errors to REST responses by kind."""
    headers = None
    if exc.kind in (ErrorKind.AUTHENTICATION_REQUIRED, ErrorKind.INVALID_CREDENTIALS):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.kind == ErrorKind.INTERNAL_ERROR:
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message)
    return _error_response(rest_status_code(exc), exc.message, exc.kind, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported like any other validation error."""
    return _error_response(status.HTTP_400_BAD_REQUEST, "Malformed request body", ErrorKind.VALIDATION_ERROR)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        ErrorKind.INTERNAL_ERROR,
    )


service_router = APIRouter()


@service_router.get("/health", tags=["Health"])
async def health_check(request: Request) -> dict:
    """
    Health check endpoint.

    Returns the service status and version information.
    Used by Docker health checks and load balancers.
    """
    settings: Settings = request.app.state.settings
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@service_router.get("/", tags=["Root"])
async def root(request: Request) -> dict:
    """Root endpoint with service information."""
    settings: Settings = request.app.state.settings
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.DEBUG else "disabled",
        "graphql": "/graphql",
    }


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one explicitly constructed Settings object."""
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Team task management with per-project Kanban boards",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # Process-wide state, read-only after startup
    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.token_service = TokenService.from_settings(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(service_router)
    app.include_router(auth_router)
    app.include_router(create_graphql_router(settings))

    return app


app = create_app()
