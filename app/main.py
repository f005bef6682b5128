import logging
from typing import Optional

from app.config import load_env_file, is_debug, get_database_url, should_create_all

# Load .env before anything reads the environment
if load_env_file():
    print("[Sift] Loaded environment variables from .env file")

from litestar import Litestar, Request
from litestar.exceptions import HTTPException
from litestar.plugins.sqlalchemy import SQLAlchemyInitPlugin, SQLAlchemyAsyncConfig
from litestar.response import Response
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR, HTTP_503_SERVICE_UNAVAILABLE
from sqlalchemy.exc import OperationalError

from app.routes import ROUTES
from app.models import Base  # Import models Base for table creation
from app.triage.errors import TriageError
from app.utils.logging import log_request_error, request_context

DEBUG = is_debug()

logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger("Sift")


# --- Exception handlers
def handle_triage_error(request: Request, exc: TriageError) -> Response:
    """Structured payload for not-found / invalid-status / invalid-input."""
    logger.info(f"{exc.error} on {request.method} {request.url.path}: {exc.detail}")
    return Response(
        content={"error": exc.error, "detail": exc.detail},
        status_code=exc.status_code,
        media_type="application/json"
    )


def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    return Response(
        content={"status_code": exc.status_code, "detail": exc.detail, "extra": exc.extra},
        status_code=exc.status_code,
        headers=exc.headers,
        media_type="application/json"
    )


def handle_store_unavailable(request: Request, exc: OperationalError) -> Response:
    """Store failures are surfaced as-is; the caller decides whether to retry."""
    logger.error(f"Feedback store unavailable: {exc.orig!r} ({request_context(request)})")
    return Response(
        content={"error": "store_unavailable", "detail": "Feedback store is unavailable"},
        status_code=HTTP_503_SERVICE_UNAVAILABLE,
        media_type="application/json"
    )


def log_exceptions(request: Request, exc: Exception) -> Response:
    log_request_error(request, exc)
    return Response(
        content={"detail": "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/json"
    )


# --- App init
def create_app(
    database_url: Optional[str] = None,
    debug: Optional[bool] = None,
    create_all: Optional[bool] = None,
) -> Litestar:
    """Build the Litestar app bound to one feedback store."""
    database_url = database_url or get_database_url()
    debug = DEBUG if debug is None else debug
    create_all = should_create_all() if create_all is None else create_all

    logger.info(f"Starting app in {'DEBUG' if debug else 'PRODUCTION'} mode")
    logger.debug(f"Database URL: {database_url}")

    # --- SQLAlchemy config
    config = SQLAlchemyAsyncConfig(
        connection_string=database_url,
        session_dependency_key="session",
        metadata=Base.metadata,
        create_all=create_all,
    )

    return Litestar(
        route_handlers=ROUTES,
        debug=debug,
        plugins=[SQLAlchemyInitPlugin(config)],
        exception_handlers={
            Exception: log_exceptions,
            HTTPException: handle_http_exception,
            TriageError: handle_triage_error,
            OperationalError: handle_store_unavailable,
        }
    )


app = create_app()
