# blog_api/middleware/middleware.py
"""
Middleware and lifespan for the blog API.

Console logging is configured here once, through rich, because this module is
imported before any request is served.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import basicConfig, getLogger
from time import perf_counter

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.logging import RichHandler
from rich.traceback import install
from sqlalchemy.engine import make_url
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blog_api.configs import file_logger, settings
from blog_api.db import close_db, init_db
from blog_api.utils.helpers import get_summary, host, time_taken

basicConfig(
    level=settings.LOG_LEVEL,
    format="%(message)s",
    datefmt="%X",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = file_logger(getLogger("rich"))

install()

DEV_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")
QUIET_PATHS = frozenset({"/health"})

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Create missing tables on startup and dispose of the engine on shutdown."""
    backend = make_url(settings.DATABASE_URL).get_backend_name()
    logger.info(f"Starting {app.title} v{app.version} ({settings.ENVIRONMENT}) on {backend}")
    try:
        await init_db()
    except Exception:
        logger.exception("Startup aborted: database unavailable")
        raise
    logger.info(
        f"Sessions last {settings.ACCESS_TOKEN_EXPIRE_MINUTES} min, "
        f"revocation registry keeps {settings.REVOKED_TOKEN_LIMIT} tokens",
    )

    yield

    logger.info(f"Shutting down {app.title}...")
    await close_db()


def allowed_origins() -> list[str]:
    origins = list(DEV_ORIGINS)
    if settings.PRODUCTION_FRONTEND_URL:
        origins.append(settings.PRODUCTION_FRONTEND_URL)
    return origins


def configure_cors(app: FastAPI) -> None:
    # Credentials are allowed so the session cookie travels cross-origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and one per response, with timing."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = perf_counter()
        route = get_summary(request) or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route}, from ip: {host(request)}")

        response = await call_next(request)

        mssg = (
            f"Response: {response.status_code} for {request.method} {request.url.path} "
            f"in {time_taken(start_time)}"
        )
        if response.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(mssg)
        else:
            logger.info(mssg)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach security headers; account responses are never cached."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if request.url.path.startswith("/user"):
            response.headers["Cache-Control"] = "no-store"
        return response
