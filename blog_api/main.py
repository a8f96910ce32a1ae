# blog_api/main.py

"""Blog Backend - accounts, posts, comments and likes over FastAPI."""

from logging import getLogger

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from jose import JWTError
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api.configs import file_logger, settings
from blog_api.db import check_db
from blog_api.errors import (
    BaseAppError,
    create_exception_handler,
    create_jwt_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from blog_api.managers import limiter, rate_limit_exceeded_handler
from blog_api.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from blog_api.routes import blog_router, comment_router, user_router
from blog_api.schemas import HealthCheckResponse
from blog_api.utils.helpers import today_str

logger = file_logger(getLogger(__name__))

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog Backend API",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)

# Comment routes share the /blog prefix and must not be shadowed by /blog/{blog_id}.
routes = [
    user_router,
    comment_router,
    blog_router,
]

_ = [app.include_router(router) for router in routes]

app_error_handler = create_exception_handler(logger)

errors = [
    (BaseAppError, app_error_handler),
    (RequestValidationError, validation_exception_handler),
    (StarletteHTTPException, http_exception_handler),
    (JWTError, create_jwt_exception_handler(logger)),
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (Exception, app_error_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/",
    tags=["🏠 Home"],
    summary="Welcome",
    response_class=ORJSONResponse,
    responses={
        200: {"content": {"application/json": {"example": {"message": "Welcome to Blog Backend"}}}},
    },
    operation_id="home",
)
@limiter.exempt
async def home(request: Request) -> ORJSONResponse:
    return ORJSONResponse({"message": f"Welcome to {app.title}"})


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01 00:00:00",
                        "database": "connected",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> ORJSONResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    ORJSONResponse
        Version, status, timestamp and database reachability.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"version": "1.0.0", "status": "ok", "timestamp": "...", "database": "connected"}
    """
    database_ok = await check_db()
    response_data = HealthCheckResponse(
        version=app.version,
        status="ok" if database_ok else "degraded",
        timestamp=today_str(),
        database="connected" if database_ok else "unavailable",
    )
    return ORJSONResponse(response_data.model_dump())
