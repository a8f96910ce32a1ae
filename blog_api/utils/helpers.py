from collections.abc import MutableMapping
from datetime import datetime
from time import perf_counter
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse
from fastapi.routing import APIRoute
from pydantic import BaseModel
from starlette.routing import BaseRoute, Match, Route


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def time_taken(start_time: float) -> str:
    elapsed_ms = (perf_counter() - start_time) * 1000
    return f"{elapsed_ms:.2f}ms"


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        if type(route) is APIRoute and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if type(route) is Route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def parse_positive_int(value: str | None, default: int, maximum: int | None = None) -> int:
    """
    Parse a query value leniently.

    Missing, non-numeric or non-positive values fall back to ``default``.

    Args:
        value: Raw query string value.
        default: Value used when ``value`` is not a positive integer.
        maximum: Optional upper bound.

    Returns:
        int: The parsed value.
    """
    try:
        parsed = int(value) if value is not None else default
    except ValueError:
        parsed = default
    if parsed < 1:
        parsed = default
    if maximum is not None:
        parsed = min(parsed, maximum)
    return parsed


def split_csv(value: str | None) -> list[str]:
    """Split a comma separated query value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def success_response(message: str, status_code: int = 200, **data: Any) -> ORJSONResponse:
    """
    Build a ``{message, ...data}`` body.

    Pydantic models in ``data`` are dumped with their camelCase aliases.
    """
    content: dict[str, Any] = {"message": message}
    for key, value in data.items():
        if isinstance(value, BaseModel):
            content[key] = value.model_dump(mode="json", by_alias=True)
        elif isinstance(value, list):
            content[key] = [
                item.model_dump(mode="json", by_alias=True) if isinstance(item, BaseModel) else item
                for item in value
            ]
        else:
            content[key] = value
    return ORJSONResponse(content=content, status_code=status_code)
