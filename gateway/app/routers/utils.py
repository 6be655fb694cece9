from __future__ import annotations

from fastapi import Request, Response
from pydantic import BaseModel

from gateway.app.schemas.health import EnvironmentInfo

UNKNOWN_ENVIRONMENT = "unknown"


def expose_error_detail(request: Request) -> bool:
    """Read the detail-exposure flag from app.state.settings; off when settings are absent."""
    settings = getattr(request.app.state, "settings", None)
    if settings is not None:
        return bool(getattr(settings, "expose_error_detail", False))
    return False


def environment_info(request: Request) -> EnvironmentInfo:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        return EnvironmentInfo(name=UNKNOWN_ENVIRONMENT, has_connection_string=False)
    return EnvironmentInfo(
        name=str(getattr(settings, "environment", UNKNOWN_ENVIRONMENT)),
        has_connection_string=bool(getattr(settings, "database_url", None)),
    )


def json_response(model: BaseModel, *, status_code: int = 200) -> Response:
    return Response(
        status_code=status_code,
        media_type="application/json",
        content=model.model_dump_json(by_alias=True, exclude_none=True),
    )


__all__ = [
    "expose_error_detail",
    "environment_info",
    "json_response",
]
