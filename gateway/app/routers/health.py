from typing import Any

from fastapi import APIRouter, Request, Response
from loguru import logger

from gateway.app.core import SERVICE_NAME
from gateway.app.routers.utils import environment_info, json_response
from gateway.app.services.health_snapshot import build_health_snapshot, degraded_snapshot

health_router = APIRouter(prefix="/api", tags=["Health"])

def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")

@health_router.get(
    "/health",
    summary="Health snapshot",
    description="Always returns 200. Reports process uptime and database connectivity; a held connection is verified with a liveness query and a failed check triggers a background reconnect. Internal faults degrade the body instead of the status code.",
    responses={200: {"description": "Health snapshot (healthy or degraded)."}},
)
async def health(request: Request) -> Response:
    try:
        database = getattr(request.app.state, "database", None)
        if database is None:
            raise RuntimeError("database not initialized")
        snapshot = await build_health_snapshot(database, environment=environment_info(request))
        return json_response(snapshot)
    except Exception as e:
        logger.exception("health snapshot failed: {}", e)
        _log("health_degraded", error=str(e))
        return json_response(degraded_snapshot(e))
