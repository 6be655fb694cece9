"""Serves the built front-end: real files when they exist, the SPA index document otherwise."""
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request, Response
from fastapi.responses import FileResponse

INDEX_DOCUMENT = "index.html"
DEFAULT_STATIC_DIR = "dist"

static_router = APIRouter(tags=["Static"])


def static_root(request: Request) -> Path:
    settings = getattr(request.app.state, "settings", None)
    static_dir = getattr(settings, "static_dir", DEFAULT_STATIC_DIR) if settings is not None else DEFAULT_STATIC_DIR
    return Path(static_dir).resolve()


def resolve_asset(root: Path, requested: str) -> Path | None:
    """Return the file under root for the requested path, or None if missing or outside root."""
    if not requested:
        return None
    candidate = (root / requested).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


@static_router.get(
    "/{full_path:path}",
    include_in_schema=False,
)
async def serve_static(request: Request, full_path: str) -> Response:
    root = static_root(request)
    asset = resolve_asset(root, full_path)
    if asset is not None:
        return FileResponse(asset)

    index = root / INDEX_DOCUMENT
    if index.is_file():
        return FileResponse(index)
    return Response(status_code=404, content="Not found")
