"""
FastAPI application entry point: SQL gateway.

uvicorn turns SIGINT/SIGTERM into lifespan shutdown, which closes the
database handle before the process exits.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from gateway.app.composition import create_app_dependencies
from gateway.app.core import SERVICE_NAME
from gateway.app.routers.health import health_router
from gateway.app.routers.query import query_router
from gateway.app.routers.static import static_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.bind(service_name=SERVICE_NAME, event="gateway_starting").info("")
    deps = create_app_dependencies()
    deps.start()
    app.state.settings = deps.settings
    app.state.database = deps.database
    try:
        yield
    finally:
        logger.bind(service_name=SERVICE_NAME, event="gateway_stopping").info("")
        await deps.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="SQL Gateway",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health_router)
    app.include_router(query_router)
    # Catch-all SPA route must be registered last.
    app.include_router(static_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    from gateway.app.config.settings import Settings

    settings = Settings()
    try:
        uvicorn.run(app, host=settings.host, port=settings.port)
    except Exception as e:
        logger.exception("gateway failed: {}", e)
        raise


if __name__ == "__main__":
    run()
