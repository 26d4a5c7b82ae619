"""Main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from lv2hostconfig import __version__
from lv2hostconfig.api.dependencies import app_state
from lv2hostconfig.api.routes import router as api_router
from lv2hostconfig.core.config import Settings, setup_logging
from lv2hostconfig.core.models import HealthResponse
from lv2hostconfig.core.store import ConfigurationStore
from lv2hostconfig.errors import HostConfigError

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ConfigurationStore:
    """Create a store and load the configured document into it.

    A document that cannot be loaded or evaluated is logged and the store
    is returned as it stands, so the API can still be used to fix it.
    """
    store = ConfigurationStore()

    try:
        store.load_file(settings.config_path)
    except HostConfigError as e:
        logger.warning(f"Could not load {settings.config_path}: {e}")
        return store

    if settings.evaluate_on_load:
        try:
            store.evaluate()
        except HostConfigError as e:
            logger.warning(f"Could not evaluate {settings.config_path}: {e}")

    return store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    settings = app_state.settings or Settings()
    app_state.settings = settings

    setup_logging(settings.log_level)
    logger.info(f"Starting LV2 host config v{__version__}")

    if app_state.store is None:
        app_state.store = build_store(settings)

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="LV2 Host Config",
    description="Declarative plugin parameter configuration",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(api_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "LV2 Host Config",
        "version": __version__,
        "status": "running",
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    store = app_state.store

    if store is None:
        return HealthResponse(
            status="unhealthy",
            plugins_count=0,
            evaluated=False,
            last_evaluation=None,
        )

    status = "healthy" if store.evaluated else "degraded"

    return HealthResponse(
        status=status,
        plugins_count=store.count,
        evaluated=store.evaluated,
        last_evaluation=store.last_evaluation,
    )


def main():
    """Run the application (for CLI entry point)."""
    import uvicorn

    settings = Settings()
    setup_logging(settings.log_level)
    app_state.settings = settings

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
