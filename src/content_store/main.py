"""FastAPI application entrypoint."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from content_store.api import router as posts_router
from content_store.config import Settings
from content_store.store import ContentStore
from content_store.telemetry import configure_logging, init_telemetry, shutdown_telemetry

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = Settings()
    configure_logging(settings.log_level)
    init_telemetry()
    app.state.settings = settings
    app.state.store = ContentStore.from_directory(
        settings.content_dir, settings.post_glob, strict=settings.strict_front_matter
    )

    await log.ainfo(
        "service started", content_dir=str(settings.content_dir), posts=len(app.state.store)
    )
    yield

    await log.ainfo("service stopped")
    shutdown_telemetry()


app = FastAPI(title="Blog Content Store", lifespan=lifespan)
app.include_router(posts_router)
FastAPIInstrumentor.instrument_app(app)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


def run() -> None:
    """Serve the app with uvicorn using HOST/PORT from settings."""
    import uvicorn

    settings = Settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)
