from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from .. import __version__
from ..analytics.metrics import analysis_metrics
from ..analytics.ops_analyzer import OpsAnalyzer
from ..core.config import settings
from ..core.constants import API_PREFIX
from ..core.exceptions import BaseApplicationException
from ..core.logging import get_logger
from ..storage.history import HistoryStore
from ..storage.progress import ProgressRegistry
from ..storage.snapshot_store import SnapshotStore
from .v1.routes.health import router as health_router
from .v1.routes.history import router as history_router
from .v1.routes.ops import router as ops_router
from .v1.routes.progress import router as progress_router
from .v1.routes.snapshots import router as snapshots_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("rdbops API starting up", extra={
        "env": settings.environment.value,
        "snapshots": len(app.state.snapshot_store),
        "history_file": str(app.state.history_store.path),
    })
    yield
    logger.info("rdbops API shutting down")


async def application_exception_handler(request: Request, exc: BaseApplicationException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", extra=exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(
    snapshot_store: SnapshotStore | None = None,
    history_store: HistoryStore | None = None,
    progress_registry: ProgressRegistry | None = None,
    analyzer: OpsAnalyzer | None = None,
) -> FastAPI:
    """Build the API with its owned stores attached to ``app.state``."""
    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="Operational analysis of Redis snapshot summaries",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )

    app.state.snapshot_store = snapshot_store if snapshot_store is not None else SnapshotStore()
    app.state.history_store = history_store if history_store is not None else HistoryStore()
    app.state.progress_registry = progress_registry if progress_registry is not None else ProgressRegistry()
    app.state.analyzer = analyzer if analyzer is not None else OpsAnalyzer()

    app.add_exception_handler(BaseApplicationException, application_exception_handler)

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(ops_router, prefix=API_PREFIX)
    app.include_router(snapshots_router, prefix=API_PREFIX)
    app.include_router(history_router, prefix=API_PREFIX)
    app.include_router(progress_router, prefix=API_PREFIX)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        metrics_source = app.state.analyzer.metrics or analysis_metrics
        payload, content_type = metrics_source.export()
        return Response(content=payload, media_type=content_type)

    return app
