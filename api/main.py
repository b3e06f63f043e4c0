from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import health, optimize
from config import Settings, settings
from core.errors import ProcessingError, ValidationError
from utils.cleanup import CleanupScheduler
from utils.logging import RequestIdMiddleware, setup_logging
from utils.storage import StagingArea

logger = structlog.get_logger(__name__)


class SPAStaticFiles(StaticFiles):
    """Static bundle that answers unknown paths with index.html."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as e:
            if e.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level)

    storage = StagingArea(app_settings.staging_dir)
    storage.ensure()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.cleanup = CleanupScheduler(storage, app_settings.cleanup_delay_seconds)
        logger.info("startup", staging_dir=str(storage.root),
                    cleanup_delay_seconds=app_settings.cleanup_delay_seconds)
        yield
        await app.state.cleanup.shutdown()

    app = FastAPI(title="Video Optimizer API", version="1.0.0", lifespan=lifespan)
    app.state.settings = app_settings
    app.state.storage = storage

    app.add_middleware(RequestIdMiddleware)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info("upload_rejected", reason=str(exc))
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    @app.exception_handler(ProcessingError)
    async def processing_error_handler(request: Request, exc: ProcessingError):
        logger.error("processing_failed", method=exc.method, returncode=exc.returncode,
                     detail=str(exc))
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(optimize.router, prefix="/api", tags=["optimize"])

    prefix = app_settings.videos_url_prefix.rstrip("/")
    app.mount(prefix, StaticFiles(directory=str(storage.root)), name="videos")

    # Serve frontend static files; must be LAST (catch-all mount)
    frontend_dir = Path(app_settings.frontend_dir)
    if (frontend_dir / "index.html").exists():
        app.mount("/", SPAStaticFiles(directory=str(frontend_dir), html=True), name="frontend")

    return app
