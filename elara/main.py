"""
Elara media API - application entry point.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from elara.api import health, metadata, plays, scan
from elara.core.config import Settings, settings as default_settings
from elara.core.errors import register_error_handlers
from elara.services.covers import CoverWriter
from elara.services.extractor import MetadataExtractor, MutagenExtractor
from elara.services.metadata import MetadataService
from elara.services.plays import PlaysService
from elara.services.scanner import ScanService
from elara.services.store import JsonStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    extractor: Optional[MetadataExtractor] = None,
) -> FastAPI:
    """Build the media API with its own store, extractor and upload directory."""
    settings = settings or default_settings
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)

        store = JsonStore(settings.DB_PATH)
        metadata_service = MetadataService(extractor or MutagenExtractor(), CoverWriter(settings.UPLOADS_DIR))

        app.state.settings = settings
        app.state.store = store
        app.state.metadata_service = metadata_service
        app.state.scan_service = ScanService(store, metadata_service)
        app.state.plays_service = PlaysService(store)

        logger.info(f"Backend running on port {settings.PORT}")
        logger.info(f"Allowed origins: {', '.join(settings.ALLOWED_ORIGINS)}")
        yield
        logger.info("Shutdown complete")

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(metadata.router, tags=["metadata"])
    app.include_router(scan.router, tags=["scan"])
    app.include_router(plays.router, tags=["plays"])

    # Directory is created in the lifespan, after mounting
    app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False), name="uploads")

    return app


app = create_app()


if __name__ == '__main__':
    import uvicorn
    uvicorn.run("elara.main:app", host=default_settings.HOST, port=default_settings.PORT)
