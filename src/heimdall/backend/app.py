import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..detection import PPEDetector, get_detector
from .audit_store import AuditLogStore
from .config import Settings, configure_logging, get_settings
from .routes import logs_router, scan_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Set up logging and reload the audit log from disk on server start"""
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    logger.info("Starting %s (vision backend: %s)", settings.api_title, settings.vision_backend)
    logger.info("CORS allowed origins: %s", settings.allowed_origins_list)

    count = app.state.audit_store.load()
    logger.info("Restored %d audit records", count)
    yield
    logger.info("Shutting down %s", settings.api_title)


def create_app(
    settings: Optional[Settings] = None,
    detector: Optional[PPEDetector] = None,
    audit_store: Optional[AuditLogStore] = None,
) -> FastAPI:
    """
    Build the API. Detector and audit store default to what the settings
    describe; tests pass their own.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.detector = detector if detector is not None else get_detector(settings)
    app.state.audit_store = audit_store if audit_store is not None else AuditLogStore(
        path=settings.audit_log_path,
        max_entries=settings.audit_max_entries,
        fallback_path=settings.fallback_log,
    )

    # browsers post frames cross-origin from the dashboard
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials="*" not in settings.allowed_origins_list,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/")
    def healthcheck():
        """Health check"""
        return {
            "status": "ok",
            "service": settings.api_title,
            "version": settings.api_version,
            "vision_backend": settings.vision_backend,
            "scans_logged": len(app.state.audit_store),
        }

    app.include_router(scan_router)
    app.include_router(logs_router)
    return app


app = create_app()


# ===========================
# Run server
# ===========================

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "heimdall.backend.app:app",
        host=settings.host,
        port=settings.port,
        reload=True  # Auto-reload on code changes during development
    )
