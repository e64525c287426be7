"""
Main FastAPI application for the ByteShorts engagement API
"""

import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from byteshorts.core.config import settings
from byteshorts.core.error_handlers import register_error_handlers
from byteshorts.core.logging_config import configure_logging
from byteshorts.db.database import create_engine
from byteshorts.api.routes import api_router
from byteshorts.services.engagement_service import EngagementService
from byteshorts.services.overlay_scheduler import OverlayConfig
from byteshorts.services.record_store import RecordStore

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    configure_logging(settings)
    logger.info("Starting ByteShorts API...", environment=settings.ENVIRONMENT)

    engine = create_engine(settings.DATABASE_URL)
    store = RecordStore(engine)
    try:
        await store.create_schema()
        service = EngagementService(store)
        if settings.SEED_WELCOME_VIDEO:
            await service.seed_welcome_video()
    except Exception as e:
        logger.error(f"Failed to start application: {e}")
        await engine.dispose()
        raise

    app.state.engagement_service = service
    app.state.overlay_config = OverlayConfig.from_settings(settings)
    logger.info("ByteShorts API started successfully!")

    yield

    # Shutdown
    logger.info("Shutting down ByteShorts API...")
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="ByteShorts API",
        description="Short video engagement and bullet comment API",
        version="1.0.0",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "environment": settings.ENVIRONMENT}

    return app


app = create_app()


def run():
    """Console entry point"""
    import uvicorn

    uvicorn.run("byteshorts.main:app", host="0.0.0.0", port=3001, reload=settings.ENVIRONMENT == "development")


if __name__ == "__main__":
    run()
