from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator

from app.api import router
from app.core.config import Settings, settings as default_settings
from app.core.dependencies import ServiceContainer
from app.core.exceptions import register_exception_handlers
from app.core.middleware import RequestLoggingMiddleware, UploadSizeLimitMiddleware
from app.utils.logger import get_logger, setup_logging

STATIC_DIR = Path(__file__).parent / "static"

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(level=settings.LOG_LEVEL, file=settings.LOG_TO_FILE, json_format=settings.LOG_JSON)

    services = ServiceContainer(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await services.initialize()
        logger.info(f"{settings.PROJECT_NAME} started, API under {settings.API_PREFIX}")
        try:
            yield
        finally:
            await services.shutdown()
            logger.info(f"{settings.PROJECT_NAME} stopped")

    app = FastAPI(title=settings.PROJECT_NAME, version="1.0.0", lifespan=lifespan)
    app.state.services = services

    register_exception_handlers(app)
    app.add_middleware(
        UploadSizeLimitMiddleware,
        path=f"{settings.API_PREFIX}/upload",
        max_bytes=settings.MAX_UPLOAD_SIZE + settings.MULTIPART_OVERHEAD,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.ENABLE_METRICS:
        Instrumentator().instrument(app).expose(app)

    app.include_router(router.api_router, prefix=settings.API_PREFIX)

    # stored files, read-only; the directory is created at startup
    app.mount(
        settings.UPLOADS_PUBLIC_PATH,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(STATIC_DIR / "index.html")

    return app


app = create_app()
