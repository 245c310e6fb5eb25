# imageflow/main.py
"""
FastAPI application entry point for imageflow.

Serves transformed images over HTTP. This file should only wire the
application together; image handling lives in the transform pipeline.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import get_settings
from .enums import LogEmoji, LoggerName, LogSource
from .middleware import RequestLoggerMiddleware
from .routers import health_routers as health
from .routers import image_routers as images
from .services.logger import configure_logging, get_service_logger
from .services.transform_pipeline import available_engines

logger = get_service_logger(LoggerName.SYSTEM, LogSource.SYSTEM)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Handle application startup and shutdown"""
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting imageflow",
        emoji=LogEmoji.STARTUP,
        extra_context={
            "environment": settings.environment,
            "images_directory": str(settings.images_path),
            "configured_engine": settings.image_engine,
            "available_engines": available_engines(),
        },
    )

    if not settings.images_path.is_dir():
        logger.warning(
            f"Images directory does not exist: {settings.images_path}",
            extra_context={"images_directory": str(settings.images_path)},
        )

    yield

    logger.info("Shutting down imageflow", emoji=LogEmoji.SHUTDOWN)


app = FastAPI(
    title="imageflow",
    description="Declarative image transformations with responsive operation selection",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggerMiddleware)

app.include_router(images.router)
app.include_router(health.router)


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "imageflow.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.value.lower(),
    )
