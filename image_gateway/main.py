"""
FastAPI app: lifespan (client shutdown), request logging, image routes.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from image_gateway.config import get_settings
from image_gateway.routes import router
from image_gateway.service import shutdown_image_service

logging.basicConfig(
    level=getattr(logging, get_settings().log_level),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: log upstream setup. Shutdown: close the upstream HTTP client."""
    settings = get_settings()
    logger.info(
        "Image gateway starting: accounts=%s, translate=%s (%s), fast_model=%s",
        len(settings.account_list),
        settings.is_translate,
        settings.translate_model,
        settings.fast_model,
    )
    if not settings.account_list:
        logger.warning("CF_ACCOUNT_LIST is empty; every upstream call will fail.")
    yield
    logger.info("Image gateway shutting down...")
    try:
        await shutdown_image_service()
    except Exception as e:
        logger.warning("Error closing upstream client: %s", e)
    logger.info("Image gateway shutdown complete.")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Workers AI Image Gateway",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start
        logger.info("%s %s %s %.3fs", request.method, request.url.path, response.status_code, duration)
        return response

    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
