# src/api/app.py — v1
"""FastAPI application exposing the administrative AI routes.

Usage:
    uvicorn lexassist.api.app:create_app --factory
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from lexassist.api.admin_routes import router
from lexassist.api.facade import LegalAIService
from lexassist.version import __version__

logger = logging.getLogger(__name__)


def create_app(service: LegalAIService | None = None) -> FastAPI:
    """Build the app. The service is created lazily on startup when omitted."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        ai_service = service or LegalAIService(configure_logging=True)
        await ai_service.start()
        app.state.ai_service = ai_service
        logger.info("AI admin API started")

        yield

        await ai_service.close()
        del app.state.ai_service
        logger.info("AI admin API shut down")

    app = FastAPI(title="lexassist", version=__version__, lifespan=lifespan)
    app.include_router(router)
    return app
