"""ASGI entry point: ``uvicorn clientdesk.main:app``."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator  # noqa: TC003
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from clientdesk.config import settings
from clientdesk.routers import clients_page, health

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging()
    if settings.table_backend == "sql":
        from clientdesk.database import create_tables

        create_tables()
    logger.info(
        "%s serving %s from the %s backend",
        settings.app_name, settings.page_path, settings.table_backend,
    )
    yield


def create_app() -> FastAPI:
    application = FastAPI(title=settings.app_name, lifespan=lifespan)
    application.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    application.include_router(clients_page.router, tags=["clients"])

    @application.get("/", include_in_schema=False)
    def root() -> RedirectResponse:
        return RedirectResponse(url=settings.page_path)

    return application


app = create_app()
