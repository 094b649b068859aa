"""FastAPI application -- schedcheck entrypoint."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import schedcheck.deps as deps
from schedcheck.api.rules import router as rules_router
from schedcheck.api.validate import router as validate_router
from schedcheck.settings import load_settings
from schedcheck.validation.engine import ValidationEngine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: build the engine on startup, drop it on shutdown."""
    log_level = logging.DEBUG if os.environ.get("SCHEDCHECK_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    settings = load_settings()
    logger.info("schedcheck starting with settings: %s", settings.model_dump())

    deps._validation_engine = ValidationEngine(settings=settings)

    yield

    deps._validation_engine = None


app = FastAPI(
    title="schedcheck",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(validate_router)
app.include_router(rules_router)
