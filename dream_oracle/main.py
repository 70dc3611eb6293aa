# dream_oracle/main.py
"""
ASGI entry point.

    uvicorn dream_oracle.main:app --reload
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dream_oracle.config import settings
from dream_oracle.api.pages.routes import router as pages_router
from dream_oracle.api.session.routes import router as session_router
from dream_oracle.dependencies import get_session_registry

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for name in ("httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg = settings()
    if not cfg.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; service calls will fail until it is configured")
    logger.info(
        f"Starting with interpretation_model={cfg.interpretation_model} "
        f"transcription_provider={cfg.transcription_provider} reset_policy={cfg.reset_policy}"
    )
    yield
    # tabs that never sent their unload request
    await get_session_registry().close_all()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Dream Oracle", version="1.0.0", lifespan=lifespan)
    app.include_router(pages_router)
    app.include_router(session_router)
    return app


app = create_app()
