"""The single-page form and a liveness probe."""
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from dream_oracle.config import settings

STATIC_DIR = Path(__file__).resolve().parents[2] / "static"

router = APIRouter(tags=["pages"])


@router.get("/", include_in_schema=False)
async def index():
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


@router.get("/ping")
def ping():
    cfg = settings()
    return {
        "ok": True,
        "interpretation_model": cfg.interpretation_model,
        "transcription_provider": cfg.transcription_provider,
        "credential_configured": bool(cfg.openai_api_key),
    }
