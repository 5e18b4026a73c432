from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .analyzer import Scanner, build_scanner, fallback_report, scan_domain
from .config import Settings
from .models import ErrorResponse, TrustReport

logger = logging.getLogger(__name__)

_settings = Settings.from_env()

logging.basicConfig(
    level=getattr(logging, _settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="TrustTap Agent", version="0.1.0")

# Browser extensions call this from arbitrary origins; narrow with TRUSTTAP_CORS_ORIGINS.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_settings.cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@lru_cache(maxsize=1)
def get_scanner() -> Scanner:
    return build_scanner(_settings)


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.get("/scan", response_model=TrustReport, responses={400: {"model": ErrorResponse}})
@app.get("/api/scan", response_model=TrustReport, responses={400: {"model": ErrorResponse}})
def scan_endpoint(domain: str | None = None):
    if not domain or not domain.strip():
        return JSONResponse(status_code=400, content={"error": "missing domain"})
    try:
        scanner = get_scanner()
    except Exception:
        logger.exception("Scanner setup failed")
        return fallback_report()
    return scan_domain(domain, scanner)
