# File: backend/app/api/v1/health.py
# Version: v0.2.0
"""
Simple healthcheck router.
"""
from __future__ import annotations
from fastapi import APIRouter

from backend.app.config.config_enzymes import load_enzymes

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    """Return a minimal health payload."""
    return {"status": "ok"}


@router.get("/health/ready")
def ready() -> dict[str, object]:
    """Readiness: the enzyme registry can be loaded."""
    return {"status": "ok", "enzymes": len(load_enzymes())}
