# File: backend/app/api/v1/api.py
# Version: v0.8.0
"""
v1 API aggregator.

Routers included under /api:
- health
- sequence (complement, search)
- enzymes (read-only registry)
- digest (fragments, agarose gel view, ladder)
- primers (binding sites, default parameters)
"""
from __future__ import annotations

from fastapi import APIRouter

from . import health as health_router
from . import sequence as sequence_router
from . import enzymes as enzymes_router
from . import digest as digest_router
from .primers import router as primers_router

# All v1 JSON APIs live under /api via api_router
api_router = APIRouter()
api_router.include_router(health_router.router)
api_router.include_router(sequence_router.router)
api_router.include_router(enzymes_router.router)
api_router.include_router(digest_router.router)
api_router.include_router(primers_router.router)
