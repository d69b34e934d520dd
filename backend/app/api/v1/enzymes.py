# File: backend/app/api/v1/enzymes.py
# Version: v0.1.0
"""
Read-only restriction enzyme registry.

- GET /api/v1/enzymes          -> every registered enzyme, sorted by name
- GET /api/v1/enzymes/{name}   -> one enzyme (404 if unknown)
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from backend.app.config.config_enzymes import get_enzyme, load_enzymes
from backend.app.core.sequence.enzymes import Enzyme
from backend.app.core.sequence.errors import UnknownEnzyme
from backend.app.schemas.sequence import EnzymeListResponse

router = APIRouter(prefix="/v1/enzymes", tags=["enzymes"])


@router.get("", response_model=EnzymeListResponse)
def list_enzymes() -> EnzymeListResponse:
    registry = load_enzymes()
    return EnzymeListResponse(count=len(registry), enzymes=[registry[k] for k in sorted(registry)])


@router.get("/{name}", response_model=Enzyme)
def read_enzyme(name: str) -> Enzyme:
    try:
        return get_enzyme(name)
    except UnknownEnzyme as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
