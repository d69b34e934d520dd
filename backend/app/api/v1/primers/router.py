# File: backend/app/api/v1/primers/router.py
# Version: v0.4.0
"""
Primer endpoints:
- POST /binding-sites     ← approximate binding sites of primers on a vector
- GET /parameters         ← default binding tolerance parameters
"""

from __future__ import annotations

from fastapi import APIRouter

from backend.app.core.sequence.binding import Primer, find_all_binding_sites
from backend.app.core.sequence.parameters import BindingParameters
from backend.app.schemas.sequence import (
    BindingSiteModel,
    BindingSitesRequest,
    BindingSitesResponse,
    MismatchRangeModel,
)

router = APIRouter(prefix="/v1/primers", tags=["primers"])


@router.get("/parameters", response_model=BindingParameters)
def get_parameters():
    """Return the binding parameters used when a request does not carry its own."""
    return BindingParameters()


@router.post("/binding-sites", response_model=BindingSitesResponse)
def binding_sites(payload: BindingSitesRequest):
    """
    Find where each primer anneals on the vector (both strands, mismatches allowed).
    If `parameters` is omitted, the server defaults (settings / .env) apply.
    """
    primers = [
        Primer(
            sequence=p.sequence,
            overhang=p.overhang,
            name=p.name,
            id=p.id or p.name or f"primer{i}",
            tm=p.tm,
            strict=p.strict,
            meta=dict(p.model_extra or {}),
        )
        for i, p in enumerate(payload.primers)
    ]
    sites = find_all_binding_sites(primers, payload.vector, circular=payload.circular, params=payload.parameters)

    return BindingSitesResponse(
        count=len(sites),
        sites=[
            BindingSiteModel(
                id=s.id,
                primerId=s.primer.id,
                name=s.primer.name,
                start=s.start,
                end=s.end,
                direction=int(s.direction),
                mismatches=[MismatchRangeModel(start=m.start, end=m.end) for m in s.mismatches],
                annealSequence=s.anneal_sequence,
                sequence=s.sequence,
                tm=s.tm,
                primerMeta=dict(s.primer.meta),
            )
            for s in sites
        ],
    )
