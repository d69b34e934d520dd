# File: backend/app/api/v1/digest.py
# Version: v0.2.0
"""
Restriction digest endpoints.

POST /api/v1/digest
  - Body: DigestRequest (enzyme names, part, optional custom enzymes)
  - Returns: fragments with '*'-padded overhangs and remapped annotations

POST /api/v1/digest/agarose
  - Body: AgaroseRequest (DigestRequest + optional ladder)
  - Returns: consolidated gel bands (largest first) and the ladder lane

POST /api/v1/digest/cut-sites
  - Body: CutSitesRequest (enzyme names, sequence, optional custom enzymes)
  - Returns: cut positions on both strands, one per top-strand position

GET /api/v1/digest/ladder
  - Returns: default ladder bands

Unknown enzyme names are skipped (logged), never rejected.
"""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException

from backend.app.core.sequence.digest import Fragment, cut_sites, digest
from backend.app.core.sequence.gel import GelBand, agarose_digest, get_agarose_ladder
from backend.app.schemas.sequence import (
    AgaroseRequest,
    AgaroseResponse,
    AnnotationModel,
    BandBoundaryModel,
    CutSiteModel,
    CutSitesRequest,
    CutSitesResponse,
    DigestRequest,
    DigestResponse,
    FragmentModel,
    GelBandModel,
)

router = APIRouter(prefix="/v1/digest", tags=["digest"])


def _fragment_out(f: Fragment) -> FragmentModel:
    return FragmentModel(
        name=f.name,
        seq=f.seq,
        compSeq=f.comp_seq,
        annotations=[
            AnnotationModel(name=a.name, start=a.start, end=a.end, direction=a.direction, **a.meta)
            for a in f.annotations
        ],
        offset=f.offset,
        start=f.start,
        end=f.end,
        length=f.length,
        startEnzymes=f.start_enzymes,
        endEnzymes=f.end_enzymes,
        message=f.message,
        centralIndex=f.central_index,
    )


def _band_out(b: GelBand) -> GelBandModel:
    return GelBandModel(
        size=b.size,
        top=b.top,
        start=[BandBoundaryModel(index=s.index, enzymes=s.enzymes) for s in b.starts],
        end=[BandBoundaryModel(index=e.index, enzymes=e.enzymes) for e in b.ends],
        message=b.message,
        centralIndex=b.central_index,
    )


@router.post("", response_model=DigestResponse)
def digest_endpoint(payload: DigestRequest) -> DigestResponse:
    fragments = digest(payload.enzymes, payload.part.to_part(), custom_enzymes=payload.customEnzymes)
    return DigestResponse(fragments=[_fragment_out(f) for f in fragments])


@router.post("/agarose", response_model=AgaroseResponse)
def agarose_endpoint(payload: AgaroseRequest) -> AgaroseResponse:
    try:
        bands = agarose_digest(
            payload.enzymes,
            payload.part.to_part(),
            ladder=payload.ladder,
            custom_enzymes=payload.customEnzymes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return AgaroseResponse(
        bands=[_band_out(b) for b in bands],
        ladder=[_band_out(b) for b in get_agarose_ladder(payload.ladder)],
    )


@router.get("/ladder", response_model=List[GelBandModel])
def ladder_endpoint() -> List[GelBandModel]:
    return [_band_out(b) for b in get_agarose_ladder()]


@router.post("/cut-sites", response_model=CutSitesResponse)
def cut_sites_endpoint(payload: CutSitesRequest) -> CutSitesResponse:
    cuts = cut_sites(payload.enzymes, payload.seq, payload.circular, custom_enzymes=payload.customEnzymes)
    return CutSitesResponse(
        count=len(cuts),
        cutSites=[
            CutSiteModel(name=c.enzyme, fcut=c.fcut, rcut=c.rcut, start=c.start, end=c.end, direction=c.strand)
            for c in cuts
        ],
    )
