# File: backend/app/api/v1/sequence.py
# Version: v0.2.0
"""
Sequence utilities and search.

POST /api/v1/sequence/complement
  - Body: ComplementRequest
  - Returns: filtered sequence, its complement, reverse complement and guessed type

POST /api/v1/sequence/translate
  - Body: TranslateRequest
  - Returns: protein (standard code, '*' for stops); 400 on non-nucleotide input

POST /api/v1/search
  - Body: SearchRequest
  - Returns: SearchResponse; hits ordered by start (both strands for dna/rna,
    top strand only for aa).
    A search that is too broad answers 200 with status "too_broad" so the UI can
    ask the user to narrow it; unsupported query symbols answer 400.
"""

from __future__ import annotations

from Bio.Data.CodonTable import TranslationError
from fastapi import APIRouter, HTTPException

from ...core.sequence.alphabet import (
    SeqType,
    calc_length,
    complement_sequence,
    guess_type,
    reverse_complement,
    translate_dna,
)
from ...core.sequence.search import SearchStatus, search
from ...schemas.sequence import (
    ComplementRequest,
    ComplementResponse,
    MatchModel,
    MismatchRangeModel,
    SearchRequest,
    SearchResponse,
    TranslateRequest,
    TranslateResponse,
)

router = APIRouter(prefix="/v1", tags=["sequence"])


@router.post("/sequence/complement", response_model=ComplementResponse)
def complement_endpoint(payload: ComplementRequest) -> ComplementResponse:
    seq, comp = complement_sequence(payload.seq)
    return ComplementResponse(
        seq=seq,
        compSeq=comp,
        reverseComplement=reverse_complement(seq),
        guessType=guess_type(payload.seq).value,
    )


@router.post("/sequence/translate", response_model=TranslateResponse)
def translate_endpoint(payload: TranslateRequest) -> TranslateResponse:
    try:
        protein = translate_dna(payload.seq)
    except TranslationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TranslateResponse(protein=protein, codons=len(protein))


@router.post("/search", response_model=SearchResponse)
def search_endpoint(payload: SearchRequest) -> SearchResponse:
    result = search(
        payload.query,
        payload.mismatch,
        payload.seq,
        payload.circular,
        seq_type=SeqType(payload.seqType),
    )
    if result.status is SearchStatus.INVALID_QUERY:
        raise HTTPException(status_code=400, detail=result.message)

    seq_length = len(payload.seq)
    return SearchResponse(
        results=[
            MatchModel(
                start=m.start,
                end=m.end,
                length=calc_length(m.start, m.end, seq_length),
                direction=int(m.strand),
                index=m.index,
                mismatches=[MismatchRangeModel(start=r.start, end=r.end) for r in m.mismatches],
            )
            for m in result.results
        ],
        index=result.index,
        status=result.status.value,
        message=result.message,
    )
