# File: backend/app/schemas/sequence.py
# Version: v0.2.0
"""
Pydantic DTOs for the sequence analysis endpoints (search, digest, gel, primers).

Field names are camelCase to match the frontend payloads; all coordinates are
0-based with `end` exclusive. `end < start` marks a feature that crosses the
origin of a circular sequence.

Annotations and primers accept extra fields (colour, notes, ...); they are kept
as `meta` on the core objects and echoed back on fragment annotations.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, conint, constr

from backend.app.core.sequence.digest import Annotation, Part
from backend.app.core.sequence.enzymes import Enzyme
from backend.app.core.sequence.parameters import BindingParameters


# --- Shared -----------------------------------------------------------------------------------

class AnnotationModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    start: conint(ge=0)
    end: conint(ge=0)
    direction: conint(ge=-1, le=1) = 0


class PartModel(BaseModel):
    """A sequence with its (optional) complement and annotations."""
    seq: constr(strip_whitespace=True, min_length=1) = Field(..., examples=["TACAAGAATTCAAAATAA"])
    compSeq: str = Field("", description="Complement strand; derived from seq when omitted")
    annotations: List[AnnotationModel] = Field(default_factory=list)
    circular: bool = False
    name: str = "part"

    def to_part(self) -> Part:
        return Part(
            seq=self.seq,
            comp_seq=self.compSeq,
            annotations=[
                Annotation(a.name, a.start, a.end, a.direction, meta=dict(a.model_extra or {}))
                for a in self.annotations
            ],
            circular=self.circular,
            name=self.name,
        )


class MismatchRangeModel(BaseModel):
    start: int
    end: int


# --- Complement / search ----------------------------------------------------------------------

class ComplementRequest(BaseModel):
    seq: str = Field(..., description="Sequence; symbols without a complement are dropped")


class ComplementResponse(BaseModel):
    seq: str
    compSeq: str
    reverseComplement: str
    guessType: Literal["dna", "rna", "aa", "unknown"] = "unknown"


class TranslateRequest(BaseModel):
    seq: constr(strip_whitespace=True, min_length=1) = Field(..., examples=["ATGGCCTAA"])


class TranslateResponse(BaseModel):
    protein: str
    codons: int


class SearchRequest(BaseModel):
    query: constr(strip_whitespace=True, min_length=1) = Field(..., examples=["GAATTC"])
    mismatch: conint(ge=0) = Field(0, description="Maximal mismatches per hit (0 = exact)")
    seq: constr(strip_whitespace=True, min_length=1)
    circular: bool = False
    seqType: Literal["dna", "rna", "aa", "unknown"] = Field(
        "dna", description="aa searches one strand with the amino-acid alphabet"
    )


class MatchModel(BaseModel):
    start: int
    end: int
    length: int = Field(..., description="Hit length, counted through the origin on circular sequences")
    direction: Literal[1, -1]
    index: int
    mismatches: List[MismatchRangeModel] = Field(default_factory=list)


class SearchResponse(BaseModel):
    results: List[MatchModel] = Field(default_factory=list)
    index: int = 0
    status: Literal["ok", "too_broad", "invalid_query"] = "ok"
    message: str = ""


# --- Digest / gel -----------------------------------------------------------------------------

class DigestRequest(BaseModel):
    enzymes: List[str] = Field(..., min_length=1, examples=[["EcoRI", "BamHI"]])
    part: PartModel
    customEnzymes: Dict[str, Enzyme] = Field(
        default_factory=dict, description="Extra enzymes by name; shadow registry entries"
    )


class FragmentModel(BaseModel):
    name: str
    seq: str
    compSeq: str
    annotations: List[AnnotationModel]
    offset: int
    start: int
    end: int
    length: int
    startEnzymes: List[str]
    endEnzymes: List[str]
    message: str = ""
    centralIndex: Optional[int] = None


class DigestResponse(BaseModel):
    fragments: List[FragmentModel]


class CutSitesRequest(BaseModel):
    enzymes: List[str] = Field(..., min_length=1, examples=[["EcoRI", "BamHI"]])
    seq: constr(strip_whitespace=True, min_length=1)
    circular: bool = False
    customEnzymes: Dict[str, Enzyme] = Field(default_factory=dict)


class CutSiteModel(BaseModel):
    name: str
    fcut: int
    rcut: int
    start: int
    end: int
    direction: Literal[1, -1]


class CutSitesResponse(BaseModel):
    count: int
    cutSites: List[CutSiteModel]


class AgaroseRequest(DigestRequest):
    ladder: Optional[List[conint(gt=0)]] = Field(None, description="Marker sizes (bp); default ladder if omitted")


class BandBoundaryModel(BaseModel):
    index: int
    enzymes: List[str]


class GelBandModel(BaseModel):
    size: int
    top: float = Field(..., description="Distance from the top of the lane, in % of its height")
    start: List[BandBoundaryModel] = Field(default_factory=list)
    end: List[BandBoundaryModel] = Field(default_factory=list)
    message: str = ""
    centralIndex: Optional[int] = None


class AgaroseResponse(BaseModel):
    bands: List[GelBandModel]
    ladder: List[GelBandModel]


# --- Enzymes ----------------------------------------------------------------------------------

class EnzymeListResponse(BaseModel):
    count: int
    enzymes: List[Enzyme]


# --- Primers ----------------------------------------------------------------------------------

class PrimerModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    sequence: constr(strip_whitespace=True, min_length=1)
    overhang: str = ""
    name: str = ""
    id: str = ""
    tm: Optional[float] = None
    strict: bool = False


class BindingSitesRequest(BaseModel):
    primers: List[PrimerModel] = Field(..., min_length=1)
    vector: constr(strip_whitespace=True, min_length=1)
    circular: bool = True
    parameters: Optional[BindingParameters] = None


class BindingSiteModel(BaseModel):
    id: str
    primerId: str
    name: str
    start: int
    end: int
    direction: Literal[1, -1]
    mismatches: List[MismatchRangeModel]
    annealSequence: str
    sequence: str
    tm: float
    primerMeta: Dict[str, Any] = Field(default_factory=dict, description="Extra fields sent with the primer")


class BindingSitesResponse(BaseModel):
    count: int
    sites: List[BindingSiteModel]
