# File: backend/app/core/sequence/enzymes.py
# Version: v0.1.0
"""
Restriction enzyme model, registry lookups and cut-site discovery.

Enzyme convention (NEB style), e.g. PstI CTGCAG with sequenceCutIdx=5,
complementCutIdx=1:

    5' ..C TGCA|G.. 3'
    3' ..G|ACGT C.. 5'

- sequenceCutIdx: top-strand cut, offset from the start of the recognition site
- complementCutIdx: bottom-strand cut, same reference point
- Both lie within [0, len(recognitionSeq)].

The registry itself is read-only data loaded by
`backend.app.config.config_enzymes`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, conint, constr

from .alphabet import reverse_complement
from .errors import UnknownEnzyme
from .matcher import circular_text, find_matches

logger = logging.getLogger(__name__)


class Enzyme(BaseModel):
    name: str = Field("", description="Enzyme name (registry key)")
    recognitionSeq: constr(strip_whitespace=True, min_length=1, pattern=r"^[ACGTURYSWKMBDHVNXacgturyswkmbdhvnx]+$") = Field(
        ..., description="Recognition site; IUPAC codes allowed"
    )
    sequenceCutIdx: conint(ge=0) = Field(..., description="Top-strand cut offset from site start")
    complementCutIdx: conint(ge=0) = Field(..., description="Bottom-strand cut offset from site start")

    model_config = ConfigDict(frozen=True)

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        n = len(self.recognitionSeq)
        if self.sequenceCutIdx > n or self.complementCutIdx > n:
            raise ValueError(f"{self.name or 'enzyme'}: cut indices must be <= len(recognitionSeq)={n}")

    @property
    def is_palindromic(self) -> bool:
        return reverse_complement(self.recognitionSeq).upper() == self.recognitionSeq.upper()


@dataclass(frozen=True)
class CutSite:
    """
    One cut produced by one recognition hit.

    fcut/rcut are absolute top/bottom strand cut positions. On circular sequences
    fcut is reduced into [0, L) and rcut is shifted by the same amount, so it may
    fall slightly outside [0, L].
    """
    enzyme: str
    fcut: int
    rcut: int
    start: int
    end: int
    strand: int  # 1 top, -1 bottom


def find_cut_sites(enzyme: Enzyme, seq: str, circular: bool = False) -> List[CutSite]:
    """
    Locate every cut of `enzyme` on `seq` (both strands, exact match on the
    wildcard-expanded recognition site), sorted by fcut and unique per fcut.

    Linear sequences keep only cuts that split the molecule (0 < fcut < L and
    0 <= rcut <= L).
    """
    L = len(seq)
    site = enzyme.recognitionSeq
    k = len(site)
    if L == 0 or k == 0:
        return []
    text = circular_text(seq, k) if circular else seq

    sites: List[CutSite] = []
    for s in find_matches(site, text):
        if s < L:
            sites.append(CutSite(enzyme.name, s + enzyme.sequenceCutIdx, s + enzyme.complementCutIdx, s, s + k, 1))
    if not enzyme.is_palindromic:
        for s in find_matches(reverse_complement(site), text):
            if s < L:
                sites.append(
                    CutSite(enzyme.name, s + k - enzyme.complementCutIdx, s + k - enzyme.sequenceCutIdx, s, s + k, -1)
                )

    cuts: Dict[int, CutSite] = {}
    for c in sites:
        fcut, rcut = c.fcut, c.rcut
        if circular:
            shift = (fcut // L) * L
            fcut, rcut = fcut - shift, rcut - shift
        elif not (0 < fcut < L and 0 <= rcut <= L):
            continue
        end = (c.end % L or L) if circular else c.end
        cuts.setdefault(fcut, CutSite(c.enzyme, fcut, rcut, c.start, end, c.strand))
    return [cuts[f] for f in sorted(cuts)]


def lookup_enzyme(
    name: str,
    registry: Mapping[str, Enzyme],
    custom_enzymes: Optional[Mapping[str, Enzyme]] = None,
) -> Enzyme:
    """Strict lookup; custom definitions shadow registry entries of the same name."""
    enzyme = (custom_enzymes or {}).get(name) or registry.get(name)
    if enzyme is None:
        raise UnknownEnzyme(name)
    return enzyme if enzyme.name == name else enzyme.model_copy(update={"name": name})


def resolve_enzymes(
    names: Iterable[str],
    registry: Mapping[str, Enzyme],
    custom_enzymes: Optional[Mapping[str, Enzyme]] = None,
) -> List[Enzyme]:
    """Map names to enzymes in order, skipping duplicates and unknown names (logged)."""
    out: List[Enzyme] = []
    seen = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        try:
            out.append(lookup_enzyme(name, registry, custom_enzymes))
        except UnknownEnzyme as exc:
            logger.warning("%s; skipped", exc)
    return out
