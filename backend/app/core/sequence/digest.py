# File: backend/app/core/sequence/digest.py
# Version: v0.2.0
"""
In-silico restriction digestion of a linear or circular part.

What this file does
-------------------
- Resolves enzyme names (custom definitions first, then the registry); unknown
  names are logged and skipped.
- Collects cut sites of all enzymes in one pass (see `find_cut_sites`), sorted
  and unique per top-strand position. Enzymes cutting at the same position are
  merged into one boundary label. A cut that falls inside another cut's
  overhang (bottom-strand positions out of order) is merged with it.
- `cut_sites` lists the cuts of several enzymes for display, one per position.
- Splits the part between consecutive cuts:
    * no cuts            -> the part as a single, unmodified fragment
    * circular, one cut  -> one fragment, the circle opened at the cut
    * circular, N cuts   -> N fragments (the last one runs through the origin)
    * linear, N cuts     -> N + 1 fragments, bounded by sequence start/end
- Overhangs are rendered by padding the shorter strand with '*', so `seq` and
  `comp_seq` of a fragment always have equal length.
- Annotations are re-expressed in fragment-local coordinates, truncated at the
  fragment's top-strand boundaries and dropped when fully excised. Inputs are
  never mutated.

Coordinates
-----------
- 0-based, [start, end).
- Fragment-local index i maps back to original position `offset + i`
  (modulo the sequence length for circular parts).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from backend.app.config.config_enzymes import load_enzymes

from .alphabet import complement_sequence
from .enzymes import CutSite, Enzyme, find_cut_sites, resolve_enzymes

logger = logging.getLogger(__name__)

START_LABEL = "Start of sequence"
END_LABEL = "End of sequence"
NO_CUTS_MESSAGE = "No cut sites found"
SINGLE_FRAGMENT_MESSAGE = "Digest resulted in only one fragment"
PAD = "*"


@dataclass(frozen=True)
class Annotation:
    name: str
    start: int
    end: int
    direction: int = 0
    meta: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass
class Part:
    seq: str
    comp_seq: str = ""
    annotations: List[Annotation] = field(default_factory=list)
    circular: bool = False
    name: str = "part"


@dataclass
class Fragment:
    name: str
    seq: str
    comp_seq: str
    annotations: List[Annotation]
    offset: int
    start: int
    end: int
    start_enzymes: List[str] = field(default_factory=list)
    end_enzymes: List[str] = field(default_factory=list)
    message: str = ""
    central_index: Optional[int] = None

    @property
    def length(self) -> int:
        """Top-strand length in bases (overhang padding excluded)."""
        return len(self.seq) - self.seq.count(PAD)


@dataclass
class _Boundary:
    fcut: int
    rcut: int
    enzymes: List[str]


def _strands(part: Part) -> Tuple[str, str]:
    if part.comp_seq and len(part.comp_seq) == len(part.seq):
        return part.seq, part.comp_seq
    seq, comp = complement_sequence(part.seq)
    if len(seq) != len(part.seq):
        logger.debug("Dropped %d non-nucleotide symbol(s) from %s", len(part.seq) - len(seq), part.name)
    return seq, comp


def _collect_boundaries(enzymes: Iterable[Enzyme], seq: str, circular: bool) -> List[_Boundary]:
    by_fcut: Dict[int, _Boundary] = {}
    for enzyme in enzymes:
        for cut in find_cut_sites(enzyme, seq, circular):
            b = by_fcut.get(cut.fcut)
            if b is None:
                by_fcut[cut.fcut] = _Boundary(cut.fcut, cut.rcut, [cut.enzyme])
            elif cut.enzyme not in b.enzymes:
                b.enzymes.append(cut.enzyme)
    return [by_fcut[f] for f in sorted(by_fcut)]


def _merge(left: _Boundary, right: _Boundary) -> _Boundary:
    enzymes = left.enzymes + [e for e in right.enzymes if e not in left.enzymes]
    return _Boundary(max(left.fcut, right.fcut), min(left.rcut, right.rcut), enzymes)


def _resolve_crossings(cuts: List[_Boundary], seq_length: int, circular: bool) -> List[_Boundary]:
    """
    Merge neighbouring cuts whose bottom-strand positions are out of order
    (a cut inside another cut's overhang). The strand pieces between them stay
    annealed to the neighbouring fragments, so the pair acts as one boundary at
    the later top cut and the earlier bottom cut.
    """
    out: List[_Boundary] = []
    for cut in cuts:
        while out and cut.rcut < out[-1].rcut:
            cut = _merge(out.pop(), cut)
        out.append(cut)
    if circular:
        # the first cut, one turn later, closes the circle
        while len(out) > 1 and out[0].rcut + seq_length < out[-1].rcut:
            last, first = out.pop(), out.pop(0)
            merged = _merge(last, _Boundary(first.fcut + seq_length, first.rcut + seq_length, first.enzymes))
            out.insert(0, _Boundary(merged.fcut - seq_length, merged.rcut - seq_length, merged.enzymes))
    if len(out) < len(cuts):
        logger.debug("Merged %d crossing cut(s) into neighbouring boundaries", len(cuts) - len(out))
    return out


def _slice_strands(seq: str, comp: str, base: int, left: _Boundary, right: _Boundary) -> Tuple[str, str]:
    top = seq[base + left.fcut : base + right.fcut]
    bottom = comp[base + left.rcut : base + right.rcut]
    lead = left.fcut - left.rcut
    if lead > 0:
        top = PAD * lead + top
    elif lead < 0:
        bottom = PAD * -lead + bottom
    tail = right.rcut - right.fcut
    if tail > 0:
        top += PAD * tail
    elif tail < 0:
        bottom += PAD * -tail
    return top, bottom


def remap_annotations(
    annotations: Iterable[Annotation],
    seq_length: int,
    circular: bool,
    window_start: int,
    window_end: int,
    offset: int,
) -> List[Annotation]:
    """
    Clip annotations to the top-strand window [window_start, window_end) and shift
    them by -offset. Wrapping annotations (end < start) run through the origin
    on circular parts and to the sequence end on linear ones.
    """
    L = seq_length
    shifts = (-L, 0, L) if circular else (0,)
    out: List[Annotation] = []
    for ann in annotations:
        start, end = ann.start, ann.end
        if end < start:
            end = end + L if circular else L
        for shift in shifts:
            lo = max(start + shift, window_start)
            hi = min(end + shift, window_end)
            if lo < hi:
                out.append(replace(ann, start=lo - offset, end=hi - offset))
    out.sort(key=lambda a: (a.start, a.end))
    return out


def cut_sites(
    enzyme_names: Iterable[str],
    seq: str,
    circular: bool = False,
    custom_enzymes: Optional[Mapping[str, Enzyme]] = None,
    registry: Optional[Mapping[str, Enzyme]] = None,
) -> List[CutSite]:
    """
    Cut sites of every named enzyme on `seq`, sorted by top-strand position.
    Only one site is kept per position; the enzyme listed first wins.
    """
    filtered, _ = complement_sequence(seq)
    enzymes = resolve_enzymes(enzyme_names, registry if registry is not None else load_enzymes(), custom_enzymes)
    by_fcut: Dict[int, CutSite] = {}
    for enzyme in enzymes:
        for cut in find_cut_sites(enzyme, filtered, circular):
            by_fcut.setdefault(cut.fcut, cut)
    return [by_fcut[f] for f in sorted(by_fcut)]


def digest(
    enzyme_names: Iterable[str],
    part: Part,
    custom_enzymes: Optional[Mapping[str, Enzyme]] = None,
    registry: Optional[Mapping[str, Enzyme]] = None,
) -> List[Fragment]:
    """
    Cut `part` with every named enzyme and return the resulting fragments,
    ordered by their top-strand start.
    """
    seq, comp = _strands(part)
    L = len(seq)
    if L == 0:
        return []

    enzymes = resolve_enzymes(enzyme_names, registry if registry is not None else load_enzymes(), custom_enzymes)
    cuts = _resolve_crossings(_collect_boundaries(enzymes, seq, part.circular), L, part.circular)

    if not cuts:
        logger.debug("No cut sites in %s for %s", part.name, [e.name for e in enzymes])
        return [
            Fragment(
                name=f"{part.name}_0",
                seq=seq,
                comp_seq=comp,
                annotations=list(part.annotations),
                offset=0,
                start=0,
                end=L,
                start_enzymes=[] if part.circular else [START_LABEL],
                end_enzymes=[] if part.circular else [END_LABEL],
                message=NO_CUTS_MESSAGE,
            )
        ]

    if part.circular:
        first = cuts[0]
        bounds = cuts + [_Boundary(first.fcut + L, first.rcut + L, first.enzymes)]
        seq_ext, comp_ext, base = seq * 3, comp * 3, L
    else:
        bounds = [_Boundary(0, 0, [START_LABEL])] + cuts + [_Boundary(L, L, [END_LABEL])]
        seq_ext, comp_ext, base = seq, comp, 0

    fragments: List[Fragment] = []
    for i, (left, right) in enumerate(zip(bounds, bounds[1:])):
        top, bottom = _slice_strands(seq_ext, comp_ext, base, left, right)
        offset = min(left.fcut, left.rcut)
        annotations = remap_annotations(part.annotations, L, part.circular, left.fcut, right.fcut, offset)
        fragments.append(
            Fragment(
                name=f"{part.name}_{i}",
                seq=top,
                comp_seq=bottom,
                annotations=annotations,
                offset=offset % L if part.circular else offset,
                start=left.fcut,
                end=(right.fcut % L or L) if part.circular else right.fcut,
                start_enzymes=list(left.enzymes),
                end_enzymes=list(right.enzymes),
            )
        )

    if part.circular and len(fragments) == 1:
        fragments[0].message = SINGLE_FRAGMENT_MESSAGE
        fragments[0].central_index = cuts[0].fcut

    logger.debug(
        "Digest of %s (%d bp, circular=%s) with %s: %d cut(s), %d fragment(s)",
        part.name, L, part.circular, [e.name for e in enzymes], len(cuts), len(fragments),
    )
    return fragments
