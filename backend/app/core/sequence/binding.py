# File: backend/app/core/sequence/binding.py
# Version: v0.1.0
"""
Primer binding-site discovery on a vector.

Approach:
- The annealing part of each primer (its `sequence`, overhang excluded) is scanned
  in mismatch mode against the vector top strand (FORWARD) and, via its reverse
  complement on the same text, against the bottom strand (REVERSE).
- Tolerance: len(sequence) // basesPerMismatch mismatches (0 for strict primers).
  The divisor is an empirical knob, see BindingParameters.
- Each hit reports mismatch ranges in primer coordinates (overhang + sequence):
    * the overhang is always one range [0, len(overhang))
    * a dense 5' mismatch cluster (> tailDensity of the bases up to its end) is
      folded into a single tail range, merged with the overhang
  and the anneal sequence, i.e. what follows that tail.
- Sites include the overhang footprint: FORWARD extends `start` upstream,
  REVERSE extends `end` downstream, wrapping through the origin on circular
  vectors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .alphabet import calc_tm, collapse_ranges, complement_sequence, reverse_complement
from .errors import InvalidQuery
from .matcher import circular_text, find_matches, mismatch_positions, validate_query
from .parameters import BindingParameters
from .search import MismatchRange

logger = logging.getLogger(__name__)


class Direction(IntEnum):
    FORWARD = 1
    REVERSE = -1


@dataclass
class Primer:
    sequence: str
    overhang: str = ""
    name: str = ""
    id: str = ""
    tm: Optional[float] = None
    strict: bool = False
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PrimerBindingSite:
    primer: Primer
    start: int
    end: int
    direction: Direction
    mismatches: List[MismatchRange]
    anneal_sequence: str
    sequence: str
    tm: float

    @property
    def id(self) -> str:
        return f"{self.primer.id}-{self.start}"


def fold_tail(ranges: List[Tuple[int, int]], density: float = 0.25) -> List[Tuple[int, int]]:
    """
    Fold a dense 5' mismatch cluster into one [0, end) tail range.

    Prefixes of at least two ranges are tried longest first; the first whose
    mismatched bases exceed `density` of its span (from index 0) is collapsed.
    """
    for cut in range(len(ranges), 1, -1):
        prefix = ranges[:cut]
        mismatched = sum(e - s for s, e in prefix)
        if mismatched / prefix[-1][1] > density:
            return [(0, prefix[-1][1])] + ranges[cut:]
    return ranges


def find_mismatches(
    sequence: str,
    overhang: str,
    indices: Iterable[int],
    density: float = 0.25,
) -> Tuple[List[MismatchRange], str]:
    """
    Mismatch ranges over `overhang + sequence` and the annealing remainder.

    Args:
        sequence: annealing part of the primer
        overhang: 5' tail that is not expected to bind
        indices: mismatch positions within `sequence`
        density: tail folding threshold

    Returns:
        (ranges, anneal_sequence)
    """
    ranges = fold_tail(collapse_ranges(sorted(indices)), density)
    anneal = sequence
    if ranges and ranges[0][0] == 0:
        anneal = sequence[ranges[0][1]:]

    oh = len(overhang)
    shifted = [(s + oh, e + oh) for s, e in ranges]
    if oh:
        if shifted and shifted[0][0] == oh:
            shifted[0] = (0, shifted[0][1])
        else:
            shifted.insert(0, (0, oh))
    return [MismatchRange(s, e) for s, e in shifted], anneal


def _wrap(pos: int, length: int, circular: bool) -> int:
    if circular:
        return pos % length
    return min(max(pos, 0), length)


def _primer_sites(
    primer: Primer,
    vector: str,
    circular: bool,
    params: BindingParameters,
) -> List[PrimerBindingSite]:
    try:
        seq = validate_query(primer.sequence)
    except InvalidQuery as exc:
        logger.warning("Primer %s skipped: %s", primer.name or primer.id, exc)
        return []
    k = len(seq)
    L = len(vector)
    if k == 0 or L == 0 or (not circular and k > L):
        return []

    budget = 0 if primer.strict else params.max_mismatches(k)
    text = circular_text(vector, k) if circular else vector
    rc_seq = reverse_complement(seq)
    oh = len(primer.overhang)
    combined = primer.overhang + primer.sequence

    sites: Dict[Tuple[int, int, int], PrimerBindingSite] = {}
    for direction, query in ((Direction.FORWARD, seq), (Direction.REVERSE, rc_seq)):
        for hit in find_matches(query, text, budget):
            if hit >= L:
                continue
            window = text[hit : hit + k]
            aligned = window if direction is Direction.FORWARD else reverse_complement(window)
            indices = mismatch_positions(seq, aligned)
            tm = calc_tm(seq, aligned)
            if params.minTm is not None and not (tm > params.minTm or (primer.tm is not None and tm >= primer.tm)):
                continue
            ranges, anneal = find_mismatches(primer.sequence, primer.overhang, indices, params.tailDensity)
            if direction is Direction.FORWARD:
                start = _wrap(hit - oh, L, circular)
                end = ((hit + k) % L or L) if circular else hit + k
            else:
                start = hit
                end = _wrap(hit + k + oh, L, circular) or L
            key = (start, end, int(direction))
            sites.setdefault(
                key,
                PrimerBindingSite(
                    primer=primer,
                    start=start,
                    end=end,
                    direction=direction,
                    mismatches=ranges,
                    anneal_sequence=anneal,
                    sequence=combined,
                    tm=tm,
                ),
            )
    return sorted(sites.values(), key=lambda s: (s.start, -int(s.direction)))


def find_all_binding_sites(
    primers: Iterable[Primer],
    vector_seq: str,
    circular: bool = True,
    params: Optional[BindingParameters] = None,
) -> List[PrimerBindingSite]:
    """
    Every approximate binding site of every primer on both strands of the vector.

    Non-nucleotide symbols in the vector are dropped before scanning.
    """
    params = params or BindingParameters()
    vector, _ = complement_sequence(vector_seq)
    out: List[PrimerBindingSite] = []
    for primer in primers:
        found = _primer_sites(primer, vector, circular, params)
        logger.debug("Primer %s: %d binding site(s)", primer.name or primer.id, len(found))
        out.extend(found)
    return out
