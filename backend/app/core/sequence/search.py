# File: backend/app/core/sequence/search.py
# Version: v0.2.0
"""
Sequence search over both strands of a linear or circular sequence
(DNA / RNA), or over the single strand of a protein sequence.

What this file does
-------------------
- Scans the top strand with the query and, on the same top-strand text, with the
  reverse complement of the query (bottom-strand hits, no second string needed).
- Circular sequences are scanned as `seq + seq[:k-1]`; only hits starting before
  the original length are kept and their `end` is wrapped back into [0, L].
  `start > end` therefore means "crosses the origin".
- Hits are de-duplicated on (start, strand), ordered by start, and ranked via
  `index` for next/previous navigation.

Guards
------
- Effective query length (len(query) - mismatches) below the configured minimum
  -> status "too_broad", no scan.
- More than `maxResults` hits on either strand -> status "too_broad".
- Symbols outside the alphabet of the sequence type -> status "invalid_query".

The core never raises for these; callers read `SearchResult.status`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

from .alphabet import SeqType, collapse_ranges, is_nucleic, reverse_complement
from .errors import InvalidQuery, SearchTooBroad
from .matcher import circular_text, find_matches, mismatch_positions, validate_query
from .parameters import SearchParameters

logger = logging.getLogger(__name__)


class Strand(IntEnum):
    TOP = 1
    BOTTOM = -1


class SearchStatus(str, Enum):
    OK = "ok"
    TOO_BROAD = "too_broad"
    INVALID_QUERY = "invalid_query"


@dataclass(frozen=True)
class MismatchRange:
    start: int
    end: int


@dataclass
class Match:
    start: int
    end: int
    strand: Strand
    index: int = 0
    mismatches: List[MismatchRange] = field(default_factory=list)


@dataclass
class SearchResult:
    results: List[Match] = field(default_factory=list)
    index: int = 0
    status: SearchStatus = SearchStatus.OK
    message: str = ""

    def __len__(self) -> int:
        return len(self.results)

    @property
    def current(self) -> Optional[Match]:
        if not self.results:
            return None
        return self.results[self.index % len(self.results)]

    def next_index(self, current: Optional[int] = None) -> int:
        """Index after `current` (defaults to `self.index`), cycling through the list."""
        if not self.results:
            return 0
        cur = self.index if current is None else current
        return (cur + 1) % len(self.results)

    def prev_index(self, current: Optional[int] = None) -> int:
        if not self.results:
            return 0
        cur = self.index if current is None else current
        return (cur - 1) % len(self.results)


def _strand_hits(
    query: str,
    text: str,
    seq_length: int,
    max_mismatches: int,
    strand: Strand,
    limit: int,
    seq_type: SeqType,
) -> List[Tuple[int, Strand]]:
    starts = [s for s in find_matches(query, text, max_mismatches, seq_type) if s < seq_length]
    if len(starts) > limit:
        raise SearchTooBroad(strand.name.lower(), len(starts), limit)
    return [(s, strand) for s in starts]


def search(
    query: str,
    mismatch: int,
    seq: str,
    circular: bool = False,
    params: Optional[SearchParameters] = None,
    seq_type: SeqType = SeqType.DNA,
) -> SearchResult:
    """
    Find `query` (IUPAC wildcards allowed) in `seq`.

    Args:
        query: pattern; wildcards expand to their symbol sets
        mismatch: maximal Hamming distance per hit (0 -> exact regex mode)
        seq: sequence to scan
        circular: whether hits may span the origin
        params: guard overrides; defaults read from settings
        seq_type: "dna" / "rna" / "unknown" scan both strands, "aa" the given
            strand only, with the amino-acid alphabet

    Returns:
        SearchResult with matches ordered by start, each carrying its rank.
    """
    params = params or SearchParameters()
    if not query or not seq:
        return SearchResult()

    if len(query) - mismatch < params.minQueryLength:
        msg = (
            f"Query {query!r} with {mismatch} mismatch(es) has fewer than "
            f"{params.minQueryLength} effective bases."
        )
        logger.info("Search too broad: %s", msg)
        return SearchResult(status=SearchStatus.TOO_BROAD, message=msg)

    seq_type = SeqType(seq_type)
    nucleic = is_nucleic(seq_type)
    seq_length = len(seq)
    k = len(query)
    try:
        q = validate_query(query, seq_type)
        rc_query = reverse_complement(q) if nucleic else ""
        text = circular_text(seq, k) if circular else seq
        hits = _strand_hits(q, text, seq_length, mismatch, Strand.TOP, params.maxResults, seq_type)
        if nucleic:
            hits += _strand_hits(rc_query, text, seq_length, mismatch, Strand.BOTTOM, params.maxResults, seq_type)
    except InvalidQuery as exc:
        return SearchResult(status=SearchStatus.INVALID_QUERY, message=str(exc))
    except SearchTooBroad as exc:
        logger.info("%s", exc)
        return SearchResult(status=SearchStatus.TOO_BROAD, message=str(exc))

    unique = sorted(set(hits), key=lambda h: (h[0], -h[1]))
    results: List[Match] = []
    for rank, (start, strand) in enumerate(unique):
        end = start + k
        if end > seq_length:
            end = end % seq_length or seq_length
        mismatches: List[MismatchRange] = []
        if mismatch > 0:
            pattern = q if strand is Strand.TOP else rc_query
            window = text[start : start + k]
            mismatches = [
                MismatchRange(s, e) for s, e in collapse_ranges(mismatch_positions(pattern, window, seq_type))
            ]
        results.append(Match(start=start, end=end, strand=strand, index=rank, mismatches=mismatches))

    logger.debug(
        "Search %r (%s, mm=%d, circular=%s): %d hit(s)", query, seq_type.value, mismatch, circular, len(results)
    )
    return SearchResult(results=results)
