# File: backend/app/core/sequence/matcher.py
# Version: v0.2.0
"""
Wildcard-aware pattern matcher.

Two scanning modes over a target string:
- exact (max_mismatches == 0): IUPAC codes become regex character classes
  (N -> [ACGT], R -> [AG], ...; for amino acids B -> [DN], X -> any residue).
  The pattern sits in a lookahead so every overlapping hit is reported.
- mismatch (max_mismatches > 0): ungapped sliding Hamming scan. A defined base
  mismatches on inequality, a wildcard mismatches when the target base is outside
  its set. The inner loop stops once the budget is exceeded.

Circular targets are handled by `circular_text`, which appends the first k-1
symbols so hits spanning the origin are visible to a linear scan. Callers keep
only hits that start before the original length.

The matcher has no minimal query length; guarding against short, overly broad
queries belongs to the search layer.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Dict, FrozenSet, List, Tuple

from .alphabet import SeqType, normalize, symbol_sets
from .errors import InvalidQuery

logger = logging.getLogger(__name__)


def validate_query(query: str, seq_type: SeqType = SeqType.DNA) -> str:
    """Return the normalized query or raise InvalidQuery on foreign symbols."""
    q = normalize(query, seq_type)
    sets = symbol_sets(seq_type)
    invalid = [c for c in q if c not in sets]
    if invalid:
        logger.info("Rejected query %r: unsupported symbols %s", query, "".join(sorted(set(invalid))))
        raise InvalidQuery(query, invalid)
    return q


def circular_text(seq: str, query_length: int) -> str:
    """`seq + seq[:k-1]`, the linear text whose hits cover every circular offset."""
    if query_length <= 1 or not seq:
        return seq
    extra = seq[: query_length - 1]
    # Queries longer than the sequence itself wrap more than once.
    while len(extra) < query_length - 1:
        extra += seq[: query_length - 1 - len(extra)]
    return seq + extra


def _symbol_class(symbol: str, sets: Dict[str, FrozenSet[str]]) -> str:
    if len(sets[symbol]) > 1:
        return "[" + "".join(sorted(sets[symbol])) + "]"
    return re.escape(symbol)


@lru_cache(maxsize=256)
def build_pattern(query: str, seq_type: SeqType = SeqType.DNA) -> "re.Pattern[str]":
    """Compile a case-insensitive, overlap-friendly regex for a validated query."""
    sets = symbol_sets(seq_type)
    body = "".join(_symbol_class(c, sets) for c in validate_query(query, seq_type))
    return re.compile(f"(?=({body}))", re.IGNORECASE)


def _count_mismatches(allowed: Tuple[FrozenSet[str], ...], window: str, budget: int) -> int:
    mism = 0
    for i, bases in enumerate(allowed):
        if window[i] not in bases:
            mism += 1
            if mism > budget:
                break
    return mism


def find_matches(
    query: str,
    target: str,
    max_mismatches: int = 0,
    seq_type: SeqType = SeqType.DNA,
) -> List[int]:
    """
    All start offsets in `target` where `query` matches within `max_mismatches`.

    Raises:
        InvalidQuery: query holds symbols outside the alphabet of `seq_type`.
        ValueError: negative mismatch budget.
    """
    if max_mismatches < 0:
        raise ValueError(f"max_mismatches must be >= 0, got {max_mismatches}")
    q = validate_query(query, seq_type)
    n = len(q)
    if n == 0 or len(target) < n:
        return []

    t = normalize(target, seq_type)
    if max_mismatches == 0:
        return [m.start() for m in build_pattern(q, seq_type).finditer(t)]

    sets = symbol_sets(seq_type)
    allowed = tuple(sets[c] for c in q)
    hits: List[int] = []
    for start in range(0, len(t) - n + 1):
        if _count_mismatches(allowed, t[start : start + n], max_mismatches) <= max_mismatches:
            hits.append(start)
    return hits


def mismatch_positions(query: str, window: str, seq_type: SeqType = SeqType.DNA) -> List[int]:
    """Query positions where `window` is not accepted by the (wildcard-aware) query."""
    q = validate_query(query, seq_type)
    w = normalize(window, seq_type)
    sets = symbol_sets(seq_type)
    return [i for i, c in enumerate(q) if i >= len(w) or w[i] not in sets[c]]
