# File: backend/app/core/sequence/gel.py
# Version: v0.1.0
"""
Agarose gel view over a digest.

- One band per fragment, positioned on a log scale between the ladder's smallest
  and largest marker (`top` is a percentage from the top of the lane).
- Fragments of identical size collapse into one band that keeps every start/end
  boundary (index + enzyme labels).
- Bands are ordered by size, largest first.

To keep bands and ladder on the same scale, use the same ladder for both.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Sequence

from .digest import Fragment, Part, digest
from .enzymes import Enzyme

DIGEST_MAP_LADDER: List[int] = [
    100, 200, 300, 400, 500, 650, 850, 1000, 1500,
    2000, 3000, 4000, 5000, 6000, 7000, 8000, 10000, 15000,
]

TOP_PADDING = 10.0     # % of lane above the largest marker
BOTTOM_PADDING = 1.0   # % of lane below the smallest marker
LADDER_MESSAGE = "Ladder"


@dataclass
class BandBoundary:
    index: int
    enzymes: List[str] = field(default_factory=list)


@dataclass
class GelBand:
    size: int
    top: float
    starts: List[BandBoundary] = field(default_factory=list)
    ends: List[BandBoundary] = field(default_factory=list)
    message: str = ""
    central_index: Optional[int] = None


def translate_to_agarose_height(fragment_length: int, max_length: int, min_length: int) -> float:
    """
    Relative migration distance (0 = top of lane, 100 = bottom) of a band.

    Bands shorter than the smallest marker sit at the bottom; longer than the
    largest marker sit slightly above it (log height * 1.02).
    """
    max_log = math.log(max_length)
    min_log = math.log(min_length)
    frag_log = max(math.log(max(fragment_length, 1)), min_log)
    if frag_log > max_log:
        frag_log = max_log * 1.02
    percent = (frag_log - min_log) / (max_log - min_log)
    height = (1 - percent) * 100
    scale = (100 - TOP_PADDING - BOTTOM_PADDING) / 100
    return (height + TOP_PADDING) * scale


def _fragment_band(fragment: Fragment, ladder: Sequence[int]) -> GelBand:
    return GelBand(
        size=fragment.length,
        top=translate_to_agarose_height(fragment.length, ladder[-1], ladder[0]),
        starts=[BandBoundary(fragment.start, list(fragment.start_enzymes))],
        ends=[BandBoundary(fragment.end, list(fragment.end_enzymes))],
        message=fragment.message,
        central_index=fragment.central_index,
    )


def consolidate_bands(bands: Iterable[GelBand]) -> List[GelBand]:
    """Merge bands of equal size (boundaries concatenated), largest size first."""
    by_size: dict[int, GelBand] = {}
    for band in bands:
        merged = by_size.get(band.size)
        if merged is None:
            by_size[band.size] = GelBand(
                size=band.size,
                top=band.top,
                starts=list(band.starts),
                ends=list(band.ends),
                message=band.message,
                central_index=band.central_index,
            )
        else:
            merged.starts.extend(band.starts)
            merged.ends.extend(band.ends)
    return sorted(by_size.values(), key=lambda b: b.size, reverse=True)


def get_agarose_ladder(ladder: Optional[Sequence[int]] = None) -> List[GelBand]:
    """Marker bands for the lane next to the digest."""
    ladder = sorted(ladder or DIGEST_MAP_LADDER)
    return [
        GelBand(size=size, top=translate_to_agarose_height(size, ladder[-1], ladder[0]), message=LADDER_MESSAGE)
        for size in ladder
    ]


def agarose_digest(
    enzyme_names: Iterable[str],
    part: Part,
    ladder: Optional[Sequence[int]] = None,
    custom_enzymes: Optional[Mapping[str, Enzyme]] = None,
    registry: Optional[Mapping[str, Enzyme]] = None,
) -> List[GelBand]:
    """Digest `part` and project the fragments onto a gel lane."""
    ladder = sorted(ladder or DIGEST_MAP_LADDER)
    if len(set(ladder)) < 2 or ladder[0] <= 0:
        raise ValueError("ladder needs at least two distinct positive marker sizes")
    fragments = digest(enzyme_names, part, custom_enzymes=custom_enzymes, registry=registry)
    return consolidate_bands(_fragment_band(f, ladder) for f in fragments)
