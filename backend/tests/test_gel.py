# File: backend/tests/test_gel.py
# Version: v0.1.0
"""
Tests for the agarose gel projection of a digest.
"""

from __future__ import annotations

import pytest

from backend.app.core.sequence.digest import SINGLE_FRAGMENT_MESSAGE, Part
from backend.app.core.sequence.gel import (
    DIGEST_MAP_LADDER,
    LADDER_MESSAGE,
    GelBand,
    agarose_digest,
    consolidate_bands,
    get_agarose_ladder,
    translate_to_agarose_height,
)

BSAI_SEQ = "TTAGGTCTCGGGGGAA"  # BsaI site at 3, cuts 10/14

TWO_SITE_SEQ = "AAGAATTCAAAAAAGGATCCAAAA"


def test_height_scale_bounds():
    assert translate_to_agarose_height(100, 15000, 100) == pytest.approx(97.9)
    assert translate_to_agarose_height(16, 15000, 100) == pytest.approx(97.9)
    assert translate_to_agarose_height(15000, 15000, 100) == pytest.approx(8.9)
    # larger than the biggest marker: above it, but not off the chart
    oversize = translate_to_agarose_height(50000, 15000, 100)
    assert 0 < oversize < 8.9


def test_height_decreases_with_size():
    tops = [translate_to_agarose_height(n, 15000, 100) for n in (150, 700, 3000, 12000)]
    assert tops == sorted(tops, reverse=True)


def test_default_ladder():
    bands = get_agarose_ladder()
    assert [b.size for b in bands] == DIGEST_MAP_LADDER
    assert all(b.message == LADDER_MESSAGE for b in bands)
    assert bands[0].top == pytest.approx(97.9)
    assert bands[-1].top == pytest.approx(8.9)


def test_equal_sizes_collapse_into_one_band():
    bands = agarose_digest(["EcoRI", "BamHI"], Part(seq=TWO_SITE_SEQ, circular=True))
    assert len(bands) == 1
    band = bands[0]
    assert band.size == 12
    assert [(b.index, b.enzymes) for b in band.starts] == [(3, ["EcoRI"]), (15, ["BamHI"])]
    assert [(b.index, b.enzymes) for b in band.ends] == [(15, ["BamHI"]), (3, ["EcoRI"])]


def test_bands_sorted_largest_first():
    bands = agarose_digest(["EcoRI", "BamHI"], Part(seq=TWO_SITE_SEQ), ladder=[2, 20])
    assert [b.size for b in bands] == [12, 9, 3]
    assert bands[0].top < bands[1].top < bands[2].top


def test_single_cut_circle_band_keeps_message():
    (band,) = agarose_digest(["BsaI"], Part(seq=BSAI_SEQ, circular=True))
    assert band.size == 16
    assert band.message == SINGLE_FRAGMENT_MESSAGE
    assert band.central_index == 10
    assert band.top == pytest.approx(97.9)


def test_consolidate_does_not_mutate_input():
    a = GelBand(size=10, top=50.0)
    b = GelBand(size=10, top=50.0)
    merged = consolidate_bands([a, b, GelBand(size=30, top=20.0)])
    assert [m.size for m in merged] == [30, 10]
    assert a.starts == [] and b.starts == []


@pytest.mark.parametrize("ladder", [[100], [100, 100], [0, 100]])
def test_invalid_ladder_rejected(ladder):
    with pytest.raises(ValueError):
        agarose_digest(["EcoRI"], Part(seq=TWO_SITE_SEQ), ladder=ladder)
