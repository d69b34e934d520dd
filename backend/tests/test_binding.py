# File: backend/tests/test_binding.py
# Version: v0.1.0
"""
Tests for primer binding-site discovery: strands, overhang footprint, wrap
through the origin, mismatch ranges and tail folding.
"""

from __future__ import annotations

from backend.app.core.sequence.binding import (
    Direction,
    Primer,
    find_all_binding_sites,
    find_mismatches,
    fold_tail,
)
from backend.app.core.sequence.parameters import BindingParameters
from backend.app.core.sequence.search import MismatchRange

FWD = "AGGTACCTTGAGCATCGGAT"        # vector[10:30]
FWD_2MM = "AGGTACATTGAGCAGCGGAT"    # same, mismatched at 6 and 14
REV = "GCTAACGATCTGGACTGCAA"        # reverse complement of vector[40:60]
ACROSS_ORIGIN = "TAGCATGCATGACTTCGATC"  # vector[79:] + vector[:10]


def test_fold_tail():
    assert fold_tail([(0, 1), (2, 3), (10, 11)]) == [(0, 11)]
    assert fold_tail([(1, 2), (3, 4), (15, 16)]) == [(0, 4), (15, 16)]
    assert fold_tail([(5, 6), (15, 16)]) == [(5, 6), (15, 16)]
    assert fold_tail([(0, 1)]) == [(0, 1)]


def test_find_mismatches_tail_and_overhang():
    ranges, anneal = find_mismatches("ACGTACGTAC", "", [1, 3])
    assert ranges == [MismatchRange(0, 4)]
    assert anneal == "ACGTAC"

    ranges, anneal = find_mismatches("ACGTACGTAC", "GG", [0])
    assert ranges == [MismatchRange(0, 3)]
    assert anneal == "CGTACGTAC"

    ranges, anneal = find_mismatches("ACGTACGTAC", "GG", [])
    assert ranges == [MismatchRange(0, 2)]
    assert anneal == "ACGTACGTAC"


def test_forward_exact(vector):
    (site,) = find_all_binding_sites([Primer(FWD, name="fwd", id="p1")], vector)
    assert (site.start, site.end, site.direction) == (10, 30, Direction.FORWARD)
    assert site.mismatches == []
    assert site.anneal_sequence == FWD
    assert site.id == "p1-10"
    assert site.tm == 52.0


def test_forward_with_internal_mismatches(vector):
    (site,) = find_all_binding_sites([Primer(FWD_2MM)], vector)
    assert (site.start, site.end) == (10, 30)
    assert site.mismatches == [MismatchRange(6, 7), MismatchRange(14, 15)]
    assert site.anneal_sequence == FWD_2MM


def test_strict_primer_needs_exact_match(vector):
    assert find_all_binding_sites([Primer(FWD_2MM, strict=True)], vector) == []
    assert len(find_all_binding_sites([Primer(FWD, strict=True)], vector)) == 1


def test_reverse_site(vector):
    (site,) = find_all_binding_sites([Primer(REV)], vector)
    assert (site.start, site.end, site.direction) == (40, 60, Direction.REVERSE)


def test_overhang_footprint(vector):
    (fwd,) = find_all_binding_sites([Primer(FWD, overhang="GGGG")], vector)
    assert (fwd.start, fwd.end) == (6, 30)
    assert fwd.mismatches == [MismatchRange(0, 4)]
    assert fwd.sequence == "GGGG" + FWD
    assert fwd.anneal_sequence == FWD

    (rev,) = find_all_binding_sites([Primer(REV, overhang="AAAA")], vector)
    assert (rev.start, rev.end) == (40, 64)


def test_site_across_origin(vector):
    (site,) = find_all_binding_sites([Primer(ACROSS_ORIGIN)], vector)
    assert (site.start, site.end, site.direction) == (79, 10, Direction.FORWARD)
    assert find_all_binding_sites([Primer(ACROSS_ORIGIN)], vector, circular=False) == []


def test_min_tm_filter(vector):
    primers = [Primer(FWD)]
    assert find_all_binding_sites(primers, vector, params=BindingParameters(minTm=60)) == []
    assert len(find_all_binding_sites(primers, vector, params=BindingParameters(minTm=50))) == 1


def test_invalid_primer_skipped(vector, caplog):
    sites = find_all_binding_sites([Primer("ACGT?ACGT", name="bad"), Primer(REV)], vector)
    assert [s.primer.sequence for s in sites] == [REV]
    assert "bad" in caplog.text
