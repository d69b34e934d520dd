# File: backend/tests/test_matcher.py
# Version: v0.2.0
"""
Unit tests for the wildcard-aware matcher (exact regex mode, mismatch mode,
circular text helper, amino-acid alphabet).
"""

from __future__ import annotations

import pytest

from backend.app.core.sequence.alphabet import SeqType
from backend.app.core.sequence.errors import InvalidQuery
from backend.app.core.sequence.matcher import (
    build_pattern,
    circular_text,
    find_matches,
    mismatch_positions,
)


def test_exact_hits_are_overlapping():
    assert find_matches("GAATTC", "GAATTCGAATTC") == [0, 6]
    assert find_matches("AA", "AAAA") == [0, 1, 2]


def test_exact_mode_is_case_insensitive():
    assert find_matches("tatt", "GCGAGTTATTCGG") == [6]


def test_wildcards_expand_to_base_sets():
    assert find_matches("GCCCGNN", "gattgcccgacggattc") == [4]
    assert find_matches("GAYTC", "GACTCGATTCGAGTC") == [0, 5]
    assert build_pattern("RN").pattern == "(?=([AG][ACGT]))"


def test_u_is_treated_as_t():
    assert find_matches("UUA", "GGTTAGG") == [2]
    assert find_matches("TTA", "GGUUAGG") == [2]


def test_mismatch_mode_bounded_hamming():
    target = "gattgcccgacggattc"
    assert find_matches("gccggac", target, 1) == [4]
    assert find_matches("gccggac", target, 0) == []


def test_mismatch_mode_with_wildcards():
    # Y = C/T does not accept the 'a' at offset 11 -> exactly one mismatch
    assert find_matches("gcccgacy", "gattgcccgacacattc", 1) == [4]
    assert find_matches("gcccgacy", "gattgcccgacacattc", 0) == []


@pytest.mark.parametrize("query", ["GATT", "GANTC", "ACGTAC"])
def test_mismatch_tolerance_is_monotonic(query):
    target = "GATTACAGATTCGAATCGACGTACGATTAGANTCACGT"
    counts = [len(find_matches(query, target, k)) for k in range(0, 4)]
    assert counts == sorted(counts)


def test_invalid_query_symbols():
    with pytest.raises(InvalidQuery) as exc:
        find_matches("GAZ", "GAZGAZ")
    assert exc.value.invalid == ["Z"]


def test_negative_budget_rejected():
    with pytest.raises(ValueError):
        find_matches("GATC", "GATC", -1)


def test_query_longer_than_target():
    assert find_matches("GATTACA", "GAT") == []


def test_circular_text():
    assert circular_text("ATCG", 3) == "ATCGAT"
    assert circular_text("ATCG", 1) == "ATCG"
    # query longer than the sequence wraps more than once
    assert circular_text("AC", 5) == "ACACAC"


def test_mismatch_positions():
    assert mismatch_positions("ACGT", "AGGT") == [1]
    assert mismatch_positions("ANGT", "ACGA") == [3]
    assert mismatch_positions("ACGT", "acgt") == []


def test_amino_acid_classes():
    aa = SeqType.AA
    # B = D/N, X = any residue
    assert find_matches("BX", "DANQ", seq_type=aa) == [0, 2]
    assert find_matches("K*", "MK*K", seq_type=aa) == [1]
    # U is selenocysteine, not folded into T
    assert find_matches("U", "ACGTU", seq_type=aa) == [4]
    assert find_matches("U", "ACGTU") == [3, 4]


def test_amino_acid_mismatch_mode():
    assert find_matches("MAV", "MKVLAKV", max_mismatches=1, seq_type=SeqType.AA) == [0]
    assert mismatch_positions("MAV", "MKV", SeqType.AA) == [1]
    assert mismatch_positions("ZZ", "EA", SeqType.AA) == [1]


def test_alphabet_depends_on_sequence_type():
    with pytest.raises(InvalidQuery):
        find_matches("EQ", "AEQ")
    assert find_matches("EQ", "AEQ", seq_type=SeqType.AA) == [1]
