# File: backend/tests/test_search.py
# Version: v0.2.0
"""
Tests for the two-strand search engine: ordering, strands, origin crossing,
guards and navigation, single-strand protein search.
"""

from __future__ import annotations

from backend.app.core.sequence.alphabet import SeqType
from backend.app.core.sequence.parameters import SearchParameters
from backend.app.core.sequence.search import MismatchRange, SearchStatus, Strand, search


def test_forward_hit():
    res = search("tatt", 0, "gcgagttattcggcgtgg")
    assert res.status is SearchStatus.OK
    assert len(res.results) == 1
    m = res.results[0]
    assert (m.start, m.end, m.strand) == (6, 10, Strand.TOP)


def test_reverse_strand_hit():
    res = search("aata", 0, "gcgagttattcggcgtgg")
    assert [(m.start, m.end, m.strand) for m in res.results] == [(6, 10, Strand.BOTTOM)]


def test_both_strands_sorted_and_ranked():
    res = search("AATTC", 0, "GGAATTCGGAATTC")
    top = [m.start for m in res.results if m.strand is Strand.TOP]
    bottom = [m.start for m in res.results if m.strand is Strand.BOTTOM]
    assert top == [2, 9]
    assert bottom == [1, 8]  # GAATT, the reverse complement, on the top strand
    assert [m.start for m in res.results] == [1, 2, 8, 9]
    assert [m.index for m in res.results] == [0, 1, 2, 3]


def test_palindrome_reported_once_per_strand():
    res = search("GAATTC", 0, "AAGAATTCAA")
    assert [(m.start, m.strand) for m in res.results] == [(2, Strand.TOP), (2, Strand.BOTTOM)]


def test_circular_match_crosses_origin():
    seq = "ATGGGGCG"
    res = search("CGAT", 0, seq, circular=True)
    assert len(res.results) == 1
    m = res.results[0]
    assert (m.start, m.end) == (6, 2)
    assert m.start > m.end

    assert search("CGAT", 0, seq, circular=False).results == []


def test_match_ending_at_sequence_end_keeps_full_length_end():
    res = search("GGCG", 0, "ATGGGGCG", circular=True)
    assert [(m.start, m.end) for m in res.results] == [(4, 8)]


def test_wildcard_and_mismatch_queries():
    res = search("gcccgnn", 0, "gattgcccgacggattc")
    assert [(m.start, m.end) for m in res.results if m.strand is Strand.TOP] == [(4, 11)]

    res = search("gccggac", 1, "gattgcccgacggattc")
    top = [m for m in res.results if m.strand is Strand.TOP]
    assert [(m.start, m.end) for m in top] == [(4, 11)]
    assert top[0].mismatches == [MismatchRange(3, 4)]

    assert [m for m in search("gccggac", 0, "gattgcccgacggattc").results if m.strand is Strand.TOP] == []


def test_short_effective_query_is_too_broad():
    res = search("AC", 0, "ACACACAC")
    assert res.status is SearchStatus.TOO_BROAD
    assert res.results == []

    res = search("ACGT", 2, "ACGTACGT")
    assert res.status is SearchStatus.TOO_BROAD


def test_hit_ceiling_per_strand():
    res = search("AAA", 0, "A" * 20, params=SearchParameters(maxResults=5))
    assert res.status is SearchStatus.TOO_BROAD
    assert "top" in res.message


def test_invalid_query_status():
    res = search("GAZ", 0, "GATTACA")
    assert res.status is SearchStatus.INVALID_QUERY
    assert res.results == []


def test_empty_inputs():
    assert search("", 0, "ACGT").results == []
    assert search("ACGT", 0, "").results == []


def test_navigation_cycles():
    res = search("AATTC", 0, "GGAATTCGGAATTC")
    assert res.current is res.results[0]
    assert res.next_index(3) == 0
    assert res.next_index() == 1
    assert res.prev_index(0) == 3
    assert res.prev_index(2) == 1


def test_protein_search_scans_one_strand():
    res = search("MKV", 0, "MKVLAKVMKV", seq_type=SeqType.AA)
    assert [(m.start, m.end, m.strand) for m in res.results] == [(0, 3, Strand.TOP), (7, 10, Strand.TOP)]

    # a palindromic DNA site is found on both strands, but once as protein
    assert len(search("GAATTC", 0, "GGAATTCC")) == 2
    assert len(search("GAATTC", 0, "GGAATTCC", seq_type=SeqType.AA)) == 1


def test_protein_search_wildcards_and_mismatches():
    res = search("BKV", 0, "DKVANKV", seq_type="aa")
    assert [m.start for m in res.results] == [0, 4]

    res = search("MAVL", 1, "MKVLAKV", seq_type=SeqType.AA)
    assert [m.start for m in res.results] == [0]
    assert res.results[0].mismatches == [MismatchRange(1, 2)]


def test_protein_search_circular():
    res = search("VMK", 0, "MKLAV", circular=True, seq_type=SeqType.AA)
    assert [(m.start, m.end, m.strand) for m in res.results] == [(4, 2, Strand.TOP)]


def test_query_alphabet_follows_sequence_type():
    assert search("GAZ", 0, "GAQ", seq_type=SeqType.AA).results[0].start == 0
    res = search("MK1", 0, "MKV", seq_type=SeqType.AA)
    assert res.status is SearchStatus.INVALID_QUERY
