# File: backend/app/core/sequence/alphabet.py
# Version: v0.2.0
"""
Nucleotide / amino-acid alphabets, complement table and small sequence utilities.

Implements:
- Complement table over A/C/G/T/U and every IUPAC ambiguity code (BioPython
  IUPACData), case preserving
- complement_sequence / reverse_complement (unknown symbols are dropped)
- Allowed symbol sets per sequence type (dna / rna / aa), used by the matcher,
  and `guess_type` for untyped input
- Codon translation (Bio.Seq)
- GC percentage, melting temperature (Bio.SeqUtils.MeltingTemp), mismatch
  ranges, wrap-aware length

Coordinates are 0-based; ranges are [start, end).
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from Bio.Data.IUPACData import (
    ambiguous_dna_complement,
    ambiguous_dna_values,
    extended_protein_values,
    protein_letters,
)
from Bio.Seq import Seq
from Bio.SeqUtils import MeltingTemp as mt


class SeqType(str, Enum):
    DNA = "dna"
    RNA = "rna"
    AA = "aa"
    UNKNOWN = "unknown"


def _build_complements() -> Dict[str, str]:
    table: Dict[str, str] = {}
    for base, comp in ambiguous_dna_complement.items():
        table[base.upper()] = comp.upper()
        table[base.lower()] = comp.lower()
    table["U"] = "A"
    table["u"] = "a"
    return table


COMPLEMENTS: Dict[str, str] = _build_complements()
_COMPLEMENT_TABLE = str.maketrans(COMPLEMENTS)

# Uppercase symbol -> set of concrete bases it stands for. U pairs like T.
BASE_SETS: Dict[str, FrozenSet[str]] = {
    code.upper(): frozenset(bases.upper()) for code, bases in ambiguous_dna_values.items()
}
BASE_SETS["U"] = frozenset("T")

# Amino acids: B = D/N, J = I/L, Z = E/Q, X = any; '*' (stop) only matches itself.
AA_SETS: Dict[str, FrozenSet[str]] = {code: frozenset(aas) for code, aas in extended_protein_values.items()}
AA_SETS["*"] = frozenset("*")
AMINO_ACIDS: FrozenSet[str] = frozenset(protein_letters + "*")

_NORMALIZE_TABLE = str.maketrans("Uu", "TT")


def is_nucleic(seq_type: SeqType) -> bool:
    """Sequence types scanned on two strands (unknown input is treated as DNA)."""
    return SeqType(seq_type) is not SeqType.AA


def symbol_sets(seq_type: SeqType = SeqType.DNA) -> Dict[str, FrozenSet[str]]:
    """Query symbol -> accepted target symbols for the given sequence type."""
    return BASE_SETS if is_nucleic(seq_type) else AA_SETS


def normalize(seq: str, seq_type: SeqType = SeqType.DNA) -> str:
    """Uppercase; nucleic sequences also fold U into T (RNA and DNA match alike)."""
    if not is_nucleic(seq_type):
        return seq.upper()
    return seq.upper().translate(_NORMALIZE_TABLE)


def guess_type(seq: str) -> SeqType:
    """
    Infer the sequence type from plain symbols only (ambiguity codes make the
    guess fall through, so it errs on the strict side).
    """
    symbols = set(seq.upper())
    if not symbols:
        return SeqType.UNKNOWN
    if symbols <= set("ACGT"):
        return SeqType.DNA
    if symbols <= set("ACGU"):
        return SeqType.RNA
    if symbols <= AMINO_ACIDS:
        return SeqType.AA
    return SeqType.UNKNOWN


def translate_dna(seq: str) -> str:
    """
    Translate codon by codon with the standard table; a trailing partial codon
    is ignored. Ambiguous codons translate to 'X'.

    Raises:
        Bio.Data.CodonTable.TranslationError: on symbols that are not nucleotides.
    """
    s = normalize(seq)
    return str(Seq(s[: len(s) - len(s) % 3]).translate())


def complement(base: str) -> str:
    """Complement of a single symbol; raises ValueError outside the alphabet."""
    try:
        return COMPLEMENTS[base]
    except KeyError:
        raise ValueError(f"Not a nucleotide symbol: {base!r}") from None


def complement_sequence(seq: str) -> Tuple[str, str]:
    """
    Return (filtered_seq, complement_of_filtered_seq).

    Any character without a complement (gaps, digits, whitespace, protein letters)
    is dropped, so both strings have the same length position for position.
    """
    filtered = "".join(c for c in seq if c in COMPLEMENTS)
    return filtered, filtered.translate(_COMPLEMENT_TABLE)


def reverse_complement(seq: str) -> str:
    return complement_sequence(seq)[1][::-1]


def gc_percent(seq: str) -> float:
    """GC percentage rounded to two decimals."""
    if not seq:
        return 0.0
    s = seq.upper()
    gc = s.count("G") + s.count("C")
    return round(100.0 * gc / len(s), 2)


def mismatch_indices(seq: str, match: str) -> List[int]:
    """Positions where `seq` and `match` differ (case-insensitive, literal comparison)."""
    s = seq.upper()
    m = match.upper()
    return [i for i, c in enumerate(s) if i >= len(m) or c != m[i]]


def collapse_ranges(indices: List[int]) -> List[Tuple[int, int]]:
    """
    Collapse sorted indices into contiguous [start, end) runs.

    Example:
        [1, 2, 3, 7, 9, 10] -> [(1, 4), (7, 8), (9, 11)]
    """
    ranges: List[Tuple[int, int]] = []
    for idx in indices:
        if ranges and idx == ranges[-1][1]:
            ranges[-1] = (ranges[-1][0], idx + 1)
        else:
            ranges.append((idx, idx + 1))
    return ranges


def calc_tm(seq: str, match: Optional[str] = None) -> float:
    """
    Melting temperature (°C) of `seq` annealed to `match`, via Bio.SeqUtils.MeltingTemp.

    - < 14 bp: Wallace rule, 2*(A+T) + 4*(G+C)
    - 25..45 bp, GC% > 40 and a leading G/C: Tm_GC value set 2,
      81.5 + 0.41*%GC - 675/N - %mismatch. Positions that differ from `match`
      are passed as 'X', which Tm_GC counts as mismatches.
    - otherwise: Tm_GC with 64.9 + 0.41*%GC - 672.4/N, rounded
      (i.e. 64.9 + 41*(GC - 16.4)/N)
    """
    s = seq.upper()
    n = len(s)
    if n == 0:
        return 0.0
    if n < 14:
        return float(mt.Tm_Wallace(s, strict=False))
    if 24 < n < 46 and gc_percent(s) > 40 and s[0] in ("C", "G"):
        mismatched = set(mismatch_indices(s, s if match is None else match))
        marked = "".join("X" if i in mismatched else c for i, c in enumerate(s))
        return float(mt.Tm_GC(marked, strict=False, valueset=2, mismatch=True))
    # value set 1 only selects "no salt correction"; userset replaces its constants
    tm = mt.Tm_GC(s, strict=False, valueset=1, userset=(64.9, 0.41, 672.4, 0), mismatch=False)
    return float(math.floor(tm + 0.5))


def calc_length(start: int, end: int, seq_length: int) -> int:
    """Length of [start, end) on a sequence that may wrap through the origin."""
    if end > start:
        return end - start
    if end == start:
        return seq_length
    return seq_length - start + end
