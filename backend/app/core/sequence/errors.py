# File: backend/app/core/sequence/errors.py
# Version: v0.1.0
"""
Error taxonomy for the sequence analysis core.

- InvalidQuery: query holds symbols outside the nucleotide + IUPAC alphabet.
- SearchTooBroad: one strand produced more hits than the configured ceiling.
- UnknownEnzyme: strict registry lookup of a name that is not registered.

Degenerate digests (no cuts, or one cut on a circle) are not errors; they are
reported through `Fragment.message`.
"""

from __future__ import annotations

from typing import Iterable


class SequenceAnalysisError(ValueError):
    """Base class for recoverable sequence analysis failures."""


class InvalidQuery(SequenceAnalysisError):
    def __init__(self, query: str, invalid: Iterable[str]):
        self.query = query
        self.invalid = sorted(set(invalid))
        super().__init__(f"Query contains unsupported symbols: {''.join(self.invalid)!r}")


class SearchTooBroad(SequenceAnalysisError):
    def __init__(self, strand: str, count: int, limit: int):
        self.strand = strand
        self.count = count
        self.limit = limit
        super().__init__(
            f"Search too broad: {count} hits on the {strand} strand exceed the limit of {limit}. "
            "Narrow the query or lower the mismatch budget."
        )


class UnknownEnzyme(SequenceAnalysisError, KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown restriction enzyme: {name!r}")

    def __str__(self) -> str:
        return self.args[0]
