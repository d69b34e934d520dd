# File: backend/app/core/sequence/parameters.py
# Version: v0.1.0
"""
Pydantic models for search and primer binding tunables.

Defaults come from `backend.app.core.config.settings` so deployments can adjust
them via environment / .env without touching request payloads.

Usage:
    from backend.app.core.sequence.parameters import SearchParameters, BindingParameters
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, conint, confloat

from backend.app.core.config import settings


class SearchParameters(BaseModel):
    maxResults: conint(ge=1) = Field(
        default_factory=lambda: settings.SEARCH_MAX_RESULTS,
        description="Per-strand hit ceiling; above it the search is reported as too broad",
    )
    minQueryLength: conint(ge=1) = Field(
        default_factory=lambda: settings.SEARCH_MIN_QUERY_LENGTH,
        description="Minimal effective query length (length minus mismatch budget)",
    )


class BindingParameters(BaseModel):
    basesPerMismatch: conint(ge=1) = Field(
        default_factory=lambda: settings.PRIMER_BASES_PER_MISMATCH,
        description="One tolerated mismatch per this many primer bases",
    )
    minTm: Optional[confloat(ge=0)] = Field(
        default_factory=lambda: settings.PRIMER_MIN_TM,
        description="If set, drop sites whose annealed Tm is not above this value (°C)",
    )
    tailDensity: confloat(gt=0, le=1) = Field(
        0.25, description="Mismatch density above which a 5' cluster is folded into the tail"
    )

    def max_mismatches(self, primer_length: int) -> int:
        """Mismatch budget for a primer of the given annealing length."""
        return primer_length // self.basesPerMismatch

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        if self.minTm is not None and self.minTm > 100:
            raise ValueError("minTm must be <= 100 °C")
