# File: backend/app/core/config.py
# Version: v0.4.0
"""
Centralized application settings using Pydantic Settings.

Controls:
- App metadata and API prefix
- CORS origins
- Path to the restriction enzyme registry JSON
- Search guards (per-strand hit ceiling, minimal effective query length)
- Primer binding tolerance (bases per allowed mismatch, optional Tm floor)
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

_APP_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    # --- App ---
    API_PREFIX: str = "/api"
    APP_NAME: str = "SeqCore"
    APP_VERSION: str = "0.4.0"

    # --- CORS ---
    CORS_ORIGINS: str = "*"  # comma-separated or '*' for all

    # --- Data ---
    ENZYMES_PATH: Path = _APP_DIR / "config" / "enzymes.json"

    # --- Search ---
    SEARCH_MAX_RESULTS: int = 4000  # per strand
    SEARCH_MIN_QUERY_LENGTH: int = 3  # len(query) - mismatches

    # --- Primer binding ---
    PRIMER_BASES_PER_MISMATCH: int = 8
    PRIMER_MIN_TM: Optional[float] = None

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "info"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def cors_origins_list(self) -> list[str]:
        raw = self.CORS_ORIGINS.strip()
        if raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]


settings = Settings()
