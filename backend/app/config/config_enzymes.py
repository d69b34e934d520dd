# File: backend/app/config/config_enzymes.py
# Version: v0.1.0
"""
Restriction enzyme registry loader (read-only).

- Reads the NEB table from: backend/app/config/enzymes.json
  (override with ENZYMES_PATH in the environment / .env)
- Validates every entry with `Enzyme` (Pydantic) from core/sequence/enzymes.py
- Caches the parsed registry for the process lifetime

Usage:
    from backend.app.config.config_enzymes import load_enzymes, get_enzyme

JSON schema (camelCase keys, name -> entry):

  {
    "EcoRI": {"recognitionSeq": "GAATTC", "sequenceCutIdx": 1, "complementCutIdx": 5},
    "BsaI":  {"recognitionSeq": "GGTCTCNNNNN", "sequenceCutIdx": 7, "complementCutIdx": 11}
  }
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from backend.app.core.config import settings
from backend.app.core.sequence.enzymes import Enzyme, lookup_enzyme

logger = logging.getLogger(__name__)

# Resolve config directory relative to this file
_THIS_DIR = Path(__file__).resolve().parent
DEFAULT_FILE = _THIS_DIR / "enzymes.json"


def _read_json(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def parse_registry(payload: dict) -> Mapping[str, Enzyme]:
    """Validate a name -> entry payload into a read-only mapping of Enzyme."""
    enzymes = {
        name: Enzyme.model_validate({**entry, "name": name})
        for name, entry in payload.items()
    }
    return MappingProxyType(enzymes)


@lru_cache(maxsize=4)
def load_enzymes(path: Optional[Path] = None) -> Mapping[str, Enzyme]:
    """
    Load and cache the enzyme registry.
    Falls back to the bundled enzymes.json when the configured path is missing.
    """
    target = Path(path or settings.ENZYMES_PATH)
    if not target.exists():
        logger.warning("Enzyme registry %s not found; using bundled %s", target, DEFAULT_FILE)
        target = DEFAULT_FILE
    registry = parse_registry(_read_json(target))
    logger.info("Loaded %d restriction enzymes from %s", len(registry), target)
    return registry


def get_enzyme(name: str) -> Enzyme:
    """Strict lookup in the default registry; raises UnknownEnzyme."""
    return lookup_enzyme(name, load_enzymes())
