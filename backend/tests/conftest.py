# File: backend/tests/conftest.py
# Version: v0.2.0
"""
Test bootstrap: ensure project root is on sys.path so 'backend.*' imports work,
plus shared sequence fixtures.

This avoids requiring editable installs or extra plugins. It keeps tests hermetic
to the repo layout (works in CI and locally).
"""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]  # repo root (../.. from this file)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# 89 bp, low self-similarity; used by primer binding tests.
VECTOR = "GACTTCGATCAGGTACCTTGAGCATCGGATTCAGCTAAGCTTGCAGTCCAGATCGTTAGCAAGGTCACGTAGAATTCCGTAGCATGCAT"

# Single BsaI site (GGTCTC at 3): top-strand cut at 10, bottom-strand cut at 14.
BSAI_SEQ = "TTAGGTCTCGGGGGAA"


@pytest.fixture
def vector() -> str:
    return VECTOR


@pytest.fixture
def registry():
    from backend.app.config.config_enzymes import load_enzymes

    return load_enzymes()
