import sys
import random
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def rng():
    """Seeded random source so property checks are reproducible."""
    return random.Random(0xB17)


@pytest.fixture()
def random_bits(rng):
    """Provide a factory for random bool lists of a given length."""

    def make(n):
        return [rng.random() < 0.5 for _ in range(n)]

    return make


def padding_is_zero(bits):
    """Return True when every bit past the logical length is clear."""
    data = bits.as_bytes()
    if len(data) != (len(bits) + 7) // 8:
        return False
    used = len(bits) % 8
    if not data or used == 0:
        return True
    return data[-1] & (0xFF >> used) == 0


@pytest.fixture()
def padding_is_zero_fn():
    """
    Fixture that provides the padding_is_zero helper without importing conftest.
    """
    return padding_is_zero
