# tests/conftest.py
import pytest

from decorquote.kv import MemoryBackend
from decorquote.records import CompanySettings, TaxRegime
from decorquote.store import DocumentStore


class TickingClock:
    """Deterministic timestamps: every call is one second later."""

    def __init__(self, start="2025-06-10T09:00:00"):
        self.start = start
        self.calls = 0

    def __call__(self):
        ts = f"{self.start[:17]}{self.calls:02d}.000+00:00"
        self.calls += 1
        return ts


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    """Fresh in-memory store per test function."""
    return DocumentStore(MemoryBackend(), clock=clock)


@pytest.fixture
def flat_rate():
    return CompanySettings(tax_regime=TaxRegime.FLAT_RATE)


@pytest.fixture
def ordinary():
    return CompanySettings(tax_regime=TaxRegime.ORDINARY, vat_rate=22)
