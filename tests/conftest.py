"""Pytest configuration and fixtures."""

import warnings

import pytest

from tinyfloat.core.config import settings
from tinyfloat.core.exceptions import PrecisionLossWarning


@pytest.fixture
def small_precision(monkeypatch):
    """Default precision of 4 digits with 2 guard digits."""
    monkeypatch.setattr(settings, "DEFAULT_PRECISION", 4)
    monkeypatch.setattr(settings, "GUARD_DIGITS", 2)
    return settings


@pytest.fixture
def strict_float_warnings():
    """Turn PrecisionLossWarning into an error."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", PrecisionLossWarning)
        yield


@pytest.fixture
def metrics_enabled(monkeypatch):
    """Make sure counters are incremented."""
    monkeypatch.setattr(settings, "ENABLE_METRICS", True)
    return settings
