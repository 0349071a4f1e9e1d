# tests/conftest.py
from __future__ import annotations

import pytest

from rentsim.core.finance import run_investment_analysis
from tests.utils import make_investment_params


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("RENTSIM_OUT", "RENTSIM_OPTIMIZE", "RENTSIM_HORIZON_MONTHS"):
        monkeypatch.delenv(name, raising=False)
    yield


# -------- Financial fixtures --------
@pytest.fixture
def baseline_params():
    """Factory for canonical baseline params (overridable)."""

    def _factory(**overrides):
        return make_investment_params(**overrides)

    return _factory


@pytest.fixture
def baseline_analysis():
    """Factory to run the full pipeline on provided params."""

    def _factory(params=None, *, optimize=False):
        if params is None:
            params = make_investment_params()
        return run_investment_analysis(params, optimize=optimize)

    return _factory


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks integration tests")
