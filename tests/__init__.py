# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_investment_params
"""

from .utils import make_amortization_entry, make_investment_params

__all__ = ["make_investment_params", "make_amortization_entry"]
