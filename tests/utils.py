# tests/utils.py
"""
Single source of truth for test data and factories.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from typing import Any

from rentsim.schemas.models import AmortizationEntry, InvestmentParams

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_PURCHASE_PRICE = 200_000.0
DEFAULT_ADDITIONAL_COSTS = 20_000.0
DEFAULT_RENT = 1_000.0
DEFAULT_DEBT = 150_000.0
DEFAULT_PAYMENT = 800.0
DEFAULT_RATE = 3.5
DEFAULT_BUILDING_VALUE = 150_000.0
DEFAULT_TAX_RATE = 40.0
DEFAULT_ANNUAL_EXPENSES = 1_200.0
DEFAULT_START_YEAR = 2025


def make_investment_params(**overrides: Any) -> InvestmentParams:
    """Baseline investment (no tax unless overridden); keyword overrides use field names."""
    base: dict[str, Any] = dict(
        purchase_price=DEFAULT_PURCHASE_PRICE,
        additional_costs=DEFAULT_ADDITIONAL_COSTS,
        expected_rent=DEFAULT_RENT,
        debt_amount=DEFAULT_DEBT,
        monthly_payment=DEFAULT_PAYMENT,
        interest_rate=DEFAULT_RATE,
        apply_tax=False,
        building_value=DEFAULT_BUILDING_VALUE,
        tax_rate=DEFAULT_TAX_RATE,
        annual_expenses=DEFAULT_ANNUAL_EXPENSES,
        start_month=0,
        start_year=DEFAULT_START_YEAR,
        property_worth=DEFAULT_PURCHASE_PRICE,
    )
    base.update(overrides)
    return InvestmentParams(**base)


def make_amortization_entry(month: int, balance: float, **overrides: Any) -> AmortizationEntry:
    """Hand-made schedule row for aggregation/extension tests."""
    base: dict[str, Any] = dict(
        month=month,
        payment=0.0,
        interest_payment=0.0,
        principal_payment=0.0,
        balance=balance,
        cumulative_interest=0.0,
    )
    base.update(overrides)
    return AmortizationEntry(**base)
