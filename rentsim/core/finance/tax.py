# rentsim/core/finance/tax.py
"""
Simplified German rental taxation.

Deductions are the flat AfA on the building (2%/yr), mortgage interest and
other expenses. A rental loss offsets other income at the marginal rate and
shows up as `tax_effect`; a rental profit produces no `tax_effect` here.
"""

from __future__ import annotations

from collections.abc import Sequence

from rentsim.schemas.models import AmortizationEntry, TaxScheduleEntry, TaxSnapshot

from .calendar_years import calendar_year_of

AFA_RATE = 0.02


def compute_tax_snapshot(
    building_value: float,
    period_interest: float,
    period_expenses: float,
    tax_rate_percent: float,
    period_rental_income: float,
    fraction_of_year: float = 1.0,
) -> TaxSnapshot:
    """Tax position for one period; depreciation is pro-rated by fraction_of_year."""
    depreciation = building_value * AFA_RATE * fraction_of_year
    total_deductible = depreciation + period_interest + period_expenses
    net_result = period_rental_income - total_deductible
    rate = tax_rate_percent / 100.0
    tax_effect = abs(net_result) * rate if net_result < 0 else 0.0

    return TaxSnapshot(
        depreciation=depreciation,
        interest=period_interest,
        other_expenses=period_expenses,
        total_deductible=total_deductible,
        rental_income=period_rental_income,
        net_result=net_result,
        tax_effect=tax_effect,
        tax_on_result=net_result * rate,
    )


def tax_schedule_by_year(
    amortization: Sequence[AmortizationEntry],
    building_value: float,
    annual_expenses: float,
    tax_rate_percent: float,
    start_month: int,
    start_year: int,
    monthly_rent: float,
) -> list[TaxScheduleEntry]:
    """
    Calendar-year tax results, repeated on every amortization month of the year.

    Partial years (mid-year start, payoff) are pro-rated by the number of
    months actually present, not an assumed 12.
    """
    interest_by_year: dict[int, float] = {}
    months_by_year: dict[int, list[int]] = {}
    for entry in amortization:
        year = calendar_year_of(entry.month, start_month, start_year)
        interest_by_year[year] = interest_by_year.get(year, 0.0) + entry.interest_payment
        months_by_year.setdefault(year, []).append(entry.month)

    out: list[TaxScheduleEntry] = []
    for year in sorted(months_by_year):
        months = months_by_year[year]
        fraction = len(months) / 12.0
        snap = compute_tax_snapshot(
            building_value,
            interest_by_year[year],
            annual_expenses * fraction,
            tax_rate_percent,
            monthly_rent * len(months),
            fraction_of_year=fraction,
        )
        out.extend(TaxScheduleEntry(month=m, savings=snap.tax_effect, snapshot=snap) for m in months)
    return out
