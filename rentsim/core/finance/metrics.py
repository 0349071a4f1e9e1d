# rentsim/core/finance/metrics.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from rentsim.schemas.models import (
    AmortizationEntry,
    CashFlowPoint,
    InvestmentMetrics,
    InvestmentParams,
    MonthlyCashFlowRecord,
    RoiPoint,
)

from .amortization import DEFAULT_HORIZON_MONTHS
from .calendar_years import months_in_calendar_year
from .tax import compute_tax_snapshot

logger = logging.getLogger(__name__)

MonthsInYearFn = Callable[[int, int, int], int]

LEGACY_APPRECIATION_RATE = 0.03  # linear, per year
ROI_REPORT_MONTH = 120


def _first_index(values: Sequence[float], predicate: Callable[[float], bool]) -> int:
    return next((i for i, v in enumerate(values) if predicate(v)), -1)


def compute_investment_metrics(
    params: InvestmentParams,
    amortization: Sequence[AmortizationEntry],
    months_in_year_fn: MonthsInYearFn = months_in_calendar_year,
) -> InvestmentMetrics:
    """
    Simulate months 0..480 of the investment and derive break-even and drawdown figures.

    The horizon is fixed; once the amortization runs out the loan counts as
    paid off (no payment, no interest, zero balance). Each month uses the
    amortization entry's own payment so a partial final payment is exact.

    Liquid position starts at -equity (the initial cash outlay). Illiquid
    position is property equity, (price - debt) + principal repaid; acquisition
    costs are sunk and not part of it.
    """
    p = params
    total_investment = p.purchase_price + p.additional_costs
    equity = total_investment - p.debt_amount
    initial_property_equity = p.purchase_price - p.debt_amount
    total_interest = amortization[-1].cumulative_interest if amortization else 0.0

    by_month = {e.month: e for e in amortization}

    monthly: list[MonthlyCashFlowRecord] = []
    points: list[CashFlowPoint] = []
    cumulative = -equity

    for month in range(DEFAULT_HORIZON_MONTHS + 1):
        entry = by_month.get(month)
        if entry is not None:
            payment = entry.payment
            interest = entry.interest_payment
            principal = entry.principal_payment
            balance = entry.balance
            cum_interest = entry.cumulative_interest
        else:
            payment = interest = principal = balance = 0.0
            cum_interest = total_interest

        tax_on_rent = 0.0
        if p.apply_tax:
            snap = compute_tax_snapshot(
                p.building_value,
                interest,
                p.annual_expenses / 12.0,
                p.tax_rate,
                p.expected_rent,
                fraction_of_year=1.0 / 12.0,
            )
            tax_on_rent = snap.tax_on_result

        net = p.expected_rent - payment - tax_on_rent
        cumulative += net
        illiquid = initial_property_equity + (p.debt_amount - balance)
        total = cumulative + illiquid
        months_this_year = months_in_year_fn(month, p.start_month, p.start_year)

        monthly.append(
            MonthlyCashFlowRecord(
                month=month,
                rent_income=p.expected_rent,
                mortgage_payment=payment,
                interest_payment=interest,
                principal_payment=principal,
                balance=balance,
                cumulative_interest=cum_interest,
                tax_on_rent=tax_on_rent,
                tax_reimbursement=-min(0.0, tax_on_rent),
                net_cash_flow=net,
                annual_rent_income=p.expected_rent * months_this_year,
                annual_mortgage_payment=payment * months_this_year,
                annual_tax_on_rent=tax_on_rent * months_this_year,
                annual_net_cash_flow=net * months_this_year,
                cumulative_liquid=cumulative,
                cumulative_illiquid=illiquid,
                cumulative_total=total,
            )
        )
        points.append(CashFlowPoint(month=month, cumulative_liquid=cumulative, cumulative_illiquid=illiquid, cumulative_total=total))

    totals = [pt.cumulative_total for pt in points]
    liquid = [pt.cumulative_liquid for pt in points]

    break_even = _first_index(totals, lambda v: v >= 0)
    break_even_liquid = _first_index(liquid, lambda v: v >= 0)

    lowest = min(liquid)
    lowest_month = liquid.index(lowest)

    roi_schedule: list[RoiPoint] = []
    for month in range(DEFAULT_HORIZON_MONTHS + 1):
        rent_received = p.expected_rent * month
        appreciation = p.property_worth * LEGACY_APPRECIATION_RATE * (month / 12.0)
        roi = (rent_received + appreciation) / equity * 100.0 if equity else 0.0
        roi_schedule.append(RoiPoint(month=month, roi=roi))

    logger.debug("simulated %d months; break-even month %d, lowest cash %.2f at month %d", len(monthly), break_even, lowest, lowest_month)

    return InvestmentMetrics(
        total_investment=total_investment,
        equity=equity,
        payoff_years=len(amortization) / 12.0,
        total_interest=total_interest,
        break_even_years=break_even / 12.0 if break_even >= 0 else 0.0,
        break_even_liquid_years=break_even_liquid / 12.0 if break_even_liquid >= 0 else 0.0,
        max_investment_needed=abs(lowest),
        max_investment_at_years=lowest_month / 12.0,
        roi_10_years=roi_schedule[ROI_REPORT_MONTH].roi,
        monthly_cash_flow_schedule=monthly,
        cash_flow_schedule=points,
        roi_schedule=roi_schedule,
    )
