# rentsim/core/finance/engine.py
from __future__ import annotations

import logging

from rentsim.schemas.models import InitialState, InvestmentAnalysis, InvestmentParams, OptimizationResult

from .amortization import DEFAULT_HORIZON_MONTHS, extend_schedule, generate_amortization, schedule_converged
from .calendar_years import aggregate_to_calendar_years, months_in_calendar_year
from .metrics import compute_investment_metrics
from .optimization import CASH_FLOW_TOLERANCE, solve_optimal_scenario
from .tax import compute_tax_snapshot, tax_schedule_by_year

logger = logging.getLogger(__name__)


def _optimize(params: InvestmentParams) -> tuple[InvestmentParams, OptimizationResult]:
    """Solve payment/rent for the params' targets and return params with both overridden."""
    result = solve_optimal_scenario(
        params.debt_amount,
        params.interest_rate,
        params.building_value,
        params.annual_expenses,
        params.tax_rate,
        params.apply_tax,
        params.target_cash_flow,
        params.target_repayment_rate,
    )
    updated = params.model_copy(update={"monthly_payment": result.monthly_payment, "expected_rent": result.minimum_rent})
    return updated, result


def run_investment_analysis(
    params: InvestmentParams,
    *,
    optimize: bool = False,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> InvestmentAnalysis:
    """
    Full pipeline: (optional) optimizer -> amortization -> metrics -> extension -> calendar years.

    Every stage is pure; the returned InvestmentAnalysis holds fresh structures only.
    """
    optimization: OptimizationResult | None = None
    if optimize:
        params, optimization = _optimize(params)

    amortization = generate_amortization(params.debt_amount, params.monthly_payment, params.interest_rate)
    converged = schedule_converged(amortization)

    # Year-1 tax view over the first 12 payments
    first_year_tax = None
    if params.apply_tax:
        first_year_interest = sum(e.interest_payment for e in amortization[:12])
        first_year_tax = compute_tax_snapshot(
            params.building_value,
            first_year_interest,
            params.annual_expenses,
            params.tax_rate,
            params.expected_rent * 12.0,
        )

    metrics = compute_investment_metrics(params, amortization, months_in_calendar_year)
    extended = extend_schedule(amortization, horizon_months)

    tax_schedule = (
        tax_schedule_by_year(
            amortization,
            params.building_value,
            params.annual_expenses,
            params.tax_rate,
            params.start_month,
            params.start_year,
            params.expected_rent,
        )
        if params.apply_tax
        else []
    )

    initial_cash = -metrics.equity
    initial_equity = params.purchase_price - params.debt_amount
    cash_flow_seed = InitialState(
        balance=params.debt_amount,
        cumulative_liquid=initial_cash,
        cumulative_illiquid=initial_equity,
        cumulative_total=initial_cash + initial_equity,
    )
    yearly_cash_flow = aggregate_to_calendar_years(
        metrics.monthly_cash_flow_schedule, params.start_month, params.start_year, cash_flow_seed
    )
    yearly_debt = aggregate_to_calendar_years(
        extended, params.start_month, params.start_year, InitialState(balance=params.debt_amount)
    )
    yearly_tax = aggregate_to_calendar_years(tax_schedule, params.start_month, params.start_year)

    warnings: list[str] = []
    if not converged:
        warnings.append(
            f"monthly payment {params.monthly_payment:,.2f} does not amortize the loan; schedule cut off after "
            f"{len(amortization)} months with {amortization[-1].balance:,.2f} outstanding"
        )
    if optimization is not None:
        warnings.extend(optimization.warnings)
    # Rent is rounded to cents, so a solved scenario may land a fraction below zero
    first = metrics.monthly_cash_flow_schedule[0] if metrics.monthly_cash_flow_schedule else None
    if first is not None and first.net_cash_flow < -CASH_FLOW_TOLERANCE:
        warnings.append("negative monthly cash flow at start")

    logger.debug(
        "analysis: %d amortization months, %d cash-flow years, %d debt years",
        len(amortization),
        len(yearly_cash_flow),
        len(yearly_debt),
    )

    return InvestmentAnalysis(
        params=params,
        optimization=optimization,
        amortization=amortization,
        extended_amortization=extended,
        amortization_converged=converged,
        first_year_tax=first_year_tax,
        metrics=metrics,
        tax_schedule=tax_schedule,
        yearly_cash_flow=yearly_cash_flow,
        yearly_debt=yearly_debt,
        yearly_tax=yearly_tax,
        warnings=warnings,
    )
