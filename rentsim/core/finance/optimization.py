# rentsim/core/finance/optimization.py

from __future__ import annotations

import logging

from rentsim.schemas.models import OptimizationResult

from .tax import AFA_RATE, compute_tax_snapshot

logger = logging.getLogger(__name__)

_MAX_TAX_FRACTION = 0.99
CASH_FLOW_TOLERANCE = 0.05


def solve_optimal_scenario(
    debt: float,
    rate_percent: float,
    building_value: float,
    annual_expenses: float,
    tax_rate_percent: float,
    apply_tax: bool,
    target_cash_flow: float = 0.0,
    target_repayment_rate_percent: float = 2.0,
) -> OptimizationResult:
    """
    Monthly payment (first-month interest + target repayment) and the minimum
    rent that yields `target_cash_flow`.

    Cash flow is rent - payment - tax, with tax = (rent - deductibles) * t
    signed (profit taxed, loss refunded), which gives the closed form

        rent = (payment + target - deductibles * t) / (1 - t)

    The solution is re-checked against that same monthly tax term, the one the
    cash-flow simulation subtracts. `in_loss_region` says whether the rent
    still leaves a rental loss; it is informational only.
    """
    monthly_interest = debt * rate_percent / 100.0 / 12.0
    monthly_repayment = debt * target_repayment_rate_percent / 100.0 / 12.0
    payment = monthly_interest + monthly_repayment

    if apply_tax:
        monthly_expenses = annual_expenses / 12.0
        deductibles = monthly_interest + building_value * AFA_RATE / 12.0 + monthly_expenses
        t = tax_rate_percent / 100.0
        if t >= _MAX_TAX_FRACTION:
            rent = payment + target_cash_flow
        else:
            rent = (payment + target_cash_flow - deductibles * t) / (1.0 - t)
    else:
        rent = payment + target_cash_flow

    payment = round(payment, 2)
    rent = round(rent, 2)

    if not apply_tax:
        return OptimizationResult(
            monthly_payment=payment,
            minimum_rent=rent,
            residual_cash_flow=rent - payment - target_cash_flow,
        )

    snap = compute_tax_snapshot(
        building_value,
        monthly_interest,
        annual_expenses / 12.0,
        tax_rate_percent,
        rent,
        fraction_of_year=1.0 / 12.0,
    )
    residual = rent - payment - snap.tax_on_result - target_cash_flow
    in_loss = snap.net_result < 0
    if not in_loss:
        logger.info("solved rent %.2f leaves a rental profit of %.2f", rent, snap.net_result)

    warnings: list[str] = []
    if abs(residual) > CASH_FLOW_TOLERANCE:
        msg = (
            f"solved rent {rent:.2f} gives monthly cash flow {residual + target_cash_flow:.2f} "
            f"instead of target {target_cash_flow:.2f}"
        )
        logger.warning(msg)
        warnings.append(msg)

    return OptimizationResult(
        monthly_payment=payment,
        minimum_rent=rent,
        residual_cash_flow=residual,
        in_loss_region=in_loss,
        warnings=warnings,
    )
