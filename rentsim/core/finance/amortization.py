# rentsim/core/finance/amortization.py

from __future__ import annotations

import logging
from collections.abc import Sequence

from rentsim.schemas.models import AmortizationEntry

logger = logging.getLogger(__name__)

AMORTIZATION_CEILING = 1200  # months (100 years)
DEFAULT_HORIZON_MONTHS = 480
_PAID_OFF_EPS = 0.01  # currency units


def generate_amortization(principal: float, monthly_payment: float, annual_rate_percent: float) -> list[AmortizationEntry]:
    """
    Month-by-month schedule for a loan repaid with a fixed monthly payment.

    Month indices start at 0. The last entry carries the actual (possibly
    partial) final payment and a balance of exactly 0.

    A payment at or below the interest-only amount never amortizes; the schedule
    then stops at AMORTIZATION_CEILING entries instead of looping forever. Use
    schedule_converged() to detect that case.
    """
    if principal <= 0:
        return []

    monthly_rate = annual_rate_percent / 100.0 / 12.0
    balance = float(principal)
    total_interest = 0.0
    out: list[AmortizationEntry] = []

    while balance > 0 and len(out) < AMORTIZATION_CEILING:
        interest = balance * monthly_rate
        principal_pay = max(0.0, monthly_payment - interest)
        # Final partial payment
        if principal_pay > balance:
            principal_pay = balance

        balance -= principal_pay
        total_interest += interest
        if balance <= _PAID_OFF_EPS:
            balance = 0.0

        out.append(
            AmortizationEntry(
                month=len(out),
                payment=principal_pay + interest,
                interest_payment=interest,
                principal_payment=principal_pay,
                balance=balance,
                cumulative_interest=total_interest,
            )
        )

    if balance > 0:
        logger.warning(
            "amortization did not converge: payment %.2f vs. interest %.2f, balance %.2f after %d months",
            monthly_payment,
            balance * monthly_rate,
            balance,
            len(out),
        )
    return out


def schedule_converged(schedule: Sequence[AmortizationEntry]) -> bool:
    """True unless the schedule was cut off at the ceiling with debt still outstanding."""
    if len(schedule) < AMORTIZATION_CEILING:
        return True
    return schedule[-1].balance <= 0.0


def extend_schedule(schedule: Sequence[AmortizationEntry], target_months: int = DEFAULT_HORIZON_MONTHS) -> list[AmortizationEntry]:
    """
    Pad a finished schedule with zero-flow, zero-balance months through target_months (inclusive).

    Numbering continues from the last entry's own month index, so a schedule
    that was re-indexed or filtered upstream still comes out gap-free.
    """
    out = list(schedule)
    last = schedule[-1] if schedule else None
    final_interest = last.cumulative_interest if last else 0.0
    next_month = last.month + 1 if last else 0

    for m in range(next_month, target_months + 1):
        out.append(
            AmortizationEntry(
                month=m,
                payment=0.0,
                interest_payment=0.0,
                principal_payment=0.0,
                balance=0.0,
                cumulative_interest=final_interest,
            )
        )
    return out
