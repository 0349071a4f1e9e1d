# rentsim/core/finance/__init__.py

from .amortization import (
    AMORTIZATION_CEILING,
    extend_schedule,
    generate_amortization,
    schedule_converged,
)
from .calendar_years import aggregate_to_calendar_years, calendar_year_of, months_in_calendar_year
from .engine import run_investment_analysis
from .metrics import compute_investment_metrics
from .optimization import solve_optimal_scenario
from .tax import compute_tax_snapshot, tax_schedule_by_year

__all__ = [
    "run_investment_analysis",
    "AMORTIZATION_CEILING",
    "generate_amortization",
    "schedule_converged",
    "extend_schedule",
    "compute_tax_snapshot",
    "tax_schedule_by_year",
    "solve_optimal_scenario",
    "compute_investment_metrics",
    "aggregate_to_calendar_years",
    "calendar_year_of",
    "months_in_calendar_year",
]
