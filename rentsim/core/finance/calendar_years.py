# rentsim/core/finance/calendar_years.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from rentsim.schemas.models import CalendarYearBucket, InitialState, TaxSnapshot

# Record attribute -> bucket field. Summed over the year.
_FLOW_FIELDS: dict[str, str] = {
    "rent_income": "rent_income",
    "mortgage_payment": "mortgage_payment",
    "payment": "mortgage_payment",  # AmortizationEntry
    "tax_on_rent": "tax_on_rent",
    "tax_reimbursement": "tax_reimbursement",
    "net_cash_flow": "net_cash_flow",
    "interest_payment": "interest_payment",
    "principal_payment": "principal_payment",
}

# Stock fields: last value of the year wins.
_STATE_FIELDS = ("balance", "cumulative_interest", "cumulative_liquid", "cumulative_illiquid", "cumulative_total")

# Stock fields that also get a beginning-of-year snapshot.
_CARRIED_FIELDS = ("balance", "cumulative_liquid", "cumulative_illiquid", "cumulative_total")


def calendar_year_of(month: int, start_month: int, start_year: int) -> int:
    """Calendar year of a 0-based simulation month."""
    return start_year + (start_month + month) // 12


def months_in_calendar_year(month: int, start_month: int, start_year: int, max_months: int = 480) -> int:
    """
    How many simulated months (indices 0..max_months) share the calendar year of `month`.

    Examples (start 2025):
        January start, month 0  -> 12
        June start, month 0     -> 7   (Jun..Dec 2025)
        December start, month 0 -> 1
    """
    year_offset = (start_month + month) // 12
    jan_index = year_offset * 12 - start_month
    dec_index = jan_index + 11

    first = min(month, max(0, jan_index))
    last = max(month, min(max_months, dec_index))
    return last - first + 1


@dataclass
class _YearAccumulator:
    calendar_year: int
    start: dict[str, float]
    months: list[int] = field(default_factory=list)
    flows: dict[str, float] = field(default_factory=dict)
    state: dict[str, float] = field(default_factory=dict)
    tax: TaxSnapshot | None = None

    def freeze(self) -> CalendarYearBucket:
        return CalendarYearBucket(
            calendar_year=self.calendar_year,
            month_indices=self.months,
            tax=self.tax,
            **self.flows,
            **self.state,
            **{f"{k}_start": v for k, v in self.start.items()},
        )


def _initial_state(initial_values: InitialState | Mapping[str, float] | None) -> dict[str, float]:
    if initial_values is None:
        return dict.fromkeys(_CARRIED_FIELDS, 0.0)
    if isinstance(initial_values, InitialState):
        return {k: getattr(initial_values, k) for k in _CARRIED_FIELDS}
    seed = InitialState.model_validate(dict(initial_values))
    return {k: getattr(seed, k) for k in _CARRIED_FIELDS}


def aggregate_to_calendar_years(
    records: Iterable[Any],
    start_month: int,
    start_year: int,
    initial_values: InitialState | Mapping[str, float] | None = None,
) -> list[CalendarYearBucket]:
    """
    Group monthly records into calendar years.

    Works on any monthly record type (amortization entries, cash-flow records,
    tax schedule entries); attributes a record lacks are skipped.

    Beginning-of-year values come from a running state updated as records are
    processed: `initial_values` before the first record, afterwards the last
    processed record's stocks. Records are never looked up by position, so
    gaps in month numbering carry the last known state forward.
    """
    running = _initial_state(initial_values)
    years: dict[int, _YearAccumulator] = {}

    for rec in records:
        year = calendar_year_of(rec.month, start_month, start_year)
        acc = years.get(year)
        if acc is None:
            acc = years[year] = _YearAccumulator(calendar_year=year, start=dict(running))

        acc.months.append(rec.month)

        for attr, target in _FLOW_FIELDS.items():
            value = getattr(rec, attr, None)
            if value is not None:
                acc.flows[target] = acc.flows.get(target, 0.0) + value

        for attr in _STATE_FIELDS:
            value = getattr(rec, attr, None)
            if value is not None:
                acc.state[attr] = value
                if attr in running:
                    running[attr] = value

        snapshot = getattr(rec, "snapshot", None)
        if snapshot is not None:
            acc.tax = snapshot

    return [years[y].freeze() for y in sorted(years)]
