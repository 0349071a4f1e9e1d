# tests/unit/test_calendar_aggregation.py
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from rentsim.core.finance.amortization import extend_schedule, generate_amortization
from rentsim.core.finance.calendar_years import aggregate_to_calendar_years
from rentsim.core.finance.tax import tax_schedule_by_year
from rentsim.schemas.models import InitialState
from tests.utils import make_amortization_entry


def _rent_records(n, rent=1_000.0):
    return [SimpleNamespace(month=m, rent_income=rent, net_cash_flow=rent) for m in range(n)]


def test_full_year_flows_are_summed():
    years = aggregate_to_calendar_years(_rent_records(24), 0, 2025)
    assert [y.calendar_year for y in years] == [2025, 2026]
    assert years[0].rent_income == pytest.approx(12_000)
    assert years[1].net_cash_flow == pytest.approx(12_000)
    assert years[0].month_count == 12


def test_partial_years_keep_real_month_count():
    years = aggregate_to_calendar_years(_rent_records(24), 5, 2025)
    assert [(y.calendar_year, y.month_count) for y in years] == [(2025, 7), (2026, 12), (2027, 5)]
    assert years[0].rent_income == pytest.approx(7_000)


def test_start_of_year_carries_last_seen_state_across_gap():
    records = [
        make_amortization_entry(0, 89_500.0),
        # months 1..11 missing
        make_amortization_entry(12, 89_000.0),
    ]
    years = aggregate_to_calendar_years(records, 0, 2024, InitialState(balance=90_000.0))
    assert [y.calendar_year for y in years] == [2024, 2025]
    assert years[0].balance_start == pytest.approx(90_000.0)
    assert years[0].balance == pytest.approx(89_500.0)
    assert years[1].balance_start == pytest.approx(89_500.0)
    assert years[1].balance == pytest.approx(89_000.0)


def test_initial_values_accept_mapping():
    years = aggregate_to_calendar_years(_rent_records(3), 0, 2025, {"cumulative_liquid": -50_000.0})
    assert years[0].cumulative_liquid_start == pytest.approx(-50_000.0)
    assert years[0].balance_start == 0.0


def test_initial_values_mapping_rejects_unknown_keys():
    with pytest.raises(ValidationError):
        aggregate_to_calendar_years(_rent_records(3), 0, 2025, {"totalCumulative": 10_000.0})


def test_unordered_input_is_returned_sorted():
    records = [make_amortization_entry(13, 5.0), make_amortization_entry(0, 10.0)]
    years = aggregate_to_calendar_years(records, 0, 2025)
    assert [y.calendar_year for y in years] == [2025, 2026]


def test_amortization_payment_feeds_mortgage_and_debt_boy():
    debt = 320_000.0
    sched = generate_amortization(debt, 1_566.0, 3.5)
    extended = extend_schedule(sched, 480)
    # December start: first calendar year holds a single month
    years = aggregate_to_calendar_years(extended, 11, 2025, InitialState(balance=debt))

    assert years[0].calendar_year == 2025
    assert years[0].month_count == 1
    assert debt - years[0].balance_start == 0.0
    assert debt - years[1].balance_start > 0.0
    assert years[1].balance_start == pytest.approx(sched[0].balance)
    assert years[0].mortgage_payment == pytest.approx(sched[0].payment)
    assert years[1].interest_payment == pytest.approx(sum(e.interest_payment for e in sched[1:13]))
    # Stocks end with the last month of the year
    assert years[1].cumulative_interest == pytest.approx(sched[12].cumulative_interest)


def test_tax_schedule_sets_year_snapshot():
    sched = generate_amortization(100_000, 800, 3.0)
    tax = tax_schedule_by_year(sched, 100_000, 1_200, 40, 0, 2025, 600)
    years = aggregate_to_calendar_years(tax, 0, 2025)
    assert years[0].tax is not None
    assert years[0].tax.rental_income == pytest.approx(7_200)
    assert years[0].tax_on_rent == 0.0  # tax entries carry no cash-flow fields
