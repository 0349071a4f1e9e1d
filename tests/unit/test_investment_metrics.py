# tests/unit/test_investment_metrics.py
import pytest

from rentsim.core.finance.amortization import generate_amortization
from rentsim.core.finance.metrics import compute_investment_metrics
from tests.utils import make_investment_params


def _run(params, fn=None):
    sched = generate_amortization(params.debt_amount, params.monthly_payment, params.interest_rate)
    if fn is None:
        return compute_investment_metrics(params, sched)
    return compute_investment_metrics(params, sched, fn)


def test_totals_and_fixed_horizon():
    m = _run(make_investment_params())
    assert m.total_investment == pytest.approx(220_000)
    assert m.equity == pytest.approx(70_000)
    assert len(m.monthly_cash_flow_schedule) == 481
    assert len(m.cash_flow_schedule) == 481
    assert len(m.roi_schedule) == 481
    assert [r.month for r in m.monthly_cash_flow_schedule] == list(range(481))
    # Rent - payment without tax
    assert m.monthly_cash_flow_schedule[0].net_cash_flow == pytest.approx(200.0)


def test_month_zero_tax_is_signed_marginal_tax():
    params = make_investment_params(apply_tax=True)
    m = _run(params)
    first = m.monthly_cash_flow_schedule[0]
    # Interest 437.50 + AfA 250 + expenses 100 = 787.50 deductible, rent 1000 -> profit 212.50
    assert first.tax_on_rent == pytest.approx(85.0)
    assert first.tax_reimbursement == 0.0
    assert first.net_cash_flow == pytest.approx(1_000 - 800 - 85.0)


def test_loss_month_yields_reimbursement():
    params = make_investment_params(apply_tax=True, expected_rent=500.0)
    m = _run(params)
    first = m.monthly_cash_flow_schedule[0]
    # 500 - 787.50 = -287.50 at 40%
    assert first.tax_on_rent == pytest.approx(-115.0)
    assert first.tax_reimbursement == pytest.approx(115.0)
    assert first.net_cash_flow == pytest.approx(500 - 800 + 115.0)


def test_liquid_starts_at_minus_equity_and_illiquid_excludes_costs():
    params = make_investment_params()
    m = _run(params)
    first = m.monthly_cash_flow_schedule[0]
    assert first.cumulative_liquid == pytest.approx(-70_000 + 200.0)
    # (price - debt) + principal repaid in month 0
    assert first.cumulative_illiquid == pytest.approx(50_000 + (800 - 437.5))
    assert first.cumulative_total == pytest.approx(first.cumulative_liquid + first.cumulative_illiquid)


def test_months_after_payoff_have_no_mortgage():
    params = make_investment_params(debt_amount=1_000.0, monthly_payment=300.0, interest_rate=0.0)
    m = _run(params)
    recs = m.monthly_cash_flow_schedule
    assert [r.mortgage_payment for r in recs[:4]] == pytest.approx([300.0, 300.0, 300.0, 100.0])
    assert recs[4].mortgage_payment == 0.0
    assert recs[480].balance == 0.0
    # Loan fully repaid: equity equals the purchase price
    assert recs[480].cumulative_illiquid == pytest.approx(params.purchase_price)
    assert m.payoff_years == pytest.approx(4 / 12)


def test_break_even_on_total_position():
    # No loan: total = 100 * (m + 1) - 3800 crosses zero at month 37
    params = make_investment_params(
        purchase_price=100_000.0,
        additional_costs=3_800.0,
        expected_rent=100.0,
        debt_amount=0.0,
        monthly_payment=0.0,
        interest_rate=0.0,
    )
    m = _run(params)
    totals = [p.cumulative_total for p in m.cash_flow_schedule]
    assert totals == sorted(totals)
    assert m.break_even_years == pytest.approx(37 / 12)
    # Cash alone never recovers within 40 years
    assert m.break_even_liquid_years == 0.0


def test_max_investment_needed_and_timing():
    params = make_investment_params(
        purchase_price=100_000.0,
        additional_costs=0.0,
        expected_rent=500.0,
        debt_amount=12_000.0,
        monthly_payment=1_000.0,
        interest_rate=0.0,
    )
    m = _run(params)
    # 12 months of -500 on top of the 88k outlay, then +500/month
    assert m.max_investment_needed == pytest.approx(94_000)
    assert m.max_investment_at_years == pytest.approx(11 / 12)


def test_months_in_year_helper_is_injected():
    params = make_investment_params()
    m = _run(params, fn=lambda month, start_month, start_year: 1)
    first = m.monthly_cash_flow_schedule[0]
    assert first.annual_rent_income == pytest.approx(first.rent_income)
    assert first.annual_net_cash_flow == pytest.approx(first.net_cash_flow)


def test_annualized_values_follow_partial_first_year():
    params = make_investment_params(start_month=5)
    m = _run(params)
    assert m.monthly_cash_flow_schedule[0].annual_rent_income == pytest.approx(7 * 1_000)
    assert m.monthly_cash_flow_schedule[7].annual_rent_income == pytest.approx(12 * 1_000)


def test_legacy_roi():
    m = _run(make_investment_params())
    # (1000 * 120 + 200000 * 3% * 10) / 70000
    assert m.roi_10_years == pytest.approx((120_000 + 60_000) / 70_000 * 100)
    assert m.roi_schedule[0].roi == 0.0


def test_zero_equity_roi_is_zero():
    params = make_investment_params(additional_costs=0.0, debt_amount=200_000.0, monthly_payment=1_200.0)
    m = _run(params)
    assert m.equity == 0.0
    assert {r.roi for r in m.roi_schedule} == {0.0}
