# rentsim/reports/generator.py
from __future__ import annotations

from rentsim.schemas.models import (
    CalendarYearBucket,
    InvestmentAnalysis,
    InvestmentMetrics,
    InvestmentParams,
    OptimizationResult,
    TaxSnapshot,
)

_MONTH_ABBR = ("Jan", "Feb", "Mär", "Apr", "Mai", "Jun", "Jul", "Aug", "Sep", "Okt", "Nov", "Dez")


def _fmt_currency(x: float) -> str:
    """
    Format an amount German-style in whole euros.

    Example:
        123456.789 -> 123.457 €
        -2000 -> -2.000 €
    """
    sign = "-" if round(x) < 0 else ""
    return f"{sign}{abs(x):,.0f} €".replace(",", ".")


def _fmt_pct(x: float) -> str:
    """
    Format a percent value with one decimal and a decimal comma.

    Example:
        3.5 -> 3,5 %
    """
    return f"{x:.1f} %".replace(".", ",")


def _fmt_month(start_month: int, start_year: int, offset: int) -> str:
    """Label of a simulation month, e.g. 'Jan 2025'."""
    idx = start_month + offset
    return f"{_MONTH_ABBR[idx % 12]} {start_year + idx // 12}"


def _fmt_years(years: float) -> str:
    return f"{years:.1f} J.".replace(".", ",")


def _section(title: str) -> str:
    """
    Render a level-2 heading for Markdown sections.
    """
    return f"\n## {title}\n"


# -----------------------
# Top sections
# -----------------------


def _render_header(p: InvestmentParams) -> str:
    lines = [
        f"# Rental Investment Analysis – start {_fmt_month(p.start_month, p.start_year, 0)}",
        "",
        f"- **Purchase Price:** {_fmt_currency(p.purchase_price)}",
        f"- **Additional Costs:** {_fmt_currency(p.additional_costs)}",
        f"- **Loan:** {_fmt_currency(p.debt_amount)} at {_fmt_pct(p.interest_rate)}",
        f"- **Monthly Payment:** {_fmt_currency(p.monthly_payment)}",
        f"- **Monthly Rent:** {_fmt_currency(p.expected_rent)}",
    ]
    if p.apply_tax:
        lines.append(
            f"- **Tax Model:** building value {_fmt_currency(p.building_value)}, "
            f"tax rate {_fmt_pct(p.tax_rate)}, expenses {_fmt_currency(p.annual_expenses)}/yr"
        )
    else:
        lines.append("- **Tax Model:** not applied")
    return "\n".join(lines) + "\n"


def _render_optimization(opt: OptimizationResult | None, p: InvestmentParams) -> str:
    if opt is None:
        return ""
    lines = [
        _section("Optimized Scenario"),
        f"Target cash flow {_fmt_currency(p.target_cash_flow)}/month at {_fmt_pct(p.target_repayment_rate)} initial repayment.",
        "",
        f"- **Monthly Payment:** {opt.monthly_payment:,.2f}",
        f"- **Minimum Rent:** {opt.minimum_rent:,.2f}",
    ]
    if opt.in_loss_region is False:
        lines.append("- *Solved rent produces a rental profit; profit is taxed at the marginal rate.*")
    return "\n".join(lines) + "\n"


def _render_key_metrics(m: InvestmentMetrics) -> str:
    be = _fmt_years(m.break_even_years) if m.break_even_years > 0 else "not reached / immediate"
    lines = [
        _section("Key Metrics"),
        f"- **Total Investment:** {_fmt_currency(m.total_investment)}",
        f"- **Equity (initial cash):** {_fmt_currency(m.equity)}",
        f"- **Payoff Time:** {_fmt_years(m.payoff_years)}",
        f"- **Total Interest:** {_fmt_currency(m.total_interest)}",
        f"- **Break-Even (cash + equity):** {be}",
        f"- **Max Investment Needed:** {_fmt_currency(m.max_investment_needed)} after {_fmt_years(m.max_investment_at_years)}",
        f"- **ROI after 10 years (legacy):** {_fmt_pct(m.roi_10_years)}",
    ]
    return "\n".join(lines) + "\n"


def _render_first_year_tax(t: TaxSnapshot | None, tax_rate: float) -> str:
    if t is None:
        return ""
    lines = [
        _section("Tax Breakdown (Year 1)"),
        f"- **AfA (2%):** {_fmt_currency(t.depreciation)}",
        f"- **Interest:** {_fmt_currency(t.interest)}",
        f"- **Expenses:** {_fmt_currency(t.other_expenses)}",
        f"- **Total Deductible:** {_fmt_currency(t.total_deductible)}",
        f"- **Rental Income:** {_fmt_currency(t.rental_income)}",
        f"- **Tax Savings at {_fmt_pct(tax_rate)}:** {_fmt_currency(t.tax_effect)}",
    ]
    return "\n".join(lines) + "\n"


# -----------------------
# Calendar-year tables
# -----------------------


def _render_cash_flow_table(years: list[CalendarYearBucket]) -> str:
    header = [
        _section("Cash Flow by Calendar Year"),
        "| Year | Months | Rent | Mortgage | Tax | Net Cash Flow | Cash (end) | Equity (end) | Total (end) |",
        "| ---: | ---: | ---: | ---: | ---: | ---: | ---: | ---: | ---: |",
    ]
    rows = [
        f"| {y.calendar_year} "
        f"| {y.month_count} "
        f"| {_fmt_currency(y.rent_income)} "
        f"| {_fmt_currency(y.mortgage_payment)} "
        f"| {_fmt_currency(y.tax_on_rent)} "
        f"| {_fmt_currency(y.net_cash_flow)} "
        f"| {_fmt_currency(y.cumulative_liquid)} "
        f"| {_fmt_currency(y.cumulative_illiquid)} "
        f"| {_fmt_currency(y.cumulative_total)} |"
        for y in years
    ]
    return "\n".join(header + rows) + "\n"


def _render_debt_table(years: list[CalendarYearBucket]) -> str:
    header = [
        _section("Debt by Calendar Year"),
        "| Year | Balance (start) | Interest | Principal | Balance (end) | Cumulative Interest |",
        "| ---: | ---: | ---: | ---: | ---: | ---: |",
    ]
    rows = []
    for y in years:
        rows.append(
            f"| {y.calendar_year} "
            f"| {_fmt_currency(y.balance_start)} "
            f"| {_fmt_currency(y.interest_payment)} "
            f"| {_fmt_currency(y.principal_payment)} "
            f"| {_fmt_currency(y.balance)} "
            f"| {_fmt_currency(y.cumulative_interest)} |"
        )
        # Nothing left to show once the loan is gone
        if y.balance_start <= 0 and y.balance <= 0:
            break
    return "\n".join(header + rows) + "\n"


def _render_tax_table(years: list[CalendarYearBucket]) -> str:
    if not years:
        return ""
    header = [
        _section("Tax by Calendar Year"),
        "| Year | Months | Rent | AfA | Interest | Expenses | Net Result | Tax Savings |",
        "| ---: | ---: | ---: | ---: | ---: | ---: | ---: | ---: |",
    ]
    rows = []
    for y in years:
        t = y.tax
        if t is None:
            continue
        rows.append(
            f"| {y.calendar_year} "
            f"| {y.month_count} "
            f"| {_fmt_currency(t.rental_income)} "
            f"| {_fmt_currency(t.depreciation)} "
            f"| {_fmt_currency(t.interest)} "
            f"| {_fmt_currency(t.other_expenses)} "
            f"| {_fmt_currency(t.net_result)} "
            f"| {_fmt_currency(t.tax_effect)} |"
        )
    return "\n".join(header + rows) + "\n"


def _render_warnings(warnings: list[str]) -> str:
    """
    Render guardrail warnings, if any.
    """
    if not warnings:
        return ""
    lines = [_section("Warnings")]
    for w in warnings:
        lines.append(f"- {w}")
    return "\n".join(lines) + "\n"


# -----------------------
# Orchestration
# -----------------------


def generate_report(analysis: InvestmentAnalysis, title_override: str | None = None) -> str:
    """
    Generate a Markdown report for one pipeline run.

    Sections:
      - Header: inputs summary
      - Optimized Scenario (when optimization ran)
      - Key Metrics: investment, equity, payoff, interest, break-even, drawdown, ROI
      - Tax Breakdown (Year 1) when tax applies
      - Cash Flow / Debt / Tax by calendar year
      - Warnings
    """
    p = analysis.params
    header = _render_header(p)
    if title_override:
        header_lines = header.splitlines()
        if header_lines:
            header_lines[0] = f"# {title_override}"
            header = "\n".join(header_lines) + "\n"

    parts = [
        header,
        _render_optimization(analysis.optimization, p),
        _render_key_metrics(analysis.metrics),
        _render_first_year_tax(analysis.first_year_tax, p.tax_rate),
        _render_cash_flow_table(analysis.yearly_cash_flow),
        _render_debt_table(analysis.yearly_debt),
        _render_tax_table(analysis.yearly_tax),
        _render_warnings(analysis.warnings),
    ]
    return "\n".join(part for part in parts if part).strip() + "\n"


def write_report(path: str, analysis: InvestmentAnalysis) -> None:
    """
    Convenience helper to write the generated report to disk.
    """
    md = generate_report(analysis)
    with open(path, "w", encoding="utf-8") as f:
        f.write(md)
