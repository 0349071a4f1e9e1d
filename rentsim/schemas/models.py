# rentsim/schemas/models.py

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# =========================
# Core inputs
# =========================


class InvestmentParams(BaseModel):
    """
    Property, loan and tax parameters for one rental investment.

    Money amounts share one implicit currency. Rates are entered in *percent*
    (3.5 = 3.5%), matching how lenders and tax tables quote them.
    Keys may be given in snake_case or camelCase.
    """

    purchase_price: float = Field(..., description="Contract price of the property.")
    additional_costs: float = Field(
        0.0, description="One-time acquisition costs (transfer tax, notary, broker). Sunk; not part of property equity."
    )
    expected_rent: float = Field(..., description="Monthly net cold rent received.")
    debt_amount: float = Field(..., description="Loan principal at purchase.")
    monthly_payment: float = Field(..., description="Fixed monthly mortgage payment (interest + principal).")
    interest_rate: float = Field(..., description="Annual nominal interest rate in percent.")
    apply_tax: bool = Field(False, description="Whether rental losses/profits are run through the tax model.")
    building_value: float = Field(0.0, description="Depreciable building share of the purchase price (AfA basis).")
    tax_rate: float = Field(0.0, description="Personal marginal income tax rate in percent.")
    annual_expenses: float = Field(0.0, description="Annual non-recoverable, tax-deductible expenses.")
    start_month: int = Field(0, ge=0, le=11, description="Calendar month of the first simulated month (0 = January).")
    start_year: int = Field(2025, description="Calendar year of the first simulated month.")
    property_worth: float = Field(0.0, description="Current market value, basis for the legacy ROI appreciation.")
    target_cash_flow: float = Field(0.0, description="Desired monthly cash flow for optimization mode.")
    target_repayment_rate: float = Field(2.0, description="Desired initial repayment rate in percent for optimization mode.")

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore")


class InitialState(BaseModel):
    """Stock values in force before the first simulated month (seed for start-of-year snapshots)."""

    balance: float = 0.0
    cumulative_liquid: float = 0.0
    cumulative_illiquid: float = 0.0
    cumulative_total: float = 0.0

    model_config = ConfigDict(frozen=True, extra="forbid")


# =========================
# Leaf finance records
# =========================


class AmortizationEntry(BaseModel):
    """One month of a fixed-payment loan schedule."""

    month: int = Field(..., ge=0, description="0-based month index from investment start.")
    payment: float = Field(..., description="Amount actually paid this month (partial on the final month).")
    interest_payment: float = Field(..., description="Interest portion of the payment.")
    principal_payment: float = Field(..., description="Principal portion of the payment.")
    balance: float = Field(..., description="Remaining principal after this month's payment.")
    cumulative_interest: float = Field(..., description="Interest paid from month 0 through this month.")

    model_config = ConfigDict(frozen=True)


class TaxSnapshot(BaseModel):
    """
    Simplified German rental taxation for one period (month, partial year or year).

    Only losses produce a visible benefit (`tax_effect`). `tax_on_result` is the
    signed marginal tax on the period result (negative = refund) and is what the
    monthly cash-flow simulation subtracts.
    """

    depreciation: float = Field(..., description="AfA for the period: 2% of building value, pro-rated.")
    interest: float = Field(..., description="Mortgage interest paid in the period.")
    other_expenses: float = Field(..., description="Other deductible expenses in the period.")
    total_deductible: float = Field(..., description="depreciation + interest + other_expenses.")
    rental_income: float = Field(..., description="Rent received in the period.")
    net_result: float = Field(..., description="rental_income - total_deductible. Negative = loss.")
    tax_effect: float = Field(..., description="Tax savings from a loss; 0 for a profit.")
    tax_on_result: float = Field(..., description="net_result x tax rate (signed).")

    model_config = ConfigDict(frozen=True)

    @property
    def taxable_income(self) -> float:
        return self.net_result if self.net_result > 0 else 0.0

    @property
    def deductible_overflow(self) -> float:
        return -self.net_result if self.net_result < 0 else 0.0


class TaxScheduleEntry(BaseModel):
    """Calendar-year tax result repeated on each month of that year."""

    month: int = Field(..., ge=0, description="0-based month index.")
    savings: float = Field(..., description="Tax savings of the month's calendar year.")
    snapshot: TaxSnapshot = Field(..., description="Pro-rated tax snapshot of the month's calendar year.")

    model_config = ConfigDict(frozen=True)


class OptimizationResult(BaseModel):
    """Payment/rent pair solved for a target cash flow and repayment rate."""

    monthly_payment: float = Field(..., description="Initial interest plus target repayment, rounded to cents.")
    minimum_rent: float = Field(..., description="Rent needed to hit the target cash flow, rounded to cents.")
    residual_cash_flow: float = Field(
        0.0, description="Monthly cash flow minus target at the solved rent, with the signed tax the simulation applies."
    )
    in_loss_region: bool | None = Field(
        None, description="Whether the solved rent leaves a rental loss; None when no tax model applies."
    )
    warnings: list[str] = Field(default_factory=list, description="Consistency notes from the re-check.")

    model_config = ConfigDict(frozen=True)


# =========================
# Simulation outputs
# =========================


class MonthlyCashFlowRecord(BaseModel):
    """One simulated month of liquid and illiquid investment position."""

    month: int = Field(..., ge=0, description="0-based month index.")
    rent_income: float = Field(..., description="Rent received this month.")
    mortgage_payment: float = Field(..., description="Mortgage payment actually made (0 once paid off).")
    interest_payment: float = Field(0.0, description="Interest part of the mortgage payment.")
    principal_payment: float = Field(0.0, description="Principal part of the mortgage payment.")
    balance: float = Field(0.0, description="Remaining loan balance after this month.")
    cumulative_interest: float = Field(0.0, description="Interest paid through this month.")
    tax_on_rent: float = Field(0.0, description="Signed tax effect subtracted from cash flow (negative = refund).")
    tax_reimbursement: float = Field(0.0, description="Refund part of tax_on_rent as a positive amount.")
    net_cash_flow: float = Field(..., description="rent_income - mortgage_payment - tax_on_rent.")

    annual_rent_income: float = Field(0.0, description="rent_income x investment months in this calendar year.")
    annual_mortgage_payment: float = Field(0.0, description="mortgage_payment x investment months in this calendar year.")
    annual_tax_on_rent: float = Field(0.0, description="tax_on_rent x investment months in this calendar year.")
    annual_net_cash_flow: float = Field(0.0, description="net_cash_flow x investment months in this calendar year.")

    cumulative_liquid: float = Field(..., description="Cash position: -initial equity plus all net cash flows so far.")
    cumulative_illiquid: float = Field(..., description="Property equity: (price - debt) + principal repaid.")
    cumulative_total: float = Field(..., description="cumulative_liquid + cumulative_illiquid.")

    model_config = ConfigDict(frozen=True)


class CashFlowPoint(BaseModel):
    month: int
    cumulative_liquid: float
    cumulative_illiquid: float
    cumulative_total: float

    model_config = ConfigDict(frozen=True)


class RoiPoint(BaseModel):
    month: int
    roi: float = Field(..., description="Return on initial equity in percent.")

    model_config = ConfigDict(frozen=True)


class CalendarYearBucket(BaseModel):
    """
    Monthly records grouped into one calendar year.

    Flow fields hold sums over the months present; stock fields hold the value
    at the end of the year's last month (`*_start` fields: just before its first).
    """

    calendar_year: int
    month_indices: list[int] = Field(default_factory=list, description="Month indices that fell into this year.")

    # Flows (sums)
    rent_income: float = 0.0
    mortgage_payment: float = 0.0
    tax_on_rent: float = 0.0
    tax_reimbursement: float = 0.0
    net_cash_flow: float = 0.0
    interest_payment: float = 0.0
    principal_payment: float = 0.0

    # Stocks at end of year
    balance: float = 0.0
    cumulative_interest: float = 0.0
    cumulative_liquid: float = 0.0
    cumulative_illiquid: float = 0.0
    cumulative_total: float = 0.0

    # Stocks at beginning of year
    balance_start: float = 0.0
    cumulative_liquid_start: float = 0.0
    cumulative_illiquid_start: float = 0.0
    cumulative_total_start: float = 0.0

    tax: TaxSnapshot | None = Field(None, description="Calendar-year tax snapshot when aggregating a tax schedule.")

    model_config = ConfigDict(frozen=True)

    @property
    def month_count(self) -> int:
        return len(self.month_indices)


class InvestmentMetrics(BaseModel):
    """Headline figures and monthly schedules of one simulation run."""

    total_investment: float = Field(..., description="purchase_price + additional_costs.")
    equity: float = Field(..., description="Initial cash outlay: total_investment - debt_amount.")
    payoff_years: float = Field(..., description="Amortization length in years.")
    total_interest: float = Field(..., description="Interest paid over the whole loan.")
    break_even_years: float = Field(..., description="First month with cumulative_total >= 0, in years (0 if never).")
    break_even_liquid_years: float = Field(0.0, description="First month with cumulative_liquid >= 0, in years (0 if never).")
    max_investment_needed: float = Field(..., description="Depth of the lowest cumulative cash position.")
    max_investment_at_years: float = Field(..., description="When the lowest cumulative cash position occurs, in years.")
    roi_10_years: float = Field(0.0, description="Legacy ROI at month 120 in percent.")

    monthly_cash_flow_schedule: list[MonthlyCashFlowRecord] = Field(default_factory=list)
    cash_flow_schedule: list[CashFlowPoint] = Field(default_factory=list)
    roi_schedule: list[RoiPoint] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class InvestmentAnalysis(BaseModel):
    """Everything one pipeline run produces, ready for presentation."""

    params: InvestmentParams = Field(..., description="Effective inputs (after optimization overrides).")
    optimization: OptimizationResult | None = Field(None, description="Solved payment/rent when optimization ran.")
    amortization: list[AmortizationEntry] = Field(default_factory=list)
    extended_amortization: list[AmortizationEntry] = Field(default_factory=list)
    amortization_converged: bool = Field(True, description="False when the schedule hit the month ceiling.")
    first_year_tax: TaxSnapshot | None = Field(None, description="Tax snapshot for the first 12 months when tax applies.")
    metrics: InvestmentMetrics
    tax_schedule: list[TaxScheduleEntry] = Field(default_factory=list)
    yearly_cash_flow: list[CalendarYearBucket] = Field(default_factory=list)
    yearly_debt: list[CalendarYearBucket] = Field(default_factory=list)
    yearly_tax: list[CalendarYearBucket] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
