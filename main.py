# main.py
"""
Entry Point: rentsim

Purpose
-------
Run the rental investment simulation end-to-end and emit a Markdown report:
  1) Load investment parameters (sample defaults or --config JSON).
  2) Optionally solve the payment/rent pair for the target cash flow
     (--optimize), which overrides monthly payment and rent.
  3) Amortize, simulate 40 years of cash flow and equity, aggregate into
     calendar years.
  4) Write the report.

Usage
-----
    python main.py
    python main.py --config data/sample/inputs.json --out out.md --optimize
"""

from __future__ import annotations

import argparse
import logging

from rentsim.core.finance import run_investment_analysis
from rentsim.inputs.inputs import AppInputs, InputsLoader
from rentsim.reports.generator import write_report
from rentsim.schemas.models import InvestmentParams

logger = logging.getLogger("rentsim")


def build_sample_inputs() -> InvestmentParams:
    """Return baseline InvestmentParams for demo purposes."""
    return InvestmentParams(
        purchase_price=400_000.0,
        additional_costs=40_000.0,
        expected_rent=1_400.0,
        debt_amount=320_000.0,
        monthly_payment=1_466.67,
        interest_rate=3.5,
        apply_tax=True,
        building_value=300_000.0,
        tax_rate=42.0,
        annual_expenses=1_200.0,
        start_month=0,
        start_year=2025,
        property_worth=400_000.0,
        target_cash_flow=0.0,
        target_repayment_rate=2.0,
    )


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for configurable runs."""
    p = argparse.ArgumentParser(description="Rental investment simulator (amortization, tax, cash flow, equity)")
    p.add_argument("--config", type=str, default=None, help="Path to JSON config (InvestmentParams or AppInputs).")
    p.add_argument("--out", type=str, default=None, help="Output Markdown path (overrides config).")
    p.add_argument(
        "--optimize",
        action="store_true",
        default=None,
        help="Solve monthly payment and minimum rent for the target cash flow before simulating.",
    )
    p.add_argument("--horizon-months", type=int, default=None, help="Last month of the padded debt schedule (overrides config).")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return p.parse_args()


def main() -> None:
    """Run the analysis and write investment_analysis.md (or chosen output)."""
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    loader = InputsLoader()
    if args.config:
        cfg: AppInputs = loader.load(args.config)
    else:
        # No config file → demo inputs
        cfg = AppInputs(inputs=build_sample_inputs())
    cfg = loader.with_overrides(cfg, out=args.out, optimize=args.optimize, horizon_months=args.horizon_months)

    analysis = run_investment_analysis(cfg.inputs, optimize=cfg.run.optimize, horizon_months=cfg.run.horizon_months)

    try:
        write_report(cfg.run.out, analysis)
    except OSError:
        logger.exception("could not write report to %s", cfg.run.out)
        raise

    m = analysis.metrics
    print(f"Report written to: {cfg.run.out}")
    print(f"Break-even after {m.break_even_years:.1f} years; max investment needed {m.max_investment_needed:,.0f}")
    for w in analysis.warnings:
        print(f"warning: {w}")


if __name__ == "__main__":
    main()
