"""Command‑line interface for the EMI calculator.

This module uses the ``click`` library to implement a multi‑command interface
with one command per calculator: the EMI calculator with its duration
comparison, the remaining‑loan calculator with the additional‑payment
comparison, the amortization report and the SIP calculator. Schedules can be
printed to the terminal or exported to JSON/CSV files.

Every option can also be set through an environment variable named
``EMI_CALC_<COMMAND>_<OPTION>``, e.g. ``EMI_CALC_SIP_RATE=12``.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from .comparison import (
    candidate_durations,
    compare_contribution_levels,
    compare_durations,
    compare_payment_levels,
    prepayment_impact,
)
from .config import DEFAULT_CANDIDATE_YEARS, MAX_PAYOFF_MONTHS, MAX_PRINTED_ROWS, TRAJECTORY_EVERY
from .data_models import AmortizationRow, LoanTerms
from .engine import payoff_plan, plan_for_term, sample_trajectory, simulate_amortization, total_interest_paid
from .errors import CalculationError
from .formatter import (
    print_blend,
    print_contribution_comparison,
    print_duration_comparison,
    print_emi_summary,
    print_payment_comparison,
    print_payoff,
    print_prepayment_impact,
    print_schedule,
    print_sip_summary,
    print_trajectory,
)
from .investment import blend_existing_and_recurring, sip_projection
from .utils import monthly_rate, parse_year_month, to_decimal, total_months

_SUFFIXES = {
    "k": Decimal("1000"),
    "l": Decimal("100000"),
    "lakh": Decimal("100000"),
    "m": Decimal("1000000"),
    "cr": Decimal("10000000"),
}


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers with any digit grouping ("50,00,000") and shorthand
    with ``k`` (thousand), ``L``/``lakh`` (100 thousand), ``m`` (million) and
    ``cr`` (10 million) suffixes, e.g. "50L" meaning 5_000_000.
    """
    text = value.strip().lower().replace(",", "")
    factor = Decimal(1)
    for suffix in sorted(_SUFFIXES, key=len, reverse=True):
        if text.endswith(suffix):
            factor = _SUFFIXES[suffix]
            text = text[: -len(suffix)].strip()
            break
    try:
        return to_decimal(text) * factor
    except CalculationError:
        raise click.BadParameter(f"Invalid amount: {value}")


def _loan_terms(principal: str, rate: float, years: float, months: int) -> LoanTerms:
    try:
        return LoanTerms(
            principal=parse_amount(principal),
            annual_rate_percent=to_decimal(rate),
            term_months=total_months(years, months),
        )
    except CalculationError as exc:
        raise click.BadParameter(str(exc))


def _serialize_rows(rows: List[AmortizationRow]) -> List[Dict[str, Any]]:
    return [
        {
            "month": row.period,
            "emi": float(row.payment),
            "principal": float(row.principal),
            "interest": float(row.interest),
            "balance": float(row.balance),
            "total_interest": float(row.cumulative_interest),
        }
        for row in rows
    ]


def export_to_json(path: Path, rows: List[AmortizationRow], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": _serialize_rows(rows)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, rows: List[AmortizationRow]) -> None:
    """Export schedule to a CSV file."""
    header = ["Month", "EMI", "Principal", "Interest", "Balance", "Total_Interest"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for entry in _serialize_rows(rows):
            writer.writerow(
                [
                    entry["month"],
                    entry["emi"],
                    entry["principal"],
                    entry["interest"],
                    entry["balance"],
                    entry["total_interest"],
                ]
            )


def principal_options(func):
    func = click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)")(func)
    func = click.option("--principal", "-p", "principal", required=True, help="Loan amount, e.g. 5000000 or 50L")(func)
    return func


def duration_options(func):
    func = click.option("--months", "-m", "months", type=int, default=0, show_default=True, help="Additional months")(func)
    func = click.option("--years", "-y", "years", type=float, default=0, show_default=True, help="Duration in years")(func)
    return func


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
def cli(log_level: str) -> None:
    """EMI, remaining loan, amortization and SIP calculator."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@principal_options
@duration_options
@click.option("--compare/--no-compare", default=True, show_default=True, help="Compare with shorter durations")
def emi(principal: str, rate: float, years: float, months: int, compare: bool) -> None:
    """Compute the EMI and compare it with shorter loan durations."""
    terms = _loan_terms(principal, rate, years, months)
    try:
        plan = plan_for_term(terms.principal, terms.annual_rate_percent, terms.term_months)
        print_emi_summary(terms.principal, plan)
        if compare:
            selected_years = Decimal(terms.term_months) / 12
            comparison = compare_durations(
                terms.principal,
                terms.annual_rate_percent,
                candidate_durations(selected_years, DEFAULT_CANDIDATE_YEARS),
                selected_years=selected_years,
            )
            print_duration_comparison(comparison)
    except CalculationError as exc:
        raise click.ClickException(str(exc))


@cli.command()
@principal_options
@click.option("--emi", "emi_amount", required=True, help="Current monthly EMI")
@click.option("--additional", "additional", help="Extra amount paid on top of the EMI every month")
@click.option("--level", "levels", multiple=True, help="Alternative EMI to compare against the current one")
@click.option("--max-months", "max_months", type=int, default=MAX_PAYOFF_MONTHS, show_default=True, help="Payoff search horizon")
def remaining(
    principal: str,
    rate: float,
    emi_amount: str,
    additional: Optional[str],
    levels: Tuple[str, ...],
    max_months: int,
) -> None:
    """Compute how long the current EMI takes to close a loan."""
    if rate < 0:
        raise click.BadParameter(f"Interest rate cannot be negative; got {rate}", param_hint="'--rate'")
    outstanding = parse_amount(principal)
    payment = parse_amount(emi_amount)
    try:
        plan = payoff_plan(outstanding, to_decimal(rate), payment, max_months=max_months)
    except CalculationError as exc:
        raise click.BadParameter(str(exc), param_hint="'--emi'")
    print_payoff(outstanding, plan)
    if additional:
        try:
            impact = prepayment_impact(outstanding, to_decimal(rate), payment, parse_amount(additional), max_months=max_months)
        except CalculationError as exc:
            raise click.BadParameter(str(exc), param_hint="'--additional'")
        print_prepayment_impact(impact)
    if levels:
        try:
            comparison = compare_payment_levels(
                outstanding,
                to_decimal(rate),
                [payment] + [parse_amount(level) for level in levels],
                max_months=max_months,
            )
        except CalculationError as exc:
            raise click.ClickException(str(exc))
        print_payment_comparison(comparison)


@cli.command()
@principal_options
@duration_options
@click.option("--emi", "emi_amount", help="Monthly payment; the duration is then derived from it")
@click.option("--start-date", "-s", "start_date", help="First payment month (YYYY-MM)")
@click.option("--trajectory/--no-trajectory", default=False, help="Print the sampled balance trajectory")
@click.option("--every", type=int, default=TRAJECTORY_EVERY, show_default=True, help="Trajectory sampling interval")
@click.option("--max-months", "max_months", type=int, default=MAX_PAYOFF_MONTHS, show_default=True, help="Payoff search horizon")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: float,
    years: float,
    months: int,
    emi_amount: Optional[str],
    start_date: Optional[str],
    trajectory: bool,
    every: int,
    max_months: int,
    output: Optional[str],
) -> None:
    """Compute and print the amortization schedule."""
    start = None
    if start_date:
        try:
            start = parse_year_month(start_date)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="'--start-date'")
    amount = parse_amount(principal)
    annual = to_decimal(rate)
    try:
        if emi_amount:
            plan = payoff_plan(amount, annual, parse_amount(emi_amount), max_months=max_months)
        else:
            terms = _loan_terms(principal, rate, years, months)
            plan = plan_for_term(terms.principal, terms.annual_rate_percent, terms.term_months)
        rows = list(simulate_amortization(amount, plan.monthly_payment, monthly_rate(annual), plan.term_months))
        points = sample_trajectory(rows, monthly_rate(annual), every=every) if trajectory else []
    except CalculationError as exc:
        raise click.ClickException(str(exc))

    summary = {
        "principal": float(amount),
        "annual_rate_percent": float(annual),
        "emi": float(plan.monthly_payment),
        "months": plan.term_months,
        "total_interest": float(total_interest_paid(rows)),
    }
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, rows, summary)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, rows)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="'--output'")
        click.echo(f"Schedule exported to {path}")
        return

    print_emi_summary(amount, plan)
    # Limit schedule length printed to avoid flooding the terminal
    if len(rows) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {MAX_PRINTED_ROWS} rows.")
    print_schedule(rows[:MAX_PRINTED_ROWS], start=start)
    if points:
        print_trajectory(points)


@cli.command()
@click.option("--amount", "-a", "amount", required=True, help="Monthly investment")
@click.option("--rate", "-r", "rate", required=True, type=float, help="Expected annual return (percent)")
@duration_options
@click.option("--existing", "existing", help="Amount already invested")
@click.option("--compare/--no-compare", default=True, show_default=True, help="Compare with shorter durations")
def sip(amount: str, rate: float, years: float, months: int, existing: Optional[str], compare: bool) -> None:
    """Project the maturity value of a systematic investment plan."""
    contribution = parse_amount(amount)
    annual = to_decimal(rate)
    duration = total_months(years, months)
    try:
        projection = sip_projection(contribution, annual, duration)
        print_sip_summary(projection)
        if compare:
            selected_years = Decimal(duration) / 12
            comparison = compare_contribution_levels(
                contribution,
                annual,
                candidate_durations(selected_years, DEFAULT_CANDIDATE_YEARS),
                selected_years=selected_years,
            )
            print_contribution_comparison(comparison)
        if existing:
            print_blend(blend_existing_and_recurring(projection, parse_amount(existing)))
    except CalculationError as exc:
        raise click.ClickException(str(exc))


def main() -> None:
    cli(auto_envvar_prefix="EMI_CALC")


if __name__ == "__main__":
    main()
