"""Output helpers for the EMI calculator.

This module renders engine results as plain text tables. Amounts are shown in
whole currency units with Indian digit grouping (``₹40,27,960``); the engine
itself never rounds or formats.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from .config import CURRENCY_SYMBOL
from .data_models import (
    AmortizationRow,
    BlendedProjection,
    ContributionComparison,
    LoanComparison,
    PaymentPlan,
    PrepaymentImpact,
    InvestmentProjection,
    TrajectoryPoint,
)
from .utils import Number, add_months, to_decimal


def format_currency(amount: Number, symbol: str = CURRENCY_SYMBOL) -> str:
    """Round to whole units and group digits the Indian way.

    The last three digits form one group and the rest are split in pairs:
    ``12345678`` becomes ``₹1,23,45,678``.
    """
    value = to_decimal(amount).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    digits = str(abs(int(value)))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])
    return f"{sign}{symbol}{digits}"


def format_duration(months: int) -> str:
    """``240`` -> ``"20 years"``, ``66`` -> ``"5Y 6M"``."""
    years, rest = divmod(months, 12)
    if rest == 0:
        return f"{years} years"
    return f"{years}Y {rest}M"


def print_emi_summary(principal: Number, plan: PaymentPlan) -> None:
    """Print the EMI and the average split of each installment."""
    principal = to_decimal(principal)
    avg_interest = plan.total_interest / plan.term_months
    print("EMI Summary")
    print("-" * 72)
    print(f"Loan amount        : {format_currency(principal)}")
    print(f"Duration           : {format_duration(plan.term_months)}")
    print(f"Monthly EMI        : {format_currency(plan.monthly_payment)}")
    print(f"Total interest     : {format_currency(plan.total_interest)}")
    print(f"Total amount       : {format_currency(principal + plan.total_interest)}")
    print(f"Avg interest/month : {format_currency(avg_interest)}")
    print(f"Avg principal/month: {format_currency(plan.monthly_payment - avg_interest)}")
    print("-" * 72)


def print_duration_comparison(comparison: LoanComparison) -> None:
    """Print every candidate duration and the recommended one."""
    print("Duration comparison")
    print("=" * 72)
    print(f"{'Duration':12s} {'EMI':>14s} {'Interest':>16s} {'Total':>16s}")
    for candidate in comparison.candidates:
        marks = []
        if candidate is comparison.best:
            marks.append("Best")
        if candidate is comparison.selected:
            marks.append("Selected")
        plan = candidate.plan
        print(
            f"{format_duration(plan.term_months):12s} "
            f"{format_currency(plan.monthly_payment):>14s} "
            f"{format_currency(plan.total_interest):>16s} "
            f"{format_currency(candidate.total_cost):>16s}"
            + (f"  [{', '.join(marks)}]" if marks else "")
        )
    print("=" * 72)
    best = comparison.best
    print(f"Recommended duration: {format_duration(best.plan.term_months)}")
    print(f"Monthly EMI         : {format_currency(best.plan.monthly_payment)}")
    print(f"Total interest      : {format_currency(best.plan.total_interest)}")
    savings = comparison.savings_vs_selected
    if savings:
        print(f"You save {format_currency(savings)} compared to your selected duration")


def print_payment_comparison(comparison: LoanComparison) -> None:
    print("Payment comparison")
    print("=" * 72)
    print(f"{'EMI':>14s} {'Months':>8s} {'Interest':>16s} {'Total':>16s}")
    for candidate in comparison.candidates:
        mark = "  [Best]" if candidate is comparison.best else ""
        print(
            f"{format_currency(candidate.duration_or_payment):>14s} "
            f"{candidate.plan.term_months:>8d} "
            f"{format_currency(candidate.plan.total_interest):>16s} "
            f"{format_currency(candidate.total_cost):>16s}{mark}"
        )
    print("=" * 72)


def print_payoff(principal: Number, plan: PaymentPlan) -> None:
    """Print how long the current EMI takes to close the loan."""
    print("Remaining loan")
    print("-" * 72)
    print(f"Outstanding principal: {format_currency(principal)}")
    print(f"Current EMI          : {format_currency(plan.monthly_payment)}")
    print(f"Months to close      : {plan.term_months} ({format_duration(plan.term_months)})")
    print(f"Total interest       : {format_currency(plan.total_interest)}")
    print("-" * 72)


def print_prepayment_impact(impact: PrepaymentImpact) -> None:
    """Print the current plan against the plan with an additional payment."""
    base, fast = impact.baseline, impact.accelerated
    print("Additional payment")
    print("=" * 72)
    print(f"{'':20s} {'Current':>16s} {'With extra':>16s}")
    print(f"{'Monthly EMI':20s} {format_currency(base.monthly_payment):>16s} {format_currency(fast.monthly_payment):>16s}")
    print(f"{'Months to close':20s} {base.term_months:>16d} {fast.term_months:>16d}")
    print(f"{'Total interest':20s} {format_currency(base.total_interest):>16s} {format_currency(fast.total_interest):>16s}")
    print("=" * 72)
    if impact.beneficial:
        print(
            f"Paying {format_currency(impact.additional_payment)} more each month closes the loan in "
            f"{format_duration(fast.term_months)} instead of {format_duration(base.term_months)}."
        )
        print(f"Time saved    : {impact.months_saved} months ({format_duration(impact.months_saved)})")
        print(f"Interest saved: {format_currency(impact.interest_saved)}")
    else:
        print("Additional payment won't change the loan duration significantly.")


def print_schedule(rows: Iterable[AmortizationRow], start: Optional[date] = None) -> None:
    """Print the amortization schedule as a simple table.

    Parameters
    ----------
    rows: Iterable[AmortizationRow]
        The schedule rows to print.
    start: date, optional
        Month of the first installment. When given, a ``Date`` column is added.
    """
    headers = ["Month"]
    if start is not None:
        headers.append("Date")
    headers += ["EMI", "Principal", "Interest", "Balance", "TotalInterest"]
    print("\t".join(headers))
    for row in rows:
        cells = [str(row.period)]
        if start is not None:
            cells.append(add_months(start, row.period - 1).strftime("%b %Y"))
        cells += [
            f"{row.payment:.2f}",
            f"{row.principal:.2f}",
            f"{row.interest:.2f}",
            f"{row.balance:.2f}",
            f"{row.cumulative_interest:.2f}",
        ]
        print("\t".join(cells))


def print_trajectory(points: Iterable[TrajectoryPoint]) -> None:
    print(f"{'Month':>6s} {'Remaining principal':>20s} {'Re-spread EMI':>16s}")
    for point in points:
        print(
            f"{point.period:>6d} {format_currency(point.balance):>20s} "
            f"{format_currency(point.respread_installment):>16s}"
        )


def print_sip_summary(projection: InvestmentProjection) -> None:
    print("SIP Summary")
    print("-" * 72)
    print(f"Monthly investment : {format_currency(projection.monthly_contribution)}")
    print(f"Duration           : {format_duration(projection.months)}")
    print(f"Total invested     : {format_currency(projection.total_contributed)}")
    print(f"Expected returns   : {format_currency(projection.gain)}")
    print(f"Maturity value     : {format_currency(projection.future_value)}")
    print("-" * 72)


def print_contribution_comparison(comparison: ContributionComparison) -> None:
    print("SIP duration comparison")
    print("=" * 72)
    print(f"{'Duration':12s} {'Invested':>14s} {'Returns':>14s} {'Maturity':>16s} {'Return %':>9s}")
    for projection in comparison.candidates:
        mark = "  [Best]" if projection is comparison.best else ""
        print(
            f"{format_duration(projection.months):12s} "
            f"{format_currency(projection.total_contributed):>14s} "
            f"{format_currency(projection.gain):>14s} "
            f"{format_currency(projection.future_value):>16s} "
            f"{projection.return_percent:>8.2f}%{mark}"
        )
    print("=" * 72)
    best = comparison.best
    print(
        f"Your investment grows by {best.return_percent:.2f}% reaching "
        f"{format_currency(best.future_value)} in {format_duration(best.months)}"
    )


def print_blend(blend: BlendedProjection) -> None:
    """Print the SIP with and without the existing amount."""
    sip = blend.recurring
    print("With existing amount")
    print("=" * 72)
    print(f"{'':18s} {'SIP only':>16s} {'SIP + existing':>16s}")
    print(f"{'Total invested':18s} {format_currency(sip.total_contributed):>16s} {format_currency(blend.total_invested):>16s}")
    print(f"{'Expected returns':18s} {format_currency(sip.gain):>16s} {format_currency(blend.gain):>16s}")
    print(f"{'Maturity value':18s} {format_currency(sip.future_value):>16s} {format_currency(blend.future_value):>16s}")
    print("=" * 72)
    print(f"Additional returns generated: {format_currency(blend.additional_benefit)}")
