"""Side-by-side evaluation of loan and SIP options.

Candidates are evaluated in ascending order (duration or payment) and the
winner is picked by an explicit comparison of the computed totals, never by
assuming that a shorter loan is cheaper. Totals are compared at cent
precision; on a tie the candidate seen first, i.e. the shorter duration or
the smaller payment, is kept.
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from .config import CENT, DEFAULT_CANDIDATE_YEARS, MAX_PAYOFF_MONTHS
from .data_models import (
    ComparisonCandidate,
    ContributionComparison,
    Horizon,
    InvestmentProjection,
    LoanComparison,
    PrepaymentImpact,
)
from .engine import months_to_payoff, payoff_plan, plan_for_term
from .errors import InvalidInput, NonConvergent
from .investment import sip_projection
from .utils import Number, monthly_rate, to_decimal, total_months

logger = logging.getLogger(__name__)


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def candidate_durations(selected_years: Number, base: Iterable[Number] = DEFAULT_CANDIDATE_YEARS) -> List[Decimal]:
    """Return ``base`` plus the selected duration, ascending, up to the selection."""
    selected = to_decimal(selected_years)
    values = {to_decimal(years) for years in base}
    values.add(selected)
    return sorted(years for years in values if years <= selected)


def _ordered(values: Iterable[Number], upper: Optional[Number] = None) -> List[Decimal]:
    ordered = sorted({to_decimal(v) for v in values})
    if upper is not None:
        limit = to_decimal(upper)
        ordered = [v for v in ordered if v <= limit]
    return ordered


def compare_durations(
    principal: Number,
    annual_rate_percent: Number,
    durations: Iterable[Number],
    selected_years: Optional[Number] = None,
) -> LoanComparison:
    """Compute the EMI plan for every duration (in years) and pick the cheapest.

    With ``selected_years`` only durations up to it are evaluated and the
    matching candidate is reported as ``selected``.
    """
    principal = to_decimal(principal)
    years_list = _ordered(durations, selected_years)
    if not years_list:
        raise InvalidInput("No candidate durations to compare")

    candidates: List[ComparisonCandidate] = []
    best: Optional[ComparisonCandidate] = None
    for years in years_list:
        months = total_months(years)
        if months <= 0:
            raise InvalidInput(f"Candidate duration must be at least one month; got {years} years")
        plan = plan_for_term(principal, annual_rate_percent, months)
        candidate = ComparisonCandidate(
            duration_or_payment=years,
            plan=plan,
            total_cost=principal + plan.total_interest,
        )
        candidates.append(candidate)
        if best is None or _money(plan.total_interest) < _money(best.plan.total_interest):
            best = candidate

    selected = None
    if selected_years is not None:
        wanted = to_decimal(selected_years)
        selected = next((c for c in candidates if c.duration_or_payment == wanted), None)
    return LoanComparison(candidates=tuple(candidates), best=best, selected=selected)


def compare_payment_levels(
    principal: Number,
    annual_rate_percent: Number,
    payments: Iterable[Number],
    max_months: int = MAX_PAYOFF_MONTHS,
) -> LoanComparison:
    """Compute the payoff plan for every monthly payment and pick the cheapest.

    Payments that do not cover the monthly interest are skipped.
    """
    principal = to_decimal(principal)
    rate = monthly_rate(annual_rate_percent)
    candidates: List[ComparisonCandidate] = []
    best: Optional[ComparisonCandidate] = None
    for payment in _ordered(payments):
        if months_to_payoff(principal, rate, payment, max_months=max_months) is Horizon.UNBOUNDED:
            logger.debug("Skipping payment %s: it does not cover the interest", payment)
            continue
        plan = payoff_plan(principal, annual_rate_percent, payment, max_months=max_months)
        candidate = ComparisonCandidate(
            duration_or_payment=payment,
            plan=plan,
            total_cost=principal + plan.total_interest,
        )
        candidates.append(candidate)
        if best is None or _money(plan.total_interest) < _money(best.plan.total_interest):
            best = candidate
    if best is None:
        raise NonConvergent("None of the payment levels covers the monthly interest")
    return LoanComparison(candidates=tuple(candidates), best=best)


def prepayment_impact(
    principal: Number,
    annual_rate_percent: Number,
    current_payment: Number,
    additional_payment: Number,
    max_months: int = MAX_PAYOFF_MONTHS,
) -> PrepaymentImpact:
    """Compare closing the loan with the current EMI against EMI plus an extra amount."""
    principal = to_decimal(principal)
    current = to_decimal(current_payment)
    additional = to_decimal(additional_payment)
    if additional <= 0:
        raise InvalidInput(f"Additional amount must be greater than 0; got {additional}")
    baseline = payoff_plan(principal, annual_rate_percent, current, max_months=max_months)
    accelerated = payoff_plan(principal, annual_rate_percent, current + additional, max_months=max_months)
    return PrepaymentImpact(
        principal=principal,
        additional_payment=additional,
        baseline=baseline,
        accelerated=accelerated,
    )


def compare_contribution_levels(
    monthly_contribution: Number,
    annual_rate_percent: Number,
    durations: Iterable[Number],
    selected_years: Optional[Number] = None,
) -> ContributionComparison:
    """Project the SIP for every duration (in years) and pick the highest gain."""
    years_list = _ordered(durations, selected_years)
    if not years_list:
        raise InvalidInput("No candidate durations to compare")

    candidates: List[InvestmentProjection] = []
    best: Optional[InvestmentProjection] = None
    for years in years_list:
        projection = sip_projection(monthly_contribution, annual_rate_percent, total_months(years))
        candidates.append(projection)
        if best is None or _money(projection.gain) > _money(best.gain):
            best = projection
    return ContributionComparison(candidates=tuple(candidates), best=best)
