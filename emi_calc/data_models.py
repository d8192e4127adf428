"""Data models for the EMI calculator.

This module defines the immutable records exchanged between the engine and
its callers: the validated loan terms, payment plans, amortization rows,
comparison results and investment projections. Every calculation returns fresh
instances; nothing here is cached or mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from .errors import InvalidInput
from .utils import monthly_rate


class Horizon(Enum):
    """Terminal value of the payoff-horizon solver.

    ``UNBOUNDED`` means the payment never reduces the principal. It is never
    returned in place of a month count that happens to be large.
    """

    UNBOUNDED = "unbounded"


@dataclass(frozen=True)
class LoanTerms:
    """Validated loan parameters.

    Attributes
    ----------
    principal: Decimal
        Amount borrowed. Must be positive.
    annual_rate_percent: Decimal
        Nominal annual interest rate in percent (``7.5`` for 7.5 %). Zero is a
        valid, interest-free loan.
    term_months: int
        Number of monthly installments. Must be positive.
    """

    principal: Decimal
    annual_rate_percent: Decimal
    term_months: int

    def __post_init__(self) -> None:
        if self.principal <= 0:
            raise InvalidInput(f"Principal must be positive; got {self.principal}")
        if self.annual_rate_percent < 0:
            raise InvalidInput(f"Interest rate cannot be negative; got {self.annual_rate_percent}")
        if self.term_months <= 0:
            raise InvalidInput(f"Loan duration must be at least one month; got {self.term_months}")

    @property
    def monthly_rate(self) -> Decimal:
        return monthly_rate(self.annual_rate_percent)


@dataclass(frozen=True)
class PaymentPlan:
    """A fixed monthly payment and what it costs over its term.

    ``monthly_payment * term_months`` covers the principal. When the plan came
    from a truncated payoff search the final installment is a balloon that
    clears whatever is left.
    """

    monthly_payment: Decimal
    term_months: int
    total_interest: Decimal

    @property
    def total_paid(self) -> Decimal:
        return self.monthly_payment * self.term_months


@dataclass(frozen=True)
class AmortizationRow:
    """One month of an amortization schedule.

    ``payment`` is the scheduled installment. ``interest + principal`` equals
    it on every row except the last, where ``principal`` is whatever balance
    remained. ``cumulative_interest`` is the interest paid in the months before
    this one.
    """

    period: int
    payment: Decimal
    interest: Decimal
    principal: Decimal
    balance: Decimal
    cumulative_interest: Decimal


@dataclass(frozen=True)
class TrajectoryPoint:
    """A sampled point of the balance trajectory.

    ``respread_installment`` is the installment that would clear ``balance``
    over the months left in the schedule.
    """

    period: int
    balance: Decimal
    respread_installment: Decimal


@dataclass(frozen=True)
class ComparisonCandidate:
    """One evaluated option of a comparison.

    ``duration_or_payment`` is the duration in years for duration comparisons
    and the monthly payment for payment-level comparisons.
    """

    duration_or_payment: Decimal
    plan: PaymentPlan
    total_cost: Decimal


@dataclass(frozen=True)
class LoanComparison:
    """Candidates in evaluation order plus the cheapest one.

    ``selected`` is the candidate matching the duration the user asked for, if
    it was part of the comparison.
    """

    candidates: Tuple[ComparisonCandidate, ...]
    best: ComparisonCandidate
    selected: Optional[ComparisonCandidate] = None

    @property
    def savings_vs_selected(self) -> Optional[Decimal]:
        """Absolute interest difference between the best and selected plans."""
        if self.selected is None:
            return None
        return abs(self.best.plan.total_interest - self.selected.plan.total_interest)

    def ranked(self) -> Tuple[ComparisonCandidate, ...]:
        """Candidates ordered by total cost, ties kept in evaluation order."""
        return tuple(sorted(self.candidates, key=lambda c: c.total_cost))


@dataclass(frozen=True)
class PrepaymentImpact:
    """Effect of paying ``additional_payment`` on top of the current EMI."""

    principal: Decimal
    additional_payment: Decimal
    baseline: PaymentPlan
    accelerated: PaymentPlan

    @property
    def months_saved(self) -> int:
        return self.baseline.term_months - self.accelerated.term_months

    @property
    def interest_saved(self) -> Decimal:
        return self.baseline.total_interest - self.accelerated.total_interest

    @property
    def beneficial(self) -> bool:
        return self.interest_saved > 0


@dataclass(frozen=True)
class InvestmentProjection:
    """Maturity of a systematic investment plan (SIP).

    ``future_value`` is at least ``total_contributed`` whenever the rate is
    non-negative.
    """

    monthly_contribution: Decimal
    annual_rate_percent: Decimal
    months: int
    future_value: Decimal
    total_contributed: Decimal

    @property
    def gain(self) -> Decimal:
        return self.future_value - self.total_contributed

    @property
    def return_percent(self) -> Decimal:
        return self.gain / self.total_contributed * 100


@dataclass(frozen=True)
class ContributionComparison:
    """SIP projections in ascending duration order plus the highest-gain one."""

    candidates: Tuple[InvestmentProjection, ...]
    best: InvestmentProjection


@dataclass(frozen=True)
class BlendedProjection:
    """A SIP combined with an amount already invested.

    The existing amount compounds on its own and is simply added to the SIP
    maturity; there is no interaction between the two.
    """

    recurring: InvestmentProjection
    existing_amount: Decimal
    existing_future_value: Decimal

    @property
    def existing_gain(self) -> Decimal:
        return self.existing_future_value - self.existing_amount

    @property
    def total_invested(self) -> Decimal:
        return self.recurring.total_contributed + self.existing_amount

    @property
    def future_value(self) -> Decimal:
        return self.recurring.future_value + self.existing_future_value

    @property
    def gain(self) -> Decimal:
        return self.recurring.gain + self.existing_gain

    @property
    def additional_benefit(self) -> Decimal:
        return self.future_value - self.recurring.future_value
