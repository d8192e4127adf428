"""Core calculation engine for the EMI calculator.

This module implements the loan side of the calculator: the equated monthly
installment (EMI) for a principal, rate and term, the month-by-month
amortization walk, and its inverse, the number of months a given payment
needs to retire a loan. All functions are pure; invalid input raises one of
the exceptions in :mod:`emi_calc.errors` instead of returning a zero.
"""

from __future__ import annotations

import logging
from decimal import Decimal, DecimalException, ROUND_CEILING, getcontext
from typing import Iterable, Iterator, List, Union

from .config import BALANCE_EPSILON, MAX_PAYOFF_MONTHS, TRAJECTORY_EVERY
from .data_models import AmortizationRow, Horizon, PaymentPlan, TrajectoryPoint
from .errors import InvalidInput, NonConvergent, NumericOverflow
from .utils import Number, monthly_rate, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def solve_emi(principal: Number, rate_per_month: Number, term: int) -> Decimal:
    """Return the equated monthly installment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.

    Raises
    ------
    InvalidInput
        If the principal or term is not positive or the rate is negative.
    NumericOverflow
        If ``(1 + i)^n`` overflows or the result is not finite.
    """
    principal = to_decimal(principal)
    rate = to_decimal(rate_per_month)
    if principal <= 0:
        raise InvalidInput(f"Principal must be positive; got {principal}")
    if term <= 0:
        raise InvalidInput(f"Term must be positive; got {term}")
    if rate < 0:
        raise InvalidInput(f"Monthly rate cannot be negative; got {rate}")
    if rate == 0:
        return principal / Decimal(term)
    try:
        factor = (1 + rate) ** term
        payment = principal * (rate * factor) / (factor - 1)
    except DecimalException as exc:
        raise NumericOverflow(
            f"EMI is not computable for rate {rate} over {term} months"
        ) from exc
    if not payment.is_finite():
        raise NumericOverflow(f"EMI is not finite for rate {rate} over {term} months")
    return payment


def compute_emi(principal: Number, annual_rate_percent: Number, term_months: int) -> Decimal:
    """Return the EMI for an annual percentage rate (``7.5`` for 7.5 %)."""
    rate = to_decimal(annual_rate_percent)
    if rate < 0:
        raise InvalidInput(f"Interest rate cannot be negative; got {rate}")
    return solve_emi(principal, monthly_rate(rate), term_months)


def plan_for_term(principal: Number, annual_rate_percent: Number, term_months: int) -> PaymentPlan:
    """Return the EMI plan for a fixed term.

    Total interest is ``EMI * term - principal``.
    """
    principal = to_decimal(principal)
    emi = compute_emi(principal, annual_rate_percent, term_months)
    plan = PaymentPlan(
        monthly_payment=emi,
        term_months=term_months,
        total_interest=emi * term_months - principal,
    )
    logger.debug("EMI for %s at %s%% over %d months: %s", principal, annual_rate_percent, term_months, emi)
    return plan


def simulate_amortization(
    principal: Number,
    monthly_payment: Number,
    rate_per_month: Number,
    term_months: int,
) -> Iterator[AmortizationRow]:
    """Walk the loan month by month.

    Returns a generator of at most ``term_months`` rows. It stops early when the
    balance reaches zero and, on the last scheduled month, applies whatever
    balance is left so that the final row always ends at zero.

    The inputs are checked before the generator is returned, so a payment that
    does not cover the first month's interest raises ``NonConvergent`` here
    rather than on iteration.
    """
    principal = to_decimal(principal)
    payment = to_decimal(monthly_payment)
    rate = to_decimal(rate_per_month)
    if principal <= 0:
        raise InvalidInput(f"Principal must be positive; got {principal}")
    if payment <= 0:
        raise InvalidInput(f"Monthly payment must be positive; got {payment}")
    if term_months <= 0:
        raise InvalidInput(f"Term must be positive; got {term_months}")
    if rate < 0:
        raise InvalidInput(f"Monthly rate cannot be negative; got {rate}")
    if rate > 0 and payment <= principal * rate:
        raise NonConvergent(
            f"Payment {payment} does not cover the first month's interest of {principal * rate}"
        )
    return _walk(principal, payment, rate, term_months)


def _walk(balance: Decimal, payment: Decimal, rate: Decimal, term_months: int) -> Iterator[AmortizationRow]:
    cumulative_interest = ZERO
    for period in range(1, term_months + 1):
        interest = balance * rate
        principal_payment = payment - interest
        # Last scheduled month or overshoot: pay off exactly what is left
        if period == term_months or principal_payment > balance:
            principal_payment = balance
        balance -= principal_payment
        if balance < BALANCE_EPSILON:
            principal_payment += balance
            balance = ZERO
        # Interest paid in earlier months only
        yield AmortizationRow(
            period=period,
            payment=payment,
            interest=interest,
            principal=principal_payment,
            balance=balance,
            cumulative_interest=cumulative_interest,
        )
        cumulative_interest += interest
        if balance == 0:
            return


def total_interest_paid(rows: Iterable[AmortizationRow]) -> Decimal:
    """Return the interest paid over a whole schedule, final month included."""
    last = None
    for last in rows:
        pass
    if last is None:
        return ZERO
    return last.cumulative_interest + last.interest


def amortization_schedule(principal: Number, annual_rate_percent: Number, term_months: int) -> List[AmortizationRow]:
    """Return the full schedule of an EMI loan."""
    emi = compute_emi(principal, annual_rate_percent, term_months)
    return list(simulate_amortization(principal, emi, monthly_rate(annual_rate_percent), term_months))


def months_to_payoff(
    principal: Number,
    rate_per_month: Number,
    monthly_payment: Number,
    max_months: int = MAX_PAYOFF_MONTHS,
    truncate: bool = True,
) -> Union[int, Horizon]:
    """Return the number of months ``monthly_payment`` needs to retire the loan.

    Returns ``Horizon.UNBOUNDED`` when the payment does not exceed the first
    month's interest. The search stops at ``max_months`` for any rate; with
    ``truncate`` the cap itself is returned, otherwise ``NonConvergent`` is
    raised.
    """
    principal = to_decimal(principal)
    rate = to_decimal(rate_per_month)
    payment = to_decimal(monthly_payment)
    if principal <= 0:
        raise InvalidInput(f"Principal must be positive; got {principal}")
    if payment <= 0:
        raise InvalidInput(f"Monthly payment must be positive; got {payment}")
    if rate < 0:
        raise InvalidInput(f"Monthly rate cannot be negative; got {rate}")
    if max_months <= 0:
        raise InvalidInput(f"Month cap must be positive; got {max_months}")

    if rate == 0:
        months = max(1, int(((principal - BALANCE_EPSILON) / payment).to_integral_value(rounding=ROUND_CEILING)))
        if months <= max_months:
            return months
        balance = principal - payment * max_months
    elif payment <= principal * rate:
        return Horizon.UNBOUNDED
    else:
        balance = principal
        months = 0
        while months < max_months:
            balance = balance + balance * rate - payment
            months += 1
            if balance <= BALANCE_EPSILON:
                return months
    if not truncate:
        raise NonConvergent(f"Loan is not repaid within {max_months} months; {balance:.2f} remains")
    logger.warning("Payoff search stopped at %d months with %.2f outstanding", max_months, balance)
    return max_months


def payoff_plan(
    principal: Number,
    annual_rate_percent: Number,
    monthly_payment: Number,
    max_months: int = MAX_PAYOFF_MONTHS,
    truncate: bool = True,
) -> PaymentPlan:
    """Return the plan of paying ``monthly_payment`` until the loan is closed.

    Total interest is summed over the actual schedule, so a short final month
    is not charged as a full installment.
    """
    principal = to_decimal(principal)
    payment = to_decimal(monthly_payment)
    rate = monthly_rate(annual_rate_percent)
    if rate < 0:
        raise InvalidInput(f"Interest rate cannot be negative; got {annual_rate_percent}")
    months = months_to_payoff(principal, rate, payment, max_months=max_months, truncate=truncate)
    if months is Horizon.UNBOUNDED:
        raise NonConvergent(
            f"EMI {payment} is too low to cover the monthly interest of {principal * rate:.2f}"
        )
    total_interest = total_interest_paid(simulate_amortization(principal, payment, rate, months))
    return PaymentPlan(monthly_payment=payment, term_months=months, total_interest=total_interest)


def sample_trajectory(
    rows: Iterable[AmortizationRow],
    rate_per_month: Number,
    every: int = TRAJECTORY_EVERY,
) -> List[TrajectoryPoint]:
    """Sample the balance trajectory of a schedule.

    Keeps the first month, every ``every``-th month and the final month. Each
    point carries the installment needed to clear the balance over the months
    left: ``balance / remaining * (1 + rate)``.
    """
    if every <= 0:
        raise InvalidInput(f"Sampling interval must be positive; got {every}")
    rate = to_decimal(rate_per_month)
    schedule = list(rows)
    if not schedule:
        return []
    last_period = schedule[-1].period
    points: List[TrajectoryPoint] = []
    for row in schedule:
        if row.period != 1 and row.period % every != 0 and row.period != last_period:
            continue
        remaining = last_period - row.period
        respread = row.balance / remaining * (1 + rate) if remaining > 0 else ZERO
        points.append(TrajectoryPoint(period=row.period, balance=row.balance, respread_installment=respread))
    return points
