"""Investment projections for systematic investment plans (SIP).

A SIP is modelled as an annuity due: each contribution is made at the start of
the month and compounds monthly, so the future value is

    FV = P * (((1 + r)^n - 1) / r) * (1 + r)

An amount that is already invested compounds as a lump sum. The two are
combined additively; they do not interact.
"""

from __future__ import annotations

import logging
from decimal import Decimal, DecimalException

from .data_models import BlendedProjection, InvestmentProjection
from .errors import InvalidInput, NumericOverflow
from .utils import Number, monthly_rate, to_decimal

logger = logging.getLogger(__name__)


def project_sip(monthly_contribution: Number, annual_rate_percent: Number, months: int) -> Decimal:
    """Return the maturity value of ``months`` contributions."""
    contribution = to_decimal(monthly_contribution)
    annual = to_decimal(annual_rate_percent)
    if contribution <= 0:
        raise InvalidInput(f"Monthly contribution must be positive; got {contribution}")
    if annual < 0:
        raise InvalidInput(f"Expected return rate cannot be negative; got {annual}")
    if months <= 0:
        raise InvalidInput(f"Investment duration must be at least one month; got {months}")
    rate = monthly_rate(annual)
    if rate == 0:
        return contribution * months
    try:
        value = contribution * (((1 + rate) ** months - 1) / rate) * (1 + rate)
    except DecimalException as exc:
        raise NumericOverflow(f"SIP value is not computable for rate {rate} over {months} months") from exc
    if not value.is_finite():
        raise NumericOverflow(f"SIP value is not finite for rate {rate} over {months} months")
    return value


def sip_projection(monthly_contribution: Number, annual_rate_percent: Number, months: int) -> InvestmentProjection:
    contribution = to_decimal(monthly_contribution)
    annual = to_decimal(annual_rate_percent)
    future_value = project_sip(contribution, annual, months)
    logger.debug("SIP of %s at %s%% for %d months matures at %s", contribution, annual, months, future_value)
    return InvestmentProjection(
        monthly_contribution=contribution,
        annual_rate_percent=annual,
        months=months,
        future_value=future_value,
        total_contributed=contribution * months,
    )


def project_lump_sum(amount: Number, rate_per_month: Number, months: int) -> Decimal:
    """Return ``amount * (1 + rate)^months``."""
    amount = to_decimal(amount)
    rate = to_decimal(rate_per_month)
    if amount < 0:
        raise InvalidInput(f"Amount cannot be negative; got {amount}")
    if rate < 0:
        raise InvalidInput(f"Monthly rate cannot be negative; got {rate}")
    if months < 0:
        raise InvalidInput(f"Months cannot be negative; got {months}")
    try:
        return amount * (1 + rate) ** months
    except DecimalException as exc:
        raise NumericOverflow(f"Lump sum is not computable for rate {rate} over {months} months") from exc


def blend_existing_and_recurring(projection: InvestmentProjection, existing_amount: Number) -> BlendedProjection:
    """Add an already invested amount to a SIP projection.

    The existing amount compounds over the same months at the same rate. The
    result is the plain sum of both maturities: the model ignores any
    interaction between the lump sum and the contributions.
    """
    existing = to_decimal(existing_amount)
    if existing < 0:
        raise InvalidInput(f"Existing amount cannot be negative; got {existing}")
    existing_value = project_lump_sum(existing, monthly_rate(projection.annual_rate_percent), projection.months)
    return BlendedProjection(
        recurring=projection,
        existing_amount=existing,
        existing_future_value=existing_value,
    )
