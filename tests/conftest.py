"""Shared loan and SIP fixtures.

Home loan: 50L at 7.5 % for 20 years.
Remaining loan: 30L outstanding at 7.5 %, paying 25,000 a month.
SIP: 10,000 a month at 12 % for 10 years.
"""

from decimal import Decimal

import pytest

from emi_calc.data_models import LoanTerms


@pytest.fixture
def home_loan() -> LoanTerms:
    return LoanTerms(
        principal=Decimal("5000000"),
        annual_rate_percent=Decimal("7.5"),
        term_months=240,
    )


@pytest.fixture
def remaining_loan() -> dict:
    return {
        "principal": Decimal("3000000"),
        "annual_rate_percent": Decimal("7.5"),
        "monthly_payment": Decimal("25000"),
    }


@pytest.fixture
def sip_plan() -> dict:
    return {
        "monthly_contribution": Decimal("10000"),
        "annual_rate_percent": Decimal("12"),
        "months": 120,
    }
