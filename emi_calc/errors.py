"""Exceptions raised by the calculation engine.

Every engine function either returns a value or raises one of these. They all
derive from ``ValueError`` so callers that only care about "bad numbers" can
catch that.
"""


class CalculationError(ValueError):
    """Base class for calculation failures."""


class InvalidInput(CalculationError):
    """Raised for a non-positive principal, a negative rate, an empty term and
    similar inputs the formulas are not defined for."""


class NonConvergent(CalculationError):
    """Raised when a payment never retires the balance."""


class NumericOverflow(CalculationError):
    """Raised when an intermediate value overflows or becomes non-finite."""
