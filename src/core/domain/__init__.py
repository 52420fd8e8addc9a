"""
Domain value types.

Contains the failure taxonomy (FailureKind, NumericalError hierarchy,
Success/Failure outcomes) and the fixed-income convention enums.
"""

from src.core.domain.conventions import CouponFrequency, DayCountBasis
from src.core.domain.outcomes import (
    DomainViolation,
    Failure,
    FailureKind,
    InvalidFloat,
    NonConvergence,
    NumericalError,
    Outcome,
    SingularDerivative,
    Success,
    capture,
    error_for,
)

__all__ = [
    # Outcomes
    "FailureKind",
    "NumericalError",
    "DomainViolation",
    "NonConvergence",
    "SingularDerivative",
    "InvalidFloat",
    "Success",
    "Failure",
    "Outcome",
    "capture",
    "error_for",
    # Conventions
    "DayCountBasis",
    "CouponFrequency",
]
