"""
Outcomes — Failure Taxonomy and Tagged Results

The numerical core distinguishes a small closed set of failure kinds:
- INVALID_PARAMETER: a parameter is outside the mathematical domain
- DID_NOT_CONVERGE: a series, continued fraction or iteration hit its cap
- SINGULAR: a derivative or divisor is numerically zero
- OVERFLOW: an otherwise valid computation produced NaN or +/-Inf

Kernel routines raise a NumericalError subclass carrying its kind. The
caller-facing layer converts any call into an Outcome (Success | Failure)
with capture(), so callers can branch on the kind without try/except.

CRITICAL INVARIANTS:
1. Every NumericalError has exactly one FailureKind
2. capture() never lets a NumericalError or pydantic ValidationError escape
3. Success never carries a NaN or infinite float
4. Failure is reported as-is: no retries, no default substitution
"""

import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

T = TypeVar("T")


class FailureKind(str, Enum):
    """Named failure conditions surfaced to callers."""

    INVALID_PARAMETER = "INVALID_PARAMETER"
    DID_NOT_CONVERGE = "DID_NOT_CONVERGE"
    SINGULAR = "SINGULAR"
    OVERFLOW = "OVERFLOW"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class NumericalError(Exception):
    """Base class for numerical failures; `kind` maps it to a FailureKind."""

    kind: FailureKind = FailureKind.INVALID_PARAMETER


class DomainViolation(NumericalError, ValueError):
    """Parameter outside the mathematical domain of the routine."""

    kind = FailureKind.INVALID_PARAMETER


class NonConvergence(NumericalError):
    """Iteration cap exhausted before the tolerance was met."""

    kind = FailureKind.DID_NOT_CONVERGE


class SingularDerivative(NumericalError):
    """Derivative (or divisor) numerically zero with no safe fallback step."""

    kind = FailureKind.SINGULAR


class InvalidFloat(NumericalError, ArithmeticError):
    """Computation produced NaN or an infinity."""

    kind = FailureKind.OVERFLOW


_ERROR_BY_KIND: dict[FailureKind, type[NumericalError]] = {
    FailureKind.INVALID_PARAMETER: DomainViolation,
    FailureKind.DID_NOT_CONVERGE: NonConvergence,
    FailureKind.SINGULAR: SingularDerivative,
    FailureKind.OVERFLOW: InvalidFloat,
}


def error_for(kind: FailureKind, reason: str) -> NumericalError:
    """Build the exception matching a failure kind."""
    return _ERROR_BY_KIND[kind](reason)


# =============================================================================
# TAGGED UNION
# =============================================================================


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful result payload."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Named failure with a human-readable reason."""

    kind: FailureKind
    reason: str = ""

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise error_for(self.kind, self.reason)


Outcome = Success[T] | Failure


def capture(fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Outcome[T]":
    """
    Run `fn` and convert its result or numerical failure into an Outcome.

    Args:
        fn: Callable to evaluate
        *args: Positional arguments for fn
        **kwargs: Keyword arguments for fn

    Returns:
        Success(value) or Failure(kind, reason); NaN/Inf float results are
        reported as Failure(OVERFLOW)

    Examples:
        >>> capture(math.sqrt, 4.0)
        Success(value=2.0)
        >>> capture(log_gamma, -1.0).kind
        <FailureKind.INVALID_PARAMETER: 'INVALID_PARAMETER'>
    """
    try:
        value = fn(*args, **kwargs)
    except NumericalError as exc:
        return Failure(exc.kind, str(exc))
    except ValidationError as exc:
        return Failure(FailureKind.INVALID_PARAMETER, str(exc))
    except OverflowError as exc:
        return Failure(FailureKind.OVERFLOW, str(exc))

    if isinstance(value, float) and not math.isfinite(value):
        return Failure(FailureKind.OVERFLOW, f"result is {value}")

    return Success(value)
