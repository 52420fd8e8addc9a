"""
Complex Numbers — Textual Complex Arithmetic

Complex values travel as text ("3+4i", "-2.5j", "i") and are represented
internally by the immutable ComplexNumber(real, imaginary, suffix):
- parse_complex / format_complex: text <-> value, suffix letter preserved
- Arithmetic: add, subtract, multiply, divide, power, sqrt
- Exponential/logarithmic: exp, ln, log10, log2
- Trigonometric: sin, cos, tan, sec, csc, cot
- Hyperbolic: sinh, cosh, tanh, sech, csch, coth
- Accessors: absolute, argument, conjugate, real_part, imaginary_part
- Aggregates: sum_all, product_all

Every function accepts a ComplexNumber or its textual form. Binary
operations keep the suffix of the left operand.

CRITICAL INVARIANTS:
1. format_complex(parse_complex("3+4i")) == "3+4i"
2. Parsing formatted output reproduces (real, imaginary) within 1e-9
3. Division by a divisor with modulus^2 < 1e-10 yields (NaN, NaN), not an error
4. ln/log of zero is a DomainViolation
"""

import math
import re
from dataclasses import dataclass
from typing import Final

from src.core.domain.outcomes import DomainViolation, InvalidFloat
from src.core.math.numerical_safeguards import EPS_COMPLEX_MODULUS, is_valid_float

# Magnitude below which a component is printed as zero
FORMAT_ZERO_TOLERANCE: Final[float] = 1e-10

VALID_SUFFIXES: Final[tuple[str, ...]] = ("i", "j")

_NUMBER = r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_REAL_ONLY = re.compile(rf"(?P<real>[+-]?{_NUMBER})")
_IMAGINARY_ONLY = re.compile(rf"(?P<imag>[+-]?(?:{_NUMBER})?)(?P<suffix>[ij])")
_REAL_AND_IMAGINARY = re.compile(rf"(?P<real>[+-]?{_NUMBER})(?P<imag>[+-](?:{_NUMBER})?)(?P<suffix>[ij])")


@dataclass(frozen=True)
class ComplexNumber:
    """Immutable complex value with its display suffix ("i" or "j")."""

    real: float
    imaginary: float
    suffix: str = "i"

    def __post_init__(self) -> None:
        if self.suffix not in VALID_SUFFIXES:
            raise DomainViolation(f"suffix must be 'i' or 'j', got {self.suffix!r}")

    @property
    def modulus_squared(self) -> float:
        return self.real * self.real + self.imaginary * self.imaginary

    def __str__(self) -> str:
        return format_complex(self)


ComplexLike = ComplexNumber | str


# =============================================================================
# PARSING / FORMATTING
# =============================================================================


def _imaginary_coefficient(text: str) -> float:
    if text in ("", "+"):
        return 1.0
    if text == "-":
        return -1.0
    return float(text)


def parse_complex(text: str) -> ComplexNumber:
    """
    Parse "[real][+|-imag](i|j)" into a ComplexNumber.

    Shorthands: "i" = 0+1i, "-j" = 0-1j, "3+i" = 3+1i, "5i" = 0+5i,
    "7" = 7+0i. Whitespace is ignored; exponents are accepted ("1e-3+2i").

    Raises:
        DomainViolation: If the text is not a complex number

    Examples:
        >>> parse_complex("3+4i")
        ComplexNumber(real=3.0, imaginary=4.0, suffix='i')
        >>> parse_complex("-j")
        ComplexNumber(real=0.0, imaginary=-1.0, suffix='j')
    """
    if not isinstance(text, str):
        raise DomainViolation(f"complex number text expected, got {type(text).__name__}")

    compact = "".join(text.split())

    match = _REAL_ONLY.fullmatch(compact)
    if match:
        return ComplexNumber(float(match["real"]), 0.0)

    match = _IMAGINARY_ONLY.fullmatch(compact)
    if match:
        return ComplexNumber(0.0, _imaginary_coefficient(match["imag"]), match["suffix"])

    match = _REAL_AND_IMAGINARY.fullmatch(compact)
    if match:
        return ComplexNumber(
            float(match["real"]),
            _imaginary_coefficient(match["imag"]),
            match["suffix"],
        )

    raise DomainViolation(f"not a valid complex number: {text!r}")


def _format_component(value: float) -> str:
    return format(value, ".15g")


def format_complex(value: ComplexNumber, suffix: str | None = None) -> str:
    """
    Render a ComplexNumber as text.

    Components with magnitude below 1e-10 are dropped; unit imaginary
    coefficients collapse to the bare suffix ("3+i", "-j").

    Args:
        value: Number to render
        suffix: Override the value's own suffix

    Raises:
        DomainViolation: If the suffix is not i or j
        InvalidFloat: If a component is NaN or infinite

    Examples:
        >>> format_complex(ComplexNumber(3.0, 4.0))
        '3+4i'
        >>> format_complex(ComplexNumber(0.0, -1.0, "j"))
        '-j'
        >>> format_complex(ComplexNumber(2.5, 0.0))
        '2.5'
    """
    letter = suffix or value.suffix
    if letter not in VALID_SUFFIXES:
        raise DomainViolation(f"suffix must be 'i' or 'j', got {letter!r}")

    real, imaginary = value.real, value.imaginary
    if not (is_valid_float(real) and is_valid_float(imaginary)):
        raise InvalidFloat(f"cannot format a complex number with non-finite components ({real}, {imaginary})")

    real_is_zero = abs(real) < FORMAT_ZERO_TOLERANCE
    if abs(imaginary) < FORMAT_ZERO_TOLERANCE:
        return "0" if real_is_zero else _format_component(real)

    if abs(imaginary - 1.0) < FORMAT_ZERO_TOLERANCE:
        imaginary_text = ""
    elif abs(imaginary + 1.0) < FORMAT_ZERO_TOLERANCE:
        imaginary_text = "-"
    else:
        imaginary_text = _format_component(imaginary)

    if real_is_zero:
        return f"{imaginary_text}{letter}"

    sign = "+" if imaginary > 0 else ""
    return f"{_format_component(real)}{sign}{imaginary_text}{letter}"


def complex_number(real: float, imaginary: float = 0.0, suffix: str = "i") -> ComplexNumber:
    """Build a ComplexNumber from its parts (suffix is case-insensitive)."""
    if not (math.isfinite(real) and math.isfinite(imaginary)):
        raise DomainViolation(f"components must be finite, got ({real}, {imaginary})")
    return ComplexNumber(float(real), float(imaginary), suffix.strip().lower())


def _coerce(value: ComplexLike) -> ComplexNumber:
    if isinstance(value, ComplexNumber):
        return value
    return parse_complex(value)


# =============================================================================
# ACCESSORS
# =============================================================================


def real_part(value: ComplexLike) -> float:
    return _coerce(value).real


def imaginary_part(value: ComplexLike) -> float:
    return _coerce(value).imaginary


def absolute(value: ComplexLike) -> float:
    """Modulus |z|."""
    z = _coerce(value)
    return math.hypot(z.real, z.imaginary)


def argument(value: ComplexLike) -> float:
    """
    Angle of z in radians, in (-pi, pi].

    Raises:
        DomainViolation: For z = 0, whose angle is undefined
    """
    z = _coerce(value)
    if z.real == 0.0 and z.imaginary == 0.0:
        raise DomainViolation("argument of zero is undefined")
    return math.atan2(z.imaginary, z.real)


def conjugate(value: ComplexLike) -> ComplexNumber:
    z = _coerce(value)
    return ComplexNumber(z.real, -z.imaginary, z.suffix)


# =============================================================================
# ARITHMETIC
# =============================================================================


def add(left: ComplexLike, right: ComplexLike) -> ComplexNumber:
    a, b = _coerce(left), _coerce(right)
    return ComplexNumber(a.real + b.real, a.imaginary + b.imaginary, a.suffix)


def subtract(left: ComplexLike, right: ComplexLike) -> ComplexNumber:
    a, b = _coerce(left), _coerce(right)
    return ComplexNumber(a.real - b.real, a.imaginary - b.imaginary, a.suffix)


def multiply(left: ComplexLike, right: ComplexLike) -> ComplexNumber:
    a, b = _coerce(left), _coerce(right)
    return ComplexNumber(
        a.real * b.real - a.imaginary * b.imaginary,
        a.real * b.imaginary + a.imaginary * b.real,
        a.suffix,
    )


def divide(left: ComplexLike, right: ComplexLike) -> ComplexNumber:
    """
    Complex division.

    A divisor with |z|^2 < 1e-10 yields (NaN, NaN) instead of raising, so
    chained arithmetic can continue; callers must check for NaN.
    """
    a, b = _coerce(left), _coerce(right)
    denominator = b.modulus_squared
    if denominator < EPS_COMPLEX_MODULUS:
        return ComplexNumber(math.nan, math.nan, a.suffix)
    return ComplexNumber(
        (a.real * b.real + a.imaginary * b.imaginary) / denominator,
        (a.imaginary * b.real - a.real * b.imaginary) / denominator,
        a.suffix,
    )


def _reciprocal(z: ComplexNumber) -> ComplexNumber:
    return divide(ComplexNumber(1.0, 0.0, z.suffix), z)


def power(value: ComplexLike, exponent: float) -> ComplexNumber:
    """
    z ** exponent.

    Integer exponents use binary exponentiation (negative ones through the
    reciprocal); other real exponents use the polar form r^n e^{i n theta}.

    Examples:
        >>> format_complex(power("1+i", 2))
        '2i'
    """
    z = _coerce(value)
    if not math.isfinite(exponent):
        raise DomainViolation(f"exponent must be finite, got {exponent}")

    if exponent == math.floor(exponent) and abs(exponent) < 2**31:
        n = int(exponent)
        base = z if n >= 0 else _reciprocal(z)
        n = abs(n)
        result = ComplexNumber(1.0, 0.0, z.suffix)
        while n:
            if n & 1:
                result = multiply(result, base)
            base = multiply(base, base)
            n >>= 1
        return result

    modulus = math.hypot(z.real, z.imaginary)
    if modulus == 0.0:
        if exponent > 0:
            return ComplexNumber(0.0, 0.0, z.suffix)
        return ComplexNumber(math.nan, math.nan, z.suffix)
    theta = math.atan2(z.imaginary, z.real) * exponent
    scale = modulus**exponent
    return ComplexNumber(scale * math.cos(theta), scale * math.sin(theta), z.suffix)


def sqrt(value: ComplexLike) -> ComplexNumber:
    """Principal square root (non-negative real part)."""
    z = _coerce(value)
    modulus = math.hypot(z.real, z.imaginary)
    real = math.sqrt(max(0.0, (modulus + z.real) / 2.0))
    imaginary = math.copysign(math.sqrt(max(0.0, (modulus - z.real) / 2.0)), z.imaginary)
    return ComplexNumber(real, imaginary, z.suffix)


def sum_all(*values: ComplexLike) -> ComplexNumber:
    """Sum of one or more complex numbers (suffix of the first)."""
    if not values:
        raise DomainViolation("sum_all requires at least one value")
    total = _coerce(values[0])
    for item in values[1:]:
        total = add(total, item)
    return total


def product_all(*values: ComplexLike) -> ComplexNumber:
    """Product of one or more complex numbers (suffix of the first)."""
    if not values:
        raise DomainViolation("product_all requires at least one value")
    total = _coerce(values[0])
    for item in values[1:]:
        total = multiply(total, item)
    return total


# =============================================================================
# EXPONENTIAL / LOGARITHM
# =============================================================================


def exp(value: ComplexLike) -> ComplexNumber:
    z = _coerce(value)
    scale = math.exp(z.real)
    return ComplexNumber(scale * math.cos(z.imaginary), scale * math.sin(z.imaginary), z.suffix)


def ln(value: ComplexLike) -> ComplexNumber:
    """
    Principal natural logarithm ln|z| + i arg(z).

    Raises:
        DomainViolation: For z = 0
    """
    z = _coerce(value)
    modulus = math.hypot(z.real, z.imaginary)
    if modulus == 0.0:
        raise DomainViolation("logarithm of zero is undefined")
    return ComplexNumber(math.log(modulus), math.atan2(z.imaginary, z.real), z.suffix)


def _scaled_ln(value: ComplexLike, base: float) -> ComplexNumber:
    natural = ln(value)
    factor = math.log(base)
    return ComplexNumber(natural.real / factor, natural.imaginary / factor, natural.suffix)


def log10(value: ComplexLike) -> ComplexNumber:
    return _scaled_ln(value, 10.0)


def log2(value: ComplexLike) -> ComplexNumber:
    return _scaled_ln(value, 2.0)


# =============================================================================
# TRIGONOMETRIC
# =============================================================================


def sin(value: ComplexLike) -> ComplexNumber:
    """sin(a+bi) = sin(a)cosh(b) + i cos(a)sinh(b)"""
    z = _coerce(value)
    return ComplexNumber(
        math.sin(z.real) * math.cosh(z.imaginary),
        math.cos(z.real) * math.sinh(z.imaginary),
        z.suffix,
    )


def cos(value: ComplexLike) -> ComplexNumber:
    """cos(a+bi) = cos(a)cosh(b) - i sin(a)sinh(b)"""
    z = _coerce(value)
    return ComplexNumber(
        math.cos(z.real) * math.cosh(z.imaginary),
        -math.sin(z.real) * math.sinh(z.imaginary),
        z.suffix,
    )


def tan(value: ComplexLike) -> ComplexNumber:
    return divide(sin(value), cos(value))


def sec(value: ComplexLike) -> ComplexNumber:
    return _reciprocal(cos(value))


def csc(value: ComplexLike) -> ComplexNumber:
    return _reciprocal(sin(value))


def cot(value: ComplexLike) -> ComplexNumber:
    return divide(cos(value), sin(value))


# =============================================================================
# HYPERBOLIC
# =============================================================================


def sinh(value: ComplexLike) -> ComplexNumber:
    """sinh(a+bi) = sinh(a)cos(b) + i cosh(a)sin(b)"""
    z = _coerce(value)
    return ComplexNumber(
        math.sinh(z.real) * math.cos(z.imaginary),
        math.cosh(z.real) * math.sin(z.imaginary),
        z.suffix,
    )


def cosh(value: ComplexLike) -> ComplexNumber:
    """cosh(a+bi) = cosh(a)cos(b) + i sinh(a)sin(b)"""
    z = _coerce(value)
    return ComplexNumber(
        math.cosh(z.real) * math.cos(z.imaginary),
        math.sinh(z.real) * math.sin(z.imaginary),
        z.suffix,
    )


def tanh(value: ComplexLike) -> ComplexNumber:
    return divide(sinh(value), cosh(value))


def sech(value: ComplexLike) -> ComplexNumber:
    return _reciprocal(cosh(value))


def csch(value: ComplexLike) -> ComplexNumber:
    return _reciprocal(sinh(value))


def coth(value: ComplexLike) -> ComplexNumber:
    return divide(cosh(value), sinh(value))
