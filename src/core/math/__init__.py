"""
Core math modules.

Numerical primitives with explicit convergence and stability guarantees.
Complex transcendental functions share names with the `math` module, so
they are used through `src.core.math.complex_numbers` directly.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_COMPLEX_MODULUS,
    EPS_DERIVATIVE,
    EPS_FLOAT_COMPARE_ABS,
    EPS_LENTZ_FLOOR,
    # Safe division
    denom_safe_signed,
    safe_divide,
    # NaN/Inf detection
    is_valid_float,
    # Comparisons
    clamp,
    is_integer,
    # Validation
    validate_finite,
    validate_in_range,
    validate_non_negative,
    validate_positive,
    validate_probability,
)

# Special functions
from src.core.math.special_functions import (
    BETA_TOLERANCE,
    GAMMA_TOLERANCE,
    MAX_ITERATIONS,
    beta_function,
    erf,
    erfc,
    gamma_cdf,
    gamma_function,
    incomplete_beta,
    incomplete_gamma_lower,
    incomplete_gamma_upper,
    log_beta,
    log_gamma,
)

# Bessel functions
from src.core.math.bessel import (
    bessel_i,
    bessel_i0,
    bessel_i1,
    bessel_j,
    bessel_j0,
    bessel_j1,
    bessel_k,
    bessel_k0,
    bessel_k1,
    bessel_y,
    bessel_y0,
    bessel_y1,
)

# Root finding
from src.core.math.root_finding import (
    CASH_FLOW_RATE_SETTINGS,
    INVERSE_CDF_SETTINGS,
    NewtonSettings,
    RootResult,
    newton_raphson,
    numeric_derivative,
    solve,
)

# Complex numbers
from src.core.math.complex_numbers import (
    ComplexNumber,
    complex_number,
    format_complex,
    parse_complex,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_COMPLEX_MODULUS",
    "EPS_DERIVATIVE",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_LENTZ_FLOOR",
    # Numerical Safeguards — Safe division
    "denom_safe_signed",
    "safe_divide",
    # Numerical Safeguards — NaN/Inf detection
    "is_valid_float",
    # Numerical Safeguards — Comparisons
    "clamp",
    "is_integer",
    # Numerical Safeguards — Validation
    "validate_finite",
    "validate_in_range",
    "validate_non_negative",
    "validate_positive",
    "validate_probability",
    # Special functions — Constants
    "BETA_TOLERANCE",
    "GAMMA_TOLERANCE",
    "MAX_ITERATIONS",
    # Special functions
    "beta_function",
    "erf",
    "erfc",
    "gamma_cdf",
    "gamma_function",
    "incomplete_beta",
    "incomplete_gamma_lower",
    "incomplete_gamma_upper",
    "log_beta",
    "log_gamma",
    # Bessel
    "bessel_i",
    "bessel_i0",
    "bessel_i1",
    "bessel_j",
    "bessel_j0",
    "bessel_j1",
    "bessel_k",
    "bessel_k0",
    "bessel_k1",
    "bessel_y",
    "bessel_y0",
    "bessel_y1",
    # Root finding
    "CASH_FLOW_RATE_SETTINGS",
    "INVERSE_CDF_SETTINGS",
    "NewtonSettings",
    "RootResult",
    "newton_raphson",
    "numeric_derivative",
    "solve",
    # Complex numbers
    "ComplexNumber",
    "complex_number",
    "format_complex",
    "parse_complex",
]
