"""
Core numerical primitives and domain value types.

This package contains the building blocks shared by the distribution,
fixed-income and forecasting packages: failure taxonomy, safe-math
guards, special functions, root finding and complex arithmetic.
"""
