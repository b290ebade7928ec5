# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Exception taxonomy for the algebra engine.

Shape errors are raised at construction time. Non-invertibility is the one
numeric condition surfaced to callers; near-zero-angle degeneracies are
absorbed by the closed-form exponential/logarithm branches.
"""


class CliffordError(Exception):
    """Base class for all engine errors."""


class ConstructionShapeMismatch(CliffordError, ValueError):
    """Coefficients do not fit the declared blade set."""


class NonInvertible(CliffordError, ArithmeticError):
    """Inverse, logarithm or dual requested for a degenerate element."""


class DegenerateGenerator(CliffordError, ValueError):
    """Exponential map input has the wrong grade or a non-scalar square."""
