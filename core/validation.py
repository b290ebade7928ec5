# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Construction-boundary validation for multivector shapes.

Unlike the lightweight asserts used elsewhere, these checks always run:
a coefficient tensor that does not fit its blade set is rejected before a
value is ever built.
"""

from typing import Sequence

import torch

from core.errors import ConstructionShapeMismatch


def check_coefficients(x: torch.Tensor, arity: int, name: str = "x") -> None:
    """Raise unless *x* holds ``arity`` coefficients along its last dimension."""
    if x.ndim < 1:
        raise ConstructionShapeMismatch(
            f"{name}: expected ndim >= 1, got shape {tuple(x.shape)}"
        )
    if x.shape[-1] != arity:
        raise ConstructionShapeMismatch(
            f"{name}: last dim should be {arity} (blade count), "
            f"got {x.shape[-1]} (shape {tuple(x.shape)})"
        )
    if not torch.is_floating_point(x):
        raise ConstructionShapeMismatch(f"{name}: expected floating coefficients, got {x.dtype}")


def check_blades(blades: Sequence[int], name: str = "x") -> None:
    """Raise if the blade set repeats a blade."""
    if len(set(blades)) != len(blades):
        raise ConstructionShapeMismatch(f"{name}: duplicate blades in {tuple(blades)}")


def check_same_algebra(a, b, name: str = "operands") -> None:
    """Raise if two multivectors live in different algebras."""
    if a.algebra is not b.algebra and a.algebra != b.algebra:
        raise ValueError(f"{name}: algebras must match ({a.algebra!r} vs {b.algebra!r})")
