# Versor: Universal Geometric Algebra Neural Network
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Metric definitions for Clifford algebras.

Provides the immutable bilinear form an algebra is built from, and the
scalar products, norms and distances it induces on multivectors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Tuple

import numpy as np
import torch

if TYPE_CHECKING:
    from core.multivector import Multivector


class Metric:
    """Symmetric bilinear form over ``n`` basis vectors.

    Entry ``[i, j]`` is ``e_i . e_j``. Zero diagonal entries are null
    directions; off-diagonal entries are allowed (the conformal ``e0/ei``
    pair relies on them).

    Attributes:
        matrix (np.ndarray): Read-only ``[n, n]`` coefficient matrix.
        dim (int): Number of basis vectors ``n``.
    """

    def __init__(self, coefficients):
        """Validates and freezes the coefficient matrix.

        Args:
            coefficients: Square, symmetric nested sequence or array.

        Raises:
            ValueError: If the matrix is empty, not square or not symmetric.
        """
        matrix = np.array(coefficients, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1] or matrix.shape[0] == 0:
            raise ValueError(f"Metric must be a non-empty square matrix, got shape {matrix.shape}")
        if not np.array_equal(matrix, matrix.T):
            raise ValueError("Metric must be symmetric")

        matrix.setflags(write=False)
        self.matrix = matrix
        self.dim = matrix.shape[0]
        self._key = tuple(tuple(float(v) for v in row) for row in matrix)

    @classmethod
    def diagonal(cls, values: Sequence[float]) -> "Metric":
        """Orthogonal metric with ``e_i^2 = values[i]``."""
        return cls(np.diag(np.asarray(values, dtype=np.float64)))

    @classmethod
    def euclidean(cls, n: int) -> "Metric":
        """Positive-definite identity metric over ``n`` vectors."""
        return cls.diagonal([1.0] * n)

    @classmethod
    def signature(cls, p: int, q: int = 0, r: int = 0) -> "Metric":
        """Metric for ``Cl(p, q, r)``: ``p`` positive, ``q`` negative, ``r`` null."""
        assert p >= 0, f"p must be non-negative, got {p}"
        assert q >= 0, f"q must be non-negative, got {q}"
        assert r >= 0, f"r must be non-negative, got {r}"
        return cls.diagonal([1.0] * p + [-1.0] * q + [0.0] * r)

    def get(self, i: int, j: int) -> float:
        return self._key[i][j]

    @property
    def is_diagonal(self) -> bool:
        """True when every off-diagonal entry is zero."""
        return not np.any(self.matrix - np.diag(np.diag(self.matrix)))

    @property
    def key(self) -> Tuple[Tuple[float, ...], ...]:
        """Hashable snapshot used to memoize Cayley tables."""
        return self._key

    def __eq__(self, other) -> bool:
        return isinstance(other, Metric) and self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        if self.is_diagonal:
            return f"Metric.diagonal({[float(v) for v in np.diag(self.matrix)]})"
        return f"Metric({[list(row) for row in self._key]})"


def scalar_product(A: "Multivector", B: "Multivector") -> torch.Tensor:
    """Compute the scalar product via projection onto grade 0.

    Computes <A B>_0.

    Args:
        A (Multivector): First multivector.
        B (Multivector): Second multivector.

    Returns:
        torch.Tensor: Scalar part, batch shape of the product.
    """
    return (A * B).scalar_part()


def norm_squared(A: "Multivector") -> torch.Tensor:
    """Signature-aware squared norm: <A ~A>_0.

    Can be negative or zero in mixed and degenerate signatures (conformal
    points are null). Returns the raw signed value.
    """
    return scalar_product(A, A.reverse())


def induced_norm(A: "Multivector") -> torch.Tensor:
    """Compute the induced norm respecting the metric signature.

    Computes ||A|| = sqrt(|<A ~A>_0|).

    Args:
        A (Multivector): Input multivector.

    Returns:
        torch.Tensor: Norm, batch shape of ``A``. Exactly 0 for null elements.
    """
    # In mixed signatures, sq_norm can be negative.
    return torch.sqrt(torch.abs(norm_squared(A)))


def geometric_distance(A: "Multivector", B: "Multivector") -> torch.Tensor:
    """Computes geometric distance.

    dist(A, B) = ||A - B||.
    """
    return induced_norm(A - B)
