# Versor: Universal Geometric Algebra Neural Network
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Conformal Geometric Algebra (CGA) of 3-D space.

Basis ``e0, e1, e2, e3, ei`` with null origin ``e0`` and null infinity
``ei`` paired by ``e0 . ei = -1``.
"""

from typing import Optional

from core.algebra import Algebra
from core.config import EngineConfig
from core.metric import Metric

CONFORMAL_NAMES = "0123i"


def conformal_metric() -> Metric:
    """5x5 metric: e1..e3 Euclidean, e0/ei null and mutually ``-1``."""
    matrix = [[0.0] * 5 for _ in range(5)]
    for k in (1, 2, 3):
        matrix[k][k] = 1.0
    matrix[0][4] = matrix[4][0] = -1.0
    return Metric(matrix)


class ConformalAlgebra(Algebra):
    """Helper for CGA. Maps Euclidean R^3 to the null cone of R^{4,1}.

    Attributes:
        d (int): Euclidean dimension (3).
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        super().__init__(conformal_metric(), names=CONFORMAL_NAMES, config=config)
        self.d = 3

    @property
    def e0(self):
        """Origin basis vector (null)."""
        return self.basis("e0")

    @property
    def ei(self):
        """Infinity basis vector (null)."""
        return self.basis("ei")

    def point(self, x, y=None, z=None):
        """Embeds a Euclidean point: ``Point.from_euclidean(self, ...)``."""
        from cga.objects import Point
        return Point.from_euclidean(self, x, y, z)

    def __repr__(self) -> str:
        return "ConformalAlgebra(e0, e1, e2, e3, ei)"
