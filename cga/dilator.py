# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Dilators: uniform scaling about the origin."""

import torch

from core.algebra import Algebra
from cga.versor import Versor


class Dilator(Versor):
    """Scaling versor ``D = exp(g / 2)`` with ``g = ln(scale) e0i``.

    ``e0i`` squares to ``+1``, so dilators take the hyperbolic branch:
    ``D = cosh(ln(s)/2) + sinh(ln(s)/2) e0i``.
    """

    BLADES = ("scalar", "e0i")
    GENERATOR_BLADES = ("e0i",)
    EXPONENT = 0.5

    @classmethod
    def from_scale(cls, algebra: Algebra, scale) -> "Dilator":
        """Dilator scaling Euclidean points by ``scale`` (> 0)."""
        cfg = algebra.config
        scale = torch.as_tensor(scale, dtype=cfg.torch_dtype, device=cfg.device)
        if bool((scale <= 0).any()):
            raise ValueError("Dilation scale must be positive")
        return cls.exp(cls.generator(algebra, torch.log(scale).unsqueeze(-1)))

    def scale(self) -> torch.Tensor:
        """Scale factor ``(c + s) / (c - s)`` for ``D = c + s e0i``."""
        c, s = self.tensor[..., 0], self.tensor[..., 1]
        return (c + s) / (c - s)
