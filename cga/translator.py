# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Translators: ``T = 1 - 1/2 t ei``."""

import torch

from core.algebra import Algebra
from cga.versor import Versor


class Translator(Versor):
    """Translation versor ``T = exp(-g) = 1 - g`` with ``g = 1/2 t ^ ei``.

    The generator is null (``g g = 0``), so the exponential series stops
    after the linear term.
    """

    BLADES = ("scalar", "e1i", "e2i", "e3i")
    GENERATOR_BLADES = ("e1i", "e2i", "e3i")
    EXPONENT = -1.0

    @classmethod
    def from_translation(cls, algebra: Algebra, t) -> "Translator":
        """Translator moving points by the Euclidean vector ``t`` ``[..., 3]``."""
        cfg = algebra.config
        t = torch.as_tensor(t, dtype=cfg.torch_dtype, device=cfg.device)
        return cls.exp(cls.generator(algebra, 0.5 * t))

    def translation(self) -> torch.Tensor:
        """Euclidean displacement ``[..., 3]``."""
        return -2.0 * self.tensor[..., 1:] / self.tensor[..., :1]
