# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Rotors: rotations about the origin."""

import math

import torch

from core.algebra import Algebra
from cga.versor import Versor


class Rotor(Versor):
    """Rotation versor ``R = exp(-g / 2)``.

    The rotation angle equals the generator magnitude, and ``theta * e12``
    turns ``e1`` towards ``e2``.
    """

    BLADES = ("scalar", "e12", "e13", "e23")
    GENERATOR_BLADES = ("e12", "e13", "e23")
    EXPONENT = -0.5

    @classmethod
    def from_axis_angle(cls, algebra: Algebra, axis, angle) -> "Rotor":
        """Right-handed rotation by ``angle`` about ``axis`` (need not be unit).

        Args:
            algebra (Algebra): Algebra holding ``e1, e2, e3``.
            axis: Rotation axis ``[..., 3]``.
            angle: Angle in radians, scalar or batch ``[...]``.
        """
        cfg = algebra.config
        axis = torch.as_tensor(axis, dtype=cfg.torch_dtype, device=cfg.device)
        angle = torch.as_tensor(angle, dtype=cfg.torch_dtype, device=cfg.device)
        length = axis.norm(dim=-1)
        if bool((length == 0).any()):
            raise ValueError("Rotation axis must be nonzero")
        unit = axis / length.unsqueeze(-1)
        # axis dual: x e23 + y e31 + z e12
        coeffs = torch.stack([unit[..., 2], -unit[..., 1], unit[..., 0]], dim=-1)
        return cls.exp(cls.generator(algebra, coeffs * angle.unsqueeze(-1)))

    def angle(self) -> torch.Tensor:
        """Rotation angle in ``[0, 2*pi)``."""
        return (2.0 * torch.atan2(self.tensor[..., 1:].norm(dim=-1), self.tensor[..., 0])) % (2 * math.pi)
