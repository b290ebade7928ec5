# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Conformal objects: points, lines and planes as typed multivectors."""

import torch

from core.algebra import Algebra
from core.errors import ConstructionShapeMismatch, NonInvertible
from core.multivector import Multivector
from core.validation import check_same_algebra
from log import get_logger

logger = get_logger(__name__)


class Point(Multivector):
    """Conformal point ``P = e0 + x + 1/2 |x|^2 ei`` (a null vector)."""

    BLADES = ("e0", "e1", "e2", "e3", "ei")

    @classmethod
    def from_euclidean(cls, algebra: Algebra, x, y=None, z=None) -> "Point":
        """Embeds Euclidean points into the conformal null cone.

        Args:
            algebra (Algebra): Conformal algebra.
            x: Either the x coordinate (with ``y``, ``z``) or a
                ``[..., 3]`` coordinate tensor.

        Returns:
            Point: Normalized conformal point(s).
        """
        cfg = algebra.config
        if y is None and z is None:
            xyz = torch.as_tensor(x, dtype=cfg.torch_dtype, device=cfg.device)
        else:
            xyz = torch.stack([
                torch.as_tensor(c, dtype=cfg.torch_dtype, device=cfg.device)
                for c in (x, y, z)
            ], dim=-1)
        if xyz.ndim < 1 or xyz.shape[-1] != 3:
            raise ConstructionShapeMismatch(
                f"Point: expected 3 Euclidean coordinates, got shape {tuple(xyz.shape)}"
            )
        x_sq = (xyz * xyz).sum(dim=-1, keepdim=True)
        tensor = torch.cat([torch.ones_like(x_sq), xyz, 0.5 * x_sq], dim=-1)
        return cls._wrap(algebra, cls.shape_of(algebra), tensor)

    def weight(self) -> torch.Tensor:
        """``-P . ei``, equal to 1 for normalized points."""
        ei = self.algebra.basis("ei")
        return -(self | ei).scalar_part()

    def normalized(self) -> "Point":
        """Rescales so that ``-P . ei = 1``.

        Raises:
            NonInvertible: For points at infinity (zero weight).
        """
        w = self.weight()
        if bool((w.abs() <= self.algebra.config.zero_tol).any()):
            logger.warning("Cannot normalize a conformal point with zero weight")
            raise NonInvertible("Point has zero weight (-P . ei = 0)")
        return self / w

    def euclidean(self) -> torch.Tensor:
        """Projects back to Euclidean coordinates ``[..., 3]``."""
        P = self.normalized()
        return torch.stack([P.coefficient(k) for k in ("e1", "e2", "e3")], dim=-1)

    def distance(self, other: "Point") -> torch.Tensor:
        """Euclidean distance ``sqrt(-2 P . Q)`` of the normalized points."""
        check_same_algebra(self, other, "distance")
        dot = (self.normalized() | other.normalized()).scalar_part()
        return torch.sqrt(torch.clamp(-2.0 * dot, min=0.0))


class Line(Multivector):
    """Flat line ``p ^ q ^ ei`` through two points."""

    BLADES = ("e01i", "e02i", "e03i", "e12i", "e13i", "e23i")

    @classmethod
    def from_points(cls, p: Point, q: Point) -> "Line":
        return (p ^ q ^ p.algebra.basis("ei")).cast(cls)


class Plane(Multivector):
    """Flat plane ``p ^ q ^ r ^ ei`` through three points."""

    BLADES = ("e012i", "e013i", "e023i", "e123i")

    @classmethod
    def from_points(cls, p: Point, q: Point, r: Point) -> "Plane":
        return (p ^ q ^ r ^ p.algebra.basis("ei")).cast(cls)
