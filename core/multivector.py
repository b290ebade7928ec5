# Versor: Universal Geometric Algebra Neural Network
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Multivector Container Class.

A fixed-shape sparse container: the participating blades are part of the
value's shape, the coefficients live in a tensor ``[..., len(blades)]``
whose leading dimensions are batch dimensions. Operator overloading maps
``A * B`` to the geometric product, ``A ^ B`` to the outer product,
``A | B`` to the inner product and ``~A`` to reversion.
"""

from typing import Dict, Optional, Sequence, Tuple, Type, TypeVar, Union

import torch

from core.algebra import GEOMETRIC, INNER, OUTER, Algebra
from core.bitmap import grade as blade_grade
from core.bitmap import reverse_sign
from core.errors import ConstructionShapeMismatch, NonInvertible
from core.validation import check_blades, check_coefficients, check_same_algebra
from log import get_logger

logger = get_logger(__name__)

BladeKey = Union[int, str]
M = TypeVar("M", bound="Multivector")


class Multivector:
    """Fixed-shape multivector.

    Subclasses fix their shape through the class attribute ``BLADES``
    (canonical blade names); generic instances take ``blades`` explicitly.
    Arithmetic between two values returns a generic :class:`Multivector`
    whose shape is derived from the operand shapes, never from the
    coefficient values.

    Attributes:
        algebra (Algebra): The underlying algebra.
        blades (Tuple[int, ...]): Ascending, duplicate-free blade bitmasks.
        tensor (torch.Tensor): Coefficients ``[..., len(blades)]``.
    """

    BLADES: Optional[Tuple[str, ...]] = None

    # Blade keys make __getitem__ look like a sequence; opt out of iteration.
    __iter__ = None

    def __init__(self, algebra: Algebra, coefficients=None,
                 blades: Optional[Sequence[BladeKey]] = None):
        """Initializes a Multivector.

        Args:
            algebra (Algebra): The algebra instance.
            coefficients: One coefficient per blade along the last
                dimension (sequence or tensor). ``None`` gives all zeros.
            blades: Blade names or bitmasks. Defaults to the class shape.

        Raises:
            ConstructionShapeMismatch: Missing/unknown/duplicate blades or a
                coefficient count that does not match the blade count.
        """
        name = type(self).__name__
        if blades is None:
            blades = self.BLADES
        if blades is None:
            raise ConstructionShapeMismatch(f"{name}: no blade set given")
        resolved = [algebra.blade(b) for b in blades]
        check_blades(resolved, name)

        cfg = algebra.config
        if coefficients is None:
            tensor = torch.zeros(len(resolved), dtype=cfg.torch_dtype, device=cfg.device)
        elif isinstance(coefficients, torch.Tensor):
            tensor = coefficients.clone()
            if not torch.is_floating_point(tensor):
                tensor = tensor.to(cfg.torch_dtype)
        else:
            tensor = torch.tensor(coefficients, dtype=cfg.torch_dtype, device=cfg.device)
        check_coefficients(tensor, len(resolved), name)

        order = sorted(range(len(resolved)), key=resolved.__getitem__)
        if order != list(range(len(resolved))):
            tensor = tensor[..., order]

        self.algebra = algebra
        self.blades = tuple(resolved[k] for k in order)
        self.tensor = tensor

    @classmethod
    def _wrap(cls: Type[M], algebra: Algebra, blades: Tuple[int, ...],
              tensor: torch.Tensor) -> M:
        """Builds an instance from an already-canonical shape and tensor."""
        obj = cls.__new__(cls)
        obj.algebra = algebra
        obj.blades = blades
        obj.tensor = tensor
        return obj

    @classmethod
    def shape_of(cls, algebra: Algebra) -> Tuple[int, ...]:
        """The class-level blade set resolved in *algebra*."""
        if cls.BLADES is None:
            raise ConstructionShapeMismatch(f"{cls.__name__} has no fixed blade set")
        return tuple(sorted(algebra.blade(b) for b in cls.BLADES))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def batch_shape(self) -> torch.Size:
        return self.tensor.shape[:-1]

    @property
    def dtype(self) -> torch.dtype:
        return self.tensor.dtype

    @property
    def device(self) -> torch.device:
        return self.tensor.device

    @property
    def blade_names(self) -> Tuple[str, ...]:
        return tuple(self.algebra.blade_name(b) for b in self.blades)

    def coefficient(self, key: BladeKey) -> torch.Tensor:
        """Coefficient of one blade; zeros when the blade is outside the shape."""
        blade = self.algebra.blade(key)
        if blade in self.blades:
            return self.tensor[..., self.blades.index(blade)]
        return torch.zeros(self.batch_shape, dtype=self.dtype, device=self.device)

    __getitem__ = coefficient

    def scalar_part(self) -> torch.Tensor:
        """Grade-0 coefficient ``<A>_0``."""
        return self.coefficient(0)

    def to_dict(self) -> Dict[str, float]:
        """Canonical ``{blade_name: value}`` view of an unbatched value."""
        if self.batch_shape != torch.Size([]):
            raise ValueError(f"to_dict needs an unbatched multivector, got batch {tuple(self.batch_shape)}")
        return {self.algebra.blade_name(b): float(v) for b, v in zip(self.blades, self.tensor.tolist())}

    # ------------------------------------------------------------------
    # Shape conversion
    # ------------------------------------------------------------------

    def _convert(self, target: Tuple[int, ...], strict: Optional[bool]) -> torch.Tensor:
        cfg = self.algebra.config
        strict = cfg.strict_narrowing if strict is None else strict
        position = {b: i for i, b in enumerate(self.blades)}
        keep = set(target)

        dropped = [i for b, i in position.items() if b not in keep]
        if dropped and self.tensor.numel():
            lost = self.tensor[..., dropped].abs().max().item()
            if lost > 0.0:
                scale = max(1.0, self.tensor.abs().max().item())
                if strict and lost > cfg.narrowing_tol * scale:
                    names = [self.algebra.blade_name(self.blades[i]) for i in dropped]
                    raise ConstructionShapeMismatch(
                        f"Narrowing would drop coefficients up to {lost:.3e} on {names}"
                    )
                logger.debug("Narrowing dropped coefficients up to %.3e", lost)

        out = torch.zeros(*self.batch_shape, len(target), dtype=self.dtype, device=self.device)
        dst = [k for k, b in enumerate(target) if b in position]
        src = [position[b] for b in target if b in position]
        if dst:
            out[..., dst] = self.tensor[..., src]
        return out

    def narrow(self, blades: Sequence[BladeKey], strict: Optional[bool] = None) -> "Multivector":
        """Converts to another blade set, dropping blades outside it.

        With ``strict`` (default from the algebra config), dropping a
        coefficient larger than ``narrowing_tol`` raises
        :class:`ConstructionShapeMismatch`; otherwise the drop is logged.
        """
        target = tuple(sorted(self.algebra.blade(b) for b in blades))
        check_blades(target, "narrow")
        return Multivector._wrap(self.algebra, target, self._convert(target, strict))

    def widen(self, blades: Sequence[BladeKey]) -> "Multivector":
        """Embeds into a superset blade set, new coefficients zero."""
        target = tuple(sorted(self.algebra.blade(b) for b in blades))
        check_blades(target, "widen")
        missing = set(self.blades) - set(target)
        if missing:
            names = [self.algebra.blade_name(b) for b in sorted(missing)]
            raise ConstructionShapeMismatch(f"widen target is missing blades {names}")
        return Multivector._wrap(self.algebra, target, self._convert(target, strict=False))

    def cast(self, cls: Type[M], strict: Optional[bool] = None) -> M:
        """Converts into the fixed shape of a typed subclass (e.g. ``Point``)."""
        target = cls.shape_of(self.algebra)
        return cls._wrap(self.algebra, target, self._convert(target, strict))

    def grade(self, k: int) -> "Multivector":
        """Projects to grade k."""
        target = tuple(b for b in self.blades if blade_grade(b) == k)
        return Multivector._wrap(self.algebra, target, self._convert(target, strict=False))

    # ------------------------------------------------------------------
    # Unary operations
    # ------------------------------------------------------------------

    def reverse(self: M) -> M:
        """Reversion: grade k gets sign (-1)^(k(k-1)/2)."""
        return reverse(self)

    def __invert__(self: M) -> M:
        """Reversion (~A)."""
        return reverse(self)

    def __neg__(self: M) -> M:
        return type(self)._wrap(self.algebra, self.blades, -self.tensor)

    def dual(self) -> "Multivector":
        """Dual ``A I^-1`` against the top-grade pseudoscalar."""
        return dual(self)

    def norm(self) -> torch.Tensor:
        """Metric-induced norm (sqrt(|<A ~A>|))."""
        from core.metric import induced_norm
        return induced_norm(self)

    def inverse(self) -> "Multivector":
        """Versor inverse ``~A / <A ~A>_0``."""
        return inverse(self)

    # ------------------------------------------------------------------
    # Binary operations
    # ------------------------------------------------------------------

    def _coerce(self, other) -> Optional["Multivector"]:
        if isinstance(other, Multivector):
            return other
        if isinstance(other, (int, float)):
            return self.algebra.scalar(float(other))
        return None

    def __add__(self, other):
        """Addition over the union of both blade sets."""
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return _combine(self, other, 1.0)

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return _combine(self, other, -1.0)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return _combine(other, self, -1.0)

    def __mul__(self, other):
        """Geometric Product (A * B), or scaling by a number/batch tensor."""
        if isinstance(other, Multivector):
            return geometric_product(self, other)
        if isinstance(other, (int, float, torch.Tensor)):
            return self._scaled(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (int, float, torch.Tensor)):
            return self._scaled(other)
        return NotImplemented

    def __truediv__(self, other):
        """Division by a number or a batch-shaped tensor."""
        if isinstance(other, (int, float)):
            return self._scaled(1.0 / other)
        if isinstance(other, torch.Tensor):
            return self._scaled(1.0 / other)
        return NotImplemented

    def __xor__(self, other):
        """Outer (wedge) product: a ^ b."""
        if not isinstance(other, Multivector):
            return NotImplemented
        return outer_product(self, other)

    def __or__(self, other):
        """Inner (dot) product: a | b."""
        if not isinstance(other, Multivector):
            return NotImplemented
        return inner_product(self, other)

    def _scaled(self: M, factor) -> M:
        if isinstance(factor, torch.Tensor) and factor.ndim > 0:
            factor = factor.unsqueeze(-1)
        return type(self)._wrap(self.algebra, self.blades, self.tensor * factor)

    def allclose(self, other, atol: float = 1e-10) -> bool:
        """Per-component agreement over the union of both shapes."""
        other = self._coerce(other)
        if other is None:
            raise TypeError(f"Cannot compare Multivector with {type(other).__name__}")
        diff = _combine(self, other, -1.0)
        return bool((diff.tensor.abs() <= atol).all())

    def __repr__(self):
        cls = type(self).__name__
        if self.batch_shape == torch.Size([]):
            terms = ", ".join(f"{k}={v:.6g}" for k, v in self.to_dict().items())
            return f"{cls}({terms})"
        return f"{cls}(blades={list(self.blade_names)}, batch_shape={tuple(self.batch_shape)})"


# ----------------------------------------------------------------------
# Free-function kernels
# ----------------------------------------------------------------------

def _combine(A: Multivector, B: Multivector, sign: float) -> Multivector:
    """``A + sign * B`` on the union of both blade sets."""
    check_same_algebra(A, B, "add")
    blades = tuple(sorted(set(A.blades) | set(B.blades)))
    position = {b: i for i, b in enumerate(blades)}
    batch = torch.broadcast_shapes(A.batch_shape, B.batch_shape)
    dtype = torch.promote_types(A.dtype, B.dtype)

    out = torch.zeros(*batch, len(blades), dtype=dtype, device=A.device)
    if A.blades:
        out[..., [position[b] for b in A.blades]] += A.tensor.to(dtype)
    if B.blades:
        out[..., [position[b] for b in B.blades]] += sign * B.tensor.to(dtype)
    return Multivector._wrap(A.algebra, blades, out)


def _product(kind: str, A: Multivector, B: Multivector) -> Multivector:
    """Shared O(|A|·|B|) kernel for the three Cayley-table products.

    Gathers every contributing coefficient pair, scales it by the table
    multiplier and accumulates into the result shape in plan order.
    """
    check_same_algebra(A, B, f"{kind}_product")
    plan = A.algebra.product_plan(kind, A.blades, B.blades)
    batch = torch.broadcast_shapes(A.batch_shape, B.batch_shape)
    dtype = torch.promote_types(A.dtype, B.dtype)
    device = A.device

    out = torch.zeros(*batch, len(plan.blades), dtype=dtype, device=device)
    if plan.left.numel():
        a = A.tensor.to(dtype)[..., plan.left.to(device)]
        b = B.tensor.to(device=device, dtype=dtype)[..., plan.right.to(device)]
        terms = (a * b * plan.signs.to(device=device, dtype=dtype)).expand(*batch, -1)
        out.index_add_(out.dim() - 1, plan.out_index.to(device), terms)
    return Multivector._wrap(A.algebra, plan.blades, out)


def geometric_product(A: Multivector, B: Multivector) -> Multivector:
    """Computes the Geometric Product AB."""
    return _product(GEOMETRIC, A, B)


def inner_product(A: Multivector, B: Multivector) -> Multivector:
    """Computes the inner product: grade |r - s| part, scalars excluded."""
    return _product(INNER, A, B)


def outer_product(A: Multivector, B: Multivector) -> Multivector:
    """Computes the wedge (outer) product: grade r + s part."""
    return _product(OUTER, A, B)


def reverse(A: M) -> M:
    """Reversion. Pure function of each blade, independent of the metric."""
    signs = torch.tensor([reverse_sign(b) for b in A.blades], dtype=A.dtype, device=A.device)
    return type(A)._wrap(A.algebra, A.blades, A.tensor * signs)


def inverse(A: Multivector) -> Multivector:
    """Multiplicative inverse ``~A / <A ~A>_0``.

    Exact for versors and blades (where ``A ~A`` is a scalar).

    Raises:
        NonInvertible: If ``|<A ~A>_0|`` is within ``zero_tol`` of zero for
            any batch element.
    """
    rev = reverse(A)
    denom = (A * rev).scalar_part()
    if bool((denom.abs() <= A.algebra.config.zero_tol).any()):
        logger.warning("Inverse requested for a null element (|<A ~A>_0| <= %g)",
                       A.algebra.config.zero_tol)
        raise NonInvertible(f"{type(A).__name__} has <A ~A>_0 = 0 and cannot be inverted")
    return rev / denom


def dual(A: Multivector) -> Multivector:
    """Dual ``A I^-1`` with ``I`` the top-grade pseudoscalar.

    Raises:
        NonInvertible: For degenerate metrics whose pseudoscalar is null.
    """
    algebra = A.algebra
    pseudo = Multivector(algebra, torch.ones(1, dtype=A.dtype, device=A.device),
                         blades=(algebra.pseudoscalar,))
    return geometric_product(A, inverse(pseudo))


def scalar_part(A: Multivector) -> torch.Tensor:
    """Grade-0 coefficient ``<A>_0``, batch shape of ``A``."""
    return A.scalar_part()
