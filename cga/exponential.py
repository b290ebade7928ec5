# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Closed-form exponential and logarithm for simple generators.

A generator ``g`` whose square is a pure scalar ``alpha = <g g>_0`` has
three regimes:

    - alpha < 0 (elliptic):   exp(g) = cos(theta) + sin(theta)/theta * g,   theta = sqrt(-alpha)
    - alpha ~= 0 (parabolic): exp(g) = 1 + g
    - alpha > 0 (hyperbolic): exp(g) = cosh(theta) + sinh(theta)/theta * g, theta = sqrt(alpha)

Both maps are branch-free over batches (``torch.where``) and use Taylor
forms of the ``sin(x)/x`` ratios below ``taylor_threshold``.
"""

import torch

from core.errors import ConstructionShapeMismatch, DegenerateGenerator, NonInvertible
from core.multivector import Multivector
from log import get_logger

logger = get_logger(__name__)


def _pure(g: Multivector) -> Multivector:
    """Drop a (zero) scalar blade from a generator."""
    if 0 not in g.blades:
        return g
    try:
        return g.narrow([b for b in g.blades if b != 0], strict=True)
    except ConstructionShapeMismatch as err:
        raise DegenerateGenerator("Generator must not carry a scalar part") from err


def scalar_square(g: Multivector) -> torch.Tensor:
    """``<g g>_0`` after checking that ``g g`` has no other component.

    Raises:
        DegenerateGenerator: If ``g g`` is not a scalar (non-simple generator).
    """
    cfg = g.algebra.config
    sq = g * g
    alpha = sq.scalar_part()
    rest = [k for k, b in enumerate(sq.blades) if b != 0]
    if rest and sq.tensor.numel():
        residual = sq.tensor[..., rest].abs().max().item()
        scale = max(1.0, sq.tensor.abs().max().item())
        if residual > cfg.narrowing_tol * scale:
            raise DegenerateGenerator(
                f"Generator square has a non-scalar part of magnitude {residual:.3e}"
            )
    return alpha


def exp_generator(g: Multivector) -> Multivector:
    """Exponential of a simple generator.

    Args:
        g (Multivector): Generator without scalar part, batch ``[...]``.

    Returns:
        Multivector: ``exp(g)`` over the scalar blade plus ``g``'s blades.
    """
    cfg = g.algebra.config
    g = _pure(g)
    alpha = scalar_square(g)

    abs_alpha = alpha.abs()
    theta = torch.sqrt(abs_alpha)
    small = theta < cfg.taylor_threshold
    safe = torch.where(small, torch.ones_like(theta), theta)

    # Elliptic branch: cos(theta) and sin(theta)/theta
    sinc_theta = torch.where(small, 1.0 - abs_alpha / 6.0, torch.sin(safe) / safe)
    # Hyperbolic branch: cosh(theta) and sinh(theta)/theta
    sinhc_theta = torch.where(small, 1.0 + abs_alpha / 6.0, torch.sinh(safe) / safe)

    is_elliptic = alpha < -cfg.zero_tol
    is_hyperbolic = alpha > cfg.zero_tol
    # Parabolic (null) falls through: scalar=1, coeff=1
    one = torch.ones_like(theta)

    scalar = torch.where(is_elliptic, torch.cos(theta),
                         torch.where(is_hyperbolic, torch.cosh(theta), one))
    coeff = torch.where(is_elliptic, sinc_theta,
                        torch.where(is_hyperbolic, sinhc_theta, one))

    if bool(small.any()):
        logger.debug("exp: Taylor form used for %d near-zero generator(s)", int(small.sum()))

    tensor = torch.cat([scalar.unsqueeze(-1), g.tensor * coeff.unsqueeze(-1)], dim=-1)
    return Multivector._wrap(g.algebra, (0,) + g.blades, tensor)


def log_versor(v: Multivector) -> Multivector:
    """Logarithm of ``v = a + B`` with ``B B`` scalar; inverse of :func:`exp_generator`.

    Returns ``(theta / |B|) B`` with ``theta = atan2(|B|, a)`` (elliptic) or
    ``atanh(|B| / a)`` (hyperbolic), and ``B / a`` when ``B B = 0``.

    A negative scalar part with a nonzero ``B`` is always elliptic: only
    angles near pi get there, and ``B B`` can be too small to carry its sign.

    Raises:
        NonInvertible: If no real logarithm exists (non-positive scalar part
            outside the elliptic regime, or ``|B| >= a`` in the hyperbolic
            regime).
        DegenerateGenerator: If ``B B`` is not a scalar.
    """
    cfg = v.algebra.config
    a = v.scalar_part()
    B = v.narrow([b for b in v.blades if b != 0], strict=False)
    beta = scalar_square(B)

    norm_b = torch.sqrt(beta.abs())
    small = norm_b < cfg.taylor_threshold
    near_pi = (a < -cfg.zero_tol) & (beta <= cfg.zero_tol) & (norm_b > 0)
    is_elliptic = ((beta < -cfg.zero_tol) & ~small) | near_pi
    is_hyperbolic = (beta > cfg.zero_tol) & ~small & ~is_elliptic
    first_order = ~(is_elliptic | is_hyperbolic)

    if bool((first_order & (a <= cfg.zero_tol)).any()):
        logger.warning("log: versor with non-positive scalar part and null bivector part")
        raise NonInvertible("Versor with scalar part <= 0 and null bivector part has no logarithm")
    if bool((is_hyperbolic & (norm_b >= a)).any()):
        logger.warning("log: hyperbolic versor outside the image of exp")
        raise NonInvertible("Hyperbolic versor needs scalar part > |B| to have a logarithm")

    safe_norm = torch.where(norm_b > 0, norm_b, torch.ones_like(norm_b))
    safe_a = torch.where(a.abs() <= cfg.zero_tol, torch.ones_like(a), a)
    ratio = torch.where(is_hyperbolic, norm_b / safe_a, torch.zeros_like(norm_b))

    coeff = torch.where(
        is_elliptic, torch.atan2(norm_b, a) / safe_norm,
        torch.where(is_hyperbolic, torch.atanh(ratio) / safe_norm, 1.0 / safe_a),
    )
    return Multivector._wrap(v.algebra, B.blades, B.tensor * coeff.unsqueeze(-1))
