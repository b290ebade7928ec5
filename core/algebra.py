# Versor: Universal Geometric Algebra Neural Network
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

import functools
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

import torch

from core.bitmap import bits, grade, left_shifts, reorder_sign, right_shifts
from core.config import EngineConfig
from core.errors import ConstructionShapeMismatch
from core.metric import Metric
from log import get_logger

logger = get_logger(__name__)

GEOMETRIC = "geometric"
INNER = "inner"
OUTER = "outer"
PRODUCT_KINDS = (GEOMETRIC, INNER, OUTER)

MAX_DIMENSIONS = 12
_DEFAULT_NAMES = "123456789abc"

Term = Tuple[int, float]


class CayleyTable:
    """Immutable multiplication table for one product kind.

    Entry ``(b1, b2)`` is a tuple of ``(result_blade, multiplier)`` terms
    with nonzero multipliers; an empty tuple means the pair annihilates.
    Orthogonal metrics give at most one term per entry (result blade
    ``b1 ^ b2``). Non-orthogonal metrics can expand one pair into several
    blades.

    Attributes:
        kind (str): ``geometric``, ``inner`` or ``outer``.
        dim (int): Number of basis blades (2^n).
    """

    def __init__(self, kind: str, dim: int, entries: Tuple[Tuple[Term, ...], ...]):
        self.kind = kind
        self.dim = dim
        self._entries = entries

    def __getitem__(self, pair: Tuple[int, int]) -> Tuple[Term, ...]:
        b1, b2 = pair
        return self._entries[b1 * self.dim + b2]

    @property
    def is_monomial(self) -> bool:
        """True when no entry expands into more than one blade."""
        return all(len(terms) <= 1 for terms in self._entries)

    def lookup(self, b1: int, b2: int) -> Term:
        """Single ``(result_blade, multiplier)`` pair, multiplier 0 on annihilation.

        Raises:
            ValueError: If the entry expands into several blades.
        """
        terms = self[b1, b2]
        if not terms:
            return b1 ^ b2, 0.0
        if len(terms) > 1:
            raise ValueError(
                f"{self.kind} product of blades {b1} and {b2} expands into "
                f"{len(terms)} blades"
            )
        return terms[0]

    def to_dense(self) -> Tuple[torch.Tensor, torch.Tensor]:
        """Dense ``[dim, dim]`` result-index and multiplier tensors.

        Only defined for monomial tables.
        """
        if not self.is_monomial:
            raise ValueError(f"{self.kind} table is not monomial; use per-entry terms")
        indices = torch.zeros(self.dim, self.dim, dtype=torch.long)
        signs = torch.zeros(self.dim, self.dim, dtype=torch.float64)
        for b1 in range(self.dim):
            for b2 in range(self.dim):
                blade, sign = self.lookup(b1, b2)
                indices[b1, b2] = blade
                signs[b1, b2] = sign
        return indices, signs

    def __repr__(self) -> str:
        return f"CayleyTable(kind={self.kind}, dim={self.dim})"


def _contract(b1: int, b2: int, metric: Metric) -> Term:
    """Orthogonal-metric product of two basis blades.

    Contracts every shared basis pair against the metric, tracking the
    anticommutation flips needed to bring the two factors together, then
    reorders what remains into canonical order.
    """
    n = metric.dim
    lhs, rhs, sign = b1, b2, 1.0
    for i in range(n):
        for j in range(n):
            g = metric.get(i, j)
            if g == 0.0 or not (lhs >> i) & 1 or not (rhs >> j) & 1:
                continue
            flips = right_shifts(i, lhs) + left_shifts(j, rhs)
            sign *= -g if flips & 1 else g
            lhs ^= 1 << i
            rhs ^= 1 << j

    # A null basis vector left on both sides squares to zero
    if lhs & rhs:
        return lhs ^ rhs, 0.0
    return lhs ^ rhs, sign * reorder_sign(lhs, rhs)


def _accumulate(acc: Dict[int, float], blade: int, value: float) -> None:
    acc[blade] = acc.get(blade, 0.0) + value


def _vector_contract(a: int, blade: int, metric: Metric) -> List[Term]:
    """Left contraction ``e_a ⌋ blade``."""
    out = []
    for m, c in enumerate(bits(blade)):
        g = metric.get(a, c)
        if g != 0.0:
            out.append((blade ^ (1 << c), -g if m & 1 else g))
    return out


def _vector_product(a: int, blade: int, metric: Metric) -> List[Term]:
    """Geometric product ``e_a blade = e_a ⌋ blade + e_a ∧ blade``."""
    out = _vector_contract(a, blade, metric)
    if not (blade >> a) & 1:
        out.append((blade | (1 << a), -1.0 if left_shifts(a, blade) & 1 else 1.0))
    return out


def _expand(b1: int, b2: int, metric: Metric,
            memo: Dict[Tuple[int, int], Dict[int, float]]) -> Dict[int, float]:
    """General-metric product of two basis blades as ``{blade: multiplier}``.

    Peels the lowest factor off the left blade: with ``A = e_a ∧ C``,
    ``A B = e_a (C B) - (e_a ⌋ C) B``.
    """
    key = (b1, b2)
    if key in memo:
        return memo[key]

    if b1 == 0:
        result = {b2: 1.0}
    else:
        a = bits(b1)[0]
        rest = b1 ^ (1 << a)
        result: Dict[int, float] = {}
        for blade, coeff in _expand(rest, b2, metric, memo).items():
            for out, c in _vector_product(a, blade, metric):
                _accumulate(result, out, coeff * c)
        for blade, c in _vector_contract(a, rest, metric):
            for out, coeff in _expand(blade, b2, metric, memo).items():
                _accumulate(result, out, -c * coeff)
        result = {k: v for k, v in result.items() if v != 0.0}

    memo[key] = result
    return result


def _keep(kind: str, g1: int, g2: int, g_out: int) -> bool:
    """Grade filter distinguishing the three product kinds."""
    if kind == OUTER:
        return g_out == g1 + g2
    if kind == INNER:
        return g1 > 0 and g2 > 0 and g_out == abs(g1 - g2)
    return True


@functools.lru_cache(maxsize=None)
def build_cayley_table(metric_key: Tuple[Tuple[float, ...], ...], kind: str) -> CayleyTable:
    """Build (once per metric and kind) the full Cayley table.

    Args:
        metric_key: :attr:`Metric.key` of the metric.
        kind: One of :data:`PRODUCT_KINDS`.

    Returns:
        CayleyTable: Immutable table shared by every algebra over this metric.
    """
    if kind not in PRODUCT_KINDS:
        raise ValueError(f"Unknown product kind '{kind}', expected one of {PRODUCT_KINDS}")

    metric = Metric(metric_key)
    dim = 1 << metric.dim
    orthogonal = metric.is_diagonal
    memo: Dict[Tuple[int, int], Dict[int, float]] = {}

    entries = []
    for b1 in range(dim):
        g1 = grade(b1)
        for b2 in range(dim):
            g2 = grade(b2)
            if orthogonal:
                blade, sign = _contract(b1, b2, metric)
                terms = [(blade, sign)] if sign != 0.0 else []
            else:
                terms = sorted(_expand(b1, b2, metric, memo).items())
            entries.append(tuple(
                (blade, float(sign)) for blade, sign in terms
                if _keep(kind, g1, g2, grade(blade))
            ))

    logger.debug("Built %s Cayley table: %d x %d blades (%s metric)",
                 kind, dim, dim, "orthogonal" if orthogonal else "general")
    return CayleyTable(kind, dim, tuple(entries))


class ProductPlan(NamedTuple):
    """Precomputed accumulation plan for one (kind, shape, shape) triple.

    Result coefficient ``out[k]`` collects ``a[left[t]] * b[right[t]] * signs[t]``
    for every ``t`` with ``out_index[t] == k``.
    """

    left: torch.Tensor
    right: torch.Tensor
    out_index: torch.Tensor
    signs: torch.Tensor
    blades: Tuple[int, ...]


class Algebra:
    """Clifford algebra over a user-supplied metric.

    Builds the geometric, inner and outer Cayley tables in the constructor,
    so every table exists before any product reads it. Algebras are passed
    explicitly to every multivector; there is no global default instance.

    Attributes:
        metric (Metric): The bilinear form.
        n (int): Number of basis vectors.
        dim (int): Number of basis blades (2^n).
        names (Tuple[str, ...]): One-character suffix per basis vector.
        config (EngineConfig): Numeric settings.
        geometric (CayleyTable): Geometric product table.
        inner (CayleyTable): Inner product table.
        outer (CayleyTable): Outer product table.
    """

    def __init__(self, metric: Union[Metric, Sequence[Sequence[float]]],
                 names: Optional[Sequence[str]] = None,
                 config: Optional[EngineConfig] = None):
        """Initialize the algebra and fetch its Cayley tables.

        Args:
            metric: A :class:`Metric` or a square symmetric matrix.
            names: Basis-vector suffixes used in blade names. Defaults to
                ``1..n``.
            config: Numeric settings. Defaults to :class:`EngineConfig()`.
        """
        if not isinstance(metric, Metric):
            metric = Metric(metric)
        if metric.dim > MAX_DIMENSIONS:
            raise ValueError(f"At most {MAX_DIMENSIONS} basis vectors supported, got {metric.dim}")

        self.metric = metric
        self.n = metric.dim
        self.dim = 1 << self.n
        self.config = config or EngineConfig()

        if names is None:
            names = _DEFAULT_NAMES[:self.n]
        names = tuple(names)
        if len(names) != self.n:
            raise ValueError(f"Expected {self.n} basis names, got {len(names)}")
        if any(len(s) != 1 for s in names) or len(set(names)) != self.n:
            raise ValueError(f"Basis names must be unique single characters, got {names}")
        self.names = names

        self.geometric = build_cayley_table(metric.key, GEOMETRIC)
        self.inner = build_cayley_table(metric.key, INNER)
        self.outer = build_cayley_table(metric.key, OUTER)

        self._plans: Dict[Tuple[str, Tuple[int, ...], Tuple[int, ...]], ProductPlan] = {}

    # ------------------------------------------------------------------
    # Blade naming
    # ------------------------------------------------------------------

    @property
    def pseudoscalar(self) -> int:
        """Top-grade blade bitmask."""
        return self.dim - 1

    @property
    def num_grades(self) -> int:
        """Counts the number of grades (n + 1)."""
        return self.n + 1

    def blade(self, key: Union[int, str]) -> int:
        """Resolve a blade name (``e12``, ``e0i``, ``scalar``) or bitmask.

        Raises:
            ConstructionShapeMismatch: Unknown name or out-of-range bitmask.
        """
        if isinstance(key, str):
            if key in ("scalar", "1"):
                return 0
            if not key.startswith("e") or len(key) < 2:
                raise ConstructionShapeMismatch(f"Unknown blade name '{key}'")
            blade = 0
            for ch in key[1:]:
                if ch not in self.names:
                    raise ConstructionShapeMismatch(
                        f"Unknown basis vector '{ch}' in blade '{key}' (basis: {self.names})"
                    )
                bit = 1 << self.names.index(ch)
                if blade & bit:
                    raise ConstructionShapeMismatch(f"Repeated basis vector in blade '{key}'")
                blade |= bit
            return blade
        blade = int(key)
        if not 0 <= blade < self.dim:
            raise ConstructionShapeMismatch(f"Blade {blade} outside [0, {self.dim})")
        return blade

    def blade_name(self, blade: int) -> str:
        """Canonical name: ``scalar`` or ``e`` + suffixes in ascending order."""
        if blade == 0:
            return "scalar"
        return "e" + "".join(self.names[i] for i in bits(blade))

    def blades_of_grade(self, k: int) -> Tuple[int, ...]:
        return tuple(b for b in range(self.dim) if grade(b) == k)

    # ------------------------------------------------------------------
    # Tables and product plans
    # ------------------------------------------------------------------

    def table(self, kind: str) -> CayleyTable:
        if kind == GEOMETRIC:
            return self.geometric
        if kind == INNER:
            return self.inner
        if kind == OUTER:
            return self.outer
        raise ValueError(f"Unknown product kind '{kind}', expected one of {PRODUCT_KINDS}")

    def product_plan(self, kind: str, blades_a: Tuple[int, ...],
                     blades_b: Tuple[int, ...]) -> ProductPlan:
        """Memoized accumulation plan for the product of two blade shapes.

        The result shape is every blade reached with a nonzero multiplier,
        ascending.
        """
        key = (kind, blades_a, blades_b)
        plan = self._plans.get(key)
        if plan is not None:
            return plan

        table = self.table(kind)
        triples = []
        for i, ba in enumerate(blades_a):
            for j, bb in enumerate(blades_b):
                for blade, sign in table[ba, bb]:
                    triples.append((i, j, blade, sign))

        result = tuple(sorted({t[2] for t in triples}))
        position = {b: k for k, b in enumerate(result)}
        plan = ProductPlan(
            left=torch.tensor([t[0] for t in triples], dtype=torch.long),
            right=torch.tensor([t[1] for t in triples], dtype=torch.long),
            out_index=torch.tensor([position[t[2]] for t in triples], dtype=torch.long),
            signs=torch.tensor([t[3] for t in triples], dtype=torch.float64),
            blades=result,
        )
        self._plans[key] = plan
        return plan

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def basis(self, key: Union[int, str], coeff: float = 1.0):
        """Single-blade multivector ``coeff * e_key``."""
        from core.multivector import Multivector
        return Multivector(self, [coeff], blades=(self.blade(key),))

    def scalar(self, value: float = 1.0):
        """Grade-0 multivector."""
        return self.basis(0, value)

    def vector(self, coeffs: Sequence[float]):
        """Injects ``n`` coefficients into the grade-1 subspace."""
        from core.multivector import Multivector
        return Multivector(self, coeffs, blades=tuple(1 << i for i in range(self.n)))

    def multivector(self, components: Dict[Union[int, str], float]):
        """Multivector from a ``{blade: coefficient}`` mapping."""
        from core.multivector import Multivector
        keys = list(components)
        return Multivector(self, [components[k] for k in keys], blades=keys)

    def __eq__(self, other) -> bool:
        return (isinstance(other, Algebra) and self.metric == other.metric
                and self.names == other.names)

    def __hash__(self) -> int:
        return hash((self.metric, self.names))

    def __repr__(self) -> str:
        return f"Algebra(n={self.n}, metric={self.metric!r})"
