"""Tests for the fixed-shape Multivector container.

Covers construction checks, the union/product shape rules, unary
operations (reverse, dual, norm, inverse) and strict narrowing.
"""

import math

import pytest
import torch

from core.algebra import Algebra
from core.bitmap import grade
from core.errors import ConstructionShapeMismatch, NonInvertible
from core.metric import Metric, geometric_distance, induced_norm, norm_squared, scalar_product
from core.multivector import Multivector, geometric_product, outer_product
from cga.algebra import ConformalAlgebra
from cga.objects import Point


# ── Fixtures ───────────────────────────────────────────────────────────

@pytest.fixture
def e3():
    return Algebra(Metric.euclidean(3))


@pytest.fixture
def cga():
    return ConformalAlgebra()


# ── Construction ───────────────────────────────────────────────────────

class TestConstruction:

    def test_default_is_zero(self, e3):
        mv = Multivector(e3, blades=("e1", "e2"))
        assert mv.tensor.shape == (2,)
        assert mv.tensor.abs().max().item() == 0.0
        assert mv.dtype == torch.float64

    def test_coefficient_count_mismatch(self, e3):
        with pytest.raises(ConstructionShapeMismatch):
            Multivector(e3, [1.0, 2.0], blades=("e1",))

    def test_unknown_and_duplicate_blades(self, e3):
        with pytest.raises(ConstructionShapeMismatch):
            Multivector(e3, [1.0], blades=("e4",))
        with pytest.raises(ConstructionShapeMismatch):
            Multivector(e3, [1.0, 2.0], blades=("e1", "e1"))

    def test_missing_shape(self, e3):
        with pytest.raises(ConstructionShapeMismatch):
            Multivector(e3, [1.0])

    def test_blades_sorted_with_coefficients(self, e3):
        mv = Multivector(e3, [3.0, 1.0, 2.0], blades=("e23", "e1", 2))
        assert mv.blades == (1, 2, 6)
        assert mv["e1"].item() == 1.0
        assert mv["e2"].item() == 2.0
        assert mv["e23"].item() == 3.0
        assert mv["e12"].item() == 0.0

    def test_tensor_input_is_copied(self, e3):
        coeffs = torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64)
        mv = e3.vector(coeffs)
        coeffs[0] = 10.0
        assert mv["e1"].item() == 1.0

    def test_to_dict_canonical_names(self, e3):
        mv = e3.multivector({"e12": 2.0, "scalar": 1.0})
        assert mv.to_dict() == {"scalar": 1.0, "e12": 2.0}

    def test_to_dict_requires_single_element(self, e3):
        mv = e3.vector(torch.zeros(4, 3, dtype=torch.float64))
        with pytest.raises(ValueError):
            mv.to_dict()

    def test_not_iterable(self, e3):
        with pytest.raises(TypeError):
            list(e3.scalar(1.0))


# ── Addition ───────────────────────────────────────────────────────────

class TestAddition:

    def test_union_shape(self, e3):
        a = e3.multivector({"e1": 1.0, "e12": 2.0})
        b = e3.multivector({"e2": 3.0, "e12": 1.0})
        c = a + b
        assert c.blades == (1, 2, 3)
        assert c.to_dict() == {"e1": 1.0, "e2": 3.0, "e12": 3.0}

    def test_scalar_operands(self, e3):
        v = e3.basis("e1")
        assert (v + 2).to_dict() == {"scalar": 2.0, "e1": 1.0}
        assert (2 - v).to_dict() == {"scalar": 2.0, "e1": -1.0}

    def test_commutative_associative_batched(self, e3):
        """10,000 random samples agree to 1e-12."""
        torch.manual_seed(0)
        n = 10_000
        a = Multivector(e3, torch.randn(n, 4, dtype=torch.float64), blades=(0, 1, 2, 3))
        b = Multivector(e3, torch.randn(n, 3, dtype=torch.float64), blades=(3, 5, 6))
        c = Multivector(e3, torch.randn(n, 2, dtype=torch.float64), blades=(1, 7))

        assert (a + b).allclose(b + a, atol=1e-12)
        assert ((a + b) + c).allclose(a + (b + c), atol=1e-12)

    def test_different_algebras_rejected(self, e3):
        other = Algebra(Metric.signature(2, 1))
        with pytest.raises(ValueError):
            e3.basis("e1") + other.basis("e1")


# ── Products ───────────────────────────────────────────────────────────

class TestProducts:

    def test_vector_square_is_scalar(self, e3):
        v = e3.vector([1.0, 2.0, 3.0])
        sq = v * v
        assert sq.allclose(e3.scalar(14.0), atol=1e-12)

    def test_shape_depends_on_blades_not_values(self, e3):
        a = Multivector(e3, [0.0], blades=("e1",))
        b = Multivector(e3, [0.0], blades=("e2",))
        assert (a * b).blades == (e3.blade("e12"),)

    def test_anticommuting_vectors(self, e3):
        e1, e2 = e3.basis("e1"), e3.basis("e2")
        assert (e1 * e2 + e2 * e1).allclose(0.0, atol=1e-15)
        assert (e1 * e2).to_dict() == {"e12": 1.0}

    def test_outer_product_of_vector_with_itself(self, e3):
        v = e3.vector([1.0, -2.0, 0.5])
        assert (v ^ v).allclose(0.0, atol=1e-15)

    def test_inner_plus_outer_is_geometric_for_vectors(self, e3):
        a = e3.vector([1.0, 2.0, 3.0])
        b = e3.vector([-1.0, 0.5, 2.0])
        assert ((a | b) + (a ^ b)).allclose(a * b, atol=1e-12)

    def test_batched_broadcast(self, e3):
        a = e3.vector(torch.randn(5, 3, dtype=torch.float64))
        b = e3.basis("e1")
        out = geometric_product(a, b)
        assert out.batch_shape == (5,)
        assert torch.allclose(out.scalar_part(), a["e1"])

    def test_associativity(self, e3):
        torch.manual_seed(1)
        full = tuple(range(e3.dim))
        a, b, c = (Multivector(e3, torch.randn(e3.dim, dtype=torch.float64), blades=full)
                   for _ in range(3))
        assert ((a * b) * c).allclose(a * (b * c), atol=1e-10)

    def test_scalar_scaling(self, e3):
        v = e3.vector([1.0, 2.0, 3.0])
        assert (2 * v).allclose(v + v)
        assert (v / 2).to_dict() == {"e1": 0.5, "e2": 1.0, "e3": 1.5}
        scales = torch.tensor([1.0, 2.0], dtype=torch.float64)
        batched = e3.vector(torch.ones(2, 3, dtype=torch.float64)) * scales
        assert batched["e2"].tolist() == [1.0, 2.0]

    def test_conformal_null_vectors(self, cga):
        e0, ei = cga.e0, cga.ei
        assert (e0 * e0).allclose(0.0)
        assert (ei * ei).allclose(0.0)
        assert (e0 * ei).to_dict() == {"scalar": -1.0, "e0i": 1.0}
        assert outer_product(e0, ei).to_dict() == {"e0i": 1.0}


# ── Unary operations ───────────────────────────────────────────────────

class TestUnary:

    def test_reverse_involution(self, e3):
        torch.manual_seed(2)
        full = tuple(range(e3.dim))
        a = Multivector(e3, torch.randn(16, e3.dim, dtype=torch.float64), blades=full)
        assert (~~a).allclose(a, atol=0.0)
        assert a.reverse().reverse().allclose(a, atol=0.0)

    def test_reverse_signs(self, e3):
        a = e3.multivector({"scalar": 1.0, "e1": 1.0, "e12": 1.0, "e123": 1.0})
        assert (~a).to_dict() == {"scalar": 1.0, "e1": 1.0, "e12": -1.0, "e123": -1.0}

    def test_norm(self, e3):
        v = e3.vector([3.0, 4.0, 0.0])
        assert v.norm().item() == pytest.approx(5.0)
        assert induced_norm(v).item() == pytest.approx(5.0)
        assert norm_squared(v).item() == pytest.approx(25.0)

    def test_norm_of_null_point_is_zero(self, cga):
        p = Point.from_euclidean(cga, 1.0, 2.0, 3.0)
        assert p.norm().item() == pytest.approx(0.0, abs=1e-12)

    def test_scalar_product_and_distance(self, e3):
        a = e3.vector([1.0, 0.0, 0.0])
        b = e3.vector([0.0, 1.0, 0.0])
        assert scalar_product(a, b).item() == 0.0
        assert geometric_distance(a, b).item() == pytest.approx(math.sqrt(2.0))

    def test_inverse_of_vector(self, e3):
        v = e3.vector([1.0, 2.0, 3.0])
        assert (v * v.inverse()).allclose(e3.scalar(1.0), atol=1e-12)
        assert v.inverse().allclose(v / 14.0, atol=1e-15)

    def test_inverse_of_conformal_point_raises(self, cga):
        p = Point.from_euclidean(cga, 1.0, 2.0, 3.0)
        with pytest.raises(NonInvertible):
            p.inverse()

    def test_dual_euclidean(self, e3):
        # I = e123, I^-1 = -e123, e1 * (-e123) = -e23
        assert e3.basis("e1").dual().allclose(e3.basis("e23", -1.0), atol=1e-15)

    def test_dual_degenerate_raises(self):
        pga = Algebra(Metric.signature(2, 0, 1))
        with pytest.raises(NonInvertible):
            pga.basis("e1").dual()

    def test_dual_conformal(self, cga):
        # The conformal pseudoscalar is invertible (e0/ei pair is non-degenerate)
        d = cga.e0.dual()
        assert d.blades
        assert all(grade(b) == 4 for b in d.blades)
        assert d.norm().item() == pytest.approx(0.0, abs=1e-12)


# ── Narrowing ──────────────────────────────────────────────────────────

class TestNarrowing:

    def test_strict_narrowing_raises(self, e3):
        mv = e3.multivector({"e1": 1.0, "e2": 2.0})
        with pytest.raises(ConstructionShapeMismatch):
            mv.narrow(["e1"])

    def test_lenient_narrowing_drops(self, e3):
        mv = e3.multivector({"e1": 1.0, "e2": 2.0})
        assert mv.narrow(["e1"], strict=False).to_dict() == {"e1": 1.0}

    def test_negligible_drop_allowed(self, e3):
        mv = e3.multivector({"e1": 1.0, "e2": 1e-14})
        assert mv.narrow(["e1"]).to_dict() == {"e1": 1.0}

    def test_config_disables_strictness(self):
        from core.config import EngineConfig
        alg = Algebra(Metric.euclidean(2), config=EngineConfig(strict_narrowing=False))
        mv = alg.multivector({"e1": 1.0, "e2": 2.0})
        assert mv.narrow(["e2"]).to_dict() == {"e2": 2.0}

    def test_widen(self, e3):
        mv = e3.basis("e1", 2.0)
        wide = mv.widen(["e1", "e2", "scalar"])
        assert wide.to_dict() == {"scalar": 0.0, "e1": 2.0, "e2": 0.0}
        with pytest.raises(ConstructionShapeMismatch):
            mv.widen(["e2"])

    def test_grade_projection(self, e3):
        mv = e3.multivector({"scalar": 1.0, "e1": 2.0, "e12": 3.0})
        assert mv.grade(1).to_dict() == {"e1": 2.0}
        assert mv.grade(3).blades == ()
