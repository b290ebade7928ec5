# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Versor base class: exponential construction and sandwich action.

A versor lives on an algebraically closed blade subset (``BLADES``) and is
generated by a Lie-algebra element on ``GENERATOR_BLADES``. ``EXPONENT``
is the factor applied to the generator before the raw exponential, so
each subclass pins its own geometric convention (half-angle rotors,
``1 - g`` translators, ...).
"""

from typing import Optional, Tuple, Type, TypeVar

from core.algebra import Algebra
from core.errors import ConstructionShapeMismatch, DegenerateGenerator
from core.multivector import Multivector, geometric_product
from core.validation import check_same_algebra
from cga.exponential import exp_generator, log_versor


V = TypeVar("V", bound="Versor")


class Versor(Multivector):
    """Multivector restricted to a closed versor shape.

    Attributes:
        GENERATOR_BLADES (Tuple[str, ...]): Blades the generator may occupy.
        EXPONENT (float): ``exp`` computes ``exp_generator(EXPONENT * g)``.
    """

    GENERATOR_BLADES: Optional[Tuple[str, ...]] = None
    EXPONENT: float = 1.0

    @classmethod
    def identity(cls: Type[V], algebra: Algebra) -> V:
        """The neutral element ``1``."""
        v = cls(algebra)
        v.tensor[..., 0] = 1.0
        return v

    @classmethod
    def generator(cls, algebra: Algebra, coefficients) -> Multivector:
        """Generator from per-blade coefficients in ``GENERATOR_BLADES`` order."""
        return Multivector(algebra, coefficients, blades=cls.GENERATOR_BLADES)

    @classmethod
    def _check_generator(cls, generator: Multivector) -> Multivector:
        try:
            return generator.narrow(cls.GENERATOR_BLADES, strict=True)
        except ConstructionShapeMismatch as err:
            raise DegenerateGenerator(
                f"{cls.__name__} generator must lie in {list(cls.GENERATOR_BLADES)}"
            ) from err

    @classmethod
    def exp(cls: Type[V], generator: Multivector) -> V:
        """Versor generated by ``generator``.

        Raises:
            DegenerateGenerator: Nonzero coefficients outside
                ``GENERATOR_BLADES`` or a non-simple generator.
        """
        g = cls._check_generator(generator)
        return exp_generator(g * cls.EXPONENT).cast(cls)

    def logarithm(self) -> Multivector:
        """Generator ``g`` with ``type(self).exp(g) == self``."""
        return log_versor(self) / self.EXPONENT

    def apply(self, x: Multivector) -> Multivector:
        """Sandwich product ``V x V^-1``.

        Typed objects (points, lines, planes, versors) keep their class and
        shape; generic multivectors return the full product shape.
        """
        check_same_algebra(self, x, "apply")
        result = geometric_product(geometric_product(self, x), self.inverse())
        if type(x).BLADES is not None:
            return result.cast(type(x))
        return result

    def compose(self: V, other: V) -> V:
        """``self * other``: apply ``other`` first, then ``self``."""
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot compose {type(self).__name__} with {type(other).__name__}"
            )
        return geometric_product(self, other).cast(type(self))

    def __mul__(self, other):
        if type(other) is type(self):
            return self.compose(other)
        return super().__mul__(other)
