# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Motors: rigid-body displacements ``M = T R``."""

from core.multivector import Multivector, geometric_product
from core.validation import check_same_algebra
from cga.rotor import Rotor
from cga.translator import Translator
from cga.versor import Versor


class Motor(Versor):
    """Rigid displacement: rotate about the origin, then translate.

    The generator splits into a rotational part (``e12, e13, e23``) and a
    translational part (``e1i, e2i, e3i``), exponentiated separately:
    ``Motor.exp(g) = Translator.exp(g_t) * Rotor.exp(g_r)``.
    """

    BLADES = ("scalar", "e12", "e13", "e23", "e1i", "e2i", "e3i", "e123i")
    GENERATOR_BLADES = Rotor.GENERATOR_BLADES + Translator.GENERATOR_BLADES

    @classmethod
    def from_versors(cls, translator: Translator, rotor: Rotor) -> "Motor":
        """``M = T R``."""
        check_same_algebra(translator, rotor, "from_versors")
        return geometric_product(translator, rotor).cast(cls)

    @classmethod
    def exp(cls, generator: Multivector) -> "Motor":
        g = cls._check_generator(generator)
        rotor = Rotor.exp(g.narrow(Rotor.GENERATOR_BLADES, strict=False))
        translator = Translator.exp(g.narrow(Translator.GENERATOR_BLADES, strict=False))
        return cls.from_versors(translator, rotor)

    def rotor(self) -> Rotor:
        """Rotational factor ``R`` (the scalar and Euclidean bivector part)."""
        return self.cast(Rotor, strict=False)

    def translator(self) -> Translator:
        """Translational factor ``T = M ~R``."""
        return geometric_product(self, ~self.rotor()).cast(Translator)

    def logarithm(self) -> Multivector:
        """``log R + log T``, over ``GENERATOR_BLADES``."""
        return (self.rotor().logarithm() + self.translator().logarithm()).narrow(self.GENERATOR_BLADES)
