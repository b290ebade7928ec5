# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Conformal model of 3-D space: versors and geometric objects.

Rotors, translators, dilators and motors built from the exponential map,
acting by sandwich product on points, lines and planes.
"""

from .algebra import ConformalAlgebra, conformal_metric
from .exponential import exp_generator, log_versor
from .versor import Versor
from .rotor import Rotor
from .translator import Translator
from .dilator import Dilator
from .motor import Motor
from .objects import Point, Line, Plane

__all__ = [
    "ConformalAlgebra",
    "conformal_metric",
    "exp_generator",
    "log_versor",
    "Versor",
    "Rotor",
    "Translator",
    "Dilator",
    "Motor",
    "Point",
    "Line",
    "Plane",
]
