# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Core mathematical kernel for Geometric Algebra.

Provides the metric, blade bitmaps, Cayley-table algebra, the fixed-shape
multivector container, engine configuration and the error taxonomy.
"""

from .algebra import Algebra, CayleyTable, build_cayley_table, GEOMETRIC, INNER, OUTER
from .config import EngineConfig, load_config, resolve_device
from .errors import (
    CliffordError,
    ConstructionShapeMismatch,
    NonInvertible,
    DegenerateGenerator,
)
from .metric import Metric, scalar_product, norm_squared, induced_norm, geometric_distance
from .multivector import (
    Multivector,
    geometric_product,
    inner_product,
    outer_product,
    reverse,
    dual,
    inverse,
    scalar_part,
)

__all__ = [
    # algebra
    "Algebra",
    "CayleyTable",
    "build_cayley_table",
    "GEOMETRIC",
    "INNER",
    "OUTER",
    "Metric",
    "Multivector",
    # config
    "EngineConfig",
    "load_config",
    "resolve_device",
    # errors
    "CliffordError",
    "ConstructionShapeMismatch",
    "NonInvertible",
    "DegenerateGenerator",
    # products
    "geometric_product",
    "inner_product",
    "outer_product",
    "reverse",
    "dual",
    "inverse",
    "scalar_part",
    # metric
    "scalar_product",
    "norm_squared",
    "induced_norm",
    "geometric_distance",
]
