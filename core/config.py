# Versor: Universal Geometric Algebra Neural Network (C) 2026 Eunkyum Kim
# Licensed under the Apache License, Version 2.0 | "Unbending" Paradigm

"""Engine configuration.

Centralises coefficient dtype/device and the numeric tolerances used by
the product kernels and the exponential/logarithm branches into a single
:class:`EngineConfig` dataclass, loadable from YAML through OmegaConf.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence

import torch
from omegaconf import OmegaConf

from log import get_logger

logger = get_logger(__name__)

CONFIG_ENV = "CLIFFKIN_CONFIG"

_DTYPES = {
    "float32": torch.float32,
    "float64": torch.float64,
}


def resolve_device(device: str = "auto") -> str:
    """Resolve ``'auto'`` to the best available accelerator.

    Priority: cuda > mps > cpu.
    """
    if device != "auto":
        return device
    if torch.cuda.is_available():
        return "cuda"
    if hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
        return "mps"
    return "cpu"


@dataclass
class EngineConfig:
    """Bag of numeric settings shared by an :class:`Algebra` and its values.

    Attributes:
        dtype: Coefficient dtype name (``float64`` or ``float32``).
        device: Device string; ``auto`` resolves via :func:`resolve_device`.
        zero_tol: Magnitude below which a scalar square counts as zero
            (parabolic exp branch, invertibility checks).
        taylor_threshold: Angle below which ``sin(x)/x``-style ratios use
            their series expansion.
        narrowing_tol: Largest coefficient a strict narrowing may drop.
        strict_narrowing: Raise instead of dropping non-negligible
            coefficients when narrowing to a smaller blade set.
    """

    dtype: str = "float64"
    device: str = "cpu"
    zero_tol: float = 1e-12
    taylor_threshold: float = 1e-7
    narrowing_tol: float = 1e-9
    strict_narrowing: bool = True

    def __post_init__(self) -> None:
        if self.dtype not in _DTYPES:
            raise ValueError(
                f"Unsupported dtype '{self.dtype}', expected one of {sorted(_DTYPES)}"
            )
        self.device = resolve_device(self.device)

    @property
    def torch_dtype(self) -> torch.dtype:
        return _DTYPES[self.dtype]


def load_config(path: Optional[str] = None,
                overrides: Optional[Sequence[str]] = None) -> EngineConfig:
    """Build an :class:`EngineConfig` from defaults, a YAML file and overrides.

    Args:
        path: YAML file to merge over the defaults. Falls back to the
            ``CLIFFKIN_CONFIG`` environment variable when omitted.
        overrides: Dotlist entries such as ``["zero_tol=1e-10"]``.

    Returns:
        EngineConfig: The validated configuration.
    """
    schema = OmegaConf.structured(EngineConfig)
    layers = [schema]

    path = path or os.environ.get(CONFIG_ENV)
    if path:
        logger.debug("Loading engine config from %s", path)
        layers.append(OmegaConf.load(path))
    if overrides:
        layers.append(OmegaConf.from_dotlist(list(overrides)))

    merged = OmegaConf.merge(*layers)
    return OmegaConf.to_object(merged)
