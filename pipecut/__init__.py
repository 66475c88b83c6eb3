# pipecut/__init__.py
"""
Public API for the pipecut package.

External code (host macros, scripts) can import:
    from pipecut import Centerline, CurveSampler, SamplerConfig, AverageAlongCurve
    from pipecut import read_centroid_csv, write_series_csv

Inside package modules, prefer relative imports to avoid cycles:
    from .centerline import Centerline
"""

from __future__ import annotations
from typing import TYPE_CHECKING
import importlib

__version__ = "0.3.0"

__all__ = [
    # Geometry
    "Centerline", "StationFrame", "tangents",
    "normalize", "right_handed_basis",
    # Sampling
    "CurveSampler", "SampleSeries", "PipeCut",
    # Host boundary
    "HostSession", "InMemorySession",
    # IO
    "read_numeric_csv", "read_centroid_csv", "write_series_csv", "read_series_csv",
    "ensure_directory",
    # Config / entry point
    "SamplerConfig", "load_config", "AverageAlongCurve",
    # Errors
    "PipeCutError", "InsufficientPointsError", "DegenerateVectorError",
    "PathNotFoundError", "ExternalServiceError", "ConfigError",
]

# Map exported names -> submodule that defines them
_EXPORT_MAP = {
    "Centerline": "pipecut.centerline",
    "StationFrame": "pipecut.centerline",
    "tangents": "pipecut.centerline",
    "normalize": "pipecut.vectors",
    "right_handed_basis": "pipecut.vectors",

    "CurveSampler": "pipecut.curve_sampler",
    "SampleSeries": "pipecut.curve_sampler",
    "PipeCut": "pipecut.curve_sampler",

    "HostSession": "pipecut.host",
    "InMemorySession": "pipecut.host",

    "read_numeric_csv": "pipecut.csv_io",
    "read_centroid_csv": "pipecut.csv_io",
    "write_series_csv": "pipecut.csv_io",
    "read_series_csv": "pipecut.csv_io",
    "ensure_directory": "pipecut.csv_io",

    "SamplerConfig": "pipecut.config",
    "load_config": "pipecut.config",
    "AverageAlongCurve": "pipecut.macro",

    "PipeCutError": "pipecut.errors",
    "InsufficientPointsError": "pipecut.errors",
    "DegenerateVectorError": "pipecut.errors",
    "PathNotFoundError": "pipecut.errors",
    "ExternalServiceError": "pipecut.errors",
    "ConfigError": "pipecut.errors",
}

def __getattr__(name: str):
    """Lazy attribute loader so `import pipecut` does not pull in numpy/orjson."""
    mod_name = _EXPORT_MAP.get(name)
    if not mod_name:
        raise AttributeError(f"module 'pipecut' has no attribute {name!r}")
    return getattr(importlib.import_module(mod_name), name)

if TYPE_CHECKING:
    # Eager imports for static type checkers / IDEs only.
    from .centerline import Centerline, StationFrame, tangents
    from .vectors import normalize, right_handed_basis
    from .curve_sampler import CurveSampler, SampleSeries, PipeCut
    from .host import HostSession, InMemorySession
    from .csv_io import (read_numeric_csv, read_centroid_csv, write_series_csv,
                         read_series_csv, ensure_directory)
    from .config import SamplerConfig, load_config
    from .macro import AverageAlongCurve
    from .errors import (PipeCutError, InsufficientPointsError, DegenerateVectorError,
                         PathNotFoundError, ExternalServiceError, ConfigError)
