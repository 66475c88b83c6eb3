# pipecut/errors.py
"""Exception hierarchy shared by the geometry, IO and host layers."""


class PipeCutError(Exception):
    """Base class for all pipecut failures."""


class InsufficientPointsError(PipeCutError, ValueError):
    """Centerline too short to derive a tangent (needs at least 2 points)."""


class DegenerateVectorError(PipeCutError, ValueError):
    """Zero-length vector met during normalization."""


class PathNotFoundError(PipeCutError, FileNotFoundError):
    """Input or output path does not exist."""


class ExternalServiceError(PipeCutError, RuntimeError):
    """Failure reported by the simulation host (unknown region/field, empty cut, ...)."""


class ConfigError(PipeCutError, ValueError):
    """Invalid sampler configuration."""
