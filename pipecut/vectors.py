# pipecut/vectors.py
from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .errors import DegenerateVectorError, InsufficientPointsError

logger = logging.getLogger(__name__)

Z_AXIS = np.array([0.0, 0.0, 1.0], dtype=float)
_X_AXIS = np.array([1.0, 0.0, 0.0], dtype=float)
_Y_AXIS = np.array([0.0, 1.0, 0.0], dtype=float)


# ---------- small numeric helpers (module-level) ----------

def as_vector(v) -> np.ndarray:
    a = np.asarray(v, dtype=float)
    if a.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {a.shape}.")
    return a


def normalize(v) -> np.ndarray:
    """
    Return v / ||v||. A zero-length vector raises DegenerateVectorError
    instead of producing NaNs.
    """
    a = as_vector(v)
    n = float(np.linalg.norm(a))
    if n == 0.0:
        raise DegenerateVectorError(f"Cannot normalize zero-length vector {a.tolist()}.")
    return a / n


def normalize_rows(a: np.ndarray) -> np.ndarray:
    """
    Normalize each row vector of an (N,3) array.
    The first zero-length row is reported by index.
    """
    a = np.asarray(a, dtype=float).reshape(-1, 3)
    n = np.linalg.norm(a, axis=1, keepdims=True)
    bad = np.flatnonzero(n[:, 0] == 0.0)
    if bad.size:
        raise DegenerateVectorError(
            f"Zero-length vector at row {int(bad[0])} (consecutive identical points?)."
        )
    return a / n


def difference(points: np.ndarray) -> np.ndarray:
    """
    Forward differences p[i+1] - p[i]; the last row repeats the previous one
    so the result has the same length as the input.
    """
    P = np.asarray(points, dtype=float).reshape(-1, 3)
    if len(P) < 2:
        raise InsufficientPointsError(
            f"At least 2 points are needed to derive a tangent, got {len(P)}."
        )
    D = np.empty_like(P)
    D[:-1] = P[1:] - P[:-1]
    D[-1] = D[-2]
    return D


def cross(a, b) -> np.ndarray:
    """Component-wise cross product a x b."""
    a = as_vector(a)
    b = as_vector(b)
    return np.array([
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    ], dtype=float)


def right_handed_basis(k) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Local basis (i, j, k) for a cylindrical frame whose third axis is the
    unit tangent k.

    k == (0,0,1) exactly maps to the lab axes. Otherwise:
        i = normalize(k x z)
        j = normalize(k x i)
    Historical outputs depend on this exact sequence of products.
    A tangent antiparallel to z has k x z == 0 and raises DegenerateVectorError.
    """
    k = as_vector(k)
    if np.array_equal(k, Z_AXIS):
        return _X_AXIS.copy(), _Y_AXIS.copy(), k.copy()

    i = cross(k, Z_AXIS)
    j = cross(k, i)
    return normalize(i), normalize(j), k.copy()
