# pipecut/centerline.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InsufficientPointsError
from .vectors import difference, normalize_rows, right_handed_basis

logger = logging.getLogger(__name__)

Basis = Tuple[np.ndarray, np.ndarray, np.ndarray]


@dataclass(frozen=True)
class StationFrame:
    """Sampling geometry at one station: plane origin + normal, optional cylindrical basis."""
    index: int
    origin: np.ndarray
    normal: np.ndarray
    basis: Optional[Basis] = None

    @property
    def has_basis(self) -> bool:
        return self.basis is not None


class Centerline:
    """
    Ordered 3D points approximating a pipe axis.

    Point order defines the pipe path and therefore the output row order.
    Coordinates are kept as given; use `scaled()` for unit conversion
    (e.g. 0.001 for mm -> m). An empty centerline is allowed so a missing
    input file can yield an empty result, but every tangent-derived
    operation needs at least 2 points.
    """

    def __init__(self, points: Union[Sequence[Sequence[float]], np.ndarray, None] = None):
        P = np.asarray(points if points is not None else [], dtype=float)
        if P.size == 0:
            P = np.zeros((0, 3), dtype=float)
        if P.ndim != 2 or P.shape[1] != 3:
            raise ValueError(f"Centerline: expected (N,3) points, got shape {P.shape}.")
        P = P.copy()
        P.setflags(write=False)
        self._points = P

    # ----- basic introspection -----

    @property
    def points(self) -> np.ndarray:
        return self._points

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, i: int) -> np.ndarray:
        return self._points[i]

    def __repr__(self) -> str:
        n = len(self)
        if not n:
            return "Centerline(n=0)"
        return f"Centerline(n={n}, start={self._points[0].tolist()}, end={self._points[-1].tolist()})"

    def is_empty(self) -> bool:
        return len(self) == 0

    def scaled(self, factor: float) -> "Centerline":
        return Centerline(self._points * float(factor))

    def arc_length(self) -> np.ndarray:
        """Cumulative chord length at each point, starting at 0."""
        if len(self) == 0:
            return np.zeros(0, dtype=float)
        seg = np.linalg.norm(np.diff(self._points, axis=0), axis=1)
        return np.concatenate([[0.0], np.cumsum(seg)])

    # ----- tangents & frames -----

    def tangents(self) -> np.ndarray:
        return tangents(self)

    def normals(self) -> np.ndarray:
        """Unit tangents, used as cutting-plane orientations."""
        return normalize_rows(self.tangents())

    def frames(self, with_basis: bool = False,
               orientations: Optional[Iterable[Sequence[float]]] = None) -> List[StationFrame]:
        """
        One StationFrame per point. `orientations` replaces the tangent-derived
        normals (explicit per-station orientation lists); it is normalized and
        must match the number of points.
        """
        if orientations is not None:
            N = np.asarray(list(orientations), dtype=float).reshape(-1, 3)
            if len(N) != len(self):
                raise ValueError(
                    f"Got {len(N)} orientations for a centerline of {len(self)} points."
                )
            N = normalize_rows(N)
        else:
            N = self.normals()

        out: List[StationFrame] = []
        for i, (origin, normal) in enumerate(zip(self._points, N)):
            basis = right_handed_basis(normal) if with_basis else None
            out.append(StationFrame(index=i, origin=origin.copy(), normal=normal, basis=basis))
        return out


def tangents(centerline: Union[Centerline, Sequence[Sequence[float]], np.ndarray]) -> np.ndarray:
    """
    Finite-difference tangents: t[i] = p[i+1] - p[i] for i < n-1 and
    t[n-1] = t[n-2]. The final point has no forward neighbour, so it reuses
    the last difference.
    """
    P = centerline.points if isinstance(centerline, Centerline) else np.asarray(centerline, dtype=float)
    P = P.reshape(-1, 3)
    if len(P) < 2:
        raise InsufficientPointsError(
            f"Centerline has {len(P)} point(s); at least 2 are needed for tangents."
        )
    return difference(P)
