# pipecut/curve_sampler.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import numpy as np

from .centerline import Centerline, StationFrame, tangents as _tangents
from .errors import ConfigError, ExternalServiceError, PipeCutError
from .host import HostSession

logger = logging.getLogger(__name__)

PLANAR = "planar"
CYLINDRICAL = "cylindrical"
MODES = (PLANAR, CYLINDRICAL)


@dataclass(frozen=True)
class PipeCut:
    origin: np.ndarray
    value: float


@dataclass
class SampleSeries:
    """Ordered (origin, value) pairs for one field, one per station."""
    field_name: str
    cuts: List[PipeCut] = field(default_factory=list)

    def append(self, origin: Sequence[float], value: float) -> None:
        self.cuts.append(PipeCut(np.asarray(origin, dtype=float).copy(), float(value)))

    def __len__(self) -> int:
        return len(self.cuts)

    def __iter__(self) -> Iterator[PipeCut]:
        return iter(self.cuts)

    @property
    def origins(self) -> np.ndarray:
        if not self.cuts:
            return np.zeros((0, 3), dtype=float)
        return np.stack([c.origin for c in self.cuts])

    @property
    def values(self) -> np.ndarray:
        return np.array([c.value for c in self.cuts], dtype=float)

    def rows(self) -> Iterator[List[float]]:
        for c in self.cuts:
            yield [float(v) for v in c.origin] + [c.value]


class CurveSampler:
    """
    Averages fields over cuts placed along a centerline.

    Modes
    -----
    planar      : one plane section on the region, origin at the station,
                  normal along the local tangent.
    cylindrical : a local cylindrical frame (third axis = tangent) drives a
                  radial threshold of `threshold_radius`; the plane section
                  is cut from that threshold so neighbouring pipe branches
                  are excluded.

    The plane, report, frame and threshold are fetched once by name and
    repositioned for every station and every field.
    """

    def __init__(
        self,
        session: HostSession,
        region_name: str,
        *,
        mode: str = PLANAR,
        threshold_radius: float = 0.15,
        plane_name: str = "alongCurveCut",
        report_name: str = "surfaceAverageAlongCurveCut",
        frame_name: str = "pipeCylindrical",
        threshold_name: str = "pipeThreshold",
    ):
        mode = str(mode).lower()
        if mode not in MODES:
            raise ConfigError(f"mode must be one of {MODES}, got {mode!r}")
        if mode == CYLINDRICAL and not float(threshold_radius) > 0.0:
            raise ConfigError(f"threshold_radius must be > 0, got {threshold_radius!r}")

        self.session = session
        self.region_name = region_name
        self.mode = mode
        self.threshold_radius = float(threshold_radius)
        self.plane_name = plane_name
        self.report_name = report_name
        self.frame_name = frame_name
        self.threshold_name = threshold_name

        self._region = None
        self._plane = None
        self._report = None
        self._frame = None
        self._threshold = None

    def __repr__(self) -> str:
        return f"CurveSampler(region={self.region_name!r}, mode={self.mode!r})"

    @property
    def is_cylindrical(self) -> bool:
        return self.mode == CYLINDRICAL

    # ----- geometry -----

    @staticmethod
    def tangents(centerline) -> np.ndarray:
        return _tangents(centerline)

    def frames(self, centerline: Centerline,
               orientations: Optional[Iterable[Sequence[float]]] = None) -> List[StationFrame]:
        return centerline.frames(with_basis=self.is_cylindrical, orientations=orientations)

    # ----- host entities -----

    def prepare(self) -> "CurveSampler":
        """Create-or-get every named entity this mode needs. Safe to call repeatedly."""
        s = self.session
        self._region = s.lookup_region(self.region_name)
        if self.is_cylindrical:
            self._frame = s.create_or_get_cylindrical_frame(self.frame_name)
            self._threshold = s.create_or_get_radial_threshold(
                self.threshold_name, self._region, self._frame, self.threshold_radius
            )
        self._plane = s.create_or_get_planar_cut(self.plane_name, self._region)
        self._report = s.create_or_get_area_average_report(self.report_name, self._plane)
        return self

    def position_station(self, frame: StationFrame) -> None:
        if self._plane is None:
            self.prepare()
        s = self.session
        if self.is_cylindrical:
            s.set_frame_pose(self._frame, frame.origin, frame.basis)
            s.set_threshold_radius(self._threshold, self.threshold_radius)
            s.set_planar_cut_pose(self._plane, frame.origin, frame.normal)
            s.set_planar_cut_input(self._plane, self._threshold)
        else:
            s.set_planar_cut_pose(self._plane, frame.origin, frame.normal)
            s.set_planar_cut_input(self._plane, self._region)

    def evaluate(self, field_name: str) -> float:
        if self._report is None:
            self.prepare()
        return float(self.session.evaluate_area_average(self._report, field_name))

    # ----- sampling -----

    def sample_along_curve(self, centerline: Centerline, field_name: str,
                           orientations: Optional[Iterable[Sequence[float]]] = None) -> SampleSeries:
        """Position the cut at every station and record the field's area average there."""
        return self._sample_frames(self.frames(centerline, orientations), field_name)

    def sample_fields(self, centerline: Centerline, fields: Iterable[str],
                      orientations: Optional[Iterable[Sequence[float]]] = None) -> Dict[str, SampleSeries]:
        frames = self.frames(centerline, orientations)
        out: Dict[str, SampleSeries] = {}
        for name in fields:
            out[name] = self._sample_frames(frames, name)
        return out

    def _sample_frames(self, frames: List[StationFrame], field_name: str) -> SampleSeries:
        try:
            self.prepare()
        except PipeCutError:
            raise
        except Exception as e:
            raise ExternalServiceError(f"Preparing cut entities ({field_name}): {e}") from e

        series = SampleSeries(field_name)
        for fr in frames:
            try:
                self.position_station(fr)
                value = self.evaluate(field_name)
            except PipeCutError:
                raise
            except Exception as e:
                raise ExternalServiceError(f"Station {fr.index} ({field_name}): {e}") from e
            logger.debug("Station %d %s -> %s = %r", fr.index, fr.origin.tolist(), field_name, value)
            series.append(fr.origin, value)
        return series
