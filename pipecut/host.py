# pipecut/host.py
"""
Boundary to the simulation host.

The core never looks up an "active simulation" from global state: every
operation receives a `HostSession`. Named geometric entities (plane section,
cylindrical frame, radial threshold, area-average report) are singletons per
(kind, name) and are fetched through `get_or_create`, so a sampling loop
repositions one entity in place instead of creating one per station.

`InMemorySession` implements the interface without a solver: values come from
a pluggable evaluator. It backs the tests and the CLI dry run.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .errors import ExternalServiceError, PipeCutError

logger = logging.getLogger(__name__)

PLANE_SECTION = "plane_section"
CYLINDRICAL_FRAME = "cylindrical_frame"
RADIAL_THRESHOLD = "radial_threshold"
AREA_AVERAGE_REPORT = "area_average_report"


class HostSession(ABC):
    """Narrow interface onto the simulation host used by CurveSampler."""

    def __init__(self):
        self._entities: Dict[Tuple[str, str], Any] = {}

    # ----- registry -----

    def has(self, kind: str, name: str) -> bool:
        return (kind, name) in self._entities or self._find_entity(kind, name) is not None

    def _find_entity(self, kind: str, name: str) -> Any:
        """Hook for hosts that can look up entities created outside this session object."""
        return None

    def get_or_create(self, kind: str, name: str, factory: Callable[[], Any]) -> Any:
        """Return the (kind, name) entity, creating it with `factory` only when absent."""
        key = (kind, name)
        handle = self._entities.get(key)
        if handle is not None:
            return handle
        handle = self._find_entity(kind, name)
        if handle is None:
            handle = factory()
            logger.debug("Created %s '%s'", kind, name)
        self._entities[key] = handle
        return handle

    # ----- composed create-or-get calls -----

    def create_or_get_planar_cut(self, name: str, region: Any) -> Any:
        return self.get_or_create(PLANE_SECTION, name, lambda: self._create_planar_cut(name, region))

    def create_or_get_cylindrical_frame(self, name: str) -> Any:
        return self.get_or_create(CYLINDRICAL_FRAME, name, lambda: self._create_cylindrical_frame(name))

    def create_or_get_radial_threshold(self, name: str, region: Any, frame: Any, radius: float) -> Any:
        created = []

        def factory():
            created.append(True)
            return self._create_radial_threshold(name, region, frame, radius)

        handle = self.get_or_create(RADIAL_THRESHOLD, name, factory)
        if not created:
            self.set_threshold_radius(handle, radius)
        return handle

    def create_or_get_area_average_report(self, name: str, surface: Any) -> Any:
        return self.get_or_create(AREA_AVERAGE_REPORT, name,
                                  lambda: self._create_area_average_report(name, surface))

    # ----- host primitives -----

    @abstractmethod
    def lookup_region(self, name: str) -> Any: ...

    @abstractmethod
    def lookup_field(self, name: str) -> Any: ...

    @abstractmethod
    def _create_planar_cut(self, name: str, region: Any) -> Any: ...

    @abstractmethod
    def set_planar_cut_pose(self, handle: Any, origin: np.ndarray, normal: np.ndarray) -> None: ...

    @abstractmethod
    def set_planar_cut_input(self, handle: Any, part: Any) -> None: ...

    @abstractmethod
    def _create_cylindrical_frame(self, name: str) -> Any: ...

    @abstractmethod
    def set_frame_pose(self, handle: Any, origin: np.ndarray,
                       basis: Tuple[np.ndarray, np.ndarray, np.ndarray]) -> None: ...

    @abstractmethod
    def _create_radial_threshold(self, name: str, region: Any, frame: Any, radius: float) -> Any: ...

    @abstractmethod
    def set_threshold_radius(self, handle: Any, radius: float) -> None: ...

    @abstractmethod
    def _create_area_average_report(self, name: str, surface: Any) -> Any: ...

    @abstractmethod
    def evaluate_area_average(self, report: Any, field_name: str) -> float: ...

    # ----- console -----

    @property
    def session_path(self) -> Optional[str]:
        return None

    def println(self, text: str = "") -> None:
        logger.info("%s", text)


# ---------------------------------------------------------------------------
# In-memory host
# ---------------------------------------------------------------------------

Evaluator = Callable[[str, np.ndarray, np.ndarray], float]


@dataclass
class Region:
    name: str


@dataclass
class PlaneSection:
    name: str
    inputs: List[Any]
    origin: np.ndarray = field(default_factory=lambda: np.zeros(3))
    normal: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))


@dataclass
class CylindricalFrame:
    name: str
    origin: np.ndarray = field(default_factory=lambda: np.zeros(3))
    basis: Tuple[np.ndarray, ...] = field(default_factory=lambda: tuple(np.eye(3)))


@dataclass
class ThresholdPart:
    name: str
    region: Region
    frame: CylindricalFrame
    radius: float


@dataclass
class AreaAverageReport:
    name: str
    surface: PlaneSection
    field_name: Optional[str] = None


class InMemorySession(HostSession):
    """
    Host stand-in backed by Python objects.

    regions / fields : names the host knows; None accepts any name.
    evaluator        : (field_name, origin, normal) -> float, called for every
                       report evaluation. Defaults to the constant `value`.
    """

    def __init__(
        self,
        regions: Optional[Iterable[str]] = None,
        fields: Optional[Iterable[str]] = None,
        *,
        evaluator: Optional[Evaluator] = None,
        value: float = 0.0,
        session_path: Optional[str] = None,
    ):
        super().__init__()
        self._regions = set(regions) if regions is not None else None
        self._fields = set(fields) if fields is not None else None
        self._evaluator = evaluator or (lambda field_name, origin, normal: float(value))
        self._session_path = session_path
        self.created: Counter = Counter()
        self.edits: Counter = Counter()
        self.console: List[str] = []

    @property
    def session_path(self) -> Optional[str]:
        return self._session_path

    def println(self, text: str = "") -> None:
        self.console.append(text)
        super().println(text)

    # ----- lookups -----

    def lookup_region(self, name: str) -> Region:
        if self._regions is not None and name not in self._regions:
            raise ExternalServiceError(f"Region '{name}' not found.")
        return Region(name)

    def lookup_field(self, name: str) -> str:
        if self._fields is not None and name not in self._fields:
            raise ExternalServiceError(f"Field function '{name}' not found.")
        return name

    # ----- entities -----

    def _create_planar_cut(self, name: str, region: Region) -> PlaneSection:
        self.created[PLANE_SECTION] += 1
        return PlaneSection(name=name, inputs=[region])

    def set_planar_cut_pose(self, handle: PlaneSection, origin, normal) -> None:
        self.edits[PLANE_SECTION] += 1
        handle.origin = np.array(origin, dtype=float)
        handle.normal = np.array(normal, dtype=float)

    def set_planar_cut_input(self, handle: PlaneSection, part) -> None:
        handle.inputs = [part]

    def _create_cylindrical_frame(self, name: str) -> CylindricalFrame:
        self.created[CYLINDRICAL_FRAME] += 1
        return CylindricalFrame(name=name)

    def set_frame_pose(self, handle: CylindricalFrame, origin, basis) -> None:
        self.edits[CYLINDRICAL_FRAME] += 1
        handle.origin = np.array(origin, dtype=float)
        handle.basis = tuple(np.array(b, dtype=float) for b in basis)

    def _create_radial_threshold(self, name: str, region: Region, frame: CylindricalFrame,
                                 radius: float) -> ThresholdPart:
        self.created[RADIAL_THRESHOLD] += 1
        return ThresholdPart(name=name, region=region, frame=frame, radius=float(radius))

    def set_threshold_radius(self, handle: ThresholdPart, radius: float) -> None:
        self.edits[RADIAL_THRESHOLD] += 1
        handle.radius = float(radius)

    def _create_area_average_report(self, name: str, surface: PlaneSection) -> AreaAverageReport:
        self.created[AREA_AVERAGE_REPORT] += 1
        return AreaAverageReport(name=name, surface=surface)

    def evaluate_area_average(self, report: AreaAverageReport, field_name: str) -> float:
        report.field_name = self.lookup_field(field_name)
        plane = report.surface
        try:
            return float(self._evaluator(field_name, plane.origin.copy(), plane.normal.copy()))
        except PipeCutError:
            raise
        except Exception as e:
            raise ExternalServiceError(
                f"Area average of '{field_name}' on '{plane.name}' failed: {e}"
            ) from e
