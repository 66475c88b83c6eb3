# pipecut/config.py
# Sampler configuration: python field -> JSON key(s), loaded with orjson.
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import orjson

from .errors import ConfigError, PathNotFoundError

logger = logging.getLogger(__name__)

CSV_UNIT_SCALE = 0.001
INLINE_UNIT_SCALE = 1.0

# field -> accepted JSON keys (snake_case first, then the camelCase names)
_KEYS: Dict[str, Tuple[str, ...]] = {
    "region_name": ("region_name", "regionName", "region"),
    "fields": ("fields", "fieldNames", "field_names"),
    "input_path": ("input_path", "inputPath", "input"),
    "points": ("points", "origins"),
    "orientations": ("orientations", "normals"),
    "output_dir": ("output_dir", "outputDir"),
    "unit_scale": ("unit_scale", "unitScale"),
    "threshold_radius": ("threshold_radius", "thresholdRadius", "radius"),
    "mode": ("mode",),
    "delimiter": ("delimiter",),
    "header_rows": ("header_rows", "headerRows"),
    "plane_name": ("plane_name", "planeName"),
    "report_name": ("report_name", "reportName"),
    "frame_name": ("frame_name", "frameName"),
    "threshold_name": ("threshold_name", "thresholdName"),
}


def _first(row: dict, keys, default=None):
    for k in keys:
        if k in row and row.get(k) not in (None, ""):
            return row.get(k)
    return default


def _flt(x, name: str) -> float:
    try:
        return float(x)
    except (TypeError, ValueError):
        raise ConfigError(f"{name}: expected a number, got {x!r}") from None


def _vectors(seq, name: str) -> List[List[float]]:
    out = []
    for i, v in enumerate(seq or []):
        if not isinstance(v, (list, tuple)) or len(v) != 3:
            raise ConfigError(f"{name}[{i}]: expected [x, y, z], got {v!r}")
        out.append([_flt(c, f"{name}[{i}]") for c in v])
    return out


@dataclass
class SamplerConfig:
    region_name: str
    fields: List[str]
    input_path: Optional[Path] = None
    points: Optional[List[List[float]]] = None
    orientations: Optional[List[List[float]]] = None
    output_dir: Optional[Path] = None
    unit_scale: Optional[float] = None
    threshold_radius: float = 0.15
    mode: str = "planar"
    delimiter: str = ","
    header_rows: int = 1
    plane_name: str = "alongCurveCut"
    report_name: str = "surfaceAverageAlongCurveCut"
    frame_name: str = "pipeCylindrical"
    threshold_name: str = "pipeThreshold"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if not self.region_name:
            raise ConfigError("region_name is required.")
        if isinstance(self.fields, str):
            self.fields = [self.fields]
        self.fields = [str(f) for f in (self.fields or [])]
        if not self.fields:
            raise ConfigError("fields must list at least one field name.")
        if self.input_path is None and not self.points:
            raise ConfigError("Either input_path or points must be given.")
        if self.input_path is not None and self.points:
            raise ConfigError("input_path and points are mutually exclusive.")
        if self.orientations is not None and self.points is None:
            raise ConfigError("orientations are only supported together with inline points.")
        if self.orientations is not None and len(self.orientations) != len(self.points):
            raise ConfigError(
                f"{len(self.orientations)} orientations given for {len(self.points)} points."
            )
        if self.mode not in ("planar", "cylindrical"):
            raise ConfigError(f"mode must be 'planar' or 'cylindrical', got {self.mode!r}")
        if self.unit_scale is None:
            # CSV centerlines come in mm; inline points are already in metres
            self.unit_scale = INLINE_UNIT_SCALE if self.points else CSV_UNIT_SCALE
        if not self.unit_scale > 0.0:
            raise ConfigError(f"unit_scale must be > 0, got {self.unit_scale!r}")
        if not self.threshold_radius > 0.0:
            raise ConfigError(f"threshold_radius must be > 0, got {self.threshold_radius!r}")
        if self.header_rows < 0:
            raise ConfigError(f"header_rows must be >= 0, got {self.header_rows!r}")
        if self.input_path is not None:
            self.input_path = Path(self.input_path)
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)

    @classmethod
    def from_dict(cls, row: Dict[str, Any], *, base_dir: Optional[Union[str, os.PathLike]] = None) -> "SamplerConfig":
        """
        Build from a plain mapping. Relative paths are resolved against
        `base_dir` (the config file's folder when loaded from disk).
        """
        known = {k for keys in _KEYS.values() for k in keys}
        unknown = sorted(k for k in row if k not in known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

        kw: Dict[str, Any] = {}
        for name, keys in _KEYS.items():
            raw = _first(row, keys)
            if raw is not None:
                kw[name] = raw

        for name in ("unit_scale", "threshold_radius"):
            if name in kw:
                kw[name] = _flt(kw[name], name)
        if "header_rows" in kw:
            kw["header_rows"] = int(_flt(kw["header_rows"], "header_rows"))
        if "mode" in kw:
            kw["mode"] = str(kw["mode"]).lower()
        for name in ("points", "orientations"):
            if name in kw:
                kw[name] = _vectors(kw[name], name)

        if base_dir is not None:
            for name in ("input_path", "output_dir"):
                if name in kw and not os.path.isabs(str(kw[name])):
                    kw[name] = Path(base_dir) / kw[name]

        try:
            return cls(**kw)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        out = {}
        for f in fields(self):
            v = getattr(self, f.name)
            out[f.name] = str(v) if isinstance(v, Path) else v
        return out


def load_config(path: Union[str, os.PathLike]) -> SamplerConfig:
    p = Path(path)
    if not p.is_file():
        raise PathNotFoundError(f"Config file not found: {p}")
    try:
        data = orjson.loads(p.read_bytes())
    except orjson.JSONDecodeError as e:
        raise ConfigError(f"{p}: invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: top-level JSON value must be an object.")
    logger.debug("Loaded config %s", p)
    return SamplerConfig.from_dict(data, base_dir=p.parent)


def dump_config(config: SamplerConfig, path: Union[str, os.PathLike]) -> Path:
    p = Path(path)
    p.write_bytes(orjson.dumps(config.to_dict(), option=orjson.OPT_INDENT_2))
    return p
