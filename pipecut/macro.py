# pipecut/macro.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import numpy as np

from .centerline import Centerline
from .config import SamplerConfig
from .csv_io import (
    ensure_directory,
    mkdir_from_session_name,
    read_centroid_csv,
    series_to_csv_text,
    write_series_csv,
)
from .curve_sampler import CurveSampler
from .errors import ConfigError, PipeCutError
from .host import HostSession

logger = logging.getLogger(__name__)


class AverageAlongCurve:
    """
    Host callback: average every configured field along the pipe centerline
    and write one `<field>.csv` per field.

    Geometry or host failures stop the run; the diagnostic goes to the
    session console and `execute` returns None.
    """

    def __init__(self, config: SamplerConfig):
        self.config = config

    # ----- steps -----

    def output_dir(self, session: HostSession) -> Path:
        cfg = self.config
        if cfg.output_dir is not None:
            return ensure_directory(cfg.output_dir)
        if not session.session_path:
            raise ConfigError("No output_dir configured and the session has no file path.")
        return mkdir_from_session_name(session.session_path, ".PipeCuts")

    def load_centerline(self) -> Centerline:
        cfg = self.config
        if cfg.points:
            return Centerline(cfg.points).scaled(cfg.unit_scale)
        return read_centroid_csv(cfg.input_path, cfg.delimiter, cfg.header_rows,
                                 unit_scale=cfg.unit_scale)

    def sampler(self, session: HostSession) -> CurveSampler:
        cfg = self.config
        return CurveSampler(
            session, cfg.region_name,
            mode=cfg.mode,
            threshold_radius=cfg.threshold_radius,
            plane_name=cfg.plane_name,
            report_name=cfg.report_name,
            frame_name=cfg.frame_name,
            threshold_name=cfg.threshold_name,
        )

    # ----- run -----

    def run(self, session: HostSession) -> Dict[str, Path]:
        """Like `execute` but lets PipeCutError propagate."""
        cfg = self.config
        out_dir = self.output_dir(session)

        centerline = self.load_centerline()
        if centerline.is_empty():
            raise PipeCutError(f"No centerline points loaded from {cfg.input_path}.")

        sampler = self.sampler(session)
        frames = sampler.frames(centerline, cfg.orientations)
        session.println("List of origins:")
        for fr in frames:
            session.println(f"{fr.index}: {np.round(fr.origin, 6).tolist()}")
        session.println("List of normals:")
        for fr in frames:
            session.println(f"{fr.index}: {np.round(fr.normal, 6).tolist()}")
        session.println("")

        written: Dict[str, Path] = {}
        for name in cfg.fields:
            series = sampler.sample_along_curve(centerline, name, cfg.orientations)
            path = write_series_csv(out_dir / f"{name}.csv", series)
            if path is not None:
                written[name] = path
            session.println(f"{name} CSV field by the tube length:")
            session.println(series_to_csv_text(series))
        session.println("End")
        return written

    def execute(self, session: HostSession) -> Optional[Dict[str, Path]]:
        try:
            return self.run(session)
        except PipeCutError as e:
            logger.error("AverageAlongCurve aborted: %s", e)
            session.println(f"AverageAlongCurve aborted: {e}")
            return None
