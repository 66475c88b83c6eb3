# pipecut/csv_io.py
"""
CSV helpers for centerline input and sampled-series output.

File problems are recovered here: a missing input yields an empty result and
an unwritable output is logged, matching how the macros behaved inside the host.
"""
from __future__ import annotations

import csv
import io
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .centerline import Centerline
from .curve_sampler import SampleSeries
from .errors import PathNotFoundError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
SERIES_HEADER = ("x", "y", "z", "value")


def read_numeric_csv(path: PathLike, delimiter: str = ",", header_rows: int = 1,
                     *, strict: bool = False) -> List[List[float]]:
    """
    Skip `header_rows` lines, then split each non-blank line on `delimiter`
    and convert every token to float.

    A missing or unreadable file is logged and gives [] unless `strict` is
    set, in which case PathNotFoundError (or ValueError for bytes that are
    not UTF-8) is raised.
    """
    p = Path(path)
    if not p.is_file():
        if strict:
            raise PathNotFoundError(f"Path does not exist --> [{p}]")
        logger.error("Path does not exist --> [%s]", p)
        return []

    try:
        with open(p, "r", encoding="utf-8", newline="") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        if strict and isinstance(e, OSError):
            raise PathNotFoundError(f"Cannot read [{p}]: {e}") from e
        if strict:
            raise ValueError(f"{p}: not UTF-8 text ({e})") from e
        logger.error("Cannot read [%s]: %s", p, e)
        return []

    rows: List[List[float]] = []
    for line_no, line in enumerate(lines, start=1):
        if line_no <= header_rows:
            continue
        line = line.strip()
        if not line:
            continue
        try:
            rows.append([float(tok) for tok in line.split(delimiter)])
        except ValueError as e:
            raise ValueError(f"{p}:{line_no}: non-numeric value ({e})") from e
    return rows


def read_centroid_csv(path: PathLike, delimiter: str = ",", header_rows: int = 1,
                      *, unit_scale: float = 1.0, strict: bool = False) -> Centerline:
    """Read x,y,z rows into a Centerline, multiplying by `unit_scale` (0.001 for mm -> m)."""
    rows = read_numeric_csv(path, delimiter, header_rows, strict=strict)
    for i, r in enumerate(rows):
        if len(r) != 3:
            raise ValueError(f"{path}: row {i} has {len(r)} columns, expected 3 (x,y,z).")
    centerline = Centerline(rows)
    if unit_scale != 1.0:
        centerline = centerline.scaled(unit_scale)
    logger.debug("Read %d centerline points from %s", len(centerline), path)
    return centerline


def _write_rows(fh, series: SampleSeries, header: Sequence[str]) -> None:
    writer = csv.writer(fh, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(series.rows())


def series_to_csv_text(series: SampleSeries, header: Sequence[str] = SERIES_HEADER) -> str:
    buf = io.StringIO()
    _write_rows(buf, series, header)
    return buf.getvalue()


def write_series_csv(path: PathLike, series: SampleSeries,
                     header: Sequence[str] = SERIES_HEADER) -> Optional[Path]:
    """
    Write `header` then one x,y,z,value row per station, overwriting `path`.
    Returns the path, or None when the file cannot be opened for writing
    (missing directory, a directory in the way, no permission).
    """
    p = Path(path)
    try:
        with open(p, "w", encoding="utf-8", newline="") as f:
            _write_rows(f, series, header)
    except OSError as e:
        logger.error("Path does not exist --> [%s] (%s)", p, e)
        return None
    logger.info("Wrote %d rows of %s to %s", len(series), series.field_name, p)
    return p


def read_series_csv(path: PathLike, field_name: Optional[str] = None) -> SampleSeries:
    """Parse an x,y,z,value file back into a SampleSeries named after the file stem by default."""
    p = Path(path)
    series = SampleSeries(field_name or p.stem)
    for i, r in enumerate(read_numeric_csv(p, ",", 1, strict=True)):
        if len(r) != 4:
            raise ValueError(f"{p}: row {i} has {len(r)} columns, expected 4 (x,y,z,value).")
        series.append(r[:3], r[3])
    return series


def ensure_directory(path: PathLike) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def mkdir_from_session_name(session_path: PathLike, extension: str = ".PipeCuts") -> Path:
    """
    'run/pipe.sim' -> 'run/pipe.PipeCuts' (created if missing).
    Sampled CSVs land next to the simulation file by default.
    """
    p = Path(session_path)
    return ensure_directory(p.parent / (p.stem + extension))
