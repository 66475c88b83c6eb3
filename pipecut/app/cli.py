#!/usr/bin/env python3
"""
pipecut CLI - station frames, offline dry runs, plotting and config checks
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

import numpy as np

from pipecut.config import load_config
from pipecut.csv_io import read_centroid_csv, read_series_csv
from pipecut.errors import PipeCutError
from pipecut.host import InMemorySession
from pipecut.macro import AverageAlongCurve
from pipecut.plotter import PlotConfig, SeriesPlotter

logger = logging.getLogger("pipecut")

FRAME_HEADER = ["index", "x", "y", "z", "nx", "ny", "nz",
                "ix", "iy", "iz", "jx", "jy", "jz"]


def _frame_row(fr):
    row = [fr.index] + fr.origin.tolist() + fr.normal.tolist()
    if fr.has_basis:
        i, j, _ = fr.basis
        row += i.tolist() + j.tolist()
    return row


def cmd_frames(input_path, unit_scale=0.001, basis=False, out=None):
    """Print (or write) origin, normal and optional cylindrical basis per station."""
    centerline = read_centroid_csv(input_path, unit_scale=unit_scale, strict=True)
    frames = centerline.frames(with_basis=basis)
    header = FRAME_HEADER if basis else FRAME_HEADER[:7]

    if out:
        with open(out, "w", encoding="utf-8", newline="") as f:
            w = csv.writer(f, lineterminator="\n")
            w.writerow(header)
            w.writerows(_frame_row(fr) for fr in frames)
        print(f"Wrote {len(frames)} frames to {out}")
        return 0

    print(",".join(header))
    for fr in frames:
        print(",".join(f"{v:.6g}" if isinstance(v, float) else str(v) for v in _frame_row(fr)))
    return 0


def cmd_dry_run(config_path, value=0.0):
    """Run the full macro against the in-memory host with a constant field value."""
    config = load_config(config_path)
    session = InMemorySession(value=value, session_path=str(Path(config_path).with_suffix(".sim")))
    written = AverageAlongCurve(config).execute(session)
    if written is None:
        return 1
    for name, path in written.items():
        print(f"✓ {name} -> {path}")
    print(f"Entities created: {dict(session.created)}")
    return 0


def cmd_plot(csv_paths, out="pipecut_plot.html", title=None, no_3d=False):
    series = [read_series_csv(p) for p in csv_paths]
    cfg = PlotConfig(show_centerline_3d=not no_3d)
    if title:
        cfg.title = title
    path = SeriesPlotter(series, config=cfg).write_html(out)
    print(f"Saved: {path}")
    return 0


def cmd_check(config_path):
    """Validate a config file and its centerline input."""
    config = load_config(config_path)
    print(f"✓ Config OK: region={config.region_name!r}, fields={config.fields}, mode={config.mode}")
    if config.points:
        n = len(config.points)
        print(f"✓ {n} inline points")
    else:
        centerline = read_centroid_csv(config.input_path, config.delimiter, config.header_rows,
                                       unit_scale=config.unit_scale, strict=True)
        n = len(centerline)
        print(f"✓ {n} centerline points in {config.input_path}")
        if n >= 2:
            centerline.normals()
            length = float(centerline.arc_length()[-1])
            print(f"✓ Tangents defined at every station, length {np.round(length, 6)} m")
    if n < 2:
        print("✗ At least 2 points are needed to place cuts")
        return 1
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog='pipecut',
        description='pipecut - average CFD fields over cuts along a pipe centerline'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    frames_parser = subparsers.add_parser('frames', help='Station origins, normals and optional cylindrical bases')
    frames_parser.add_argument('--input', required=True, help='Centerline CSV (header + x,y,z rows)')
    frames_parser.add_argument('--unit-scale', type=float, default=0.001, help='Coordinate factor (default: mm -> m)')
    frames_parser.add_argument('--basis', action='store_true', help='Include the right-handed i/j axes')
    frames_parser.add_argument('--out', help='Write CSV instead of printing')

    dry_parser = subparsers.add_parser('dry-run', help='Run a config against the in-memory host')
    dry_parser.add_argument('--config', required=True)
    dry_parser.add_argument('--value', type=float, default=0.0, help='Constant value returned for every cut')

    plot_parser = subparsers.add_parser('plot', help='Render x,y,z,value CSV series to HTML')
    plot_parser.add_argument('csv', nargs='+')
    plot_parser.add_argument('--out', default='pipecut_plot.html')
    plot_parser.add_argument('--title')
    plot_parser.add_argument('--no-3d', action='store_true', help='Skip the 3D centerline view')

    check_parser = subparsers.add_parser('check', help='Validate a config file and its input')
    check_parser.add_argument('--config', required=True)
    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == 'frames':
            return cmd_frames(args.input, unit_scale=args.unit_scale, basis=args.basis, out=args.out)
        elif args.command == 'dry-run':
            return cmd_dry_run(args.config, value=args.value)
        elif args.command == 'plot':
            return cmd_plot(args.csv, out=args.out, title=args.title, no_3d=args.no_3d)
        elif args.command == 'check':
            return cmd_check(args.config)
    except (PipeCutError, ValueError) as e:
        print(f"✗ {e}")
        return 1

    print(f"Unknown command: {args.command}")
    return 1


if __name__ == '__main__':
    sys.exit(main())
