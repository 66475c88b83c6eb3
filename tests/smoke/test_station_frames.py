#!/usr/bin/env python3
"""
Smoke test for station frame construction along a bend.
Checks the invariants the sampling loop relies on:
- one frame per centerline point
- unit-norm normals, no NaN values
- cylindrical bases are orthonormal and right-handed
"""

import numpy as np

from pipecut.centerline import Centerline


def test_station_frame_invariants(bend_points):
    """Frames along a quarter bend."""
    centerline = Centerline(bend_points)
    frames = centerline.frames(with_basis=True)

    assert len(frames) == len(centerline), f"Expected {len(centerline)} frames, got {len(frames)}"

    for fr in frames:
        assert np.all(np.isfinite(fr.origin)), f"Non-finite origin at station {fr.index}"
        assert np.isclose(np.linalg.norm(fr.normal), 1.0, atol=1e-12), f"Normal not unit at {fr.index}"

        i, j, k = fr.basis
        assert np.allclose(k, fr.normal), f"Basis k is not the tangent at {fr.index}"
        for name, v in (("i", i), ("j", j)):
            assert np.isclose(np.linalg.norm(v), 1.0, atol=1e-12), f"{name} not unit at {fr.index}"

        # Orthogonality (i·j = 0, i·k = 0, j·k = 0)
        assert abs(i @ j) < 1e-12, f"i·j = {i @ j} at {fr.index}"
        assert abs(i @ k) < 1e-12, f"i·k = {i @ k} at {fr.index}"
        assert abs(j @ k) < 1e-12, f"j·k = {j @ k} at {fr.index}"

        # Right-handed: i x j == k
        assert np.allclose(np.cross(i, j), k, atol=1e-12), f"Basis not right-handed at {fr.index}"


def test_last_station_reuses_previous_normal(bend_points):
    frames = Centerline(bend_points).frames()
    assert np.array_equal(frames[-1].normal, frames[-2].normal)
    assert np.array_equal(frames[-1].origin, bend_points[-1])


def test_planar_frames_have_no_basis(bend_points):
    frames = Centerline(bend_points).frames(with_basis=False)
    assert not any(fr.has_basis for fr in frames)
