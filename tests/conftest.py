import numpy as np
import pytest

from pipecut.host import InMemorySession


@pytest.fixture
def centerline_csv(tmp_path):
    """Straight pipe along Z, three stations, coordinates in millimetres."""
    path = tmp_path / "origins.csv"
    path.write_text("x,y,z\n0,0,0\n0,0,1000\n0,0,2000\n", encoding="utf-8")
    return path


@pytest.fixture
def bend_points():
    """Quarter bend in the XZ plane (metres)."""
    theta = np.linspace(0.0, np.pi / 2, 7)
    r = 0.5
    return np.stack([r * (1 - np.cos(theta)), np.zeros_like(theta), r * np.sin(theta)], axis=1)


@pytest.fixture
def session():
    return InMemorySession(regions=["Assembly 1.big_coll"], value=7.5)
