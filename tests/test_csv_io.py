"""CSV adapter: centerline input, series output, directories."""
import numpy as np
import pytest

from pipecut.csv_io import (
    ensure_directory,
    mkdir_from_session_name,
    read_centroid_csv,
    read_numeric_csv,
    read_series_csv,
    series_to_csv_text,
    write_series_csv,
)
from pipecut.curve_sampler import SampleSeries
from pipecut.errors import PathNotFoundError


def _series():
    s = SampleSeries("Density")
    s.append((0.0, 0.0, 0.0), 1.25)
    s.append((0.1, -0.2, 0.3), 1.1875)
    s.append((1.0 / 3.0, 2.0, 1e-7), -4.5e3)
    return s


def test_read_centroid_csv_scales_to_metres(centerline_csv):
    centerline = read_centroid_csv(centerline_csv, unit_scale=0.001)
    assert len(centerline) == 3
    assert np.allclose(centerline.points, [[0, 0, 0], [0, 0, 1], [0, 0, 2]])


def test_missing_file_is_lenient(tmp_path, caplog):
    centerline = read_centroid_csv(tmp_path / "nope.csv")
    assert len(centerline) == 0
    assert centerline.is_empty()
    assert "Path does not exist" in caplog.text


def test_missing_file_strict(tmp_path):
    with pytest.raises(PathNotFoundError):
        read_numeric_csv(tmp_path / "nope.csv", strict=True)


def test_header_rows_and_delimiter(tmp_path):
    path = tmp_path / "pts.txt"
    path.write_text("# exported\nx;y;z\n1;2;3\n\n4;5;6\n", encoding="utf-8")
    rows = read_numeric_csv(path, delimiter=";", header_rows=2)
    assert rows == [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]]


def test_wrong_column_count(tmp_path):
    path = tmp_path / "pts.csv"
    path.write_text("x,y\n1,2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="expected 3"):
        read_centroid_csv(path)


def test_write_then_read_round_trip(tmp_path):
    series = _series()
    path = write_series_csv(tmp_path / "Density.csv", series)
    assert path is not None

    rows = read_numeric_csv(path, header_rows=1)
    assert len(rows) == len(series)
    for row, cut in zip(rows, series):
        assert np.allclose(row[:3], cut.origin)
        assert np.isclose(row[3], cut.value)

    back = read_series_csv(path)
    assert back.field_name == "Density"
    assert np.allclose(back.origins, series.origins)
    assert np.allclose(back.values, series.values)


def test_write_overwrites(tmp_path):
    path = tmp_path / "T.csv"
    path.write_text("stale\n" * 10, encoding="utf-8")
    write_series_csv(path, _series())
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "x,y,z,value"
    assert len(lines) == 4


def test_write_into_missing_directory_is_logged(tmp_path, caplog):
    assert write_series_csv(tmp_path / "missing" / "T.csv", _series()) is None
    assert "Path does not exist" in caplog.text


def test_write_onto_directory_is_logged(tmp_path, caplog):
    (tmp_path / "Density.csv").mkdir()
    assert write_series_csv(tmp_path / "Density.csv", _series()) is None
    assert "Density.csv" in caplog.text
    assert (tmp_path / "Density.csv").is_dir()


def test_non_utf8_input_is_lenient(tmp_path, caplog):
    path = tmp_path / "origins.csv"
    path.write_bytes(b"x,y,z\n0,0,\xff\xfe\n")
    assert read_numeric_csv(path) == []
    assert len(read_centroid_csv(path)) == 0
    assert "Cannot read" in caplog.text
    with pytest.raises(ValueError, match="UTF-8"):
        read_numeric_csv(path, strict=True)


def test_series_text_layout():
    s = SampleSeries("p")
    s.append((0.0, 0.0, 1.0), 2.0)
    assert series_to_csv_text(s) == "x,y,z,value\n0.0,0.0,1.0,2.0\n"


def test_ensure_directory_idempotent(tmp_path):
    target = tmp_path / "a" / "b"
    assert ensure_directory(target) == target
    assert ensure_directory(target) == target
    assert target.is_dir()


def test_mkdir_from_session_name(tmp_path):
    sim = tmp_path / "pipe_run.sim"
    out = mkdir_from_session_name(sim)
    assert out == tmp_path / "pipe_run.PipeCuts"
    assert out.is_dir()
