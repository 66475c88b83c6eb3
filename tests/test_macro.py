"""AverageAlongCurve host callback."""
import numpy as np

from pipecut.config import SamplerConfig
from pipecut.csv_io import read_series_csv
from pipecut.host import PLANE_SECTION, InMemorySession
from pipecut.macro import AverageAlongCurve

REGION = "Assembly 1.big_coll"


def test_execute_writes_one_csv_per_field(tmp_path, centerline_csv, session):
    cfg = SamplerConfig(region_name=REGION, fields=["AbsoluteTotalPressure", "Density"],
                        input_path=centerline_csv, output_dir=tmp_path / "Loads" / "60")
    written = AverageAlongCurve(cfg).execute(session)

    assert set(written) == {"AbsoluteTotalPressure", "Density"}
    for name, path in written.items():
        assert path.name == f"{name}.csv"
        series = read_series_csv(path)
        assert np.allclose(series.origins, [[0, 0, 0], [0, 0, 1], [0, 0, 2]])
        assert np.allclose(series.values, 7.5)

    assert session.created[PLANE_SECTION] == 1
    assert "List of origins:" in session.console
    assert "List of normals:" in session.console
    assert session.console[-1] == "End"


def test_output_dir_defaults_next_to_simulation(tmp_path):
    session = InMemorySession(value=1.0, session_path=str(tmp_path / "bend.sim"))
    cfg = SamplerConfig(region_name=REGION, fields=["Temperature"],
                        points=[[0.9, 2.9, 6.0], [0.9, 2.9, 7.0], [0.9, 2.9, 8.0]],
                        orientations=[[0.0, 0, 1.0]] * 3, unit_scale=1.0)
    written = AverageAlongCurve(cfg).execute(session)

    assert written["Temperature"] == tmp_path / "bend.PipeCuts" / "Temperature.csv"
    assert written["Temperature"].is_file()


def test_cylindrical_config(tmp_path, centerline_csv):
    session = InMemorySession(value=2.0)
    cfg = SamplerConfig(region_name=REGION, fields=["MassFlux"], input_path=centerline_csv,
                        output_dir=tmp_path, mode="cylindrical", threshold_radius=0.15)
    written = AverageAlongCurve(cfg).execute(session)
    assert np.allclose(read_series_csv(written["MassFlux"]).values, 2.0)


def test_missing_input_prints_diagnostic(tmp_path, session):
    cfg = SamplerConfig(region_name=REGION, fields=["Density"],
                        input_path=tmp_path / "absent.csv", output_dir=tmp_path)
    assert AverageAlongCurve(cfg).execute(session) is None
    assert any("aborted" in line for line in session.console)
    assert not list(tmp_path.glob("*.csv"))


def test_unknown_field_aborts_remaining_fields(tmp_path, centerline_csv):
    session = InMemorySession(fields=["Density"], value=1.0)
    cfg = SamplerConfig(region_name=REGION, fields=["Density", "Bogus", "Temperature"],
                        input_path=centerline_csv, output_dir=tmp_path)
    assert AverageAlongCurve(cfg).execute(session) is None
    assert (tmp_path / "Density.csv").is_file()
    assert not (tmp_path / "Temperature.csv").exists()
    assert any("Bogus" in line for line in session.console)


def test_no_output_dir_and_no_session_path(centerline_csv):
    session = InMemorySession()
    cfg = SamplerConfig(region_name=REGION, fields=["p"], input_path=centerline_csv)
    assert AverageAlongCurve(cfg).execute(session) is None


def test_unwritable_field_output_is_skipped(tmp_path, centerline_csv, session):
    (tmp_path / "Density.csv").mkdir()
    cfg = SamplerConfig(region_name=REGION, fields=["Density", "Temperature"],
                        input_path=centerline_csv, output_dir=tmp_path)
    written = AverageAlongCurve(cfg).execute(session)

    assert set(written) == {"Temperature"}
    assert (tmp_path / "Temperature.csv").is_file()
    assert session.console[-1] == "End"


class RefusingHost(InMemorySession):
    def _create_planar_cut(self, name, region):
        raise RuntimeError("host refused plane section")


def test_host_entity_failure_prints_diagnostic(tmp_path, centerline_csv):
    session = RefusingHost(regions=[REGION])
    cfg = SamplerConfig(region_name=REGION, fields=["Density"],
                        input_path=centerline_csv, output_dir=tmp_path)
    assert AverageAlongCurve(cfg).execute(session) is None
    assert any("host refused plane section" in line for line in session.console)
    assert not list(tmp_path.glob("*.csv"))


def test_csv_text_is_echoed_to_console(tmp_path, centerline_csv, session):
    cfg = SamplerConfig(region_name=REGION, fields=["Density"],
                        input_path=centerline_csv, output_dir=tmp_path)
    AverageAlongCurve(cfg).execute(session)

    i = session.console.index("Density CSV field by the tube length:")
    assert session.console[i + 1] == (tmp_path / "Density.csv").read_text(encoding="utf-8")


def test_aborted_run_logs_one_error(tmp_path, centerline_csv, caplog):
    session = InMemorySession(fields=["Density"], value=1.0)
    cfg = SamplerConfig(region_name=REGION, fields=["Bogus"],
                        input_path=centerline_csv, output_dir=tmp_path)
    assert AverageAlongCurve(cfg).execute(session) is None
    errors = [r for r in caplog.records if r.levelname == "ERROR"]
    assert len(errors) == 1
    assert "Bogus" in errors[0].getMessage()


def test_inline_points_are_metres_by_default(tmp_path):
    session = InMemorySession(value=1.0)
    cfg = SamplerConfig(region_name=REGION, fields=["Temperature"], output_dir=tmp_path,
                        points=[[0.9, 2.9, 6.0], [0.9, 2.9, 7.0]])
    written = AverageAlongCurve(cfg).execute(session)
    assert np.allclose(read_series_csv(written["Temperature"]).origins,
                       [[0.9, 2.9, 6.0], [0.9, 2.9, 7.0]])
