# -*- coding: utf-8 -*-
"""Tests for the command line actions."""

import json

import pytest
from conftest import SQUARE_COORDS
from conftest import make_square

from cogo_lib.commands.area import area
from cogo_lib.commands.closure import closure
from cogo_lib.commands.inputs import load_points
from cogo_lib.commands.topology import topology
from cogo_lib.errors import ValidationError
from cogo_lib.parsing import geometry_to_wkt


def _write_square_csv(path, with_ids=False):
    lines = ["id,x,y" if with_ids else "x,y"]
    for n, (x, y) in enumerate(SQUARE_COORDS, start=1):
        lines.append(f"P{n},{x},{y}" if with_ids else f"{x},{y}")
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def _write_wkt(path, geometry):
    path.write_text(geometry_to_wkt(geometry), encoding="utf-8")
    return path


@pytest.fixture
def no_remote_engine(monkeypatch, tmp_path):
    monkeypatch.delenv("COGO_ENGINE_BASE_URL", raising=False)
    monkeypatch.chdir(tmp_path)


class TestLoadPoints:
    """Tests for the CSV input helper."""

    def test_utm(self, tmp_path):
        points = load_points(_write_square_csv(tmp_path / "square.csv", with_ids=True))
        assert len(points) == 5
        assert points[0].id == "P1"
        assert points[1].x == 301000.0

    def test_decimal_is_projected(self, tmp_path):
        path = tmp_path / "gps.csv"
        path.write_text("lat,lon\n0.0,27.0\n", encoding="utf-8")
        points = load_points(path, "decimal")
        assert points[0].x == pytest.approx(500000.0, abs=1e-3)
        assert points[0].y == pytest.approx(10_000_000.0, abs=1e-3)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_points(tmp_path / "missing.csv")

    def test_utm_outside_envelope(self, tmp_path):
        path = tmp_path / "local.csv"
        path.write_text("100000,8000000\n101000,8000000\n101000,8001000\n", encoding="utf-8")
        with pytest.raises(ValidationError) as exc_info:
            load_points(path)
        assert exc_info.value.field == "easting"


class TestClosureCommand:
    """Tests for ``cogo closure``."""

    def test_text_report(self, tmp_path, capsys):
        path = _write_square_csv(tmp_path / "square.csv")
        assert closure(["-i", str(path)]) == 0
        output = capsys.readouterr().out
        assert "OUTSIDE FIGURE COMPUTATION REPORT" in output
        assert "Overall Status: PASSED" in output

    def test_json(self, tmp_path, capsys):
        path = _write_square_csv(tmp_path / "square.csv", with_ids=True)
        assert closure(["-i", str(path), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["area"]["area"] == pytest.approx(1_000_000.0)

    def test_output_file(self, tmp_path):
        path = _write_square_csv(tmp_path / "square.csv")
        report = tmp_path / "report.txt"
        assert closure(["-i", str(path), "-o", str(report)]) == 0
        assert "CLOSURE ANALYSIS" in report.read_text(encoding="utf-8")

    def test_failed_closure(self, tmp_path):
        path = tmp_path / "open.csv"
        path.write_text(
            "300000,8000000\n301000,8000000\n301000,8001000\n300000,8001000\n300000,8000100\n",
            encoding="utf-8",
        )
        assert closure(["-i", str(path)]) == 2

    def test_missing_file(self, tmp_path):
        assert closure(["-i", str(tmp_path / "missing.csv")]) == 1

    def test_invalid_content(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("300000,8000000\n301000\n", encoding="utf-8")
        assert closure(["-i", str(path)]) == 1

    def test_coordinates_outside_utm_zone(self, tmp_path):
        path = tmp_path / "local.csv"
        path.write_text("0,0\n100,0\n100,100\n0,100\n", encoding="utf-8")
        assert closure(["-i", str(path)]) == 1


class TestAreaCommand:
    """Tests for ``cogo area``."""

    def test_hectares(self, tmp_path, capsys):
        path = _write_square_csv(tmp_path / "square.csv")
        assert area(["-i", str(path), "-u", "hectares"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["area"] == pytest.approx(100.0)
        assert data["unit"] == "hectares"
        assert data["perimeter"] == pytest.approx(4000.0)
        assert data["angles"]["is_valid"] is True

    def test_missing_file(self, tmp_path):
        assert area(["-i", str(tmp_path / "missing.csv")]) == 1


class TestTopologyCommand:
    """Tests for ``cogo topology`` with the local engine."""

    def test_clean_scheme(self, tmp_path, capsys, no_remote_engine):
        parent = _write_wkt(tmp_path / "parent.wkt", make_square(0, 0, 2000.0))
        sections = [
            _write_wkt(tmp_path / "s1.wkt", make_square(0, 0, 2000.0)),
        ]
        args = ["-p", str(parent), "-s", *map(str, sections)]

        assert topology(args) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["is_valid"] is True
        assert data["summary"]["total_geometries"] == 2

    def test_overlap_is_reported(self, tmp_path, capsys, no_remote_engine):
        parent = _write_wkt(tmp_path / "parent.wkt", make_square(0, 0, 2000.0))
        s1 = _write_wkt(tmp_path / "s1.wkt", make_square(0, 0))
        s2 = _write_wkt(tmp_path / "s2.wkt", make_square(500, 500))

        assert topology(["-p", str(parent), "-s", str(s1), str(s2), "--no-gaps"]) == 2
        data = json.loads(capsys.readouterr().out)
        assert data["errors"][0]["type"] == "overlap"
        assert "warnings" in data

    def test_missing_section_file(self, tmp_path, no_remote_engine):
        parent = _write_wkt(tmp_path / "parent.wkt", make_square(0, 0, 2000.0))
        assert topology(["-p", str(parent), "-s", str(tmp_path / "missing.wkt")]) == 1

    def test_invalid_wkt(self, tmp_path, no_remote_engine):
        parent = tmp_path / "parent.wkt"
        parent.write_text("POLYGON ((", encoding="utf-8")
        section = _write_wkt(tmp_path / "s1.wkt", make_square(0, 0))
        assert topology(["-p", str(parent), "-s", str(section)]) == 1

    def test_missing_env_file(self, tmp_path, no_remote_engine):
        parent = _write_wkt(tmp_path / "parent.wkt", make_square(0, 0, 2000.0))
        args = ["-p", str(parent), "-s", str(parent), "-e", str(tmp_path / "none.env")]
        assert topology(args) == 1
