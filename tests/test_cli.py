"""Tests for the command-line front end."""

import json

import pytest

from clustermde._cli import main


class TestCli:
    """Modes and exit codes."""

    def test_summary(self, capsys):
        assert main(["--mode", "summary"]) == 0
        out = capsys.readouterr().out
        assert "Design summary at N = 1000" in out

    def test_curve(self, capsys):
        assert main(["--mode", "curve", "--n-min", "400", "--n-max", "600"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        # header + 400, 450, 500, 550, 600
        assert len(lines) == 6

    def test_table(self, capsys):
        assert main(["--mode", "table", "--measurement-model", "rasch"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 11

    def test_search(self, capsys):
        assert main(["--mode", "search", "--outcome", "severity", "--target", "2"]) == 0
        assert "600" in capsys.readouterr().out

    def test_search_requires_target(self):
        assert main(["--mode", "search"]) == 2

    def test_crosscheck(self, capsys):
        assert main(["--mode", "crosscheck"]) == 0
        assert "PASS" in capsys.readouterr().out

    def test_invalid_parameter(self):
        assert main(["--icc-severity", "1.5"]) == 2

    def test_invalid_grid(self):
        assert main(["--mode", "curve", "--step", "0"]) == 2

    def test_power_choices(self):
        with pytest.raises(SystemExit):
            main(["--power", "0.95"])

    def test_settings_roundtrip(self, tmp_path, capsys):
        path = tmp_path / "design.json"
        assert main(["--settings", str(path), "--patients-per-cluster", "12", "--save"]) == 0
        assert json.loads(path.read_text())["patients_per_cluster"] == 12
        assert main(["--settings", str(path), "--mode", "summary"]) == 0
        assert "Clusters      : 83" in capsys.readouterr().out

    def test_save_requires_settings(self):
        assert main(["--save"]) == 2
