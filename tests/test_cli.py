"""Tests for the command-line entry point."""
from __future__ import annotations

import json

import pytest

from skill_issue.cli import build_parser, main


class TestParser:
    def test_requires_command(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_rejects_unknown_strategy(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["simulate", "--strategy", "speedrunner"])


class TestInspectSeed:
    def test_text(self, capsys) -> None:
        assert main(["inspect-seed", "42"]) == 0
        out = capsys.readouterr().out
        assert "Seed 42" in out
        assert "energy.decay" in out

    def test_json(self, capsys) -> None:
        assert main(["inspect-seed", "42", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["seed"] == 42
        assert "rescue.chance" in data["parameters"]


class TestSimulate:
    def test_single_run_text(self, capsys) -> None:
        assert main(["simulate", "--seed", "42", "--strategy", "priority"]) == 0
        out = capsys.readouterr().out
        assert "Seed 42" in out
        assert "monday" in out

    def test_single_run_json(self, capsys) -> None:
        assert main(["simulate", "--seed", "42", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["seed"] == 42
        assert data["strategy"] == "human"

    def test_batch_json(self, capsys) -> None:
        assert main(["simulate", "--runs", "4", "--json", "--group-by", "timePref"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["runs"] == 4
        assert "timePref" in data["groups"]

    def test_batch_text(self, capsys) -> None:
        assert main(["simulate", "--runs", "3", "--group-by", "socialPref"]) == 0
        out = capsys.readouterr().out
        assert "3 runs" in out
        assert "by socialPref" in out

    def test_bad_run_count(self, capsys) -> None:
        assert main(["simulate", "--runs", "0"]) == 2


class TestMigrate:
    def test_in_place(self, tmp_path, v3_run, v3_payload) -> None:
        path = tmp_path / "save.json"
        path.write_text(json.dumps(v3_payload(v3_run())), encoding="utf-8")
        assert main(["migrate", str(path), "--in-place"]) == 0
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == 4
        assert data["runs"]["main"]["gameMode"] == "main"
        assert "migratedAt" in data

    def test_print(self, tmp_path, capsys, v3_payload) -> None:
        path = tmp_path / "save.json"
        path.write_text(json.dumps(v3_payload(None)), encoding="utf-8")
        assert main(["migrate", str(path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["runs"] == {"main": None, "seeded": None}
        assert json.loads(path.read_text(encoding="utf-8"))["version"] == 3

    def test_unreadable(self, tmp_path, capsys) -> None:
        path = tmp_path / "save.json"
        path.write_text("{nope", encoding="utf-8")
        assert main(["migrate", str(path)]) == 1
        assert "Could not migrate" in capsys.readouterr().err

    def test_future_version(self, tmp_path) -> None:
        path = tmp_path / "save.json"
        path.write_text(json.dumps({"version": 7}), encoding="utf-8")
        assert main(["migrate", str(path)]) == 1

    def test_missing_file(self, tmp_path) -> None:
        assert main(["migrate", str(tmp_path / "absent.json")]) == 1
