"""Tests for the command-line entrypoint."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest

from neuroaura.logger import setup_logging
from neuroaura.main import main
from neuroaura.session import AssessmentSession


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


class TestScoreCommand:
    def test_scores_payload_file(self, tmp_path: Path, payload_dict: dict, capsys):
        path = tmp_path / "payload.json"
        path.write_text(json.dumps(payload_dict), encoding="utf-8")

        assert _run(["score", str(path)]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["stress_score"] == 78
        assert result["mood"] == "fatigued"

    def test_invalid_payload(self, tmp_path: Path, payload_dict: dict, capsys):
        payload_dict["questions"][0]["latency_ms"] = -5
        path = tmp_path / "payload.json"
        path.write_text(json.dumps(payload_dict), encoding="utf-8")

        assert _run(["score", str(path)]) == 2
        assert "Invalid payload" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys):
        assert _run(["score", str(tmp_path / "nope.json")]) == 2
        assert "Cannot read payload" in capsys.readouterr().err

    def test_not_json(self, tmp_path: Path):
        path = tmp_path / "payload.json"
        path.write_text("{not json", encoding="utf-8")
        assert _run(["score", str(path)]) == 2


class TestNoCommand:
    def test_prints_help(self, capsys):
        assert _run([]) == 1
        assert "neuroaura" in capsys.readouterr().out


class TestLoggingStream:
    def test_setup_does_not_keep_the_stream(self, monkeypatch, capsys):
        swapped = io.StringIO()
        monkeypatch.setattr(sys, "stdout", swapped)
        setup_logging("INFO")
        monkeypatch.undo()
        swapped.close()

        AssessmentSession("U001").build_payload()
        assert "session.payload_built" in capsys.readouterr().out

    def test_session_logs_after_cli_run(self, tmp_path: Path, payload_dict: dict, capsys):
        path = tmp_path / "payload.json"
        path.write_text(json.dumps(payload_dict), encoding="utf-8")
        assert _run(["score", str(path)]) == 0
        capsys.readouterr()

        payload = AssessmentSession("U001").build_payload()
        assert payload.questions == ()
