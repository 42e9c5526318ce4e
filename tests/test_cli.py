from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from delve.cli import main

ROOT = Path(__file__).resolve().parents[1]
SMALL = ["--levels", "2", "--width", "11", "--height", "9", "--seed", "5"]


def test_ascii_output(capsys):
    assert main(SMALL) == 0
    out = capsys.readouterr().out
    assert "Floor 1/2" in out
    assert "Floor 2/2" in out
    assert "Route:" in out
    assert "1 stair transitions, reaches goal: yes" in out


def test_json_output(capsys):
    assert main(SMALL + ["--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert len(data["levels"]) == 2
    assert len(data["levels"][0]) == 9
    assert all(len(row) == 11 for row in data["levels"][0])
    assert data["spawn"][0] == 0
    assert data["goal"][0] == 1
    assert data["route"]["reaches_goal"] is True
    assert data["route"]["transitions"] == 1


def test_auto_play_reaches_goal(capsys):
    assert main(SMALL + ["--auto", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["auto"]["phase"] == "GOAL_REACHED"
    assert data["auto"]["level_transitions"] == 1
    assert data["auto"]["final_floor"] == 2
    assert data["auto"]["ticks"] == data["route"]["length"] + 1


def test_auto_play_cut_short_fails(capsys):
    assert main(SMALL + ["--auto", "--max-steps", "1"]) == 1
    assert "Auto-play: PATH_COMPUTED after 1 ticks" in capsys.readouterr().out


def test_invalid_settings_exit_code(capsys):
    assert main(["--levels", "2", "--start-level", "5"]) == 2
    assert capsys.readouterr().out == ""


def test_config_file_and_env(tmp_path, monkeypatch, capsys):
    cfg = tmp_path / "delve.yaml"
    cfg.write_text("generation:\n  level_count: 2\n  width: 15\n", encoding="utf-8")
    monkeypatch.setenv("DELVE_HEIGHT", "7")
    monkeypatch.setenv("DELVE_SEED", "9")
    assert main(["--config", str(cfg), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert len(data["levels"]) == 2
    assert len(data["levels"][0][0]) == 15
    assert len(data["levels"][0]) == 7


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("delve ")


def test_module_entrypoint():
    env = os.environ.copy()
    env["PYTHONPATH"] = str(ROOT / "src")
    cmd = [sys.executable, "-m", "delve", "--auto", "--tick-rate", "0"] + SMALL
    proc = subprocess.run(cmd, capture_output=True, text=True, env=env, timeout=30)

    assert proc.returncode == 0, proc.stderr
    assert "Floor 1/2" in proc.stdout
    assert "Auto-play: GOAL_REACHED" in proc.stdout
