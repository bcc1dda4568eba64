"""
travel-planner: CLI subprocess smoke contracts

File: tests/integration/test_cli_smoke.py

Purpose
- Enforce CLI behavior for `python -m travel_planner` plan/verify/config in a real subprocess.
- Verify exit codes, stdout payloads, stderr diagnostics, and log-file side effects.
"""

from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"

_STATEMENTS = ("x => z", "y => z", "z => v", "h =>", "v => h")


def _run_cli(workdir: Path, *args: str) -> subprocess.CompletedProcess[str]:
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith("TRAVEL_PLANNER_") and key != "NO_COLOR"
    }
    existing_pythonpath = env.get("PYTHONPATH")
    src_pythonpath = str(SRC_PATH)
    env["PYTHONPATH"] = (
        src_pythonpath
        if not existing_pythonpath
        else f"{src_pythonpath}{os.pathsep}{existing_pythonpath}"
    )
    return subprocess.run(
        [sys.executable, "-m", "travel_planner", *args],
        cwd=workdir,
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )


def _write(path: Path, contents: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    return path


def _render_failure(command_name: str, completed: subprocess.CompletedProcess[str]) -> str:
    return (
        f"{command_name} exited with {completed.returncode}\n"
        f"stdout:\n{completed.stdout}\n"
        f"stderr:\n{completed.stderr}"
    )


@pytest.mark.integration
def test_cli_plan_text_output(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "plan", *_STATEMENTS)

    assert completed.returncode == 0, _render_failure("plan", completed)
    assert completed.stdout.splitlines() == ["h", "v", "z", "y", "x"]
    assert completed.stderr == ""


@pytest.mark.integration
def test_cli_plan_json_has_stable_keys(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "plan", "--format", "json", *_STATEMENTS)

    assert completed.returncode == 0, _render_failure("plan --format json", completed)
    assert json.loads(completed.stdout) == {"travel": ["h", "v", "z", "y", "x"]}


@pytest.mark.integration
def test_cli_plan_yaml_statement_file(tmp_path: Path) -> None:
    statement_file = _write(tmp_path / "route.yaml", "- b => a\n- a =>\n- c =>\n")

    completed = _run_cli(tmp_path, "plan", "--format", "yaml", "--file", str(statement_file))

    assert completed.returncode == 0, _render_failure("plan --file", completed)
    assert yaml.safe_load(completed.stdout) == {"travel": ["a", "b", "c"]}


@pytest.mark.integration
def test_cli_plan_cycle_exits_one(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "plan", "a => b", "b => a")

    assert completed.returncode == 1, _render_failure("plan", completed)
    assert completed.stdout == ""
    assert "Circle in the plan" in completed.stderr


@pytest.mark.integration
def test_cli_plan_without_statements_prints_empty_travel(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "plan", "--format", "json")

    assert completed.returncode == 0, _render_failure("plan", completed)
    assert json.loads(completed.stdout) == {"travel": []}


@pytest.mark.integration
def test_cli_plan_self_dependency_names_item(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "plan", "a => a")

    assert completed.returncode == 1, _render_failure("plan", completed)
    assert completed.stderr == (
        "error: The travel destination and the predecessor are the same for 'a'.\n"
    )


@pytest.mark.integration
def test_cli_plan_writes_log_file_when_enabled(tmp_path: Path) -> None:
    _write(
        tmp_path / "travel_planner.toml",
        '[observability]\nlog_level = "DEBUG"\nlog_dir = "run-logs"\nlog_to_file = true\n',
    )

    completed = _run_cli(tmp_path, "plan", "b => a", "a =>")

    assert completed.returncode == 0, _render_failure("plan", completed)
    log_files = sorted((tmp_path / "run-logs").glob("plan-*/planner.jsonl"))
    assert len(log_files) == 1
    records = [json.loads(line) for line in log_files[0].read_text("utf-8").splitlines()]
    assert records[-1]["message"] == "travel planned"
    assert all(record["command"] == "plan" for record in records)


@pytest.mark.integration
def test_cli_verify_valid_and_invalid(tmp_path: Path) -> None:
    statement_file = _write(tmp_path / "route.txt", "\n".join(_STATEMENTS) + "\n")

    valid = _run_cli(tmp_path, "verify", "--ordering", "h,v,z,x,y", "-f", str(statement_file))
    invalid = _run_cli(
        tmp_path, "verify", "--ordering", "v,h,z,y", "--json", "-f", str(statement_file)
    )

    assert valid.returncode == 0, _render_failure("verify", valid)
    assert invalid.returncode == 1, _render_failure("verify --json", invalid)
    payload = json.loads(invalid.stdout)
    assert payload["valid"] is False
    assert "declared destination 'x' is missing" in payload["problems"]
    assert "'h' must precede 'v'" in payload["problems"]


@pytest.mark.integration
def test_cli_config_json_has_stable_keys(tmp_path: Path) -> None:
    completed = _run_cli(tmp_path, "config", "--json")

    assert completed.returncode == 0, _render_failure("config --json", completed)
    payload = json.loads(completed.stdout)
    assert payload["command"] == "config"
    assert sorted(payload["config"]) == ["meta", "observability", "output", "planner"]


@pytest.mark.integration
def test_cli_bad_config_exits_two(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "bad.toml", "[planner\n")

    completed = _run_cli(tmp_path, "config", "--config", str(config_path))

    assert completed.returncode == 2, _render_failure("config", completed)
    assert "invalid TOML" in completed.stderr
