"""
travel-planner: unit tests for the executable entrypoint and CLI router

File: tests/unit/test_main.py

Purpose
- Validate the exit-code contract of ``cli_entrypoint``.
- Validate command routing and rendering for plan, verify and config.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

import pytest
import yaml

from travel_planner.config import ConfigLoadError
from travel_planner.main import ExitCode, cli_entrypoint, exit_code_for
from travel_planner.planning import CycleError, StatementSourceError

if TYPE_CHECKING:
    from pathlib import Path

_STATEMENTS = ["x => z", "y => z", "z => v", "h =>", "v => h"]


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NO_COLOR", raising=False)
    for name in list(os.environ):
        if name.startswith("TRAVEL_PLANNER_"):
            monkeypatch.delenv(name)


@pytest.mark.unit
def test_plan_prints_one_destination_per_line(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_entrypoint(["plan", *_STATEMENTS])

    assert exit_code == ExitCode.SUCCESS
    assert capsys.readouterr().out.splitlines() == ["h", "v", "z", "y", "x"]


@pytest.mark.unit
def test_plan_json_and_yaml_formats(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["plan", "--format", "json", "b => a", "a =>"]) == 0
    assert json.loads(capsys.readouterr().out) == {"travel": ["a", "b"]}

    assert cli_entrypoint(["plan", "--format", "yaml", "b => a", "a =>"]) == 0
    assert yaml.safe_load(capsys.readouterr().out) == {"travel": ["a", "b"]}


@pytest.mark.unit
def test_plan_reads_statement_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    statement_file = tmp_path / "route.txt"
    statement_file.write_text("# trip\nb -> a\na ->\n", encoding="utf-8")

    exit_code = cli_entrypoint(["plan", "--file", str(statement_file), "--separator=->"])

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == ["a", "b"]


@pytest.mark.unit
def test_dash_separator_needs_equals_form(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["plan", "--separator=->", "b -> a", "a ->"]) == 0
    assert capsys.readouterr().out.splitlines() == ["a", "b"]

    assert cli_entrypoint(["plan", "--separator", "->", "b -> a", "a ->"]) == 2
    assert "--separator" in capsys.readouterr().err


@pytest.mark.unit
def test_plan_uses_config_file_from_working_directory(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "travel_planner.toml").write_text(
        '[planner]\nunanchored_order = "sorted"\n', encoding="utf-8"
    )

    assert cli_entrypoint(["plan", "m =>", "k =>"]) == 0
    assert capsys.readouterr().out.splitlines() == ["k", "m"]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("statements", "message"),
    [
        (["a => b", "b => a"], "Circle in the plan"),
        (["a => a"], "are the same for 'a'"),
        (["a => b", "a => c"], "'a' is duplicated"),
        (["a => q"], "No valid travel can be created"),
        (["=> a"], "Invalid input format"),
    ],
)
def test_rejected_plans_exit_with_plan_rejected(
    statements: list[str], message: str, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = cli_entrypoint(["plan", *statements])

    captured = capsys.readouterr()
    assert exit_code == ExitCode.PLAN_REJECTED
    assert captured.out == ""
    assert captured.err.startswith("error: ")
    assert message in captured.err


@pytest.mark.unit
def test_rejection_message_survives_debug_logging(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_entrypoint(["plan", "--log-level", "DEBUG", "a => b", "b => a"])

    err_lines = capsys.readouterr().err.splitlines()
    assert exit_code == ExitCode.PLAN_REJECTED
    assert err_lines[-1].startswith("error: Circle in the plan")
    rejected = json.loads(err_lines[-2])
    assert rejected["message"] == "plan rejected"
    assert rejected["fields"] == {"items": ["b", "a"]}


@pytest.mark.unit
def test_verify_rejects_malformed_statements(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_entrypoint(["verify", "--ordering", "a", "a => a => b", "nonsense"])

    assert exit_code == ExitCode.PLAN_REJECTED
    assert "Invalid input format in statement 2" in capsys.readouterr().err


@pytest.mark.unit
@pytest.mark.parametrize(
    ("output_format", "expected"),
    [("text", ""), ("json", '{"travel":[]}\n'), ("yaml", "travel: []\n")],
)
def test_plan_without_statements_prints_empty_travel(
    output_format: str, expected: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli_entrypoint(["plan", "--format", output_format]) == ExitCode.SUCCESS
    assert capsys.readouterr().out == expected


@pytest.mark.unit
def test_missing_statement_file_is_a_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = cli_entrypoint(["plan", "--file", str(tmp_path / "missing.txt")])

    assert exit_code == ExitCode.CONFIG_ERROR
    assert "not found" in capsys.readouterr().err


@pytest.mark.unit
def test_invalid_config_is_a_config_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config_path = tmp_path / "bad.toml"
    config_path.write_text('[output]\nformat = "xml"\n', encoding="utf-8")

    exit_code = cli_entrypoint(["plan", "--config", str(config_path), "a =>"])

    assert exit_code == ExitCode.CONFIG_ERROR
    assert "output.format" in capsys.readouterr().err


@pytest.mark.unit
def test_unknown_command_exits_with_argparse_code(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["teleport"]) == 2
    assert "invalid choice" in capsys.readouterr().err


@pytest.mark.unit
def test_verify_accepts_valid_ordering(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_entrypoint(["verify", "--ordering", "h,v,z,x,y", *_STATEMENTS])

    assert exit_code == 0
    assert "ordering satisfies 5 statement(s)" in capsys.readouterr().out


@pytest.mark.unit
def test_verify_reports_problems(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_entrypoint(["verify", "--ordering", "b,a", "--json", "b => a", "a =>"])

    assert exit_code == ExitCode.PLAN_REJECTED
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "command": "verify",
        "valid": False,
        "problems": ["'a' must precede 'b'"],
    }


@pytest.mark.unit
def test_config_command_emits_effective_config(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli_entrypoint(["config", "--json", "--log-level", "debug"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["command"] == "config"
    assert payload["config"]["observability"]["log_level"] == "DEBUG"
    assert payload["config"]["planner"]["separator"] == "=>"


@pytest.mark.unit
def test_debug_log_level_writes_json_logs_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_entrypoint(["plan", "--log-level", "DEBUG", "b => a", "a =>"]) == 0

    captured = capsys.readouterr()
    records = [json.loads(line) for line in captured.err.splitlines()]
    assert captured.out.splitlines() == ["a", "b"]
    assert {record["command"] for record in records} == {"plan"}
    assert records[-1]["message"] == "travel planned"


@pytest.mark.unit
def test_exit_code_for_follows_exception_chain() -> None:
    try:
        try:
            raise CycleError("a", "b")
        except CycleError as exc:
            raise RuntimeError("wrapped") from exc
    except RuntimeError as wrapped:
        assert exit_code_for(wrapped) is ExitCode.PLAN_REJECTED

    assert exit_code_for(ConfigLoadError("bad")) is ExitCode.CONFIG_ERROR
    assert exit_code_for(StatementSourceError("bad")) is ExitCode.CONFIG_ERROR
    assert exit_code_for(KeyError("boom")) is ExitCode.INTERNAL_ERROR
