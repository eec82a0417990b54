# tests/test_cli.py

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from todo_cli import cli
from todo_cli.store import JsonFileStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch) -> None:
    """Keep the CLI from replacing pytest's logging handlers."""
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


def invoke(path: Path, *args: str):
    return runner.invoke(cli.app, ["--file", str(path), *args])


def test_add_then_list(json_path: Path) -> None:
    result = invoke(json_path, "add", "Buy milk")
    assert result.exit_code == 0, result.output
    assert "Created task 0" in result.output

    result = invoke(json_path, "add", "Pay rent", "--deadline", "2000-01-01")
    assert result.exit_code == 0, result.output
    assert "Created task 1" in result.output

    result = invoke(json_path, "list")
    assert result.exit_code == 0, result.output
    assert "Buy milk" in result.output
    assert "Pay rent" in result.output

    stored = json.loads(json_path.read_text(encoding="utf-8"))
    assert [e["status"] for e in stored["entries"]] == ["Todo", "Overdue"]
    assert stored["next_id"] == 2


def test_add_rejects_bad_deadline(json_path: Path) -> None:
    result = invoke(json_path, "add", "Pay rent", "--deadline", "2024-02-30")
    assert result.exit_code == 2
    assert not json_path.exists()


def test_add_rejects_blank_name(json_path: Path) -> None:
    result = invoke(json_path, "add", "   ")
    assert result.exit_code == 1
    assert "empty name" in result.output
    assert not json_path.exists()


def test_close(json_path: Path) -> None:
    invoke(json_path, "add", "Buy milk")

    result = invoke(json_path, "close", "0")
    assert result.exit_code == 0, result.output
    assert "Closed task 0" in result.output

    result = invoke(json_path, "close", "0")
    assert result.exit_code == 1
    assert "Open task with id 0 not found" in result.output

    assert JsonFileStore(json_path).load().get(0).status.value == "Done"


def test_close_requires_integer_id(json_path: Path) -> None:
    result = invoke(json_path, "close", "abc")
    assert result.exit_code == 2


def test_remove_is_a_placeholder(json_path: Path) -> None:
    invoke(json_path, "add", "Buy milk")
    result = invoke(json_path, "remove", "0")
    assert result.exit_code == 1
    assert "not supported" in result.output
    assert JsonFileStore(json_path).load().size() == 1


def test_status(json_path: Path) -> None:
    invoke(json_path, "add", "Buy milk")
    invoke(json_path, "add", "Pay rent", "-d", "2000-01-01")
    invoke(json_path, "add", "Done already")
    invoke(json_path, "close", "2")

    result = invoke(json_path, "status")
    assert result.exit_code == 0, result.output
    assert "Overdue: 1" in result.output
    assert "Todo: 1" in result.output
    assert "Done: 1" in result.output


def test_corrupt_file_aborts_without_touching_it(json_path: Path) -> None:
    json_path.write_text("{broken", encoding="utf-8")
    result = invoke(json_path, "add", "Buy milk")
    assert result.exit_code == 1
    assert "Storage error" in result.output
    assert json_path.read_text(encoding="utf-8") == "{broken"


def test_shell_command(json_path: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["--file", str(json_path), "shell"],
        input="add Buy milk\n\nclose 0\nquit\n",
    )
    assert result.exit_code == 0, result.output
    assert "Created task 0" in result.output
    assert "Closed task 0" in result.output
    assert JsonFileStore(json_path).load().get(0).status.value == "Done"


def test_sqlite_backend(tmp_path: Path) -> None:
    path = tmp_path / "tasks.db"
    assert invoke(path, "add", "Buy milk").exit_code == 0
    assert invoke(path, "close", "0").exit_code == 0
    result = invoke(path, "status")
    assert "Done: 1" in result.output


def test_file_defaults_to_environment(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "from-env.json"
    monkeypatch.setenv("TODO_FILE", str(path))
    result = runner.invoke(cli.app, ["add", "Buy milk"])
    assert result.exit_code == 0, result.output
    assert JsonFileStore(path).load().size() == 1


def test_shell_aborts_at_startup_on_corrupt_file(json_path: Path) -> None:
    json_path.write_text("{broken", encoding="utf-8")
    result = runner.invoke(
        cli.app,
        ["--file", str(json_path), "shell"],
        input="add Buy milk\n\nquit\n",
    )
    assert result.exit_code == 1
    assert "Storage error" in result.output
    assert "Deadline" not in result.output
    assert "Created task" not in result.output
    assert json_path.read_text(encoding="utf-8") == "{broken"
