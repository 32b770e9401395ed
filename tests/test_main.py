"""Tests for the console entry point."""

import os
import signal
from pathlib import Path

import pytest

import procman.main as console


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch) -> None:
    """Leave pytest's log capture in place."""
    monkeypatch.setattr(console, "setup_logging", lambda level: None)


class TestCommands:
    """Verify each command's effect and exit code."""

    def test_no_arguments_prints_help(self, capsys) -> None:
        assert console.main([]) == 0
        assert "Usage: procman" in capsys.readouterr().out

    def test_unknown_command(self) -> None:
        assert console.main(["explode"]) == 2

    def test_write_pid(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "app.pid"
        assert console.main(["write-pid", str(path)]) == 0
        assert path.read_text() == str(os.getpid())

    def test_status_running(self, capsys) -> None:
        assert console.main(["status", str(os.getpid())]) == 0
        assert capsys.readouterr().out.strip() == f"{os.getpid()}\trunning"

    def test_status_stopped(self, capsys, dead_pid: int) -> None:
        assert console.main(["status", str(os.getpid()), str(dead_pid)]) == 1
        assert f"{dead_pid}\tstopped" in capsys.readouterr().out

    def test_status_bad_pid(self) -> None:
        assert console.main(["status", "abc"]) == 2

    def test_signal_delivers(self, spawn) -> None:
        proc = spawn()
        assert console.main(["signal", "term", str(proc.pid)]) == 0
        assert proc.wait(timeout=10) == -signal.SIGTERM

    def test_signal_to_gone_process(self, dead_pid: int) -> None:
        assert console.main(["signal", "HUP", str(dead_pid)]) == 1

    def test_signal_rejects_unsupported(self, spawn) -> None:
        proc = spawn()
        assert console.main(["signal", "KILL", str(proc.pid)]) == 2
        assert proc.poll() is None

    def test_signal_usage(self) -> None:
        assert console.main(["signal", "TERM"]) == 2

    def test_supervise_requires_pids(self) -> None:
        assert console.main(["supervise"]) == 2

    def test_verbose_flag_is_stripped(self, capsys) -> None:
        assert console.main(["--verbose", "help"]) == 0
        assert "Usage: procman" in capsys.readouterr().out


class TestFailures:
    """Unexpected errors end the command with a logged error, not a traceback."""

    def test_signal_without_permission(self, monkeypatch, caplog) -> None:
        def refuse(pid: int, signum: int) -> None:
            raise PermissionError(1, "Operation not permitted")

        monkeypatch.setattr(os, "kill", refuse)
        assert console.main(["signal", "HUP", "1"]) == 1
        assert "Operation not permitted" in caplog.text

