"""Tests for tmcpu.tmux - best-effort tmux calls.

All tests mock subprocess to avoid touching a real tmux server.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

from tmcpu.tmux import cleanup_command, display_message, register_cleanup_hooks


def _mock_run(returncode: int = 0, stderr: str = ""):
    """Create a mock subprocess.CompletedProcess."""
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout="", stderr=stderr)


def test_cleanup_command_quotes_path():
    assert cleanup_command(Path("/tmp/tmcpu/42")) == "run-shell 'rm /tmp/tmcpu/42 2> /dev/null'"
    assert "'/tmp/my dir/42'" in cleanup_command(Path("/tmp/my dir/42"))


@patch("tmcpu.tmux.subprocess.run")
def test_register_cleanup_hooks_single_call(mock_run):
    mock_run.return_value = _mock_run()
    assert register_cleanup_hooks(Path("/tmp/tmcpu/42")) is True

    mock_run.assert_called_once()
    args = mock_run.call_args[0][0]
    command = cleanup_command(Path("/tmp/tmcpu/42"))
    assert args == [
        "tmux",
        "set-hook",
        "-ga",
        "client-detached",
        command,
        ";",
        "set-hook",
        "-ga",
        "session-closed",
        command,
    ]


@patch("tmcpu.tmux.subprocess.run")
def test_register_cleanup_hooks_tmux_error(mock_run, capsys):
    mock_run.return_value = _mock_run(returncode=1, stderr="no server running")
    assert register_cleanup_hooks(Path("/tmp/tmcpu/42")) is False
    err = capsys.readouterr().err
    assert "removal hooks" in err
    assert "no server running" in err


@patch("tmcpu.tmux.subprocess.run")
def test_register_cleanup_hooks_tmux_missing(mock_run, capsys):
    mock_run.side_effect = FileNotFoundError("tmux")
    assert register_cleanup_hooks(Path("/tmp/tmcpu/42")) is False
    assert "tmux set-hook" in capsys.readouterr().err


@patch("tmcpu.tmux.subprocess.Popen")
def test_display_message(mock_popen):
    assert display_message("#[fg=red]50", 1500) is True
    args = mock_popen.call_args[0][0]
    assert args == ["tmux", "display", "-d", "1500", "#[fg=red]50"]


@patch("tmcpu.tmux.subprocess.Popen")
def test_display_message_tmux_missing(mock_popen):
    mock_popen.side_effect = OSError("no tmux")
    assert display_message("50", 100) is False
