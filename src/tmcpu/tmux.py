"""tmux integration for tmcpu.

Everything here is best-effort: a failing tmux call is reported on stderr
and in the log, and never stops the status line from being computed.
"""

import shlex
import subprocess
import sys
from pathlib import Path

from .log import get_logger

_log = get_logger("tmux")

CLEANUP_HOOKS = ("client-detached", "session-closed")


def cleanup_command(cache_path: Path) -> str:
    """The tmux command that removes a client's cache file."""
    return f"run-shell 'rm {shlex.quote(str(cache_path))} 2> /dev/null'"


def register_cleanup_hooks(cache_path: Path) -> bool:
    """Ask tmux to delete ``cache_path`` when the client detaches or its session closes.

    Returns True if tmux accepted the hooks.
    """
    command = cleanup_command(cache_path)
    args = ["tmux"]
    for i, hook in enumerate(CLEANUP_HOOKS):
        if i:
            args.append(";")
        args += ["set-hook", "-ga", hook, command]

    try:
        result = subprocess.run(args, capture_output=True, text=True)
    except OSError as e:
        print(f"Could not run `tmux set-hook`'s: {e}", file=sys.stderr)
        _log.warning("tmux set-hook failed to start: %s", e)
        return False

    if result.returncode != 0:
        print(
            f"Could not create {cache_path} removal hooks. tmux stderr:\n{result.stderr}",
            file=sys.stderr,
        )
        _log.warning(
            "tmux set-hook for %s exited %d: %s", cache_path, result.returncode, result.stderr
        )
        return False

    _log.info("registered removal hooks for %s", cache_path)
    return True


def display_message(text: str, delay: int) -> bool:
    """Show ``text`` in the status line for ``delay`` milliseconds.

    Fire-and-forget: tmux is started but not waited on.
    """
    try:
        subprocess.Popen(
            ["tmux", "display", "-d", str(delay), text],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        _log.warning("tmux display failed to start: %s", e)
        return False
    return True
