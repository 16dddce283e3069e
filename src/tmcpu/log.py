"""Shared logging for tmcpu.

All components log to ~/.local/state/tmcpu/tmcpu.log via Python's logging
module. Filter with grep: grep 'tmcpu.cache' ~/.local/state/tmcpu/tmcpu.log
"""

import logging

from .paths import get_log_path

try:
    _handler: logging.Handler = logging.FileHandler(get_log_path(), delay=True)
except OSError:
    # no writable state dir; the status line still works, just unlogged
    _handler = logging.NullHandler()
_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(message)s", datefmt="%H:%M:%S"))

_root = logging.getLogger("tmcpu")
_root.addHandler(_handler)
_root.setLevel(logging.DEBUG)
# don't propagate to root logger (avoids duplicate output if someone
# configures the root logger elsewhere)
_root.propagate = False


def get_logger(name: str) -> logging.Logger:
    return _root.getChild(name)
