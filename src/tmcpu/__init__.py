"""tmcpu - CPU usage with a colour gradient for the tmux status line.

Run once per status-line refresh with the client pid:

    set -g status-right '#(tmcpu #{client_pid} -b "#<fg=HEXGRAD>")'

The previous counter sample is cached per client under /tmp/tmcpu/ so each
invocation can report the usage since the last refresh.
"""

__version__ = "0.3.0"
