"""CLI entry points for tmcpu.

`tmcpu PID` prints the CPU usage since the previous call for the same tmux
client. `tmcpu-config` manages the optional config file.
"""

import argparse
import sys
from pathlib import Path

from . import __version__, tmux
from .cache import CacheError
from .config import ensure_config_exists, load_config
from .counters import CounterSourceError
from .log import get_logger
from .paths import get_config_path
from .preview import print_preview
from .status import Settings, compute_status

_log = get_logger("cli")

FORMATTING_HELP = """\
Formatting:
--before and --after take tmux-like format strings: #<style>text where
i.  text is any valid UTF8 text that is printed without any processing, and
ii. style takes tmux style strings (validity unchecked), with the additional feature that
    every match for the exact pattern HEXGRAD inside it is replaced by a color from
    Hue 120 degrees (green) to Hue 0 degrees (red) (going from low to high usage)
    e.g. #<fg=HEXGRAD>abc will be replaced by #[fg=#00ff00]abc for a 0%-ish CPU usage
Any empty #<>'s at the start are trimmed.

--raw prints CPU usage and the gradient in the format: USAGE\\nHEXGRAD where \\n is U+000A (newline)

Furthermore, --before and --after conflict with --raw

Defaults for most options can be set in the config file (see tmcpu-config).
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmcpu",
        description="CPU usage and a usage gradient for the tmux status line",
        epilog=FORMATTING_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("pid", help="Pass in #{client_pid}")
    parser.add_argument(
        "-H",
        "--no-hook",
        dest="hook",
        action="store_false",
        default=None,
        help="Disable setting of cache removal hooks (client-detached, session-closed)",
    )
    parser.add_argument(
        "-P",
        "--precision",
        type=_non_negative_int,
        help="Decimal places to use for the displayed usage (default: 0)",
    )
    parser.add_argument(
        "-b",
        "--before",
        action="append",
        help="Tmux format strings (sort of) to place before CPU usage (see below)",
    )
    parser.add_argument(
        "-a",
        "--after",
        action="append",
        help="Tmux format strings (sort of) to place after CPU usage (see below)",
    )
    parser.add_argument(
        "-r",
        "--raw",
        action="store_true",
        help='Get CPU usage and gradient in a "raw" reusable format (see below)',
    )
    parser.add_argument(
        "-c",
        "--cachedir",
        type=Path,
        help="Directory to cache stats in (default: /tmp/tmcpu/)",
    )
    parser.add_argument(
        "-s",
        "--stat",
        dest="stat_path",
        type=Path,
        help="Counter source to read (default: /proc/stat)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Config file to use (default: {get_config_path()})",
    )
    parser.add_argument(
        "-d",
        "--display",
        "--delay",
        dest="display",
        metavar="DELAY",
        type=_non_negative_int,
        help="Also show the output in the status line with `tmux display-message` for DELAY ms",
    )
    parser.add_argument(
        "-p",
        "--preview",
        action="store_true",
        help="Also render the output in this terminal (on stderr)",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid non-negative int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"invalid non-negative int value: {value!r}")
    return number


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Merge command-line options over the config file."""
    config = load_config(args.config)

    if args.raw:
        before: list[str] = []
        after: list[str] = []
    else:
        before = args.before if args.before is not None else config.status.before
        after = args.after if args.after is not None else config.status.after

    return Settings(
        client_id=args.pid,
        cachedir=args.cachedir if args.cachedir is not None else config.cache.dir,
        stat_path=args.stat_path if args.stat_path is not None else config.source.path,
        hook=args.hook if args.hook is not None else config.cache.hook,
        precision=args.precision if args.precision is not None else config.status.precision,
        before=before,
        after=after,
        raw=args.raw,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.raw and (args.before or args.after):
        parser.error("argument -r/--raw: not allowed with argument -b/--before or -a/--after")
    if args.raw and args.preview:
        parser.error("argument -p/--preview: not allowed with argument -r/--raw")

    settings = resolve_settings(args)

    try:
        out = compute_status(settings)
    except (CacheError, CounterSourceError) as e:
        _log.error("error: %s", e)
        print(e, file=sys.stderr)
        sys.exit(1)

    if out is None:
        return

    print(out, end="")

    if args.preview:
        print_preview(out)
    if args.display is not None:
        tmux.display_message(out, args.display)


def cmd_config_init(args: argparse.Namespace) -> None:
    """Initialize config file with defaults."""
    config_path = ensure_config_exists(args.config)
    print(f"Config file at: {config_path}")


def cmd_config_path(args: argparse.Namespace) -> None:
    """Print config file path."""
    print(args.config or get_config_path())


def cmd_config_show(args: argparse.Namespace) -> None:
    """Show current config."""
    config_path = args.config or get_config_path()
    if config_path.exists():
        print(config_path.read_text())
    else:
        print(f"No config file at {config_path}")
        print("Run 'tmcpu-config init' to create one.")


def config_main(argv: list[str] | None = None) -> None:
    """Entry point for `tmcpu-config`."""
    parser = argparse.ArgumentParser(
        prog="tmcpu-config",
        description="Manage tmcpu configuration",
    )
    parser.add_argument("--config", type=Path, help=f"Config file (default: {get_config_path()})")
    subparsers = parser.add_subparsers(dest="config_command")

    # config init
    init_parser = subparsers.add_parser("init", help="Create default config file")
    init_parser.set_defaults(func=cmd_config_init)

    # config path
    path_parser = subparsers.add_parser("path", help="Print config file path")
    path_parser.set_defaults(func=cmd_config_path)

    # config show
    show_parser = subparsers.add_parser("show", help="Show current config")
    show_parser.set_defaults(func=cmd_config_show)

    parser.set_defaults(func=cmd_config_show)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
