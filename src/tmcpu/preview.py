"""Terminal preview of a tmux-formatted status string.

Translates ``#[...]`` directives into rich styles so the output of a
``--before``/``--after`` combination can be checked without reloading the
tmux config.
"""

import re

from rich.color import Color, ColorParseError
from rich.console import Console
from rich.style import Style
from rich.text import Text

_DIRECTIVE = re.compile(r"#\[([^\]]*)\]")

# tmux attribute name -> rich attribute name
_ATTRIBUTES = {
    "bold": "bold",
    "bright": "bold",
    "dim": "dim",
    "italics": "italic",
    "underscore": "underline",
    "blink": "blink",
    "reverse": "reverse",
    "strikethrough": "strike",
    "overline": "overline",
}


def tmux_colour(value: str) -> str | None:
    """Convert a tmux colour to a rich colour, or None for default/unknown."""
    value = value.strip().lower()
    if not value or value in ("default", "terminal"):
        return None
    match = re.fullmatch(r"colou?r(\d{1,3})", value)
    if match:
        number = int(match.group(1))
        return f"color({number})" if number < 256 else None
    if value.startswith("bright"):
        value = f"bright_{value[len('bright'):]}"
    try:
        Color.parse(value)
    except ColorParseError:
        return None
    return value


def apply_tmux_style(current: Style, style: str) -> Style:
    """Apply a comma/space separated tmux style on top of ``current``."""
    for token in re.split(r"[,\s]+", style.strip()):
        if not token:
            continue
        key, sep, value = token.partition("=")
        key = key.lower()
        if sep and key in ("fg", "bg"):
            # rich can't unset a colour by adding styles, so rebuild
            colours = {"color": current.color, "bgcolor": current.bgcolor}
            colours["color" if key == "fg" else "bgcolor"] = tmux_colour(value)
            current = Style(**colours, **_attrs(current))
        elif key == "default":
            current = Style()
        elif key == "none":
            current = Style(color=current.color, bgcolor=current.bgcolor)
        elif key in _ATTRIBUTES:
            current += Style(**{_ATTRIBUTES[key]: True})
        elif key.startswith("no") and key[2:] in _ATTRIBUTES:
            current += Style(**{_ATTRIBUTES[key[2:]]: False})
    return current


def _attrs(style: Style) -> dict[str, bool]:
    attrs = {}
    for name in set(_ATTRIBUTES.values()):
        value = getattr(style, name)
        if value is not None:
            attrs[name] = value
    return attrs


def to_rich_text(status: str) -> Text:
    """Render a tmux status string as rich Text."""
    text = Text()
    style = Style()
    pos = 0
    for match in _DIRECTIVE.finditer(status):
        if match.start() > pos:
            text.append(status[pos : match.start()], style=style)
        style = apply_tmux_style(style, match.group(1))
        pos = match.end()
    if pos < len(status):
        text.append(status[pos:], style=style)
    return text


def print_preview(status: str, console: Console | None = None) -> None:
    """Print the status string as tmux would show it."""
    if console is None:
        console = Console(stderr=True)
    console.print(to_rich_text(status))
