"""Expansion of the --before/--after format strings.

An affix is either plain text, printed as-is, or ``#<style>text``, which
becomes the tmux directive ``#[style]text``. Inside the style every
``HEXGRAD`` is replaced by the gradient colour. The token is exactly as
long as ``#rrggbb``, so substituting it never moves the closing ``>``.

Only the first ``#<...>`` of an affix is recognised; the text after it is
never re-scanned.
"""

from collections.abc import Iterable

from .gradient import Gradient

GRADIENT_TOKEN = "HEXGRAD"
_OPEN = "#<"


def format_percentage(usage: float, precision: int) -> str:
    """Format normalized usage as a percentage with ``precision`` decimals."""
    return f"{usage * 100.0:.{precision}f}"


def expand_affix(affix: str, gradient: Gradient) -> str:
    """Rewrite one affix into tmux format."""
    if not affix.startswith(_OPEN):
        return affix

    end = affix.find(">")
    if end == -1:
        # unterminated directive, print as-is
        return affix
    if end == len(_OPEN):
        return affix[end + 1 :]

    style = affix[len(_OPEN) : end]
    if GRADIENT_TOKEN in style:
        style = style.replace(GRADIENT_TOKEN, gradient.hex)
    return f"#[{style}]{affix[end + 1 :]}"


def join_affixes(affixes: Iterable[str], gradient: Gradient) -> str:
    """Expand and concatenate affixes in order."""
    return "".join(expand_affix(affix, gradient) for affix in affixes)


def render_plain(
    usage: float,
    precision: int,
    before: Iterable[str] = (),
    after: Iterable[str] = (),
    gradient: Gradient | None = None,
) -> str:
    """Build ``<before...><percentage><after...>``."""
    if gradient is None:
        gradient = Gradient(usage)
    prefix = join_affixes(before, gradient)
    suffix = join_affixes(after, gradient)
    return f"{prefix}{format_percentage(usage, precision)}{suffix}"


def render_raw(usage: float, precision: int, gradient: Gradient | None = None) -> str:
    """Build ``USAGE\\nHEXGRAD`` for scripts that do their own formatting."""
    if gradient is None:
        gradient = Gradient(usage)
    return f"{format_percentage(usage, precision)}\n{gradient.hex}"
