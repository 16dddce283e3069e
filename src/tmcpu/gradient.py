"""Usage to colour mapping.

Hue sweeps from 120 degrees (green) at 0% usage to 0 degrees (red) at 100%,
at full saturation and half lightness. Usage outside [0, 1] keeps going
around the hue wheel instead of being clamped, so an anomalous reading
shows up as an odd colour.
"""

import colorsys
import functools
import math


def usage_to_rgb(usage: float) -> tuple[int, int, int]:
    """Map normalized usage to an 8-bit RGB triple."""
    if not math.isfinite(usage):
        # hue is undefined
        return (0, 0, 0)
    hue = 120.0 - (120.0 * usage)
    r, g, b = colorsys.hls_to_rgb((hue / 360.0) % 1.0, 0.5, 1.0)
    return (round(r * 255), round(g * 255), round(b * 255))


def usage_to_hex(usage: float) -> str:
    """Map normalized usage to ``#rrggbb``."""
    r, g, b = usage_to_rgb(usage)
    return f"#{r:02x}{g:02x}{b:02x}"


class Gradient:
    """The gradient colour for one run, computed at most once.

    Nothing is computed until ``hex`` is first read, so a status line that
    never asks for the colour never pays for it.
    """

    def __init__(self, usage: float) -> None:
        self.usage = usage

    @functools.cached_property
    def hex(self) -> str:
        return usage_to_hex(self.usage)

    @property
    def computed(self) -> bool:
        return "hex" in self.__dict__
