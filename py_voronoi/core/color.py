"""
Colour helpers for Voronoi rendering.

Provides RGB/HSV value types, random colour generation constrained by hue
and luminosity, and linear interpolation between two colours.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, NamedTuple, Optional, Tuple

import numpy as np
from matplotlib.colors import hsv_to_rgb

from .alea_prng import AleaPRNG


class Rgb(NamedTuple):
    """8-bit per channel colour."""
    r: int
    g: int
    b: int


class Hsv(NamedTuple):
    """Colour in HSV space: hue in degrees [0, 360), saturation and value in [0, 1]."""
    h: float
    s: float
    v: float

    def to_rgb(self) -> Rgb:
        """Convert to 8-bit RGB, truncating each channel."""
        rgb = hsv_to_rgb(np.array([(self.h % 360.0) / 360.0, self.s, self.v]))
        r, g, b = (min(int(c * 255.0), 255) for c in rgb)
        return Rgb(r, g, b)


class Luminosity(str, Enum):
    """Brightness family of generated colours."""
    RANDOM = "random"
    BRIGHT = "bright"
    LIGHT = "light"
    DARK = "dark"


# (saturation range, value range) per luminosity
LUMINOSITY_RANGES: Dict[Luminosity, Tuple[Tuple[float, float], Tuple[float, float]]] = {
    Luminosity.RANDOM: ((0.0, 1.0), (0.0, 1.0)),
    Luminosity.BRIGHT: ((0.55, 1.0), (0.8, 1.0)),
    Luminosity.LIGHT: ((0.2, 0.55), (0.85, 1.0)),
    Luminosity.DARK: ((0.55, 1.0), (0.2, 0.55)),
}


@dataclass
class RandomColorConfig:
    """Parameters for :func:`random_color`.

    Attributes:
        prng: Generator used for every draw
        hue: Optional ``(lo, hi)`` hue range in degrees; full circle if None
        luminosity: Brightness family to draw from
    """
    prng: AleaPRNG
    hue: Optional[Tuple[float, float]] = None
    luminosity: Luminosity = Luminosity.RANDOM

    def __post_init__(self):
        if self.hue is not None:
            lo, hi = self.hue
            if not 0 <= lo <= hi <= 360:
                raise ValueError(f"Hue range must satisfy 0 <= lo <= hi <= 360, got {self.hue}")
        self.luminosity = Luminosity(self.luminosity)


def random_color(config: RandomColorConfig) -> Hsv:
    """Draw a colour matching the hue and luminosity constraints of ``config``."""
    prng = config.prng
    hue_lo, hue_hi = config.hue if config.hue is not None else (0.0, 360.0)
    (s_lo, s_hi), (v_lo, v_hi) = LUMINOSITY_RANGES[config.luminosity]

    return Hsv(
        h=prng.uniform(hue_lo, hue_hi),
        s=prng.uniform(s_lo, s_hi),
        v=prng.uniform(v_lo, v_hi),
    )


def lerp_color(color1: Rgb, color2: Rgb, t: float) -> Rgb:
    """
    Interpolate linearly between two colours.

    Channels are computed in floating point and truncated, not rounded.
    """
    return Rgb(*(int(c1 + t * (c2 - c1)) for c1, c2 in zip(color1, color2)))


NAMED_COLORS: Dict[str, Rgb] = {
    "black": Rgb(0, 0, 0),
    "white": Rgb(255, 255, 255),
    "red": Rgb(255, 0, 0),
    "green": Rgb(0, 128, 0),
    "blue": Rgb(0, 0, 255),
    "yellow": Rgb(255, 255, 0),
    "cyan": Rgb(0, 255, 255),
    "magenta": Rgb(255, 0, 255),
    "orange": Rgb(255, 165, 0),
    "purple": Rgb(128, 0, 128),
    "gray": Rgb(128, 128, 128),
    "grey": Rgb(128, 128, 128),
}


def parse_color(text: str) -> Rgb:
    """
    Parse ``#rrggbb``, ``#rgb`` or a named colour.

    Raises:
        ValueError: If the text is not a recognised colour.
    """
    value = text.strip().lower()
    if value in NAMED_COLORS:
        return NAMED_COLORS[value]

    if value.startswith("#"):
        digits = value[1:]
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) == 6:
            try:
                return Rgb(*(int(digits[i:i + 2], 16) for i in (0, 2, 4)))
            except ValueError:
                pass

    raise ValueError(f"Could not parse colour '{text}'")
