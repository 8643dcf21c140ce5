"""Segment colour policy.

Colours are plain CSS strings so the browser can use them directly.
"""

from __future__ import annotations

import numpy as np

INITIAL_COLOR = "#fff"
GLITCH_COLOR = "#ff00ff"

HEX_DIGITS = "0123456789ABCDEF"


def random_color(rng: np.random.Generator) -> str:
    """Draw a uniformly random ``#RRGGBB`` colour."""
    digits = rng.integers(0, 16, size=6)
    return "#" + "".join(HEX_DIGITS[d] for d in digits)


def grayscale(index: int) -> str:
    """Gray level fading with the index, clamped at 50."""
    v = max(50, 255 - index * 10)
    return f"rgb({v}, {v}, {v})"


def color_for_score(score: int, rng: np.random.Generator) -> str:
    """Colour of the segment grown when the score reaches ``score``."""
    if score > 20:
        return GLITCH_COLOR
    if score > 10:
        return grayscale(score)
    return random_color(rng)


def monochrome_trail(length: int) -> list[str]:
    """Grayscale trail for a snake of ``length`` segments, brightest at the head."""
    return [grayscale(i) for i in range(length)]
