# horse_dash/game/geometry.py
from __future__ import annotations
import math
from typing import Tuple

from .config import MIN_GAP_FLOOR, GAP_REACTION_PX

RGB = Tuple[int, int, int]
Box = Tuple[float, float, float, float]  # left, top, right, bottom


def min_gap(speed: float, gravity: float, jump_impulse: float) -> int:
    """
    Smallest horizontal gap between two obstacles that a jump can still clear.

    Air time of a symmetric jump is |2 * impulse / gravity| ticks; the world
    scrolls `speed` px per tick during it. A reaction margin is added and the
    result never drops below MIN_GAP_FLOOR.
    """
    air_time = abs((2.0 * jump_impulse) / gravity)
    distance = speed * air_time
    return max(MIN_GAP_FLOOR, int(math.floor(distance + GAP_REACTION_PX)))


def boxes_overlap(a: Box, b: Box) -> bool:
    """Half-open AABB test: boxes that only touch along an edge do not overlap."""
    a_left, a_top, a_right, a_bottom = a
    b_left, b_top, b_right, b_bottom = b
    return (a_left < b_right and a_right > b_left
            and a_top < b_bottom and a_bottom > b_top)


def hex_to_rgb(color: str) -> RGB:
    """'#rrggbb' -> (r, g, b). Anything unparsable is black."""
    h = color.lstrip("#")
    if len(h) != 6:
        return (0, 0, 0)
    try:
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
    except ValueError:
        return (0, 0, 0)


def lerp_color(c1: str, c2: str, amount: float) -> RGB:
    """Linear RGB blend, floored per channel."""
    r1, g1, b1 = hex_to_rgb(c1)
    r2, g2, b2 = hex_to_rgb(c2)
    return (
        int(math.floor(r1 + (r2 - r1) * amount)),
        int(math.floor(g1 + (g2 - g1) * amount)),
        int(math.floor(b1 + (b2 - b1) * amount)),
    )


def shade_color(color: RGB, percent: int) -> RGB:
    """
    Lighten (percent > 0) or darken (percent < 0) every channel by the same amount.
    Positive values push hard toward white: the offset is 255 - percent.
    """
    amount = 255 - percent if percent > 0 else percent
    return tuple(max(0, min(255, c + amount)) for c in color)  # type: ignore[return-value]


def wrap(x: float, span: float) -> float:
    """Wrap x into [0, span), also for negative x."""
    return ((x % span) + span) % span
