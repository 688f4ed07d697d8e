"""Hex color parsing, similarity and shading."""

from __future__ import annotations

import math
import re

RGB = tuple[int, int, int]

MAX_DISTANCE = math.sqrt(255**2 * 3)
UNKNOWN_SIMILARITY = 0.5

_HEX6 = re.compile(r"^#?([0-9a-fA-F]{6})$")


def parse_hex(value: object) -> RGB | None:
    """Parse ``#rrggbb`` (or ``rrggbb``); anything else returns None."""
    if not isinstance(value, str):
        return None
    match = _HEX6.match(value.strip())
    if match is None:
        return None
    digits = match.group(1)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def to_hex(rgb: RGB) -> str:
    return "#" + "".join(f"{_clamp_channel(channel):02x}" for channel in rgb)


def _clamp_channel(value: float) -> int:
    return max(0, min(255, int(round(value))))


def color_similarity(first: object, second: object) -> float:
    if first == second:
        return 1.0
    rgb_a = parse_hex(first)
    rgb_b = parse_hex(second)
    if rgb_a is None or rgb_b is None:
        return UNKNOWN_SIMILARITY
    distance = math.dist(rgb_a, rgb_b)
    return max(0.0, 1.0 - distance / MAX_DISTANCE)


def scale_color(value: str, factor: float) -> str | None:
    """Multiply every channel by ``factor``; None when ``value`` is not hex."""
    rgb = parse_hex(value)
    if rgb is None:
        return None
    return to_hex((rgb[0] * factor, rgb[1] * factor, rgb[2] * factor))
