"""
Small numeric and color helpers shared by the engine and the web interface
"""

import math
import re
from typing import Tuple

_HEX_COLOR = re.compile(r'^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$', re.IGNORECASE)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp a value between low and high"""
    return max(low, min(high, value))


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points"""
    return math.hypot(x1 - x2, y1 - y2)


def map_range(value: float, in_min: float, in_max: float, out_min: float, out_max: float) -> float:
    """Linearly map a value from one range onto another"""
    return (value - in_min) * (out_max - out_min) / (in_max - in_min) + out_min


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert 0-255 RGB values to a '#rrggbb' string"""
    return '#{:02x}{:02x}{:02x}'.format(*(int(clamp(c, 0, 255)) for c in (r, g, b)))


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """
    Parse a '#rrggbb' (or 'rrggbb') string into 0-255 RGB values

    Raises:
        ValueError: If the string is not a six digit hex color
    """
    match = _HEX_COLOR.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid hex color: {value!r}")
    return tuple(int(part, 16) for part in match.groups())


def unit_to_byte(value: float) -> int:
    """Quantize a 0-1 channel to 0-255 (clamped, floored)"""
    return int(math.floor(clamp(value) * 255))
