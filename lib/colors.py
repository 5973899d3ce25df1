# =============================================================================
# lib/colors.py - Color Utilities
# =============================================================================
# Pure helpers for working with hex color codes:
# - Validation against the 6-digit #RRGGBB form
# - Repair of common malformed codes returned by the AI model
# - Lighten/darken by a fixed per-channel offset
# - Grouping palettes by category for display
#
# Usage:
#   from lib.colors import normalize_hex, lighten_color
#   normalize_hex("abc")        # "#aabbcc"
#   lighten_color("#CC5500")    # "#F47D28"
# =============================================================================

from __future__ import annotations

import re
from typing import Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from core.models.analysis import ColorResult

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

# Offset applied to every RGB channel by the light/deep variants
DEFAULT_SHIFT = 40


def is_valid_hex(value: str | None) -> bool:
    """Check that a value is a 6-digit hex color with a leading '#'."""
    return bool(value) and HEX_COLOR_PATTERN.match(value) is not None


def normalize_hex(value: str) -> str:
    """
    Repair common hex color mistakes.

    - Missing leading '#': "123456" -> "#123456"
    - 3-digit shorthand: "#abc" -> "#aabbcc"

    Anything else is returned as-is (after the '#' fix), so callers must
    still check the result with is_valid_hex().

    Args:
        value: Raw hex string from the model

    Returns:
        Repaired hex string
    """
    hex_value = value.strip()
    if not hex_value.startswith("#"):
        hex_value = "#" + hex_value
    if len(hex_value) == 4:
        hex_value = "#" + "".join(ch * 2 for ch in hex_value[1:])
    return hex_value


def hex_to_rgb(hex_value: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' to an (r, g, b) tuple."""
    if not is_valid_hex(hex_value):
        raise ValueError(f"Invalid hex color: {hex_value!r}")
    num = int(hex_value[1:], 16)
    return (num >> 16) & 0xFF, (num >> 8) & 0xFF, num & 0xFF


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert channel values to '#RRGGBB', clamping each to [0, 255]."""
    return "#{:02X}{:02X}{:02X}".format(*(_clamp(c) for c in (r, g, b)))


def shift_color(hex_value: str, amount: int) -> str:
    """Add `amount` to every RGB channel, clamped to [0, 255]."""
    r, g, b = hex_to_rgb(hex_value)
    return rgb_to_hex(r + amount, g + amount, b + amount)


def lighten_color(hex_value: str, amount: int = DEFAULT_SHIFT) -> str:
    return shift_color(hex_value, amount)


def darken_color(hex_value: str, amount: int = DEFAULT_SHIFT) -> str:
    return shift_color(hex_value, -amount)


def group_by_category(colors: Iterable[ColorResult]) -> dict[str, list[ColorResult]]:
    """
    Bucket colors by category for display.

    Returns a dict with keys neutrals, accents, statements, softs and others
    (colors without a category). Order within each bucket is preserved.
    """
    buckets: dict[str, list[ColorResult]] = {
        "neutrals": [],
        "accents": [],
        "statements": [],
        "softs": [],
        "others": [],
    }
    for color in colors:
        category = color.category.value if color.category else None
        key = f"{category}s" if category else "others"
        buckets[key].append(color)
    return buckets


def _clamp(channel: int) -> int:
    return max(0, min(255, channel))
