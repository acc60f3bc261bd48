"""Colormap palette and per-image color assignment.

Detected non-background classes are ranked by ascending id and take
palette entries in that order; more than eight classes wrap around.
"""

from typing import Dict, Iterable, Tuple

from .registry import BACKGROUND_ID

RGB = Tuple[int, int, int]

# green, red, blue, purple, pink, teal, yellow, gray
PALETTE_HEX = (
    "#008000", "#FF0000", "#0000FF", "#A020F0",
    "#FFB950", "#008080", "#FFFF00", "#C0C0C0",
)

# Alpha of recolored (non-background) pixels in the colormap overlay.
COLORMAP_ALPHA = 200


def _hex_to_rgb(hex_str: str) -> RGB:
    """Convert '#RRGGBB' to (r, g, b) uint8."""
    hex_str = hex_str.lstrip("#")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


PALETTE: Tuple[RGB, ...] = tuple(_hex_to_rgb(h) for h in PALETTE_HEX)


def assign_colors(class_ids: Iterable[int]) -> Dict[int, RGB]:
    """Return mapping class_id -> RGB, ranked over the sorted non-background ids."""
    ranked = sorted({int(c) for c in class_ids if int(c) != BACKGROUND_ID})
    return {c: PALETTE[rank % len(PALETTE)] for rank, c in enumerate(ranked)}


def rgb_to_hex(rgb: RGB) -> str:
    return "#{:02X}{:02X}{:02X}".format(*rgb)


def get_class_id_to_hex(class_ids: Iterable[int]) -> Dict[int, str]:
    """Mapping class_id -> hex for legends and reports (background is never colored)."""
    return {c: rgb_to_hex(rgb) for c, rgb in assign_colors(class_ids).items()}
