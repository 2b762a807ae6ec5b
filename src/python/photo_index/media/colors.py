"""
Color summary of decoded images.

The image is reduced to a 3x3 grid. Every cell is mapped to the nearest of
16 named colors; the palette and luminance strings hold one hex digit per
cell, row by row.
"""

from collections import Counter
from dataclasses import dataclass

import numpy as np
from PIL import Image

GRID_SIZE = 3

# Order matters: the index of a color is its hex digit in the palette string
NAMED_COLORS = [
    ("black", (0, 0, 0)),
    ("grey", (128, 128, 128)),
    ("white", (255, 255, 255)),
    ("brown", (139, 69, 19)),
    ("red", (220, 20, 60)),
    ("orange", (255, 140, 0)),
    ("gold", (255, 215, 0)),
    ("yellow", (255, 255, 0)),
    ("lime", (50, 205, 50)),
    ("green", (0, 128, 0)),
    ("teal", (0, 128, 128)),
    ("cyan", (0, 255, 255)),
    ("blue", (30, 60, 200)),
    ("purple", (128, 0, 128)),
    ("magenta", (255, 0, 255)),
    ("pink", (255, 182, 193)),
]

_PALETTE = np.array([rgb for _, rgb in NAMED_COLORS], dtype=np.float64)


@dataclass(frozen=True)
class ColorSummary:
    """Compact color profile of an image.

    Attributes:
        main_color: Name of the most frequent grid color
        palette: One hex digit per grid cell (index into NAMED_COLORS)
        luminance: One hex digit per grid cell (0 = dark, f = bright)
        saturation: Mean saturation scaled to 0-15
    """
    main_color: str
    palette: str
    luminance: str
    saturation: int


def nearest_color_index(rgb) -> int:
    """Index of the named color closest to an RGB triple."""
    distances = ((_PALETTE - np.asarray(rgb, dtype=np.float64)) ** 2).sum(axis=1)
    return int(distances.argmin())


def summarize_colors(image: Image.Image) -> ColorSummary:
    """Compute the color summary of a decoded image."""
    thumb = image.convert("RGB").resize((GRID_SIZE, GRID_SIZE), Image.Resampling.BOX)
    pixels = np.asarray(thumb, dtype=np.float64).reshape(-1, 3)

    indices = [nearest_color_index(rgb) for rgb in pixels]

    luma = (pixels @ np.array([0.299, 0.587, 0.114])) / 255.0
    luminance = "".join(format(int(round(v * 15)), "x") for v in luma)

    hsv = np.asarray(thumb.convert("HSV"), dtype=np.float64).reshape(-1, 3)
    saturation = int(round(hsv[:, 1].mean() / 255.0 * 15))

    # Counter.most_common keeps first-seen order for ties
    main_index = Counter(indices).most_common(1)[0][0]

    return ColorSummary(
        main_color=NAMED_COLORS[main_index][0],
        palette="".join(format(i, "x") for i in indices),
        luminance=luminance,
        saturation=saturation,
    )
