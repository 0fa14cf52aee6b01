"""Palette textures, remappable colours, and hex / image conversion.

A palette texture is at least 3 rows tall. Its columns are palette entries;
within a column, the rows sampled at v = 0.0, 0.25 and 0.5 hold the
background, foreground and accent colours. build_palette() lays palettes out
4 rows tall so those fractions land exactly on rows 0, 1 and 2.

Source assets are painted with the remappable colours: pure black for
background, pure red for foreground, pure green for accent. Anti-aliased
edges between them become smooth blends after remapping. The blue channel
carries the palette index.
"""

from __future__ import annotations

import string
from collections.abc import Sequence

import numpy as np
from PIL import Image

from palette_remap.core.sampler import DEFAULT_SAMPLER, Sampler

BACKGROUND_ROW = 0.0
FOREGROUND_ROW = 0.25
ACCENT_ROW = 0.5

PALETTE_HEIGHT = 4

RGBA = tuple[float, float, float, float]


class PaletteError(ValueError):
    """Invalid palette, colour or palette index."""


class RemappableColors:
    """Colours a source asset is painted with before remapping."""

    BACKGROUND: RGBA = (0.0, 0.0, 0.0, 1.0)
    FOREGROUND: RGBA = (1.0, 0.0, 0.0, 1.0)
    ACCENT: RGBA = (0.0, 1.0, 0.0, 1.0)


def hex_to_rgba(hex_colour: str) -> RGBA:
    """Parse #rgb, #rgba, #rrggbb or #rrggbbaa (leading # optional) into normalized RGBA."""
    h = hex_colour.strip()
    if h.startswith('#'):
        h = h[1:]
    if not h or not all(c in string.hexdigits for c in h):
        raise PaletteError(f'Invalid hex colour: {hex_colour!r}')
    if len(h) in (3, 4):
        h = ''.join(c * 2 for c in h)
    if len(h) == 6:
        h += 'ff'
    if len(h) != 8:
        raise PaletteError(f'Invalid hex colour: {hex_colour!r}')
    channels = [int(h[i : i + 2], 16) for i in range(0, 8, 2)]
    r, g, b, a = (c / 255.0 for c in channels)
    return (r, g, b, a)


def rgba_to_hex(rgba: Sequence[float]) -> str:
    """Format a normalized RGBA colour as #rrggbbaa."""
    parts = [int(round(float(np.clip(c, 0.0, 1.0)) * 255)) for c in rgba[:4]]
    return '#' + ''.join(f'{p:02x}' for p in parts)


def build_palette(columns: Sequence[Sequence[str]]) -> np.ndarray:
    """Build a palette texture from (background, foreground, accent) hex triples, one per column.

    Returns a float32 array of shape (4, len(columns), 4). Row 3 pads the
    texture to 4 rows and repeats the accent row.
    """
    if not columns:
        raise PaletteError('Palette needs at least one column')
    palette = np.zeros((PALETTE_HEIGHT, len(columns), 4), dtype=np.float32)
    for x, column in enumerate(columns):
        if len(column) != 3:
            raise PaletteError(f'Palette column {x} needs 3 colours (background, foreground, accent), got {len(column)}')
        for y, hex_colour in enumerate(column):
            palette[y, x] = hex_to_rgba(hex_colour)
    palette[3] = palette[2]
    return palette


def palette_index(index: int, maximum: int) -> float:
    """Blue-channel value that selects palette entry `index` out of `maximum`."""
    if maximum <= 0:
        raise PaletteError(f'Maximum palette index must be positive, got {maximum}')
    if not 0 <= index <= maximum:
        raise PaletteError(f'Palette index {index} out of range [0, {maximum}]')
    return index / maximum


def column_for_index(palette: np.ndarray, p: float, sampler: Sampler = DEFAULT_SAMPLER) -> int:
    """Palette column a nearest lookup at blue value `p` reads, wrapped with `sampler`'s wrap mode."""
    width = palette.shape[1]
    return int(sampler.wrap_index(np.int64(np.floor(np.float32(p) * width)), width))


def columns_for_index(palette: np.ndarray, p: float, sampler: Sampler = DEFAULT_SAMPLER) -> list[int]:
    """Every palette column `sampler` reads at blue value `p`.

    Nearest filtering reads one column. Linear filtering blends the two
    columns either side of p * width - 0.5.
    """
    if sampler.filter == 'nearest':
        return [column_for_index(palette, p, sampler)]
    width = palette.shape[1]
    x0 = np.int64(np.floor(np.float32(p) * width - 0.5))
    return sorted({int(sampler.wrap_index(x0, width)), int(sampler.wrap_index(x0 + 1, width))})


def load_image(path: str) -> np.ndarray:
    """Load any PIL-readable image as a float32 (h, w, 4) array in [0, 1]."""
    with Image.open(path) as img:
        return from_image(img)


def from_image(image: Image.Image) -> np.ndarray:
    arr = np.asarray(image.convert('RGBA'), dtype=np.float32)
    return arr / 255.0


def to_image(arr: np.ndarray) -> Image.Image:
    """Convert a float RGBA array back to an 8-bit RGBA PIL image."""
    data = np.clip(np.rint(arr * 255.0), 0, 255).astype(np.uint8)
    return Image.fromarray(data)
