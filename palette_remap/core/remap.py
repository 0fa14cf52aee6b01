"""Palette remap filter: a 3-entry palette swap driven by the source texel.

For each texel T = (r, g, b, a):

    p          = T.b
    background = palette(p, 0.0)
    foreground = palette(p, 0.25)
    accent     = palette(p, 0.5)
    result     = mix(mix(background, foreground, T.r), accent, T.g)

Red and green are blend weights, blue is the palette index. Accent is mixed
in last, so green = 1 gives the accent colour whatever red is. Alpha of the
source texel is not used; output alpha comes from the palette.

Every output pixel depends only on its own texel and the palette, so the
whole image is computed in one vectorized pass.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from palette_remap.core.palette import ACCENT_ROW, BACKGROUND_ROW, FOREGROUND_ROW
from palette_remap.core.sampler import DEFAULT_SAMPLER, Sampler, pixel_centres


def mix(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Component-wise linear interpolation a * (1 - t) + b * t."""
    return a * (1.0 - t) + b * t


def remap_pixels(texels: np.ndarray, palette: np.ndarray, sampler: Sampler = DEFAULT_SAMPLER) -> np.ndarray:
    """Remap an array of texels of shape (..., 4). Returns the same shape."""
    texels = np.asarray(texels, dtype=np.float32)
    p = texels[..., 2]
    background = sampler.sample(palette, p, BACKGROUND_ROW)
    foreground = sampler.sample(palette, p, FOREGROUND_ROW)
    accent = sampler.sample(palette, p, ACCENT_ROW)

    red = texels[..., 0:1]
    green = texels[..., 1:2]
    return mix(mix(background, foreground, red), accent, green)


def remap_texel(texel: Sequence[float], palette: np.ndarray, sampler: Sampler = DEFAULT_SAMPLER) -> np.ndarray:
    """Remap a single (r, g, b, a) texel. Returns a length-4 array."""
    return remap_pixels(np.asarray(texel, dtype=np.float32), palette, sampler)


def remap_image(
    source: np.ndarray,
    palette: np.ndarray,
    tint: Sequence[float] | None = None,
    source_sampler: Sampler = DEFAULT_SAMPLER,
    palette_sampler: Sampler = DEFAULT_SAMPLER,
    size: tuple[int, int] | None = None,
) -> np.ndarray:
    """Remap a whole source image through a palette texture.

    The source is sampled at the centre of each output pixel; `size` is
    (width, height) of the output and defaults to the source size. `tint` is
    accepted for interface compatibility with tinted draw calls but is not
    applied.
    """
    h, w = source.shape[:2]
    width, height = size if size is not None else (w, h)
    u, v = pixel_centres(width, height)
    texels = source_sampler.sample(source, u, v)
    return remap_pixels(texels, palette, palette_sampler)
