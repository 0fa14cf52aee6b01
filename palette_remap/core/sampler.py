"""Texture sampling at normalized coordinates.

Textures are float32 arrays of shape (height, width, 4). Coordinates are
normalized: u runs left to right across the width, v top to bottom across
the height, both in [0, 1] for in-range lookups.

Filters:
  nearest  texel index floor(u * w)
  linear   bilinear blend of the 4 texels around (u * w - 0.5, v * h - 0.5)

Wrap modes (applied to texel indices):
  clamp    clip to [0, size - 1] (clamp-to-edge)
  repeat   index modulo size
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

FILTERS = ('nearest', 'linear')
WRAPS = ('clamp', 'repeat')


@dataclass(frozen=True)
class Sampler:
    """Filter + wrap mode pair used to read a texture."""

    filter: str = 'nearest'
    wrap: str = 'clamp'

    def __post_init__(self) -> None:
        if self.filter not in FILTERS:
            raise ValueError(f'Unknown filter: {self.filter}. Available: {", ".join(FILTERS)}')
        if self.wrap not in WRAPS:
            raise ValueError(f'Unknown wrap mode: {self.wrap}. Available: {", ".join(WRAPS)}')

    def wrap_index(self, idx: np.ndarray, size: int) -> np.ndarray:
        """Map texel indices into [0, size) with this sampler's wrap mode."""
        if self.wrap == 'repeat':
            return np.mod(idx, size)
        return np.clip(idx, 0, size - 1)

    def sample(self, texture: np.ndarray, u, v) -> np.ndarray:
        """Sample texture at (u, v). Returns an array of shape broadcast(u, v) + (4,)."""
        u = np.asarray(u, dtype=np.float32)
        v = np.asarray(v, dtype=np.float32)
        u, v = np.broadcast_arrays(u, v)
        h, w = texture.shape[:2]

        if self.filter == 'nearest':
            x = self.wrap_index(np.asarray(np.floor(u * w), dtype=np.int64), w)
            y = self.wrap_index(np.asarray(np.floor(v * h), dtype=np.int64), h)
            return texture[y, x]

        fx = u * w - 0.5
        fy = v * h - 0.5
        x0 = np.floor(fx)
        y0 = np.floor(fy)
        # Weights stay float32 so results are identical however the coordinates are batched
        tx = np.expand_dims(np.asarray(fx - x0, dtype=np.float32), -1)
        ty = np.expand_dims(np.asarray(fy - y0, dtype=np.float32), -1)
        x0 = np.asarray(x0, dtype=np.int64)
        y0 = np.asarray(y0, dtype=np.int64)
        xa, xb = self.wrap_index(x0, w), self.wrap_index(x0 + 1, w)
        ya, yb = self.wrap_index(y0, h), self.wrap_index(y0 + 1, h)

        top = texture[ya, xa] * (1.0 - tx) + texture[ya, xb] * tx
        bottom = texture[yb, xa] * (1.0 - tx) + texture[yb, xb] * tx
        return top * (1.0 - ty) + bottom * ty


DEFAULT_SAMPLER = Sampler()


def pixel_centres(width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Normalized (u, v) grids addressing the centre of every pixel of a width x height target."""
    xs = (np.arange(width, dtype=np.float32) + 0.5) / width
    ys = (np.arange(height, dtype=np.float32) + 0.5) / height
    u, v = np.meshgrid(xs, ys)
    return u, v
