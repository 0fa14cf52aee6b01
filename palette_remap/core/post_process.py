"""Ping-pong canvases for applying pixel effects in sequence.

    pp = PostProcess(width, height)
    pp.draw(source)
    pp.apply(PixelEffect('remap', remap_image, palette=palette))
    result = pp.canvas

Each apply() reads canvas A, writes the effect output into canvas B, then
swaps the two, so effects compose in the order they are applied.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import numpy as np


class PixelEffect:
    """A named per-image effect with bound parameters."""

    def __init__(self, name: str, fn: Callable[..., np.ndarray], **params: Any):
        self.name = name
        self.fn = fn
        self.params = params

    def __call__(self, image: np.ndarray) -> np.ndarray:
        return self.fn(image, **self.params)

    def __repr__(self) -> str:
        return f'PixelEffect({self.name!r})'


class PostProcess:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._canvas_a = np.zeros((height, width, 4), dtype=np.float32)
        self._canvas_b = np.zeros((height, width, 4), dtype=np.float32)
        self.applied: list[str] = []

    @property
    def canvas(self) -> np.ndarray:
        """The current result."""
        return self._canvas_a

    def draw(self, image: np.ndarray) -> None:
        """Copy an image into the post-process canvas."""
        if image.shape[:2] != (self.height, self.width):
            raise ValueError(
                f'Image is {image.shape[1]}x{image.shape[0]}, canvas is {self.width}x{self.height}'
            )
        self._canvas_a[...] = image

    def apply(self, effect: Callable[[np.ndarray], np.ndarray]) -> None:
        """Apply an effect to the canvas."""
        self._canvas_b[...] = effect(self._canvas_a)
        self._canvas_a, self._canvas_b = self._canvas_b, self._canvas_a
        self.applied.append(getattr(effect, 'name', repr(effect)))
