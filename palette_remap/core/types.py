"""Shared types for palette-remap: Effect, Job, Report."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from palette_remap.core.sampler import Sampler


@dataclass
class Job:
    """Inputs shared by every effect in one CLI run."""

    image_path: str
    image: np.ndarray  # float32 (h, w, 4)
    out_dir: str
    palette_path: str | None = None
    palette: np.ndarray | None = None
    source_sampler: Sampler = field(default_factory=Sampler)
    palette_sampler: Sampler = field(default_factory=Sampler)
    tint: tuple[float, float, float, float] | None = None

    @property
    def stem(self) -> str:
        return os.path.splitext(os.path.basename(self.image_path))[0]


class Effect:
    """A self-registering effect.

    Usage in an effect module:

        effect = Effect(name='remap', help='Palette remap an image')

        @effect.run
        def run(job, report, args):
            ...
    """

    def __init__(self, name: str, help: str = ''):
        self.name = name
        self.help = help
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, job: Job, report: Report, args: Any) -> None:
        """Execute the effect's run function."""
        if self._run_fn is None:
            raise RuntimeError(f'Effect {self.name} has no run function')
        self._run_fn(job, report, args)


@dataclass
class Report:
    """Accumulates results from effects for text/JSON output."""

    image_path: str = ''
    image_width: int = 0
    image_height: int = 0
    palette_path: str | None = None
    effects: dict[str, dict[str, Any]] = field(default_factory=dict)
    pass_count: int = 0
    fail_count: int = 0

    def add(self, effect_name: str, data: dict[str, Any]) -> None:
        """Add (or extend) results for an effect."""
        self.effects.setdefault(effect_name, {}).update(data)

    def record_pass(self) -> None:
        self.pass_count += 1

    def record_fail(self) -> None:
        self.fail_count += 1
