"""Recolour an image through a palette texture.

Each source pixel is read as blend weights and a palette index:
  red    how much foreground replaces background
  green  how much accent replaces the result
  blue   horizontal position in the palette (palette index)

The palette is sampled at v = 0.0 (background), 0.25 (foreground) and
0.5 (accent). Output is written to <out_dir>/<stem>_remapped.png.

Sampling defaults to nearest + clamp. Override with --filter/--wrap or
PALETTE_REMAP_FILTER / PALETTE_REMAP_WRAP.

--tint is accepted and reported but not multiplied into the output.

Example:
    uv run palette-remap remap ./out sprite.png --palette palette.png
    uv run palette-remap remap ./out sprite.png -P palette.png --filter linear --json
"""

import os

import numpy as np

from palette_remap.core.palette import columns_for_index, to_image
from palette_remap.core.post_process import PixelEffect, PostProcess
from palette_remap.core.remap import remap_image
from palette_remap.core.sampler import pixel_centres
from palette_remap.core.types import Effect, Job, Report

effect = Effect(
    name='remap',
    help='Recolour an image through a palette texture (background/foreground/accent).',
)


def _columns_used(job: Job) -> list[int]:
    h, w = job.image.shape[:2]
    texels = job.source_sampler.sample(job.image, *pixel_centres(w, h))
    columns = set()
    for b in np.unique(texels[..., 2]):
        columns.update(columns_for_index(job.palette, float(b), job.palette_sampler))
    return sorted(columns)


@effect.run
def run(job: Job, report: Report, args) -> None:
    if job.palette is None:
        report.add('remap', {'error': '--palette image required'})
        return

    h, w = job.image.shape[:2]
    pp = PostProcess(w, h)
    pp.draw(job.image)
    pp.apply(
        PixelEffect(
            'remap',
            remap_image,
            palette=job.palette,
            tint=job.tint,
            source_sampler=job.source_sampler,
            palette_sampler=job.palette_sampler,
        )
    )

    os.makedirs(job.out_dir, exist_ok=True)
    out_path = os.path.join(job.out_dir, f'{job.stem}_remapped.png')
    to_image(pp.canvas).save(out_path)

    data = {
        'output': out_path,
        'width': w,
        'height': h,
        'source_sampler': f'{job.source_sampler.filter}/{job.source_sampler.wrap}',
        'palette_sampler': f'{job.palette_sampler.filter}/{job.palette_sampler.wrap}',
        'columns_used': _columns_used(job),
    }
    if job.tint is not None:
        data['tint'] = list(job.tint)
        data['tint_applied'] = False
    report.add('remap', data)
