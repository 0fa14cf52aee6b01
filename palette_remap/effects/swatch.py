"""List the background, foreground and accent colour of every palette column.

Samples each column at v = 0.0, 0.25 and 0.5 with the palette sampler,
the same lookups the remap filter makes. Colours are reported as
#rrggbbaa.

Requires --palette. The input image is loaded but not used.

Example:
    uv run palette-remap swatch ./out sprite.png --palette palette.png
"""

from palette_remap.core.palette import ACCENT_ROW, BACKGROUND_ROW, FOREGROUND_ROW, rgba_to_hex
from palette_remap.core.types import Effect, Job, Report

effect = Effect(
    name='swatch',
    help='List background/foreground/accent colours per palette column.',
)


@effect.run
def run(job: Job, report: Report, args) -> None:
    if job.palette is None:
        report.add('swatch', {'error': '--palette image required'})
        return

    width = job.palette.shape[1]
    sampler = job.palette_sampler
    columns = []
    for x in range(width):
        u = (x + 0.5) / width
        columns.append(
            {
                'column': x,
                'background': rgba_to_hex(sampler.sample(job.palette, u, BACKGROUND_ROW)),
                'foreground': rgba_to_hex(sampler.sample(job.palette, u, FOREGROUND_ROW)),
                'accent': rgba_to_hex(sampler.sample(job.palette, u, ACCENT_ROW)),
            }
        )

    report.add('swatch', {'columns': columns})
