"""Write a palette index into the blue channel of every pixel.

Prepares an asset painted in the remappable colours (black background,
red foreground, green accent) for remapping: blue becomes index / max,
so the remap filter picks palette column `index`.

Requires --index. --max-index defaults to PALETTE_REMAP_MAX_INDEX or 32.
Output is written to <out_dir>/<stem>_encoded.png.

Example:
    uv run palette-remap encode ./out sprite.png --index 3 --max-index 7
"""

import os

from palette_remap.core.env import default_max_index
from palette_remap.core.palette import PaletteError, palette_index, to_image
from palette_remap.core.types import Effect, Job, Report

effect = Effect(
    name='encode',
    help='Set every pixel\'s blue channel to index / max so it selects one palette column.',
)


@effect.run
def run(job: Job, report: Report, args) -> None:
    index = getattr(args, 'index', None)
    if index is None:
        report.add('encode', {'error': '--index required'})
        return
    maximum = getattr(args, 'max_index', None)
    if maximum is None:
        maximum = default_max_index()

    try:
        blue = palette_index(index, maximum)
    except PaletteError as e:
        report.add('encode', {'error': str(e)})
        return

    encoded = job.image.copy()
    encoded[..., 2] = blue

    os.makedirs(job.out_dir, exist_ok=True)
    out_path = os.path.join(job.out_dir, f'{job.stem}_encoded.png')
    to_image(encoded).save(out_path)

    report.add(
        'encode',
        {
            'output': out_path,
            'index': index,
            'max_index': maximum,
            'blue': blue,
        },
    )
