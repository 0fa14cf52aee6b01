"""Pixel diff between a reference image and the input image.

Requires --ref reference image. Resizes the reference to match the input
if dimensions differ. Computes the percentage of pixels whose RGBA
distance (8-bit scale) exceeds 20.

Typical use is a regression check on remap output: remap once, keep the
result as reference, then compare later renders against it.

Generates a diff image: green = match, red = mismatch.
Saves to <out_dir>/<stem>_diff.png.

With --fail-on-mismatch N the run exits 1 if mismatch exceeds N percent.

Example:
    uv run palette-remap compare ./out current.png --ref reference.png
    uv run palette-remap compare ./out current.png --ref reference.png --fail-on-mismatch 0.5
"""

import os

import numpy as np
from PIL import Image

from palette_remap.core.palette import from_image
from palette_remap.core.types import Effect, Job, Report

effect = Effect(
    name='compare',
    help='Pixel-diff the image against a reference (--ref). Output mismatch percentage.',
)

DIFF_THRESHOLD = 20


def mismatch_mask(reference: np.ndarray, current: np.ndarray, threshold: float = DIFF_THRESHOLD) -> np.ndarray:
    """Boolean (h, w) mask of pixels whose RGBA distance on the 0-255 scale exceeds threshold."""
    diffs = np.linalg.norm((reference - current) * 255.0, axis=-1)
    return diffs > threshold


@effect.run
def run(job: Job, report: Report, args) -> None:
    ref_path = getattr(args, 'ref', None)
    if not ref_path:
        report.add('compare', {'error': '--ref reference image required'})
        return

    h, w = job.image.shape[:2]
    with Image.open(ref_path) as ref_img:
        ref_img = ref_img.convert('RGBA')
        if ref_img.size != (w, h):
            ref_img = ref_img.resize((w, h), Image.Resampling.LANCZOS)
        reference = from_image(ref_img)

    mismatches = mismatch_mask(reference, job.image)
    mismatch_count = int(np.sum(mismatches))
    mismatch_pct = round(mismatch_count / max(h * w, 1) * 100, 1)

    diff_img = np.zeros((h, w, 3), dtype=np.uint8)
    diff_img[~mismatches] = [0, 200, 0]  # green = match
    diff_img[mismatches] = [200, 0, 0]  # red = mismatch

    os.makedirs(job.out_dir, exist_ok=True)
    diff_path = os.path.join(job.out_dir, f'{job.stem}_diff.png')
    Image.fromarray(diff_img).save(diff_path)

    data = {
        'reference': ref_path,
        'mismatch_pct': mismatch_pct,
        'mismatch_pixels': mismatch_count,
        'diff_image': diff_path,
    }

    threshold = getattr(args, 'fail_on_mismatch', None)
    if threshold is not None:
        passed = mismatch_pct <= threshold
        data['pass'] = passed
        if passed:
            report.record_pass()
        else:
            report.record_fail()

    report.add('compare', data)
