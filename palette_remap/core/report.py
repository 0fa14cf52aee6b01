"""Report builder: text and JSON output for palette-remap results."""

import json
import os
from typing import Any

from palette_remap.core.types import Report


def format_text(report: Report) -> str:
    """Format report as human-readable text."""
    lines = []
    dim = f'{report.image_width}×{report.image_height}'
    header = f'palette-remap: {report.image_path} ({dim})'
    if report.palette_path:
        header += f' — palette {os.path.basename(report.palette_path)}'
    lines.append(header)
    lines.append('')

    for effect_name, data in report.effects.items():
        lines.append(f'── {effect_name}')
        if 'error' in data:
            lines.append(f'  error: {data["error"]}')
        elif effect_name == 'remap':
            lines.append(f'  output: {data["output"]} ({data["width"]}×{data["height"]})')
            lines.append(f'  sampler: source={data["source_sampler"]} palette={data["palette_sampler"]}')
            lines.append(f'  palette columns used: {data["columns_used"]}')
        elif effect_name == 'encode':
            lines.append(f'  output: {data["output"]}')
            lines.append(f'  index: {data["index"]}/{data["max_index"]} → blue={data["blue"]:.4f}')
        elif effect_name == 'swatch':
            for entry in data['columns']:
                lines.append(
                    f'  [{entry["column"]:>3}] bg {entry["background"]}  '
                    f'fg {entry["foreground"]}  accent {entry["accent"]}'
                )
        elif effect_name == 'compare':
            line = f'  diff: {data["mismatch_pct"]:.1f}% mismatch'
            if 'pass' in data:
                line += '  ✓' if data['pass'] else '  ✗'
            lines.append(line)
            lines.append(f'  diff image: {data["diff_image"]}')
        else:
            for k, v in data.items():
                lines.append(f'  {effect_name}.{k}: {v}')
        lines.append('')

    total = report.pass_count + report.fail_count
    if total > 0:
        lines.append(f'PASS {report.pass_count}/{total}  FAIL {report.fail_count}/{total}')
    return '\n'.join(lines)


def format_json(report: Report) -> str:
    """Format report as JSON."""
    obj: dict[str, Any] = {
        'image': report.image_path,
        'dimensions': {'width': report.image_width, 'height': report.image_height},
    }
    if report.palette_path:
        obj['palette'] = report.palette_path

    obj['effects'] = [{'name': name, **data} for name, data in report.effects.items()]
    obj['summary'] = {
        'total': report.pass_count + report.fail_count,
        'pass': report.pass_count,
        'fail': report.fail_count,
    }
    return json.dumps(obj, indent=2)
