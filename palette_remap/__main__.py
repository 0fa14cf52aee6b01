"""palette-remap — Recolour palette-swap sprites with a palette lookup texture.

Usage: uv run palette-remap <effect> <out_dir> <image> [options]

Effects are auto-discovered from palette_remap/effects/.
Each effect module's docstring is its documentation.
Run `palette-remap help <effect>` for full module docs.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, palette-remap looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import importlib
import os
import sys
from typing import NoReturn

from palette_remap import registry
from palette_remap.core.env import default_filter, default_wrap, load_env
from palette_remap.core.palette import PaletteError, hex_to_rgba, load_image
from palette_remap.core.report import format_json, format_text
from palette_remap.core.sampler import FILTERS, WRAPS, Sampler
from palette_remap.core.types import Job, Report


def _load_effect_module(name: str) -> object:
    """Load the raw module for an effect (for docstring access)."""
    return importlib.import_module(f'palette_remap.effects.{name}')


def _short_doc(name: str, fallback: str) -> str:
    doc = (_load_effect_module(name).__doc__ or '').strip()
    return doc.splitlines()[0] if doc else fallback


def _build_parser() -> argparse.ArgumentParser:
    effects = registry.all_effects()

    epilog = (
        'Examples:\n'
        '  palette-remap remap ./out sprite.png --palette palette.png\n'
        '  palette-remap remap ./out sprite.png -P palette.png --filter linear --json\n'
        '  palette-remap encode ./out sprite.png --index 3 --max-index 7\n'
        '  palette-remap swatch ./out sprite.png --palette palette.png\n'
        '  palette-remap compare ./out current.png --ref reference.png --fail-on-mismatch 0.5\n'
        '  palette-remap help remap\n'
        '\n'
        'Settings (set in .env or environment, flags win):\n'
        '  PALETTE_REMAP_FILTER=nearest|linear\n'
        '  PALETTE_REMAP_WRAP=clamp|repeat\n'
        '  PALETTE_REMAP_MAX_INDEX=32\n'
    )
    parser = argparse.ArgumentParser(
        prog='palette-remap',
        description='Recolour palette-swap sprites with a palette lookup texture.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    sub = parser.add_subparsers(dest='effect', help='Effect to run')

    for name, eff in sorted(effects.items()):
        p = sub.add_parser(name, help=_short_doc(name, eff.help))
        p.add_argument('out_dir', help='Directory for output images')
        p.add_argument('image', help='Path to source image (PNG or any PIL-readable format)')
        p.add_argument('-P', '--palette', help='Palette lookup image')
        p.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
        p.add_argument('-r', '--ref', help='Reference image for compare')
        p.add_argument('-f', '--filter', choices=FILTERS, default=None, help='Sampling filter (default: nearest)')
        p.add_argument('-w', '--wrap', choices=WRAPS, default=None, help='Sampling wrap mode (default: clamp)')
        p.add_argument('-t', '--tint', metavar='HEX', help='Diffuse tint (accepted, not applied)')
        p.add_argument('-i', '--index', type=int, default=None, help='Palette index for encode')
        p.add_argument(
            '-m',
            '--max-index',
            type=int,
            default=None,
            help='Largest palette index for encode (default: PALETTE_REMAP_MAX_INDEX or 32)',
        )
        p.add_argument(
            '-d',
            '--fail-on-mismatch',
            type=float,
            default=None,
            metavar='N',
            help='Exit 1 if compare mismatch exceeds N percent (CI gating)',
        )

    help_parser = sub.add_parser('help', help='Print full docs for an effect')
    help_parser.add_argument('command', nargs='?', help='Effect name')

    return parser


def _print_help(command: str | None) -> None:
    """Print full module docstring for an effect."""
    effects = registry.all_effects()

    if command is None:
        print('Available effects:\n')
        for name, eff in sorted(effects.items()):
            print(f'  {name:<10} {_short_doc(name, eff.help)}')
        print('\nRun: palette-remap help <effect> for full docs.')
        return

    if command not in effects:
        print(f'Unknown effect: {command}', file=sys.stderr)
        print(f'Available: {", ".join(sorted(effects))}', file=sys.stderr)
        sys.exit(1)

    doc = (_load_effect_module(command).__doc__ or '').strip()
    if not doc:
        print(f'(No module docs for {command!r})')
        return
    print(doc)


def _fail(message: str) -> NoReturn:
    print(f'Error: {message}', file=sys.stderr)
    sys.exit(1)


def _build_job(args: argparse.Namespace) -> Job:
    """Load images and resolve sampler settings for the run."""
    if not os.path.isfile(args.image):
        _fail(f'image not found: {args.image}')

    palette = None
    if args.palette:
        if not os.path.isfile(args.palette):
            _fail(f'palette not found: {args.palette}')
        palette = load_image(args.palette)

    if args.ref and not os.path.isfile(args.ref):
        _fail(f'reference not found: {args.ref}')

    tint = None
    if args.tint:
        try:
            tint = hex_to_rgba(args.tint)
        except PaletteError as e:
            _fail(str(e))
        print('palette-remap: --tint is accepted but not applied to the output', file=sys.stderr)

    try:
        sampler = Sampler(filter=args.filter or default_filter(), wrap=args.wrap or default_wrap())
    except ValueError as e:
        _fail(str(e))

    return Job(
        image_path=args.image,
        image=load_image(args.image),
        out_dir=args.out_dir,
        palette_path=args.palette,
        palette=palette,
        source_sampler=sampler,
        palette_sampler=sampler,
        tint=tint,
    )


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Load .env before anything else; OS env vars always win
    env_path = load_env(env_file=getattr(args, 'env_file', None))
    if env_path:
        print(f'palette-remap: loaded {env_path}', file=sys.stderr)

    if not args.effect:
        parser.print_help()
        sys.exit(1)

    if args.effect == 'help':
        _print_help(getattr(args, 'command', None))
        return

    job = _build_job(args)

    h, w = job.image.shape[:2]
    report = Report(image_path=args.image, image_width=w, image_height=h, palette_path=args.palette)

    try:
        registry.get(args.effect).execute(job, report, args)
    except ValueError as e:
        _fail(str(e))

    if args.json:
        print(format_json(report))
    else:
        print(format_text(report))

    # CI gate after output so the report is visible even on failure
    if report.fail_count > 0:
        sys.exit(1)


if __name__ == '__main__':
    main()
