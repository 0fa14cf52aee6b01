"""Environment and .env configuration for palette-remap.

Load order (first wins):
  1. Existing OS environment variables (never overwritten).
  2. .env file at --env-file path (if explicitly provided).
  3. .env file walking up from cwd, stopping at .git (file or dir).

Settings read after loading:
  PALETTE_REMAP_FILTER     nearest | linear   (default nearest)
  PALETTE_REMAP_WRAP       clamp | repeat     (default clamp)
  PALETTE_REMAP_MAX_INDEX  positive integer   (default 32)

Command-line flags override all of these.
"""

import os
from pathlib import Path

from palette_remap.core.sampler import FILTERS, WRAPS

DEFAULT_MAX_INDEX = 32


def _find_dotenv(start: Path) -> Path | None:
    """Walk up from start, return first .env found, stop at .git boundary."""
    current = start.resolve()
    while True:
        candidate = current / '.env'
        if candidate.is_file():
            return candidate
        # .git can be a dir (normal clone) or file (worktree)
        if (current / '.git').exists():
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_dotenv(path: Path) -> dict[str, str]:
    """Parse a .env file into a dict. Handles KEY=value and KEY="value"."""
    result: dict[str, str] = {}
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        if '=' not in line:
            continue
        key, _, raw_value = line.partition('=')
        key = key.strip()
        if key.startswith('export '):
            key = key[len('export ') :].strip()
        value = raw_value.strip().strip('"').strip("'")
        if key:
            result[key] = value
    return result


def load_env(env_file: str | None = None) -> Path | None:
    """Load .env into os.environ for keys not already set.

    Returns the path that was loaded, or None if no .env was found/used.
    """
    if env_file:
        path = Path(env_file)
        if not path.is_file():
            return None
    else:
        path = _find_dotenv(Path.cwd())
        if path is None:
            return None

    parsed = _parse_dotenv(path)
    for key, value in parsed.items():
        if key not in os.environ:
            os.environ[key] = value

    return path


def _choice(name: str, choices: tuple[str, ...], default: str) -> str:
    value = os.environ.get(name, '').strip().lower()
    if not value:
        return default
    if value not in choices:
        raise ValueError(f'{name}={value!r} is not one of: {", ".join(choices)}')
    return value


def default_filter() -> str:
    return _choice('PALETTE_REMAP_FILTER', FILTERS, 'nearest')


def default_wrap() -> str:
    return _choice('PALETTE_REMAP_WRAP', WRAPS, 'clamp')


def default_max_index() -> int:
    raw = os.environ.get('PALETTE_REMAP_MAX_INDEX', '').strip()
    if not raw:
        return DEFAULT_MAX_INDEX
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f'PALETTE_REMAP_MAX_INDEX={raw!r} is not an integer') from e
    if value <= 0:
        raise ValueError(f'PALETTE_REMAP_MAX_INDEX must be positive, got {value}')
    return value
