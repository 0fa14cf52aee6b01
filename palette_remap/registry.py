"""Effect auto-discovery and registration.

Scans palette_remap/effects/ for modules that define an `effect` object
of type Effect. Collects them into a dict keyed by name.

Handles both normal Python (pkgutil.iter_modules) and frozen PyInstaller
binaries (where iter_modules returns nothing, so it falls back to the known
module list below).
"""

import importlib
import pkgutil

from palette_remap.core.types import Effect

_registry: dict[str, Effect] = {}

# Known effect module names, fallback for frozen binaries
_EFFECT_MODULES = [
    'compare',
    'encode',
    'remap',
    'swatch',
]


def discover() -> dict[str, Effect]:
    """Import all effect modules and return the registry."""
    if _registry:
        return _registry

    import palette_remap.effects as pkg

    found_modules = [
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    ]

    if not found_modules:
        found_modules = _EFFECT_MODULES

    for modname in found_modules:
        module = importlib.import_module(f'palette_remap.effects.{modname}')
        eff = getattr(module, 'effect', None)
        if isinstance(eff, Effect):
            _registry[eff.name] = eff

    return _registry


def get(name: str) -> Effect:
    """Get an effect by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown effect: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def all_effects() -> dict[str, Effect]:
    """Return all registered effects."""
    return discover()
