"""Auto-discovery of effect modules.

Every .py file in this package that defines an `effect` object is
auto-registered by palette_remap.registry.discover().

The explicit imports below ensure PyInstaller includes these modules
in the frozen binary. Without them, pkgutil.iter_modules cannot find
the effect files at runtime.
"""

# PyInstaller hidden imports: keep this list in sync with effect modules
import palette_remap.effects.compare as _compare  # noqa: F401
import palette_remap.effects.encode as _encode  # noqa: F401
import palette_remap.effects.remap as _remap  # noqa: F401
import palette_remap.effects.swatch as _swatch  # noqa: F401
