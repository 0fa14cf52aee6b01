"""palette_remap.core: foundation layer.

Contains the sampler, palette helpers, the remap filter, the post-process
chain, shared types, configuration, and report builder.
This module has NO dependencies on palette_remap.effects or palette_remap.registry.
Only stdlib, numpy, and PIL are allowed here.
"""
