"""RTIN and grid terrain meshes from 16-bit heightmaps, with an orbit camera."""

__version__ = "0.2.0"
__all__ = ["camera", "common", "mesh", "rtin", "terrain", "terrain_rtin"]