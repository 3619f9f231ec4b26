# msicomb/storage/__init__.py

"""
Storage utilities for reconstructed image cubes.
"""

from .cube_store import CubeStore, compute_cache_key

__all__ = ["CubeStore", "compute_cache_key"]
