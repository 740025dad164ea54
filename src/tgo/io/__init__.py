"""
tgo IO Module

- path: segment-aware path helpers and cache-rooted path mapping
- fs: mode-preserving copy primitive, forced-writable walk and tree removal

Usage:
    from tgo.io import rooted, copy_entry, remove_tree
"""

from .path import normalize, rooted, is_under, is_strict_descendant, has_excluded_part, resolve_parent
from .fs import (
    ModeTransform,
    wrap_io_error,
    ensure_owner_write,
    walk,
    copy_entry,
    make_writable,
    remove_tree,
)

__all__ = [
    # Path
    'normalize',
    'rooted',
    'is_under',
    'is_strict_descendant',
    'has_excluded_part',
    'resolve_parent',
    # FileSystem
    'ModeTransform',
    'wrap_io_error',
    'ensure_owner_write',
    'walk',
    'copy_entry',
    'make_writable',
    'remove_tree',
]
