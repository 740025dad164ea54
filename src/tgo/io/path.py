"""
Path helpers for the mirrored cache.

Every check here is path-segment aware: ``/a/b`` is under ``/a`` but not
under ``/a/bc``, which a plain string prefix test would get wrong.
"""

import os
from typing import Iterable


def normalize(path: str) -> str:
    """Absolute, normalized form of ``path`` without resolving symlinks."""
    return os.path.normpath(os.path.abspath(path))


def rooted(root: str, path: str) -> str:
    """
    Map an absolute host path to its image under ``root``.

    ``rooted("/w/.tgo/root", "/dep/libfoo")`` is ``/w/.tgo/root/dep/libfoo``.
    An empty ``path`` maps to ``root`` itself.
    """
    if not path:
        return root
    return os.path.normpath(os.path.join(root, path.lstrip(os.sep)))


def is_under(path: str, root: str) -> bool:
    """True if ``path`` equals ``root`` or lies inside it."""
    if not root:
        return False
    path, root = normalize(path), normalize(root)
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


def resolve_parent(path: str) -> str:
    """
    Resolve symlinks in every segment of ``path`` except the last.

    The result names the entry an unlink or rmtree of ``path`` would
    actually remove: a trailing symlink is removed itself, but links in the
    segments leading to it are followed.
    """
    path = normalize(path)
    return os.path.join(os.path.realpath(os.path.dirname(path)), os.path.basename(path))


def is_strict_descendant(path: str, ancestor: str) -> bool:
    return is_under(path, ancestor) and normalize(path) != normalize(ancestor)


def has_excluded_part(path: str, names: Iterable[str]) -> bool:
    """True if any segment of ``path`` is one of ``names``."""
    excluded = set(names)
    return any(part in excluded for part in path.split(os.sep))
