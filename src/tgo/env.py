"""
Environment virtualization.

A process launched against the mirror sees the dependency root, the build
cache and its working directory at their cache-rooted locations, while every
other variable is inherited unchanged.
"""

from typing import Dict, Mapping, Optional

from . import constants
from .config import CacheRecord
from .io import rooted


def replacements(record: CacheRecord, cache_root: str) -> Dict[str, str]:
    """Cache-rooted values for the path-valued variables"""
    return {
        constants.GOPATH: rooted(cache_root, record.gopath),
        constants.GOCACHE: rooted(cache_root, record.gocache),
        constants.PWD: rooted(cache_root, record.pkgdir),
    }


def virtualize(
    base_env: Mapping[str, str],
    record: CacheRecord,
    cache_root: str,
    overrides: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Return a new environment derived from ``base_env``.

    Entries named by ``replacements`` are dropped and their cache-rooted
    values appended; ``overrides`` are applied last and win on duplicate
    keys. ``base_env`` is not modified.
    """
    replaced = replacements(record, cache_root)
    env = {key: value for key, value in base_env.items() if key not in replaced}
    env.update(replaced)
    if overrides:
        env.update(overrides)
    return env
