"""
Mirror engine.

Replicates dependency source trees into the cache root, keeping structure,
symlinks and permission bits (run through a mode transform that by default
forces owner-write so the mirror can always be cleaned).
"""

import logging
import os
from typing import Iterable, List, Optional, Sequence

from . import constants
from .io import (
    ModeTransform,
    copy_entry,
    ensure_owner_write,
    has_excluded_part,
    is_strict_descendant,
    is_under,
    normalize,
    remove_tree,
    rooted,
    walk,
    wrap_io_error,
)

logger = logging.getLogger(__name__)


def plan_mirror_set(dirs: Iterable[str], excluded_roots: Iterable[str] = ()) -> List[str]:
    """
    Build the ordered mirror set.

    Drops directories under any of ``excluded_roots`` (empty roots are
    ignored), removes duplicates and sorts, so an ancestor always precedes
    its descendants.
    """
    roots = [r for r in excluded_roots if r]
    planned = set()
    for d in dirs:
        d = normalize(d)
        if any(is_under(d, root) for root in roots):
            logger.debug(f"Leaving '{d}' out of the mirror set")
            continue
        planned.add(d)
    return sorted(planned)


class MirrorEngine:

    def __init__(
        self,
        cache_root: str,
        mode_transform: ModeTransform = ensure_owner_write,
        excluded_names: Sequence[str] = (constants.CACHE_MARKER, constants.VCS_DIRNAME),
    ):
        self.cache_root = cache_root
        self.mode_transform = mode_transform
        self.excluded_names = tuple(excluded_names)

    def cache_path(self, path: str) -> str:
        return rooted(self.cache_root, path)

    def _excluded(self, path: str) -> bool:
        return has_excluded_part(path, self.excluded_names)

    def mirror(self, mirror_set: Sequence[str], pruned_roots: Sequence[str] = ()) -> int:
        """
        Mirror every tree in ``mirror_set`` (already sorted).

        Nothing under ``pruned_roots`` is copied, even when a tree in the set
        encloses one of them (a parent module replaced with ``..``).

        A directory inside the previously mirrored one is skipped, its contents
        having been copied by that walk. Any error aborts the whole operation;
        the cache is then in an unknown state until the next successful run.
        Returns the number of trees walked.
        """
        previous: Optional[str] = None
        walked = 0
        logger.info(f"Mirroring {len(mirror_set)} directories into '{self.cache_root}'")
        for d in mirror_set:
            if previous is not None and is_strict_descendant(d, previous):
                logger.debug(f"Skipping '{d}', already mirrored with '{previous}'")
                continue
            self.mirror_tree(d, pruned_roots)
            previous = d
            walked += 1
        logger.info(f"Mirrored {walked} trees")
        return walked

    @wrap_io_error
    def mirror_tree(self, src_root: str, pruned_roots: Sequence[str] = ()):
        """Replace the cache-side image of ``src_root`` with a fresh copy."""
        roots = [r for r in pruned_roots if r]

        def prune(path: str) -> bool:
            return self._excluded(path) or any(is_under(path, r) for r in roots)

        dst_root = self.cache_path(src_root)
        if os.path.lexists(dst_root):
            logger.debug(f"Clearing stale mirror '{dst_root}'")
            remove_tree(dst_root)
        os.makedirs(os.path.dirname(dst_root), exist_ok=True)

        count = 0
        for path, st in walk(src_root, prune=prune):
            if copy_entry(path, self.cache_path(path), st, self.mode_transform):
                count += 1
        logger.debug(f"Mirrored '{src_root}' ({count} entries)")
