import logging
import os
import stat

from .config import CacheRecord
from .io import rooted, wrap_io_error

logger = logging.getLogger(__name__)


class CacheLayout:
    """
    Directory skeleton of a cache root.

    Maps host paths into the cache root and creates the directories and the
    workspace link that the mirrored environment relies on.
    """

    def __init__(self, cache_root: str):
        self.cache_root = cache_root

    def path(self, host_path: str) -> str:
        """Cache-side image of ``host_path``"""
        return rooted(self.cache_root, host_path)

    @wrap_io_error
    def ensure_skeleton(self, record: CacheRecord):
        """
        Create the cache-side directories for the workspace parent, the
        dependency root and the build cache, each carrying the permission
        bits of its real counterpart.
        """
        for host_dir in (os.path.dirname(record.pkgdir), record.gocache, record.gopath):
            cache_dir = self.path(host_dir)
            os.makedirs(cache_dir, mode=0o750, exist_ok=True)
            mode = stat.S_IMODE(os.stat(host_dir).st_mode)
            os.chmod(cache_dir, mode)
            logger.debug(f"Created '{cache_dir}' with mode {oct(mode)}")

    @wrap_io_error
    def ensure_root_link(self, record: CacheRecord):
        """
        Link the workspace's cache-side image back to the real workspace.

        The target is relative to the link's own directory, so the link stays
        valid if the cache is moved as a whole. An existing link with the same
        target is kept; anything else at that path is replaced.
        """
        link_path = self.path(record.pkgdir)
        target = os.path.relpath(record.pkgdir, os.path.dirname(link_path))
        if os.path.islink(link_path):
            if os.readlink(link_path) == target:
                logger.debug(f"Workspace link '{link_path}' already in place")
                return
            os.unlink(link_path)
        elif os.path.lexists(link_path):
            raise FileExistsError(17, "Workspace link path is occupied", link_path)
        os.makedirs(os.path.dirname(link_path), exist_ok=True)
        os.symlink(target, link_path)
        logger.debug(f"Linked '{link_path}' -> '{target}'")
