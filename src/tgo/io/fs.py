"""
Filesystem primitives used by the mirror engine, the cache layout and the
teardown path.

All public functions convert ``OSError`` into the ``TgoIOError`` family so
callers see the offending path and the underlying OS error.
"""

import functools
import logging
import os
import shutil
import stat
from typing import Callable, Iterator, Optional, Tuple

from ..exceptions import TgoIOError, TgoPathExistsError, TgoPathNotFoundError

logger = logging.getLogger(__name__)

ModeTransform = Callable[[int], int]


def wrap_io_error(func):
    """Decorator to wrap OS errors into tgo exceptions."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FileNotFoundError as e:
            raise TgoPathNotFoundError(str(e), path=e.filename) from e
        except FileExistsError as e:
            raise TgoPathExistsError(str(e), path=e.filename) from e
        except OSError as e:
            raise TgoIOError(str(e), path=e.filename) from e

    return wrapper


def ensure_owner_write(mode: int) -> int:
    """Default mode transform: keep the source bits and force owner-write."""
    return mode | stat.S_IWUSR


def walk(root: str, prune: Optional[Callable[[str], bool]] = None) -> Iterator[Tuple[str, os.stat_result]]:
    """
    Depth-first, lexically ordered walk that never follows symlinks.

    Yields ``(path, lstat)`` for ``root`` and every entry below it. A directory
    is yielded before it is listed, so the consumer may change its mode first.
    Paths for which ``prune`` returns True are neither yielded nor descended.
    Errors (including a missing ``root``) propagate.
    """
    if prune is not None and prune(root):
        return
    st = os.lstat(root)
    yield root, st
    if not stat.S_ISDIR(st.st_mode):
        return
    for name in sorted(os.listdir(root)):
        yield from walk(os.path.join(root, name), prune)


def _remove_existing(path: str):
    """Remove a file or link at ``path`` if present."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


def copy_entry(src: str, dst: str, st: os.stat_result, mode_transform: ModeTransform = ensure_owner_write) -> bool:
    """
    Replicate a single directory, regular file or symlink at ``dst``.

    The destination mode is ``mode_transform(source mode)`` for every entry
    type. Returns False for entry types that are not replicated.
    """
    mode = mode_transform(stat.S_IMODE(st.st_mode))
    if stat.S_ISDIR(st.st_mode):
        if os.path.islink(dst) or (os.path.lexists(dst) and not os.path.isdir(dst)):
            os.unlink(dst)
        os.makedirs(dst, exist_ok=True)
        os.chmod(dst, mode)
        return True

    if stat.S_ISREG(st.st_mode):
        with open(src, "rb") as fsrc:
            _remove_existing(dst)
            fd = os.open(dst, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
            with os.fdopen(fd, "wb") as fdst:
                shutil.copyfileobj(fsrc, fdst)
        # O_CREAT honours the umask
        os.chmod(dst, mode)
        return True

    if stat.S_ISLNK(st.st_mode):
        target = os.readlink(src)
        _remove_existing(dst)
        os.symlink(target, dst)
        if hasattr(os, "lchmod"):
            os.lchmod(dst, mode)
        return True

    logger.warning(f"Skipping unsupported file type at '{src}'")
    return False


@wrap_io_error
def make_writable(root: str):
    """Force owner-write on ``root`` and everything below it."""
    if not os.path.lexists(root):
        return
    for path, st in walk(root):
        if stat.S_ISLNK(st.st_mode):
            continue
        mode = stat.S_IMODE(st.st_mode) | stat.S_IWUSR
        # a directory must also be listable to be walked and emptied
        if stat.S_ISDIR(st.st_mode):
            mode |= stat.S_IRUSR | stat.S_IXUSR
        if mode != stat.S_IMODE(st.st_mode):
            os.chmod(path, mode)


@wrap_io_error
def remove_tree(root: str):
    """Remove ``root`` even if parts of it were left read-only."""
    if not os.path.lexists(root):
        return
    if os.path.islink(root) or not os.path.isdir(root):
        os.unlink(root)
        return
    make_writable(root)
    shutil.rmtree(root)
