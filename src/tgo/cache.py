import logging
import os
from typing import IO, Dict, Mapping, Optional
from pydantic import ValidationError

from . import constants
from .config import CacheRecord, ConfigStore
from .env import virtualize
from .exceptions import EnumerationError, ScopeViolationError
from .io import ModeTransform, ensure_owner_write, is_under, normalize, remove_tree, resolve_parent
from .layout import CacheLayout
from .lifecycle import InitGuard
from .mirror import MirrorEngine, plan_mirror_set
from .runner import Command, ProcessRunner
from .toolchain import GoToolchain, Toolchain

logger = logging.getLogger(__name__)


class MirrorCache:
    """
    The mirrored build cache of one workspace.

    Holds ``<workspace>/.tgo/root``, a tree that mirrors the workspace's
    dependency sources at their absolute host paths, plus the record that
    describes it. Commands run through this object see a virtualized
    environment pointing into that tree.
    """

    def __init__(
        self,
        workspace: str,
        toolchain: Optional[Toolchain] = None,
        cache_marker: str = constants.CACHE_MARKER,
        runner: Optional[ProcessRunner] = None,
        mode_transform: ModeTransform = ensure_owner_write,
    ):
        self.workspace = normalize(workspace)
        self.cache_dir = os.path.join(self.workspace, cache_marker)
        self.cache_root = os.path.join(self.cache_dir, constants.CACHE_ROOT_DIRNAME)
        self.toolchain = toolchain or GoToolchain()
        self.runner = runner or ProcessRunner()
        self.store = ConfigStore(os.path.join(self.cache_dir, constants.CONFIG_FILENAME))
        self.layout = CacheLayout(self.cache_root)
        self.engine = MirrorEngine(
            self.cache_root,
            mode_transform=mode_transform,
            excluded_names=(cache_marker, constants.VCS_DIRNAME),
        )
        self.record: Optional[CacheRecord] = None
        self._guard = InitGuard()

    @property
    def state(self):
        return self._guard.state

    def initialize(self):
        """Run the initialization sequence, once per instance."""
        self._guard.run(self._initialize)

    def _initialize(self):
        logger.info(f"Initializing cache for '{self.workspace}'")
        record = self.store.load()
        is_new = record is None
        if is_new:
            record = self._new_record()
            self.layout.ensure_skeleton(record)
            self.layout.ensure_root_link(record)

        if record.pkgdir == self.workspace:
            self._mirror_dependencies(record)
        else:
            logger.warning(
                f"Cache record belongs to '{record.pkgdir}', not '{self.workspace}'; "
                "leaving dependency mirror untouched"
            )

        if is_new:
            self.store.persist(record)
        self.record = record
        logger.info("Cache ready")

    def _new_record(self) -> CacheRecord:
        try:
            return CacheRecord(
                pkgdir=self.workspace,
                gopath=self.toolchain.dependency_root,
                gocache=self.toolchain.build_cache,
            )
        except ValidationError as e:
            raise EnumerationError(f"Toolchain environment lacks usable {constants.GOPATH}/{constants.GOCACHE}:\n{e}")

    def _mirror_dependencies(self, record: CacheRecord):
        dirs = self.toolchain.list_dirs(self.workspace)
        excluded = (self.toolchain.system_root, self.toolchain.dependency_root, self.workspace)
        mirror_set = plan_mirror_set(dirs, excluded_roots=excluded)
        self.engine.mirror(mirror_set, pruned_roots=(*excluded, record.gocache))

        # a tree enclosing the workspace or the go roots replaced their images
        skeleton = (record.pkgdir, record.gopath, record.gocache)
        if any(is_under(path, d) for d in mirror_set for path in skeleton):
            logger.debug("Restoring cache skeleton after mirroring an enclosing tree")
            self.layout.ensure_skeleton(record)
            self.layout.ensure_root_link(record)

    def environ(self, overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Virtualized copy of the current process environment"""
        self.initialize()
        return virtualize(os.environ, self.record, self.cache_root, overrides)

    def run(
        self,
        command: Command,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
        stdin: Optional[IO] = None,
        stdout: Optional[IO] = None,
        stderr: Optional[IO] = None,
    ) -> int:
        """Run ``command`` (string or argv) in the cache"""
        environ = self.environ(env)
        return self.runner.run(command, env=environ, cwd=cwd, stdin=stdin, stdout=stdout, stderr=stderr)

    def run_args(self, program: str, *args: str, **kwargs) -> int:
        return self.run([program, *args], **kwargs)

    def clean(self, target: Optional[str] = None):
        """
        Remove the cache directory (or ``target`` inside it), forcing
        owner-write on every entry first.
        """
        target = normalize(target) if target is not None else self.cache_dir
        self._check_scope(target)
        self.initialize()
        # initialization may have created the links the target passes through
        self._check_scope(target)
        logger.info(f"Cleaning '{target}'")
        remove_tree(target)

    def _check_scope(self, target: str):
        if not is_under(target, self.cache_dir):
            raise ScopeViolationError(f"Refusing to clean '{target}': not inside '{self.cache_dir}'")
        # the workspace link and mirrored symlinks lead back out of the cache
        resolved = resolve_parent(target)
        if not is_under(resolved, os.path.realpath(self.cache_dir)):
            raise ScopeViolationError(f"Refusing to clean '{target}': resolves to '{resolved}' outside the cache")
