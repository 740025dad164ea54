"""
Boundary to the build toolchain.

The cache only needs two things from the toolchain: its environment (where
the system install, the dependency root and the build cache live) and the
list of directories that contribute source to the workspace.
"""

import json
import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from . import constants
from .exceptions import EnumerationError

logger = logging.getLogger(__name__)


class Toolchain(ABC):
    """Abstract build toolchain as seen by the mirrored cache"""

    @abstractmethod
    def env(self) -> Dict[str, str]:
        """Toolchain environment, e.g. the output of ``go env``"""
        pass

    @abstractmethod
    def list_dirs(self, workspace: str) -> List[str]:
        """Absolute directories contributing source to ``workspace``"""
        pass

    @property
    def system_root(self) -> str:
        return self.env().get(constants.GOROOT, "")

    @property
    def dependency_root(self) -> str:
        # GOPATH may list several roots; modules are downloaded into the first
        return self.env().get(constants.GOPATH, "").split(os.pathsep)[0]

    @property
    def build_cache(self) -> str:
        return self.env().get(constants.GOCACHE, "")


class GoToolchain(Toolchain):
    """The ``go`` command"""

    def __init__(self, go: Optional[str] = None):
        self.go = go or os.environ.get(constants.GO_BINARY_ENV) or constants.GO_BINARY
        self._env: Optional[Dict[str, str]] = None

    def _output(self, args: List[str], cwd: Optional[str] = None) -> str:
        command = [self.go, *args]
        logger.debug(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                env=dict(os.environ),
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise EnumerationError(f"Toolchain executable '{self.go}' not found: {e}") from e
        except subprocess.CalledProcessError as e:
            raise EnumerationError(
                f"'{' '.join(command)}' failed with exit status {e.returncode}: {e.stderr.strip()}"
            ) from e
        return result.stdout

    def env(self) -> Dict[str, str]:
        if self._env is None:
            output = self._output(["env", "-json"])
            try:
                data = json.loads(output)
            except json.JSONDecodeError as e:
                raise EnumerationError(f"Unparseable '{self.go} env -json' output: {e}") from e
            if not isinstance(data, dict):
                raise EnumerationError(f"'{self.go} env -json' did not produce an object")
            self._env = {str(k): str(v) for k, v in data.items()}
        return self._env

    def list_dirs(self, workspace: str) -> List[str]:
        output = self._output(constants.LIST_DIRS_ARGS, cwd=workspace)
        return parse_dir_list(output)


def parse_dir_list(output: str) -> List[str]:
    """One absolute directory per non-empty line"""
    dirs = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        if not os.path.isabs(line):
            raise EnumerationError(f"Expected an absolute directory, got '{line}'")
        dirs.append(line)
    return dirs
