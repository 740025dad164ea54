"""
tgo - transparent, mirrored Go build cache

Gives the go toolchain an isolated, permission-normalized copy of a
workspace's dependency source trees under ``<workspace>/.tgo/root`` and runs
commands with an environment that points into it, so builds behave the same
regardless of host paths, mount restrictions or ownership.

Main modules:
- config: Cache record model and its YAML store
- layout: Cache directory skeleton and workspace link
- mirror: Mirror set planning and the mirror engine
- env: Environment virtualization
- runner: Child process launching
- lifecycle: Exactly-once initialization guard
- cache: MirrorCache, the per-workspace entry point
- toolchain: Boundary to the `go` command

Quick start example:
```python
from tgo import MirrorCache

cache = MirrorCache("/path/to/workspace")
cache.run("go build ./...")
cache.clean()
```
"""

from .cache import MirrorCache
from .config import CacheRecord, ConfigStore
from .env import virtualize
from .layout import CacheLayout
from .lifecycle import InitGuard, State
from .mirror import MirrorEngine, plan_mirror_set
from .runner import ProcessRunner
from .toolchain import Toolchain, GoToolchain
from .exceptions import (
    TgoError,
    ConfigError,
    TgoIOError,
    EnumerationError,
    ExternalProcessError,
    ScopeViolationError,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    '__version__',
    # Cache
    'MirrorCache',
    'CacheRecord',
    'ConfigStore',
    'CacheLayout',
    'MirrorEngine',
    'plan_mirror_set',
    'virtualize',
    'ProcessRunner',
    'InitGuard',
    'State',
    # Toolchain
    'Toolchain',
    'GoToolchain',
    # Exceptions
    'TgoError',
    'ConfigError',
    'TgoIOError',
    'EnumerationError',
    'ExternalProcessError',
    'ScopeViolationError',
]
