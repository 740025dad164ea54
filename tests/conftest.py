import os
from typing import Dict, List

import pytest

from tgo.toolchain import Toolchain


class FakeToolchain(Toolchain):
    """Stands in for `go`: fixed environment, fixed dependency list."""

    def __init__(self, env: Dict[str, str], dirs: List[str]):
        self._env = env
        self.dirs = dirs
        self.list_calls = 0

    def env(self) -> Dict[str, str]:
        return self._env

    def list_dirs(self, workspace: str) -> List[str]:
        self.list_calls += 1
        return list(self.dirs)


@pytest.fixture
def host(tmp_path):
    """A host filesystem with a workspace, a GOPATH, a GOCACHE, a GOROOT and one dependency."""
    workspace = tmp_path / "w"
    gopath = tmp_path / "gopath"
    gocache = tmp_path / "gocache"
    goroot = tmp_path / "goroot"
    dep = tmp_path / "dep" / "libfoo"
    for d in (workspace, gopath, gocache, goroot, dep):
        d.mkdir(parents=True)
    (workspace / "main.go").write_text("package main\n")
    (dep / "a.go").write_text("package libfoo\n")
    os.chmod(dep / "a.go", 0o644)
    os.symlink("a.go", dep / "link")
    return {
        "root": tmp_path,
        "workspace": workspace,
        "gopath": gopath,
        "gocache": gocache,
        "goroot": goroot,
        "dep": dep,
    }


@pytest.fixture
def toolchain(host):
    env = {
        "GOROOT": str(host["goroot"]),
        "GOPATH": str(host["gopath"]),
        "GOCACHE": str(host["gocache"]),
    }
    dirs = [
        str(host["dep"]),
        str(host["workspace"]),
        str(host["goroot"] / "src" / "fmt"),
        str(host["gopath"] / "pkg" / "mod" / "example.com" / "x@v1.0.0"),
    ]
    return FakeToolchain(env, dirs)
