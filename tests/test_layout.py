import os
import stat

import pytest

from tgo.config import CacheRecord
from tgo.exceptions import TgoIOError, TgoPathExistsError
from tgo.layout import CacheLayout


@pytest.fixture
def record(host):
    return CacheRecord(
        pkgdir=str(host["workspace"]),
        gopath=str(host["gopath"]),
        gocache=str(host["gocache"]),
    )


@pytest.fixture
def layout(host):
    return CacheLayout(str(host["workspace"] / ".tgo" / "root"))


class TestSkeleton:

    def test_directories_copy_host_modes(self, host, record, layout):
        os.chmod(host["gocache"], 0o700)
        os.chmod(host["gopath"], 0o751)

        layout.ensure_skeleton(record)

        for host_dir in (host["gocache"], host["gopath"], host["root"]):
            cache_dir = layout.path(str(host_dir))
            assert os.path.isdir(cache_dir)
            assert stat.S_IMODE(os.stat(cache_dir).st_mode) == stat.S_IMODE(os.stat(host_dir).st_mode)

    def test_skeleton_is_idempotent(self, record, layout):
        layout.ensure_skeleton(record)
        layout.ensure_skeleton(record)

    def test_missing_host_directory_raises(self, host, record, layout):
        os.rmdir(host["gocache"])

        with pytest.raises(TgoIOError):
            layout.ensure_skeleton(record)


class TestRootLink:

    def test_link_is_relative_and_resolves_to_workspace(self, host, record, layout):
        layout.ensure_skeleton(record)
        layout.ensure_root_link(record)

        link = layout.path(record.pkgdir)
        assert os.path.islink(link)
        assert not os.path.isabs(os.readlink(link))
        assert os.path.samefile(link, host["workspace"])

    def test_existing_link_is_kept(self, record, layout):
        layout.ensure_skeleton(record)
        layout.ensure_root_link(record)
        before = os.lstat(layout.path(record.pkgdir))

        layout.ensure_root_link(record)

        assert os.lstat(layout.path(record.pkgdir)).st_ino == before.st_ino

    def test_wrong_link_is_replaced(self, host, record, layout):
        layout.ensure_skeleton(record)
        os.symlink("elsewhere", layout.path(record.pkgdir))

        layout.ensure_root_link(record)

        assert os.path.samefile(layout.path(record.pkgdir), host["workspace"])

    def test_occupied_link_path_raises(self, record, layout):
        layout.ensure_skeleton(record)
        os.mkdir(layout.path(record.pkgdir))

        with pytest.raises(TgoPathExistsError):
            layout.ensure_root_link(record)
