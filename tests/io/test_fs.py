import os
import stat

import pytest

from tgo.exceptions import TgoIOError, TgoPathNotFoundError
from tgo.io.fs import copy_entry, ensure_owner_write, make_writable, remove_tree, walk, wrap_io_error


def mode_of(path) -> int:
    return stat.S_IMODE(os.lstat(path).st_mode)


class TestWalk:

    def test_depth_first_lexical_order(self, tmp_path):
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "z.txt").write_text("z")
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "c").mkdir()

        names = [os.path.relpath(p, tmp_path) for p, _ in walk(str(tmp_path))]

        assert names == [".", "a.txt", "b", os.path.join("b", "z.txt"), "c"]

    def test_does_not_follow_symlinked_directories(self, tmp_path):
        (tmp_path / "real").mkdir()
        (tmp_path / "real" / "f").write_text("x")
        os.symlink("real", tmp_path / "alias")

        paths = [p for p, _ in walk(str(tmp_path))]

        assert str(tmp_path / "alias") in paths
        assert str(tmp_path / "alias" / "f") not in paths

    def test_prune_skips_subtree(self, tmp_path):
        (tmp_path / ".git").mkdir()
        (tmp_path / ".git" / "HEAD").write_text("ref")

        paths = [p for p, _ in walk(str(tmp_path), prune=lambda p: os.path.basename(p) == ".git")]

        assert paths == [str(tmp_path)]

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(walk(str(tmp_path / "gone")))


class TestCopyEntry:

    def test_regular_file_keeps_content_and_mode(self, tmp_path):
        src = tmp_path / "src.sh"
        src.write_text("#!/bin/sh\n")
        os.chmod(src, 0o555)
        dst = tmp_path / "dst.sh"

        assert copy_entry(str(src), str(dst), os.lstat(src))

        assert dst.read_text() == "#!/bin/sh\n"
        assert mode_of(dst) == 0o755

    def test_regular_file_replaces_read_only_copy(self, tmp_path):
        src = tmp_path / "src"
        src.write_text("fresh")
        dst = tmp_path / "dst"
        dst.write_text("stale content that is longer")
        os.chmod(dst, 0o444)

        copy_entry(str(src), str(dst), os.lstat(src))

        assert dst.read_text() == "fresh"

    def test_symlink_is_recreated(self, tmp_path):
        os.symlink("target/file", tmp_path / "link")

        copy_entry(str(tmp_path / "link"), str(tmp_path / "copy"), os.lstat(tmp_path / "link"))

        assert os.readlink(tmp_path / "copy") == "target/file"

    def test_directory_uses_mode_transform(self, tmp_path):
        src = tmp_path / "d"
        src.mkdir()
        os.chmod(src, 0o750)

        copy_entry(str(src), str(tmp_path / "e"), os.lstat(src), mode_transform=lambda m: m & 0o700)

        assert mode_of(tmp_path / "e") == 0o700

    def test_fifo_is_skipped(self, tmp_path):
        if not hasattr(os, "mkfifo"):
            pytest.skip("no fifos on this platform")
        os.mkfifo(tmp_path / "pipe")

        assert not copy_entry(str(tmp_path / "pipe"), str(tmp_path / "copy"), os.lstat(tmp_path / "pipe"))
        assert not os.path.lexists(tmp_path / "copy")

    def test_ensure_owner_write(self):
        assert ensure_owner_write(0o444) == 0o644
        assert ensure_owner_write(0o755) == 0o755


class TestRemoval:

    def _read_only_tree(self, root):
        (root / "sub").mkdir(parents=True)
        (root / "sub" / "f").write_text("x")
        os.chmod(root / "sub" / "f", 0o444)
        os.chmod(root / "sub", 0o555)
        os.chmod(root, 0o555)

    def test_make_writable_sets_owner_write_everywhere(self, tmp_path):
        root = tmp_path / "tree"
        self._read_only_tree(root)

        make_writable(str(root))

        for path, st in walk(str(root)):
            assert st.st_mode & stat.S_IWUSR, path

    def test_remove_tree_handles_read_only_entries(self, tmp_path):
        root = tmp_path / "tree"
        self._read_only_tree(root)

        remove_tree(str(root))

        assert not os.path.lexists(root)

    def test_remove_tree_missing_is_noop(self, tmp_path):
        remove_tree(str(tmp_path / "nothing"))

    def test_wrap_io_error_converts_os_errors(self, tmp_path):
        @wrap_io_error
        def boom():
            os.stat(tmp_path / "missing")

        with pytest.raises(TgoPathNotFoundError) as excinfo:
            boom()
        assert isinstance(excinfo.value, TgoIOError)
        assert excinfo.value.path == str(tmp_path / "missing")
