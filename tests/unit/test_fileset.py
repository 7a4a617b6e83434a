"""Tests for file-set expansion."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from luabundle.core.errors import ConfigError
from luabundle.core.fileset import expand_paths
from luabundle.core.models import Strictness


@pytest.fixture
def tree(write_tree) -> Path:
    return write_tree(
        {
            "lib/b.lua": "",
            "lib/a.lua": "",
            "lib/sub/c.lua": "",
            "main.lua": "",
        }
    )


def test_directory_expands_recursively(tree: Path) -> None:
    files = expand_paths(["lib"], tree)
    assert set(files) == {"lib/a.lua", "lib/b.lua", "lib/sub/c.lua"}


def test_directory_order_is_sorted(tree: Path) -> None:
    assert expand_paths(["lib"], tree) == ["lib/a.lua", "lib/b.lua", "lib/sub/c.lua"]


def test_manifest_order_is_kept(tree: Path) -> None:
    files = expand_paths(["main.lua", "lib/sub", "lib/b.lua"], tree)
    assert files == ["main.lua", "lib/sub/c.lua", "lib/b.lua"]


def test_duplicates_are_kept(tree: Path) -> None:
    files = expand_paths(["lib/a.lua", "lib"], tree)
    assert files.count("lib/a.lua") == 2


def test_trailing_slash(tree: Path) -> None:
    assert expand_paths(["lib/sub/"], tree) == ["lib/sub/c.lua"]


def test_missing_path_raises(tree: Path) -> None:
    with pytest.raises(ConfigError, match="'nope' in `files` does not exist"):
        expand_paths(["nope"], tree)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
class TestSymlinkCycles:
    @pytest.fixture
    def cyclic(self, tree: Path) -> Path:
        try:
            os.symlink(tree / "lib", tree / "lib" / "sub" / "loop", target_is_directory=True)
        except OSError:
            pytest.skip("cannot create symlinks here")
        return tree

    def test_lenient_skips_cycle(self, cyclic: Path, caplog) -> None:
        files = expand_paths(["lib"], cyclic)
        assert files == ["lib/a.lua", "lib/b.lua", "lib/sub/c.lua"]
        assert "directory cycle" in caplog.text

    def test_strict_raises(self, cyclic: Path) -> None:
        with pytest.raises(ConfigError, match="directory cycle"):
            expand_paths(["lib"], cyclic, Strictness.STRICT)


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="needs a non-root POSIX user for permission checks",
)
def test_unreadable_directory_raises(tree: Path) -> None:
    locked = tree / "lib" / "sub"
    locked.chmod(0o000)
    try:
        with pytest.raises(ConfigError, match="could not read directory 'lib/sub'"):
            expand_paths(["lib"], tree)
    finally:
        locked.chmod(0o755)
