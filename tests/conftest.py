"""Shared fixtures for luabundle tests."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest


class StubCompiler:
    """In-process stand-in for the Fennel compiler that records its calls."""

    def __init__(self, prefix: str = "-- compiled\n"):
        self.prefix = prefix
        self.calls: list[str] = []

    def compile(self, source: str, *, path: str) -> str:
        self.calls.append(path)
        return self.prefix + source.upper()


@pytest.fixture
def stub_compiler() -> StubCompiler:
    return StubCompiler()


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative path: contents}`` under tmp_path and return tmp_path."""

    def _write(files: dict[str, str]) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content), encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def lua_project(write_tree: Callable[[dict[str, str]], Path]) -> Path:
    """A small project with a build.toml, an entry point and a library dir."""
    return write_tree(
        {
            "build.toml": """\
                [[project]]
                name = "game"
                entry_point = "src/main.lua"
                files = ["src"]
            """,
            "src/main.lua": """\
                local util = require("util/strings")
                print(util.shout("hi"))
            """,
            "src/util/strings.lua": """\
                local M = {}

                function M.shout(s)
                    return s:upper()
                end

                return M
            """,
        }
    )
