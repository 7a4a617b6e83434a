"""Tests for the source transform adapter and the subprocess compiler."""

from __future__ import annotations

import sys

import pytest

from luabundle.core.errors import CompileError, CompilerNotFoundError
from luabundle.core.models import Strictness
from luabundle.core.transform import SourceTransformer, SubprocessCompiler

# Small python programs standing in for `fennel --compile -`
UPPERCASE = "import sys; sys.stdout.write(sys.stdin.read().upper())"
FAILING = (
    "import sys; sys.stdin.read(); sys.stdout.write('partial');"
    " sys.stderr.write('parse error'); sys.exit(3)"
)
BAD_BYTES = "import sys; sys.stdin.read(); sys.stdout.buffer.write(b'ok\\xff')"


class TestSourceTransformer:
    def test_alt_syntax_goes_to_compiler(self, stub_compiler) -> None:
        transformer = SourceTransformer(stub_compiler)
        result = transformer.transform("src/game.fnl", "(print 1)")
        assert result == "-- compiled\n(PRINT 1)"
        assert stub_compiler.calls == ["src/game.fnl"]

    def test_lua_passes_through_unchanged(self, stub_compiler) -> None:
        transformer = SourceTransformer(stub_compiler)
        source = "print('hello')\n-- trailing comment\n"
        assert transformer.transform("src/main.lua", source) == source
        assert stub_compiler.calls == []

    @pytest.mark.parametrize("path", ["a.txt", "a.FNL", "fnl", ".fnl", "a.fnl.lua"])
    def test_other_extensions_pass_through(self, stub_compiler, path: str) -> None:
        transformer = SourceTransformer(stub_compiler)
        assert transformer.transform(path, "x") == "x"
        assert stub_compiler.calls == []

    def test_custom_extensions(self, stub_compiler) -> None:
        transformer = SourceTransformer(stub_compiler, extensions=[".moon"])
        assert transformer.needs_compile("a.moon")
        assert not transformer.needs_compile("a.fnl")


class TestSubprocessCompiler:
    def test_pipes_source_through_process(self) -> None:
        compiler = SubprocessCompiler([sys.executable, "-c", UPPERCASE])
        assert compiler.compile("(print :hi)", path="a.fnl") == "(PRINT :HI)"

    def test_invalid_output_bytes_are_replaced(self) -> None:
        compiler = SubprocessCompiler([sys.executable, "-c", BAD_BYTES])
        assert compiler.compile("", path="a.fnl") == "ok�"

    def test_nonzero_exit_lenient_returns_output(self, caplog) -> None:
        compiler = SubprocessCompiler([sys.executable, "-c", FAILING], Strictness.LENIENT)
        assert compiler.compile("(", path="a.fnl") == "partial"
        assert "status 3" in caplog.text

    def test_nonzero_exit_strict_raises(self) -> None:
        compiler = SubprocessCompiler([sys.executable, "-c", FAILING], Strictness.STRICT)
        with pytest.raises(CompileError, match="status 3: parse error"):
            compiler.compile("(", path="a.fnl")

    def test_missing_executable(self) -> None:
        compiler = SubprocessCompiler(["luabundle-no-such-compiler", "--compile", "-"])
        with pytest.raises(CompilerNotFoundError, match="luabundle-no-such-compiler"):
            compiler.compile("(print 1)", path="a.fnl")

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX exec semantics")
    def test_unlaunchable_executable(self, tmp_path) -> None:
        bogus = tmp_path / "fennel"
        bogus.write_bytes(b"\x00\x01\x02 not a program")
        bogus.chmod(0o755)
        compiler = SubprocessCompiler([str(bogus), "--compile", "-"])
        with pytest.raises(CompilerNotFoundError, match="could not launch compiler"):
            compiler.compile("(print 1)", path="a.fnl")

    def test_empty_command(self) -> None:
        with pytest.raises(CompilerNotFoundError, match="compiler command is empty"):
            SubprocessCompiler([])
