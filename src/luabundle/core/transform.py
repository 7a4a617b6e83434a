"""
Source transformation before bundling.

Files written in an alternate surface syntax (Fennel, ``.fnl``) are compiled
to Lua by an external compiler; every other file is bundled as-is. The
decision is made on the file extension alone.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterable, Sequence
from typing import Protocol

from .errors import CompileError, CompilerNotFoundError
from .models import Strictness

logger = logging.getLogger(__name__)

DEFAULT_COMPILER_COMMAND: tuple[str, ...] = ("fennel", "--compile", "-")
ALT_SYNTAX_EXTENSIONS: tuple[str, ...] = (".fnl",)


class Compiler(Protocol):
    """Anything that turns alternate-syntax source text into Lua."""

    def compile(self, source: str, *, path: str) -> str: ...


class SubprocessCompiler:
    """
    Compiler backed by an external process used as a stdin/stdout filter.

    The full source is written to the process's stdin and its stdout is read
    to completion. The call blocks; there is no timeout.

    Args:
        command: Executable and arguments; ``-`` tells fennel to read stdin
        strictness: STRICT raises CompileError on a non-zero exit status,
            LENIENT logs a warning and returns whatever was written to stdout
    """

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMPILER_COMMAND,
        strictness: Strictness = Strictness.LENIENT,
    ):
        if not command:
            raise CompilerNotFoundError("compiler command is empty")
        self.command = tuple(command)
        self.strictness = strictness

    def compile(self, source: str, *, path: str) -> str:
        logger.debug("Compiling %s with %s", path, " ".join(self.command))
        try:
            result = subprocess.run(
                self.command,
                input=source.encode("utf-8"),
                capture_output=True,
            )
        except OSError as e:
            raise CompilerNotFoundError(
                f"could not launch compiler '{self.command[0]}': {e.strerror or e}"
            ) from e

        output = result.stdout.decode("utf-8", errors="replace")
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            message = f"compiler exited with status {result.returncode}"
            if stderr:
                message += f": {stderr}"
            if self.strictness is Strictness.STRICT:
                raise CompileError(message)
            logger.warning("%s: %s (using its output anyway)", path, message)
        return output


class SourceTransformer:
    """Routes each source file either through a compiler or straight through."""

    def __init__(
        self,
        compiler: Compiler | None = None,
        extensions: Iterable[str] = ALT_SYNTAX_EXTENSIONS,
    ):
        self.compiler = compiler if compiler is not None else SubprocessCompiler()
        self.extensions = frozenset(extensions)

    def needs_compile(self, path: str | os.PathLike[str]) -> bool:
        """True if ``path`` has one of the alternate-syntax extensions."""
        _, ext = os.path.splitext(os.fspath(path))
        return ext in self.extensions

    def transform(self, path: str | os.PathLike[str], contents: str) -> str:
        """Return the Lua source for a file given its raw contents."""
        if not self.needs_compile(path):
            return contents
        return self.compiler.compile(contents, path=os.fspath(path))
