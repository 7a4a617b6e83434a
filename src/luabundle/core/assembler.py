"""
Bundle assembly.

A bundle is the runtime preamble, a ``files`` table with one wrapped entry
per source file, and an epilogue that requires the entry point:

    <runtime.lua>
    local files = {
        ["main"] = function(runtime) ... end,
        ...
    }

    runtime.new({
        files = files,
        modules = {},
    }):require("main")
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..runtime import load_runtime
from .errors import (
    CompileError,
    CompilerNotFoundError,
    ErrorContext,
    make_bundle_error,
)
from .models import DEFAULT_REQUIRE_FUNCTION, ProjectSpec
from .paths import module_key
from .transform import SourceTransformer
from .wrapper import lua_string, wrap_module

logger = logging.getLogger(__name__)

TABLE_OPEN = "\nlocal files = {"
TABLE_CLOSE = "\n}\n"


def entry_point_call(entry_key: str) -> str:
    """Epilogue that builds the runtime and requires the entry module."""
    return (
        "\nruntime.new({\n"
        "\tfiles = files,\n"
        "\tmodules = {},\n"
        f"}}):require({lua_string(entry_key)})\n"
    )


def read_source(project: ProjectSpec, file: str) -> str:
    try:
        return (project.root / file).read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        raise make_bundle_error(f"not valid UTF-8: {e}", project.name, file) from e
    except OSError as e:
        raise make_bundle_error(f"could not read file: {e.strerror or e}", project.name, file) from e


def assemble_bundle(
    project: ProjectSpec,
    require_function: str = DEFAULT_REQUIRE_FUNCTION,
    transformer: SourceTransformer | None = None,
) -> str:
    """
    Build the bundle text for one project.

    Files are read, transformed and wrapped in the project's file order.

    Raises:
        BundleError: A source file could not be read
        CompileError: The compiler rejected a source file (strict mode)
        CompilerNotFoundError: The compiler could not be launched
    """
    transformer = transformer or SourceTransformer()

    parts = [load_runtime(), TABLE_OPEN]
    for file in project.files:
        key = module_key(file)
        contents = read_source(project, file)
        try:
            source = transformer.transform(file, contents)
        except CompilerNotFoundError:
            raise
        except CompileError as e:
            raise CompileError(e.message, ErrorContext(project=project.name, file=file)) from e

        logger.debug("Bundling %s as %r", file, key)
        parts.append(wrap_module(key, source, require_function, level=1))

    parts.append(TABLE_CLOSE)
    parts.append(entry_point_call(module_key(project.entry_point)))
    return "".join(parts)


def write_bundle(project: ProjectSpec, text: str) -> Path:
    """
    Write a bundle to ``<root>/<output_dir>/<name>``, replacing any old file.

    Raises:
        BundleError: The output could not be written
    """
    output_path = project.output_path
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8", newline="\n")
    except OSError as e:
        raise make_bundle_error(
            f"could not write {output_path}: {e.strerror or e}", project.name
        ) from e
    return output_path
