"""
luabundle CLI.

Commands:
- build: Bundle every project of build.toml
- inspect: Show how the projects resolve without building
- init: Create a starter build.toml and src/main.lua
"""

from __future__ import annotations

import logging
import os
import platform
import shlex
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from luabundle._version import get_version
from luabundle.core.builder import BuildReport, build, resolve_manifest
from luabundle.core.errors import BundlerError
from luabundle.core.manifest import MANIFEST_FILENAME, load_manifest
from luabundle.core.models import Strictness
from luabundle.core.paths import module_key
from luabundle.core.transform import DEFAULT_COMPILER_COMMAND
from luabundle.runtime import runtime_version

console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

STARTER_MANIFEST = """\
# require_function = "require"

[[project]]
name = "{name}"
output = "build"
entry_point = "src/main.lua"
files = ["src"]
# lua_version = "Default"  # Default | Lua51 | Luau | Fennel
"""

STARTER_MAIN = """\
print("Hello from {name}!")
"""


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"luabundle version {get_version()}")
        typer.echo(f"  Runtime:       v{runtime_version()}")
        typer.echo(f"  Python:        {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)


app = typer.Typer(
    help="""luabundle – bundle Lua source trees into single files

Reads build.toml in the current directory (or --manifest) and writes one
self-contained .lua file per [[project]].
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """luabundle CLI main callback for global options."""
    pass


def _strictness(strict: bool) -> Strictness:
    return Strictness.STRICT if strict else Strictness.LENIENT


def _print_report(report: BuildReport) -> None:
    for result in report.built:
        typer.echo(f"✓ {result.project.name} -> {result.output_path} ({result.module_count} modules)")
    for failure in report.failures:
        typer.echo(f"error: {failure.message}", err=True)

    if report.failures:
        typer.echo(
            f"\n{len(report.built)} built, {len(report.failures)} skipped",
            err=True,
        )


@app.command(name="build")
def build_command(
    manifest: Path = typer.Option(
        Path(MANIFEST_FILENAME), "--manifest", "-m", help="Path to build.toml"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Treat fallbacks (unknown lua_version, duplicate modules, ...) as errors"
    ),
    compiler: str = typer.Option(
        shlex.join(DEFAULT_COMPILER_COMMAND),
        "--compiler",
        help="Command used to compile .fnl files (reads stdin, writes stdout)",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """
    Bundle every project in build.toml.

    Projects that fail to resolve or bundle are reported and skipped; the
    exit code is 1 if any project was skipped.
    """
    configure_logging(verbose)

    try:
        compiler_command = shlex.split(compiler)
    except ValueError as e:
        typer.echo(f"error: invalid --compiler command: {e}", err=True)
        raise typer.Exit(code=1)

    try:
        report = build(
            manifest,
            strictness=_strictness(strict),
            compiler_command=compiler_command,
        )
    except BundlerError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    _print_report(report)
    if not report.ok:
        raise typer.Exit(code=1)


@app.command(name="inspect")
def inspect_command(
    manifest: Path = typer.Option(
        Path(MANIFEST_FILENAME), "--manifest", "-m", help="Path to build.toml"
    ),
    strict: bool = typer.Option(False, "--strict", help="Treat fallbacks as errors"),
) -> None:
    """Show how each project resolves, without writing anything."""
    configure_logging(False)

    try:
        document = load_manifest(manifest)
    except BundlerError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    resolved, failures = resolve_manifest(document, _strictness(strict))

    table = Table(title=f"{manifest} (require_function = {resolved.require_function})")
    table.add_column("Project", style="cyan")
    table.add_column("Output")
    table.add_column("Entry module")
    table.add_column("Modules", justify="right")
    table.add_column("Dialect")
    for project in resolved.projects:
        table.add_row(
            project.name,
            str(Path(project.output_dir) / project.name),
            module_key(project.entry_point),
            str(len(project.files)),
            project.dialect.value,
        )
    console.print(table)

    for failure in failures:
        typer.echo(f"error: {failure.message}", err=True)
    if failures:
        raise typer.Exit(code=1)


@app.command(name="init")
def init_command(
    directory: Path = typer.Argument(Path("."), help="Directory to initialize"),
    name: str | None = typer.Option(None, "--name", help="Project name (default: directory name)"),
) -> None:
    """Create a starter build.toml and src/main.lua."""
    directory = directory.resolve()
    manifest_path = directory / MANIFEST_FILENAME
    if manifest_path.exists():
        typer.echo(f"error: {manifest_path} already exists", err=True)
        raise typer.Exit(code=1)

    project_name = name or directory.name or "a"
    main_path = directory / "src" / "main.lua"

    directory.mkdir(parents=True, exist_ok=True)
    manifest_path.write_text(STARTER_MANIFEST.format(name=project_name), encoding="utf-8")
    if not main_path.exists():
        main_path.parent.mkdir(parents=True, exist_ok=True)
        main_path.write_text(STARTER_MAIN.format(name=project_name), encoding="utf-8")

    typer.echo(f"✓ Created {manifest_path}")
    typer.echo("\nNext steps:")
    typer.echo(f"   1. Add your modules under {main_path.parent}")
    typer.echo("   2. Run: luabundle build")


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
