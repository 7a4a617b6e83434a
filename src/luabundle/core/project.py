"""
Project resolution.

Turns one raw ``[[project]]`` table from build.toml into a ProjectSpec,
checking that every path it names exists and expanding directories.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Any

from .errors import ConfigError, make_config_error
from .fileset import expand_paths
from .models import Dialect, ProjectSpec, Strictness
from .paths import module_key

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "a"
DEFAULT_OUTPUT_DIR = "build"
BUNDLE_EXTENSION = ".lua"


def project_label(raw: dict[str, Any], index: int) -> str:
    """Name used to refer to a project in messages, even before it resolves."""
    name = raw.get("name")
    if isinstance(name, str) and name:
        return name
    return f"#{index + 1}"


def parse_dialect(value: Any, strictness: Strictness = Strictness.LENIENT) -> Dialect:
    """
    Parse a ``lua_version`` value.

    Unknown values fall back to Dialect.DEFAULT with a warning, or raise
    ConfigError in strict mode.
    """
    if value is None:
        return Dialect.DEFAULT
    try:
        return Dialect(value)
    except ValueError:
        choices = ", ".join(d.value for d in Dialect)
        message = f"unknown lua_version {value!r} (expected one of: {choices})"
        if strictness is Strictness.STRICT:
            raise ConfigError(message) from None
        logger.warning("%s; using %s", message, Dialect.DEFAULT.value)
        return Dialect.DEFAULT


def _get_str(raw: dict[str, Any], key: str, label: str, default: str | None = None) -> str | None:
    value = raw.get(key, default)
    if value is not None and not isinstance(value, str):
        raise make_config_error(f"`{key}` must be a string", label)
    return value


def _check_duplicate_keys(files: list[str], label: str, strictness: Strictness) -> None:
    counts = Counter(module_key(f) for f in files)
    duplicates = sorted(key for key, count in counts.items() if count > 1)
    if not duplicates:
        return

    message = "duplicate module keys: " + ", ".join(duplicates)
    if strictness is Strictness.STRICT:
        raise make_config_error(message, label)
    logger.warning("project '%s': %s (the last file wins)", label, message)


def resolve_project(
    raw: dict[str, Any],
    root: Path,
    index: int = 0,
    strictness: Strictness = Strictness.LENIENT,
) -> ProjectSpec:
    """
    Validate and materialize one project from its manifest table.

    Args:
        raw: The ``[[project]]`` table
        root: Directory the project's paths are relative to
        index: Position of the project in the manifest (for messages)
        strictness: Whether fallbacks are errors or warnings

    Returns:
        The resolved ProjectSpec

    Raises:
        ConfigError: If the project cannot be built
    """
    label = project_label(raw, index)

    name = _get_str(raw, "name", label, DEFAULT_PROJECT_NAME)
    output_dir = _get_str(raw, "output", label, DEFAULT_OUTPUT_DIR)

    entry_point = _get_str(raw, "entry_point", label)
    if entry_point is None:
        raise make_config_error("missing `entry_point` file", label)
    if not (root / entry_point).is_file():
        raise make_config_error("`entry_point` does not exist", label, entry_point)

    try:
        dialect = parse_dialect(raw.get("lua_version"), strictness)
    except ConfigError as e:
        raise make_config_error(e.message, label) from e

    listed = raw.get("files")
    if listed is None:
        raise make_config_error("missing `files` list", label)
    if not isinstance(listed, list) or not all(isinstance(p, str) for p in listed):
        raise make_config_error("`files` must be a list of paths", label)

    try:
        files = expand_paths(listed, root, strictness)
    except ConfigError as e:
        raise make_config_error(e.message, label) from e

    _check_duplicate_keys(files, label, strictness)

    project = ProjectSpec(
        name=f"{name}{BUNDLE_EXTENSION}",
        output_dir=output_dir,
        entry_point=entry_point,
        files=files,
        dialect=dialect,
        root=root,
    )
    logger.debug("Resolved project %s with %d files", project.name, len(files))
    return project
