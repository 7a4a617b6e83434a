import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .errors import ConfigError
from .models import Strictness

logger = logging.getLogger(__name__)


def expand_paths(
    paths: Iterable[str],
    root: Path,
    strictness: Strictness = Strictness.LENIENT,
) -> list[str]:
    """
    Flatten a list of file and directory paths into a list of files.

    Files keep their manifest order; directories are walked recursively with
    their entries sorted by name. Returned paths keep the text the manifest
    used, so ``src`` expands to ``src/a.lua`` and so on. Duplicates are kept.

    Raises:
        ConfigError: A path does not exist, or (strict mode) a directory
            symlink points back to one of its ancestors
    """
    files: list[str] = []
    for rel in paths:
        if not (root / rel).exists():
            raise ConfigError(f"path '{rel}' in `files` does not exist")
        files.extend(_walk(rel, root, strictness, ancestors=frozenset()))
    return files


def _walk(rel: str, root: Path, strictness: Strictness, ancestors: frozenset[str]) -> list[str]:
    path = root / rel
    if path.is_file():
        return [rel]
    if not path.is_dir():
        return []

    real = os.path.realpath(path)
    if real in ancestors:
        message = f"directory cycle at '{rel}' (links back to {real})"
        if strictness is Strictness.STRICT:
            raise ConfigError(message)
        logger.warning("Skipping %s", message)
        return []

    ancestors = ancestors | {real}
    try:
        with os.scandir(path) as it:
            names = sorted(entry.name for entry in it)
    except OSError as e:
        raise ConfigError(f"could not read directory '{rel}': {e.strerror or e}") from e

    files: list[str] = []
    for name in names:
        files.extend(_walk(_join(rel, name), root, strictness, ancestors))
    return files


def _join(directory: str, name: str) -> str:
    if directory.endswith(("/", os.sep)):
        return directory + name
    return f"{directory}/{name}"
