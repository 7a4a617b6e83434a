"""
Embedded Lua runtime prepended to every bundle.

The runtime defines ``runtime`` (the module table loader) and the
``make_require`` factory that each wrapped module calls to get its own
``require``. It is package data and is read once per process.
"""

from __future__ import annotations

import re
from functools import cache
from importlib import resources

RUNTIME_ASSET = "runtime.lua"

_VERSION_LINE = re.compile(r"^-- luabundle runtime (\d+)")


@cache
def load_runtime() -> str:
    """Return the runtime preamble text."""
    return resources.files(__package__).joinpath(RUNTIME_ASSET).read_text(encoding="utf-8")


def runtime_version() -> int:
    """Version number recorded on the first line of the runtime asset."""
    match = _VERSION_LINE.match(load_runtime())
    if not match:
        raise RuntimeError(f"{RUNTIME_ASSET} is missing its version header")
    return int(match.group(1))
