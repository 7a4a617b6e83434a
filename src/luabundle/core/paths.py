"""Module key derivation."""

from __future__ import annotations

import os


def module_key(path: str | os.PathLike[str]) -> str:
    """
    Derive the module key of a file: its path with the final extension removed.

    Directory separators and casing are left untouched. A file name that
    starts with a dot and has no other dot (``.luarc``) has no extension.

    Examples:
        >>> module_key("src/util/strings.lua")
        'src/util/strings'
        >>> module_key("lib/archive.tar.gz")
        'lib/archive.tar'
        >>> module_key("config/.luarc")
        'config/.luarc'
    """
    text = os.fspath(path)
    cut = max(text.rfind("/"), text.rfind(os.sep)) + 1
    directory, filename = text[:cut], text[cut:]

    dot = filename.rfind(".")
    if dot <= 0:
        return text
    return directory + filename[:dot]
