"""
Module wrapping for the bundle's module table.

Each source file becomes one entry of the ``files`` table literal:

    ["src/util"] = function(runtime)
        local require, runtime, make_require = make_require(runtime), nil, nil

        <module body>
    end,

The wrapper is purely textual and never validates the Lua it wraps.
"""

from __future__ import annotations

INDENT = "\t"

# Names shared with runtime/runtime.lua
REGISTRY_PARAM = "runtime"
REQUIRE_FACTORY = "make_require"

_LUA_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def lua_string(value: str) -> str:
    """Render ``value`` as a double-quoted Lua string literal."""
    parts = []
    for char in value:
        if char in _LUA_ESCAPES:
            parts.append(_LUA_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            # Decimal escape, zero-padded so a following digit is not absorbed
            parts.append(f"\\{ord(char):03d}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


def indent_block(text: str, level: int) -> str:
    """Indent every non-empty line of ``text`` by ``level`` tabs."""
    if level <= 0:
        return text

    trailing_newline = text.endswith("\n")
    lines = text.split("\n")
    if trailing_newline:
        lines.pop()

    prefix = INDENT * level
    indented = []
    for line in lines:
        line = line.removesuffix("\r")
        indented.append(prefix + line if line else "")

    result = "\n".join(indented)
    if trailing_newline:
        result += "\n"
    return result


def inject_accessor(source: str, require_function: str) -> str:
    """Prepend the statement that gives a module its own ``require``."""
    return (
        f"local {require_function}, {REGISTRY_PARAM}, {REQUIRE_FACTORY} = "
        f"{REQUIRE_FACTORY}({REGISTRY_PARAM}), nil, nil\n"
        f"\n"
        f"{source}"
    )


def wrap_module(key: str, source: str, require_function: str, level: int = 1) -> str:
    """
    Wrap a module's Lua source as a keyed factory entry of the module table.

    Args:
        key: Module key, used verbatim as the table key
        source: Lua source of the module (already transformed)
        require_function: Name the module uses to require its dependencies
        level: Extra indentation of the whole entry inside the table literal

    Returns:
        The table entry text, ending with a newline
    """
    body = indent_block(inject_accessor(source, require_function), 1)
    if not body.endswith("\n"):
        body += "\n"

    entry = f"\n[{lua_string(key)}] = function({REGISTRY_PARAM})\n{body}end,\n"
    return indent_block(entry, level)
