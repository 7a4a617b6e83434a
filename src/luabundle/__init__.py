"""
luabundle - single-file bundler for Lua source trees.

Reads build.toml, and for every [[project]] writes one self-contained .lua
file holding the project's modules and a small runtime that resolves their
requires.
"""

from ._version import __version__

__all__ = ["__version__"]
