"""
Data model for luabundle builds.

These types describe resolved projects and the manifest they come from.
Paths are kept exactly as written in the manifest (relative to ``root``)
because module keys are derived from that text.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_REQUIRE_FUNCTION = "require"


class Dialect(StrEnum):
    """Lua dialect declared by a project's ``lua_version`` field."""

    DEFAULT = "Default"
    LUA51 = "Lua51"
    LUAU = "Luau"
    FENNEL = "Fennel"


class Strictness(StrEnum):
    """How silent fallbacks are treated: reported as errors or as warnings."""

    STRICT = "strict"
    LENIENT = "lenient"


class ProjectSpec(BaseModel):
    """
    A resolved project: one bundle to produce.

    Attributes:
        name: Output file name, including the ``.lua`` extension
        output_dir: Output directory, relative to ``root``
        entry_point: Entry file, relative to ``root``
        files: Fully expanded file list in bundle order (duplicates kept)
        dialect: Declared Lua dialect
        root: Directory the manifest paths are relative to
    """

    name: str
    output_dir: str
    entry_point: str
    files: list[str] = Field(default_factory=list)
    dialect: Dialect = Dialect.DEFAULT
    root: Path = Path(".")

    model_config = ConfigDict(frozen=True)

    @property
    def output_path(self) -> Path:
        return self.root / self.output_dir / self.name


class BuildManifest(BaseModel):
    """All resolved projects of a manifest plus process-wide options."""

    projects: list[ProjectSpec] = Field(default_factory=list)
    require_function: str = DEFAULT_REQUIRE_FUNCTION
    root: Path = Path(".")

    model_config = ConfigDict(frozen=True)
