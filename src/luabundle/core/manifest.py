import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ManifestError
from .models import DEFAULT_REQUIRE_FUNCTION

MANIFEST_FILENAME = "build.toml"

_LUA_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

LUA_KEYWORDS = frozenset(
    {
        "and", "break", "do", "else", "elseif", "end", "false", "for",
        "function", "goto", "if", "in", "local", "nil", "not", "or",
        "repeat", "return", "then", "true", "until", "while",
        # Luau
        "continue",
    }
)  # fmt: skip

# Already bound by the accessor statement, or (_ENV) the module's globals
RESERVED_NAMES = frozenset({"runtime", "make_require", "_ENV"})


@dataclass
class ManifestDocument:
    """
    A build.toml file, parsed but with its projects not yet resolved.

    Attributes:
        path: Location of the manifest file
        raw_projects: The ``[[project]]`` tables, in manifest order
        require_function: Name of the per-module dependency accessor
    """

    path: Path
    raw_projects: list[dict[str, Any]] = field(default_factory=list)
    require_function: str = DEFAULT_REQUIRE_FUNCTION

    @property
    def root(self) -> Path:
        """Directory that project paths are relative to."""
        return self.path.parent


def validate_require_function(name: Any) -> str:
    """Check that ``name`` can be used as a Lua local variable name."""
    if not isinstance(name, str) or not _LUA_IDENTIFIER.match(name):
        raise ManifestError(f"require_function {name!r} is not a valid Lua identifier")
    if name in LUA_KEYWORDS or name in RESERVED_NAMES:
        raise ManifestError(f"require_function {name!r} is a reserved name")
    return name


def load_manifest(path: Path) -> ManifestDocument:
    """
    Read and parse a build.toml file.

    Raises:
        ManifestError: If the file is missing, is not valid TOML, has no
            ``[[project]]`` array, or sets an invalid ``require_function``
    """
    if not path.is_file():
        raise ManifestError(f"could not find `{path.name}` file at {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"invalid TOML in {path.name}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"could not read {path.name}: {e}") from e

    projects = data.get("project")
    if projects is None:
        raise ManifestError(f"missing [[project]] field in {path.name}")
    if not isinstance(projects, list) or not all(isinstance(p, dict) for p in projects):
        raise ManifestError(f"`project` in {path.name} must be an array of tables ([[project]])")

    require_function = validate_require_function(
        data.get("require_function", DEFAULT_REQUIRE_FUNCTION)
    )

    return ManifestDocument(
        path=path,
        raw_projects=projects,
        require_function=require_function,
    )
