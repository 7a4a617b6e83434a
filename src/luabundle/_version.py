"""Package version: pyproject.toml in a source checkout, else installed metadata."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

PYPROJECT = Path(__file__).parent.parent.parent / "pyproject.toml"


def get_version(pyproject: Path = PYPROJECT) -> str:
    if pyproject.is_file():
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        if data.get("project", {}).get("name") == "luabundle":
            return data["project"]["version"]
    try:
        return _metadata_version("luabundle")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = get_version()
