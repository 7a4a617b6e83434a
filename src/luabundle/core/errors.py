"""
Error types for luabundle manifest loading, project resolution and bundling.
"""

from dataclasses import dataclass
from typing import Optional


class BundlerError(Exception):
    """Base exception for all luabundle errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class ManifestError(BundlerError):
    """
    Raised when the build manifest cannot be used at all.

    Examples:
    - build.toml does not exist
    - Invalid TOML
    - Missing [[project]] array
    - Invalid require_function identifier
    """

    pass


class ConfigError(BundlerError):
    """
    Raised when a single project entry cannot be resolved.

    Examples:
    - Missing or nonexistent entry_point
    - Missing files list or a listed path that does not exist
    - Unknown lua_version (strict mode)
    - Duplicate module keys or directory cycles (strict mode)
    """

    pass


class CompileError(BundlerError):
    """
    Raised when the alternate-syntax compiler fails on a source file.

    Examples:
    - Compiler exited with a non-zero status (strict mode)
    """

    pass


class CompilerNotFoundError(CompileError):
    """Raised when the compiler executable cannot be launched."""

    pass


class BundleError(BundlerError):
    """
    Raised when a bundle cannot be assembled or written.

    Examples:
    - Source file unreadable or not valid UTF-8
    - Output directory or file not writable
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        project: Project name, or "#<index>" when the name is unknown
        file: Optional path of the file involved, as written in the manifest
    """

    project: str
    file: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "project 'game.lua' (src/main.lua)"
        """
        location = f"project '{self.project}'"
        if self.file:
            location += f" ({self.file})"
        return location


def make_config_error(message: str, project: str, file: str | None = None) -> ConfigError:
    """Helper to create a ConfigError with project context attached."""
    return ConfigError(message, ErrorContext(project=project, file=file))


def make_bundle_error(message: str, project: str, file: str | None = None) -> BundleError:
    """Helper to create a BundleError with project context attached."""
    return BundleError(message, ErrorContext(project=project, file=file))
