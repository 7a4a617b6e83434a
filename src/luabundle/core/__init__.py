"""
Core bundling engine for luabundle.

Manifest loading, project resolution, source transformation, module
wrapping and bundle assembly.
"""

from .assembler import assemble_bundle, write_bundle
from .builder import BuildReport, BuildResult, ProjectFailure, build, resolve_manifest
from .errors import (
    BundleError,
    BundlerError,
    CompileError,
    CompilerNotFoundError,
    ConfigError,
    ManifestError,
)
from .manifest import MANIFEST_FILENAME, ManifestDocument, load_manifest
from .models import BuildManifest, Dialect, ProjectSpec, Strictness
from .paths import module_key
from .project import resolve_project
from .transform import Compiler, SourceTransformer, SubprocessCompiler
from .wrapper import indent_block, wrap_module

__all__ = [
    "MANIFEST_FILENAME",
    "BuildManifest",
    "BuildReport",
    "BuildResult",
    "BundleError",
    "BundlerError",
    "CompileError",
    "Compiler",
    "CompilerNotFoundError",
    "ConfigError",
    "Dialect",
    "ManifestDocument",
    "ManifestError",
    "ProjectFailure",
    "ProjectSpec",
    "SourceTransformer",
    "Strictness",
    "SubprocessCompiler",
    "assemble_bundle",
    "build",
    "indent_block",
    "load_manifest",
    "module_key",
    "resolve_manifest",
    "resolve_project",
    "wrap_module",
    "write_bundle",
]
