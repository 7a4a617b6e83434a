"""
Build driver: manifest -> projects -> bundles on disk.

Projects are resolved and built one after another. A project that fails
to resolve or assemble is recorded as a failure and skipped; the remaining
projects still build. Fatal errors (manifest problems, a compiler that
cannot be launched) propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .assembler import assemble_bundle, write_bundle
from .errors import BundlerError, CompilerNotFoundError
from .manifest import ManifestDocument, load_manifest
from .models import BuildManifest, ProjectSpec, Strictness
from .project import project_label, resolve_project
from .transform import DEFAULT_COMPILER_COMMAND, Compiler, SourceTransformer, SubprocessCompiler

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """A bundle that was written."""

    project: ProjectSpec
    output_path: Path

    @property
    def module_count(self) -> int:
        return len(self.project.files)


@dataclass
class ProjectFailure:
    """A project that was skipped."""

    label: str
    error: BundlerError

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class BuildReport:
    """Outcome of a build run."""

    manifest_path: Path
    built: list[BuildResult] = field(default_factory=list)
    failures: list[ProjectFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def resolve_manifest(
    document: ManifestDocument,
    strictness: Strictness = Strictness.LENIENT,
) -> tuple[BuildManifest, list[ProjectFailure]]:
    """Resolve every project of a manifest, collecting the ones that fail."""
    projects: list[ProjectSpec] = []
    failures: list[ProjectFailure] = []

    for index, raw in enumerate(document.raw_projects):
        try:
            projects.append(resolve_project(raw, document.root, index, strictness))
        except BundlerError as e:
            logger.info("Skipping project: %s", e)
            failures.append(ProjectFailure(label=project_label(raw, index), error=e))

    manifest = BuildManifest(
        projects=projects,
        require_function=document.require_function,
        root=document.root,
    )
    return manifest, failures


def build(
    manifest_path: Path,
    strictness: Strictness = Strictness.LENIENT,
    compiler: Compiler | None = None,
    compiler_command: Sequence[str] = DEFAULT_COMPILER_COMMAND,
) -> BuildReport:
    """
    Build every project of a manifest.

    Args:
        manifest_path: Path to build.toml
        strictness: Whether silent fallbacks become errors
        compiler: Compiler for alternate-syntax files; defaults to running
            ``compiler_command`` as a subprocess
        compiler_command: Command used when no compiler is given

    Returns:
        BuildReport listing written bundles and skipped projects

    Raises:
        ManifestError: The manifest is missing or invalid
        CompilerNotFoundError: The compiler could not be launched
    """
    document = load_manifest(manifest_path)
    manifest, failures = resolve_manifest(document, strictness)
    report = BuildReport(manifest_path=manifest_path, failures=failures)

    if compiler is None:
        compiler = SubprocessCompiler(compiler_command, strictness)
    transformer = SourceTransformer(compiler)

    for project in manifest.projects:
        try:
            text = assemble_bundle(project, manifest.require_function, transformer)
            output_path = write_bundle(project, text)
        except CompilerNotFoundError:
            raise
        except BundlerError as e:
            logger.info("Skipping project: %s", e)
            report.failures.append(ProjectFailure(label=project.name, error=e))
            continue

        logger.info("Wrote %s (%d modules)", output_path, len(project.files))
        report.built.append(BuildResult(project=project, output_path=output_path))

    return report
