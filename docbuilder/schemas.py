"""
Pydantic schemas shared by the store, the pipeline and the CLI.

Packages and their clone/documentation configurations are owned by the
package registry; the pipeline only reads them, except for
`DocConfiguration.repository_path` which is updated after every clone.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# REGISTRY SCHEMAS
# ============================================================================

class Package(BaseModel):
    """A package tracked by the registry."""
    id: int = Field(description="Registry identifier, passed to the documentation job")
    name: str = Field(description="Package name, e.g. 'bar'")
    fqn: str = Field(description="Fully-qualified name used to namespace cache/output paths, e.g. 'acme/bar'")
    enabled: bool = Field(default=True, description="Whether the package is active in the registry")
    ssh_url: str = Field(description="SSH clone URL, e.g. 'git@github.com:acme/bar.git'")
    description: Optional[str] = Field(None, description="Free-form package description")


class CloneConfiguration(BaseModel):
    """Per-package settings controlling whether the repository is cloned."""
    package_id: int = Field(description="Id of the owning package")
    enabled: bool = Field(default=False, description="Whether cloning is enabled for the package")


class DocConfiguration(BaseModel):
    """Per-package settings controlling documentation generation."""
    package_id: int = Field(description="Id of the owning package")
    enabled: bool = Field(default=False, description="Whether documentation is built for the package")
    docs_path: str = Field(description="Root directory for generated documentation")
    repository_path: Optional[str] = Field(None, description="Last directory the package was cloned into")
    source_dir: str = Field(default="docs", description="Documentation sources, relative to the clone")
    title: Optional[str] = Field(None, description="Title handed to the generator (defaults to the package name)")

    def build_dir(self, fqn: str) -> Path:
        """Directory the generator writes documentation for `fqn` into."""
        return Path(self.docs_path) / fqn / "build"


# ============================================================================
# BUILD RESULT SCHEMAS
# ============================================================================

class BuildStatus(str, Enum):
    """Outcome of building documentation for one package."""
    BUILT = "built"
    SKIPPED_DISABLED = "skipped_disabled"
    SKIPPED_NOT_CLONED = "skipped_not_cloned"
    SKIPPED_NO_DOCS = "skipped_no_docs"
    CLONE_FAILED = "clone_failed"
    DOCS_FAILED = "docs_failed"

    @property
    def is_skip(self) -> bool:
        return self in (
            BuildStatus.SKIPPED_DISABLED,
            BuildStatus.SKIPPED_NOT_CLONED,
            BuildStatus.SKIPPED_NO_DOCS,
        )

    @property
    def is_failure(self) -> bool:
        return self in (BuildStatus.CLONE_FAILED, BuildStatus.DOCS_FAILED)


class DocBuildResult(BaseModel):
    """Result of running the documentation job for a package."""
    success: bool = Field(description="Whether the job completed without raising")
    error: Optional[str] = Field(None, description="Error message when the job failed")
    duration_seconds: float = Field(default=0.0, description="Wall time spent in the job")


class PackageBuildReport(BaseModel):
    """What happened to one package during a build run."""
    package_name: str = Field(description="Package name")
    status: BuildStatus = Field(description="Outcome of the build")
    message: str = Field(description="Human-readable outcome message")
    clone_dir: Optional[str] = Field(None, description="Directory the package was cloned into")
    docs_build_dir: Optional[str] = Field(None, description="Directory documentation was written to")
    started_at: str = Field(description="ISO timestamp when processing started")
    completed_at: Optional[str] = Field(None, description="ISO timestamp when processing finished")
