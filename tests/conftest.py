from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Optional, Set

import pytest
from rich.console import Console

from docbuilder.config import Settings
from docbuilder.errors import CloneError
from docbuilder.schemas import CloneConfiguration, DocConfiguration, Package
from docbuilder.store import PackageStore

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


class FakeRepositoryManager:
    """Records clone calls and writes a marker file instead of running git."""

    def __init__(self, failing_urls: Optional[Set[str]] = None) -> None:
        self.calls: List[tuple] = []
        self.failing_urls = failing_urls or set()

    def clone(self, url: str, directory: Path) -> Path:
        self.calls.append((url, Path(directory)))
        if url in self.failing_urls:
            raise CloneError(url, str(directory), "fatal: repository not found")
        (Path(directory) / "README.md").write_text("cloned")
        return Path(directory)


class RecordingJob:
    def __init__(self, calls: List[dict], failing_ids: Set[int]) -> None:
        self.calls = calls
        self.failing_ids = failing_ids

    def run(self, args: dict) -> None:
        self.calls.append(args)
        if args["id"] in self.failing_ids:
            raise RuntimeError(f"generator crashed for {args['id']}")


class RecordingJobFactory:
    """Creates jobs that record their arguments; jobs for `failing_ids` raise."""

    def __init__(self, failing_ids: Optional[Set[int]] = None) -> None:
        self.calls: List[dict] = []
        self.failing_ids = failing_ids or set()

    def __call__(self) -> RecordingJob:
        return RecordingJob(self.calls, self.failing_ids)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(cache_dir=tmp_path / "cache", registry_path=tmp_path / "packages.json")


@pytest.fixture
def store(settings: Settings) -> PackageStore:
    return PackageStore(settings.registry_file)


@pytest.fixture
def quiet_console() -> Console:
    return Console(record=True, width=200)


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    return tmp_path / "docs"


def register(
    store: PackageStore,
    package_id: int,
    name: str,
    docs_root: Path,
    enabled: bool = True,
    clone_enabled: Optional[bool] = True,
    docs_enabled: Optional[bool] = True,
    ssh_url: Optional[str] = None,
) -> Package:
    """Add a package with its configurations; `None` leaves a configuration out."""
    package = Package(
        id=package_id,
        name=name,
        fqn=f"acme/{name}",
        enabled=enabled,
        ssh_url=ssh_url or f"git@example.com:acme/{name}.git",
    )
    clone_config = None if clone_enabled is None else CloneConfiguration(package_id=package_id, enabled=clone_enabled)
    doc_config = None if docs_enabled is None else DocConfiguration(
        package_id=package_id, enabled=docs_enabled, docs_path=str(docs_root)
    )
    store.add_package(package, clone_config, doc_config)
    return package
