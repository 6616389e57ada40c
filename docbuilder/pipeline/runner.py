"""
Pipeline runner that orchestrates documentation builds.

This module coordinates, per package:
1. Enablement checks (package, clone configuration, doc configuration)
2. Repository cloning into a fresh cache directory
3. Removal of stale documentation output and generator cache
4. The documentation update job
"""

import time
import logging
from pathlib import Path
from typing import Optional, List, Callable
from datetime import datetime

from rich.console import Console
from rich.markup import escape

from docbuilder.config import Settings
from docbuilder.errors import PackageNotFoundError, CloneError
from docbuilder.jobs import UpdateJob
from docbuilder.repository import RepositoryManager, reset_directory
from docbuilder.schemas import Package, DocConfiguration, BuildStatus, DocBuildResult, PackageBuildReport
from docbuilder.store import PackageStore
from docbuilder.buildlog import BuildLogger

logger = logging.getLogger(__name__)

JobFactory = Callable[[], UpdateJob]


class DocumentationBuildPipeline:
    """Clones packages and builds their documentation."""

    def __init__(
        self,
        settings: Settings,
        store: PackageStore,
        repository_manager: Optional[RepositoryManager] = None,
        job_factory: Optional[JobFactory] = None,
        console: Optional[Console] = None,
        build_logger: Optional[BuildLogger] = None,
    ):
        """
        Initialize the build pipeline.

        Args:
            settings: Cache and generator settings
            store: Package registry
            repository_manager: Cloner (default: RepositoryManager writing to `console`)
            job_factory: Creates a fresh documentation job per package
                (default: UpdateJob bound to `settings` and `store`)
            console: Console for progress and skip messages
            build_logger: Optional JSONL recorder of package outcomes
        """
        self.settings = settings
        self.store = store
        self.console = console or Console()
        self.repository_manager = repository_manager or RepositoryManager(console=self.console)
        self.job_factory = job_factory or (lambda: UpdateJob(settings, store, console=self.console))
        self.build_logger = build_logger

    def run(self, package_name: Optional[str] = None) -> List[PackageBuildReport]:
        """
        Build documentation for one named package or for every enabled one.

        Args:
            package_name: Package to build; all enabled packages when None

        Returns:
            One report per processed package

        Raises:
            PackageNotFoundError: If `package_name` is not in the registry
        """
        if package_name:
            package = self.store.find_package_by_name(package_name)
            return [self.build_package(package, requested_name=package_name)]

        reports = []
        for config in self.store.find_enabled_doc_configurations():
            package = self.store.find_package(config.package_id)
            reports.append(self.build_package(package))
        return reports

    def build_package(self, package: Optional[Package], requested_name: Optional[str] = None) -> PackageBuildReport:
        """
        Run the enablement checks, clone and documentation job for one package.

        Clone, filesystem and documentation failures are reported, not raised,
        so a batch run continues with the next package.

        Raises:
            PackageNotFoundError: If `package` is None
        """
        if package is None:
            raise PackageNotFoundError(requested_name or "<unknown>")

        started_at = datetime.now().isoformat()
        name = escape(package.name)

        if not package.enabled:
            self.console.print(f"[yellow]Package {name} is disabled. Skipping...[/yellow]")
            return self._report(package, BuildStatus.SKIPPED_DISABLED, "Package is disabled", started_at)

        clone_config = self.store.find_clone_configuration(package)
        if clone_config is None or not clone_config.enabled:
            self.console.print(f"[yellow]Package {name} is not configured to be cloned. Skipping...[/yellow]")
            return self._report(package, BuildStatus.SKIPPED_NOT_CLONED, "Cloning is not enabled", started_at)

        doc_config = self.store.find_doc_configuration(package)
        if doc_config is None or not doc_config.enabled:
            self.console.print(
                f"[yellow]Package {name} is not configured to build documentation. Skipping...[/yellow]"
            )
            return self._report(package, BuildStatus.SKIPPED_NO_DOCS, "Documentation is not enabled", started_at)

        clone_dir = self.settings.clone_dir(package.fqn)

        self.console.print(f"\n🔄 Cloning [cyan]{escape(package.ssh_url)}[/cyan] into [cyan]{escape(str(clone_dir))}[/cyan]")
        try:
            reset_directory(clone_dir)
            self.repository_manager.clone(package.ssh_url, clone_dir)
        except (CloneError, OSError) as e:
            self.console.print(f"[red]❌ {escape(str(e))}[/red]")
            return self._report(package, BuildStatus.CLONE_FAILED, str(e), started_at, clone_dir=clone_dir)

        docs_build_dir = doc_config.build_dir(package.fqn)
        try:
            self._prepare_build(package, doc_config, clone_dir, docs_build_dir)
        except OSError as e:
            self.console.print(f"[red]Unable to prepare documentation build for {name}: {escape(str(e))}[/red]")
            return self._report(
                package,
                BuildStatus.DOCS_FAILED,
                str(e),
                started_at,
                clone_dir=clone_dir,
                docs_build_dir=docs_build_dir,
            )

        result = self.run_doc_job(package)
        if not result.success:
            self.console.print(f"[red]Unable to build documentation for {name}. Skipping...[/red]")
            return self._report(
                package,
                BuildStatus.DOCS_FAILED,
                result.error or "Documentation job failed",
                started_at,
                clone_dir=clone_dir,
                docs_build_dir=docs_build_dir,
            )

        self.console.print(f"[green]✅ Documentation for {name} built in {result.duration_seconds:.1f}s[/green]")
        return self._report(
            package,
            BuildStatus.BUILT,
            "Documentation built",
            started_at,
            clone_dir=clone_dir,
            docs_build_dir=docs_build_dir,
        )

    def _prepare_build(
        self,
        package: Package,
        doc_config: DocConfiguration,
        clone_dir: Path,
        docs_build_dir: Path,
    ) -> None:
        """Record the clone location and clear stale documentation output and generator cache."""
        doc_config.repository_path = str(clone_dir)
        self.store.save_doc_configuration(doc_config)

        if docs_build_dir.is_dir():
            self.console.print(f"[yellow]Removing old documentation from {escape(str(docs_build_dir))}...[/yellow]")
            reset_directory(docs_build_dir)

        generator_cache_dir = self.settings.generator_cache_dir(package.fqn)
        if generator_cache_dir.is_dir():
            self.console.print(f"[yellow]Removing old cache from {escape(str(generator_cache_dir))}...[/yellow]")
            reset_directory(generator_cache_dir)

    def run_doc_job(self, package: Package) -> DocBuildResult:
        """Run the documentation job for a package and capture any failure as a result."""
        start = time.monotonic()
        try:
            job = self.job_factory()
            job.run({"id": package.id})
        except Exception as e:
            logger.exception("Documentation job failed for %s", package.name)
            return DocBuildResult(success=False, error=str(e) or type(e).__name__,
                                  duration_seconds=time.monotonic() - start)

        return DocBuildResult(success=True, duration_seconds=time.monotonic() - start)

    def _report(
        self,
        package: Package,
        status: BuildStatus,
        message: str,
        started_at: str,
        clone_dir: Optional[Path] = None,
        docs_build_dir: Optional[Path] = None,
    ) -> PackageBuildReport:
        report = PackageBuildReport(
            package_name=package.name,
            status=status,
            message=message,
            clone_dir=str(clone_dir) if clone_dir else None,
            docs_build_dir=str(docs_build_dir) if docs_build_dir else None,
            started_at=started_at,
            completed_at=datetime.now().isoformat(),
        )
        logger.info("Package %s: %s (%s)", package.name, status.value, message)
        if self.build_logger:
            self.build_logger.log_report(report)
        return report
