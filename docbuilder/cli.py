"""
docbuilder CLI - Package documentation builder

A command-line tool that builds documentation for registered packages by:
1. Cloning the package repository into a fresh cache directory
2. Clearing stale documentation output and generator cache
3. Running the documentation generator
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from docbuilder import __version__
from docbuilder.buildlog import BuildLogger
from docbuilder.config import Settings
from docbuilder.errors import PackageNotFoundError, RegistryError
from docbuilder.pipeline import DocumentationBuildPipeline
from docbuilder.schemas import BuildStatus
from docbuilder.store import PackageStore

app = typer.Typer(
    name="docbuilder",
    help="Clones packages and builds their documentation",
    add_completion=False,
)

console = Console()

STATUS_STYLES = {
    BuildStatus.BUILT: "green",
    BuildStatus.SKIPPED_DISABLED: "yellow",
    BuildStatus.SKIPPED_NOT_CLONED: "yellow",
    BuildStatus.SKIPPED_NO_DOCS: "yellow",
    BuildStatus.CLONE_FAILED: "red",
    BuildStatus.DOCS_FAILED: "red",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command("sami:build")
def build(
    package: Optional[str] = typer.Argument(None, help="Package name. If left blank, all packages."),
    registry: Optional[Path] = typer.Option(
        None,
        "--registry",
        help="Package registry JSON file (default: <cache-dir>/packages.json)",
    ),
    cache_dir: Optional[Path] = typer.Option(
        None,
        "--cache-dir",
        help="Cache root for clones and generator caches (default: ./cache)",
    ),
):
    """
    Clone project and build documentation.

    Example (single package):
        docbuilder sami:build bar

    Example (all enabled packages):
        docbuilder sami:build --registry ./packages.json
    """
    settings = Settings.from_env(cache_dir=cache_dir, registry_path=registry)
    store = PackageStore(settings.registry_file)

    pipeline = DocumentationBuildPipeline(
        settings=settings,
        store=store,
        console=console,
        build_logger=BuildLogger(settings.build_log_file),
    )

    try:
        reports = pipeline.run(package)
    except (PackageNotFoundError, RegistryError) as e:
        console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not reports:
        console.print("[yellow]No packages are enabled for documentation builds.[/yellow]")
        return

    table = Table(title="Documentation builds")
    table.add_column("Package", style="cyan")
    table.add_column("Status")
    table.add_column("Details")
    for report in reports:
        style = STATUS_STYLES[report.status]
        table.add_row(
            escape(report.package_name),
            f"[{style}]{report.status.value}[/{style}]",
            escape(report.message),
        )
    console.print(table)

    # A clone failure is fatal only when the package was named explicitly
    if package and reports[0].status == BuildStatus.CLONE_FAILED:
        raise typer.Exit(1)


@app.command()
def packages(
    registry: Optional[Path] = typer.Option(None, "--registry", help="Package registry JSON file"),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Cache root (locates the default registry)"),
):
    """List registered packages and their enablement flags."""
    settings = Settings.from_env(cache_dir=cache_dir, registry_path=registry)
    store = PackageStore(settings.registry_file)

    try:
        all_packages = store.list_packages()
    except RegistryError as e:
        console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Packages in {settings.registry_file}")
    table.add_column("Name", style="cyan")
    table.add_column("FQN")
    table.add_column("Enabled")
    table.add_column("Clone")
    table.add_column("Docs")
    table.add_column("Repository path")

    def flag(value: bool) -> str:
        return "[green]yes[/green]" if value else "[red]no[/red]"

    for pkg in all_packages:
        clone_config = store.find_clone_configuration(pkg)
        doc_config = store.find_doc_configuration(pkg)
        table.add_row(
            escape(pkg.name),
            escape(pkg.fqn),
            flag(pkg.enabled),
            flag(bool(clone_config and clone_config.enabled)),
            flag(bool(doc_config and doc_config.enabled)),
            escape(doc_config.repository_path or "-") if doc_config else "-",
        )
    console.print(table)


@app.command()
def version():
    """Show the version of docbuilder."""
    console.print(f"[bold cyan]docbuilder[/bold cyan] v{__version__}")
    console.print("Package documentation builder")


if __name__ == "__main__":
    app()
