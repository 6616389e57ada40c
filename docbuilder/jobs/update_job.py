"""
Documentation update job.

Runs the configured documentation generator for one package. The job is
given only the package id; everything else (clone location, output and cache
directories, title) comes from the registry and the settings.
"""

import shlex
import logging
import subprocess
from collections import deque
from pathlib import Path
from typing import Optional, Dict, Any, List

from rich.console import Console

from docbuilder.config import Settings
from docbuilder.errors import DocBuildError
from docbuilder.schemas import Package, DocConfiguration
from docbuilder.store import PackageStore

logger = logging.getLogger(__name__)

OUTPUT_TAIL_LINES = 20


class UpdateJob:
    """Builds documentation for a single package with an external generator."""

    def __init__(self, settings: Settings, store: PackageStore, console: Optional[Console] = None):
        self.settings = settings
        self.store = store
        self.console = console or Console()

    def run(self, args: Dict[str, Any]) -> Path:
        """Generate documentation for the package identified by `args["id"]`.

        Args:
            args: Job arguments; must contain the package ``id``

        Returns:
            Directory the documentation was written to

        Raises:
            DocBuildError: If the package or its configuration cannot be
                found, or the generator fails
        """
        if "id" not in args:
            raise DocBuildError("Update job requires a package id")

        package = self.store.find_package(args["id"])
        if package is None:
            raise DocBuildError(f"No package with id {args['id']}")

        config = self.store.find_doc_configuration(package)
        if config is None:
            raise DocBuildError(f"Package {package.name} has no documentation configuration")
        if not config.repository_path:
            raise DocBuildError(f"Package {package.name} has not been cloned yet")

        build_dir = config.build_dir(package.fqn)
        command = self.build_command(package, config)

        logger.info("Building documentation for %s: %s", package.name, " ".join(command))
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise DocBuildError(f"Unable to start documentation generator '{command[0]}': {e}")

        # Keep the tail of the output for the error message
        tail = deque(maxlen=OUTPUT_TAIL_LINES)
        with process:
            for line in process.stdout:
                line = line.rstrip()
                tail.append(line)
                self.console.print(line, markup=False, highlight=False)
            returncode = process.wait()

        if returncode != 0:
            raise DocBuildError(
                f"Documentation generator exited with status {returncode}: " + "\n".join(tail)
            )

        logger.info("Documentation for %s written to %s", package.name, build_dir)
        return build_dir

    def build_command(self, package: Package, config: DocConfiguration) -> List[str]:
        """Expand the generator command template for a package.

        The template is split shell-style first, so substituted paths with
        spaces stay a single argument.
        """
        values = {
            "source_dir": str(Path(config.repository_path) / config.source_dir),
            "build_dir": str(config.build_dir(package.fqn)),
            "cache_dir": str(self.settings.generator_cache_dir(package.fqn)),
            "title": config.title or package.name,
            "fqn": package.fqn,
            "name": package.name,
        }

        try:
            return [part.format(**values) for part in shlex.split(self.settings.doc_command)]
        except (KeyError, ValueError) as e:
            raise DocBuildError(f"Invalid documentation command template '{self.settings.doc_command}': {e}")
