"""JSON-backed package registry.

The registry holds packages together with their clone and documentation
configurations. It is the persistence layer the build pipeline reads from
and writes updated repository paths back to.
"""

import json
import logging
from pathlib import Path
from typing import Optional, List, Dict, Any

from pydantic import ValidationError

from docbuilder.errors import RegistryError
from docbuilder.schemas import Package, CloneConfiguration, DocConfiguration

logger = logging.getLogger(__name__)


class PackageStore:
    """Reads and writes packages and their configurations in a JSON file."""

    def __init__(self, registry_file: Path):
        """Initialize the store.

        Args:
            registry_file: Path to the registry JSON file. A missing file is
                treated as an empty registry and created on first write.
        """
        self.registry_file = Path(registry_file)

    def _read_registry(self) -> Dict[str, Any]:
        """Read registry file."""
        if not self.registry_file.exists():
            return {"packages": [], "clone_configurations": [], "doc_configurations": []}

        try:
            with open(self.registry_file, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise RegistryError(f"Registry {self.registry_file} is not valid JSON: {e}")

        data.setdefault("packages", [])
        data.setdefault("clone_configurations", [])
        data.setdefault("doc_configurations", [])
        return data

    def _write_registry(self, data: Dict[str, Any]) -> None:
        """Write registry file."""
        self.registry_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.registry_file, 'w') as f:
            json.dump(data, f, indent=2)

    def _parse(self, model, entries: List[Dict[str, Any]]) -> list:
        try:
            return [model(**entry) for entry in entries]
        except ValidationError as e:
            raise RegistryError(f"Registry {self.registry_file} has an invalid {model.__name__}: {e}")

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    def list_packages(self) -> List[Package]:
        """Return every package in the registry."""
        return self._parse(Package, self._read_registry()["packages"])

    def find_package(self, package_id: int) -> Optional[Package]:
        """Look up a package by id."""
        return next((p for p in self.list_packages() if p.id == package_id), None)

    def find_package_by_name(self, name: str) -> Optional[Package]:
        """Look up exactly one package by name.

        Returns:
            The package, or None if no package has this name
        """
        return next((p for p in self.list_packages() if p.name == name), None)

    def add_package(
        self,
        package: Package,
        clone_configuration: Optional[CloneConfiguration] = None,
        doc_configuration: Optional[DocConfiguration] = None,
    ) -> None:
        """Add or replace a package and, optionally, its configurations."""
        data = self._read_registry()

        data["packages"] = [p for p in data["packages"] if p["id"] != package.id]
        data["packages"].append(package.model_dump())
        data["packages"].sort(key=lambda p: p["id"])

        if clone_configuration is not None:
            data["clone_configurations"] = [
                c for c in data["clone_configurations"] if c["package_id"] != package.id
            ]
            data["clone_configurations"].append(clone_configuration.model_dump())

        if doc_configuration is not None:
            data["doc_configurations"] = [
                c for c in data["doc_configurations"] if c["package_id"] != package.id
            ]
            data["doc_configurations"].append(doc_configuration.model_dump())

        self._write_registry(data)

    # ------------------------------------------------------------------
    # Configurations
    # ------------------------------------------------------------------

    def find_clone_configuration(self, package: Package) -> Optional[CloneConfiguration]:
        """Return the clone configuration of a package, if any."""
        configs = self._parse(CloneConfiguration, self._read_registry()["clone_configurations"])
        return next((c for c in configs if c.package_id == package.id), None)

    def find_doc_configuration(self, package: Package) -> Optional[DocConfiguration]:
        """Return the documentation configuration of a package, if any."""
        configs = self._parse(DocConfiguration, self._read_registry()["doc_configurations"])
        return next((c for c in configs if c.package_id == package.id), None)

    def find_enabled_doc_configurations(self) -> List[DocConfiguration]:
        """Return doc configurations that are enabled and belong to an enabled package.

        Configurations whose package is missing from the registry are ignored.
        """
        data = self._read_registry()
        packages = {p.id: p for p in self._parse(Package, data["packages"])}
        configs = self._parse(DocConfiguration, data["doc_configurations"])

        enabled = []
        for config in configs:
            package = packages.get(config.package_id)
            if package is None:
                logger.warning("Doc configuration references unknown package id %s", config.package_id)
                continue
            if config.enabled and package.enabled:
                enabled.append(config)
        return enabled

    def save_doc_configuration(self, config: DocConfiguration) -> None:
        """Persist a documentation configuration, replacing the package's previous one."""
        data = self._read_registry()

        data["doc_configurations"] = [
            c for c in data["doc_configurations"] if c["package_id"] != config.package_id
        ]
        data["doc_configurations"].append(config.model_dump())
        data["doc_configurations"].sort(key=lambda c: c["package_id"])

        self._write_registry(data)
        logger.debug("Saved doc configuration for package %s", config.package_id)
