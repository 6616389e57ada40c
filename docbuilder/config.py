"""Runtime settings for docbuilder, read from the environment and `.env` files."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field

DEFAULT_DOC_COMMAND = "sphinx-build -b html -d {cache_dir} {source_dir} {build_dir}"


class Settings(BaseModel):
    """Paths and commands shared by every build."""
    cache_dir: Path = Field(default=Path("./cache"), description="Root for clones, generator caches and logs")
    registry_path: Optional[Path] = Field(None, description="Package registry JSON file")
    doc_command: str = Field(default=DEFAULT_DOC_COMMAND, description="Documentation generator command template")

    @classmethod
    def from_env(
        cls,
        cache_dir: Optional[Path] = None,
        registry_path: Optional[Path] = None,
    ) -> "Settings":
        """Build settings from DOCBUILDER_* variables.

        Explicit arguments take precedence over the environment.
        """
        load_dotenv(find_dotenv(usecwd=True))

        env_cache_dir = os.getenv("DOCBUILDER_CACHE_DIR")
        env_registry = os.getenv("DOCBUILDER_REGISTRY")

        return cls(
            cache_dir=Path(cache_dir or env_cache_dir or "./cache").resolve(),
            registry_path=Path(registry_path or env_registry).resolve() if (registry_path or env_registry) else None,
            doc_command=os.getenv("DOCBUILDER_DOC_COMMAND") or DEFAULT_DOC_COMMAND,
        )

    @property
    def registry_file(self) -> Path:
        return self.registry_path or self.cache_dir / "packages.json"

    def clone_dir(self, fqn: str) -> Path:
        """Directory a package repository is cloned into."""
        return self.cache_dir / "cloned_project" / fqn

    def generator_cache_dir(self, fqn: str) -> Path:
        """Cache directory handed to the documentation generator."""
        return self.cache_dir / "sami" / fqn

    @property
    def build_log_file(self) -> Path:
        return self.cache_dir / "logs" / "build.jsonl"
