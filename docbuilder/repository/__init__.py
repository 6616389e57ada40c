"""Repository cloning and directory management for documentation builds."""

from .manager import RepositoryManager, CloneProgress, remove_directory, reset_directory

__all__ = ["RepositoryManager", "CloneProgress", "remove_directory", "reset_directory"]
