"""Package registry persistence."""

from .manager import PackageStore

__all__ = ["PackageStore"]
