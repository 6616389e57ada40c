"""Repository cloning and directory lifecycle for documentation builds."""

import os
import logging
from pathlib import Path
from typing import Optional, Union

import git
from git import RemoteProgress, GitCommandError
from rich.console import Console

from docbuilder.errors import CloneError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def remove_directory(directory: PathLike) -> None:
    """Empty a directory tree bottom-up and remove the directory itself.

    Files and directories that disappear while the tree is being walked are
    treated as already removed. A missing directory is a no-op, and a
    symlink is unlinked without touching its target.

    Args:
        directory: Directory to remove
    """
    directory = Path(directory)
    if directory.is_symlink():
        directory.unlink()
        return
    if not directory.exists():
        return

    # Walk the directory tree from bottom up so children go before parents
    for root, dirs, files in os.walk(directory, topdown=False):
        root_path = Path(root)

        for file in files:
            try:
                (root_path / file).unlink()
            except FileNotFoundError:
                pass

        for name in dirs:
            dir_path = root_path / name
            try:
                if dir_path.is_symlink():
                    dir_path.unlink()
                else:
                    dir_path.rmdir()
            except FileNotFoundError:
                pass

    try:
        directory.rmdir()
    except FileNotFoundError:
        pass


def reset_directory(directory: PathLike) -> Path:
    """Remove a directory if it exists and recreate it empty, parents included.

    Args:
        directory: Directory to reset

    Returns:
        The recreated directory
    """
    directory = Path(directory)
    if directory.exists() or directory.is_symlink():
        if directory.is_dir() and not directory.is_symlink():
            remove_directory(directory)
        else:
            directory.unlink()

    directory.mkdir(parents=True, exist_ok=True)
    return directory


class CloneProgress(RemoteProgress):
    """Writes git's clone output to the console line by line as it arrives."""

    def __init__(self, console: Console):
        super().__init__()
        self.console = console

    def update(self, op_code, cur_count, max_count=None, message=""):
        self.console.print(self._cur_line, markup=False, highlight=False)

    def line_dropped(self, line):
        self.console.print(line, markup=False, highlight=False)


class RepositoryManager:
    """Clones package repositories for documentation builds."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def clone(self, url: str, directory: PathLike) -> Path:
        """Run `git clone <url> <directory>`, streaming git's output.

        Args:
            url: Repository URL (usually the package's SSH URL)
            directory: Target directory; must be missing or empty

        Returns:
            The directory the repository was cloned into

        Raises:
            CloneError: If git exits with a non-zero status
        """
        directory = Path(directory)
        logger.info("Cloning %s into %s", url, directory)

        try:
            git.Repo.clone_from(url, directory, progress=CloneProgress(self.console))
        except GitCommandError as e:
            reason = (e.stderr or "").strip() or f"git exited with status {e.status}"
            logger.error("Clone of %s failed: %s", url, reason)
            raise CloneError(url, str(directory), reason)

        logger.info("Cloned %s", url)
        return directory
