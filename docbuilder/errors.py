"""Exception types raised while building package documentation."""


class DocBuilderError(RuntimeError):
    """Base class for all docbuilder errors."""


class PackageNotFoundError(DocBuilderError):
    """Raised when a package named on the command line is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid project: package '{name}' not found")


class CloneError(DocBuilderError):
    """Raised when `git clone` exits with a non-zero status."""

    def __init__(self, url: str, directory: str, reason: str = ""):
        self.url = url
        self.directory = directory
        self.reason = reason
        message = f"Unable to clone package from {url} into {directory}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DocBuildError(DocBuilderError):
    """Raised by the documentation job when the generator cannot run or fails."""


class RegistryError(DocBuilderError):
    """Raised when the package registry file cannot be read."""
