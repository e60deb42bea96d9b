"""Errors raised by the in-memory file tree."""


class FileTreeError(Exception):
    """Base class for all file tree conditions."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidPathError(FileTreeError):
    """The path cannot be used as a file tree key."""


class PathNotFoundError(FileTreeError):
    """No file or directory exists at the path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"The path {path} does not exist.", path)


class PathConflictError(FileTreeError):
    """The destination path is already occupied."""

    def __init__(self, path: str) -> None:
        super().__init__(f"The path {path} already exists.", path)


class SnapshotError(FileTreeError):
    """A snapshot could not be converted into a file tree."""
