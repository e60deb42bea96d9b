"""
In-memory file tree for a single project session.

Files are stored in a flat mapping keyed by normalized absolute path.
Directories are never stored; a directory exists whenever at least one file
lives below it.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Literal, Mapping

from uigen_mcp.utils.path_utils import is_under, normalize_path
from uigen_mcp.vfs.errors import (
    InvalidPathError,
    PathConflictError,
    PathNotFoundError,
    SnapshotError,
)

logger = logging.getLogger(__name__)

NodeKind = Literal["file", "directory"]


@dataclass(frozen=True)
class FileNode:
    """A read-only view of one entry of the tree."""

    path: str
    kind: NodeKind
    content: str | None = None

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1] or "/"


class FileTree:
    """Owns every file of a project and the path -> content mapping."""

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self._files: dict[str, str] = {}
        if files:
            self.restore(files)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            return self.exists(path)
        except InvalidPathError:
            return False

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._files))

    def paths(self) -> list[str]:
        """Returns all file paths in sorted order."""
        return sorted(self._files)

    def _file_key(self, path: str) -> str:
        key = normalize_path(path)
        if key == "/":
            raise InvalidPathError("The root directory cannot be used as a file path.", key)
        return key

    def _check_parents(self, key: str) -> None:
        # A file cannot also act as the directory of another file.
        parent = key.rsplit("/", 1)[0]
        while parent:
            if parent in self._files:
                raise PathConflictError(parent)
            parent = parent.rsplit("/", 1)[0]

    def is_file(self, path: str) -> bool:
        key = normalize_path(path)
        return key in self._files

    def is_directory(self, path: str) -> bool:
        key = normalize_path(path)
        if key == "/":
            return True
        return any(is_under(existing, key) for existing in self._files)

    def exists(self, path: str) -> bool:
        return self.is_file(path) or self.is_directory(path)

    def get(self, path: str) -> str:
        """
        Returns the content of the file at `path`.

        Raises:
            PathNotFoundError: If no file exists at the path.
        """
        key = self._file_key(path)
        try:
            return self._files[key]
        except KeyError:
            raise PathNotFoundError(key) from None

    def get_node(self, path: str) -> FileNode:
        key = normalize_path(path)
        if key in self._files:
            return FileNode(path=key, kind="file", content=self._files[key])
        if self.is_directory(key):
            return FileNode(path=key, kind="directory")
        raise PathNotFoundError(key)

    def set(self, path: str, content: str) -> None:
        """Creates or overwrites the file at `path`."""
        key = self._file_key(path)
        if not isinstance(content, str):
            raise TypeError(f"File content must be a string, got: {type(content).__name__}")
        if self.is_directory(key):
            raise PathConflictError(key)
        self._check_parents(key)
        logger.debug(f"Writing {key}, content length: {len(content)}")
        self._files[key] = content

    def remove(self, path: str) -> list[str]:
        """
        Removes a file, or every file below a directory.

        Returns:
            The removed file paths.

        Raises:
            PathNotFoundError: If nothing exists at the path.
        """
        key = normalize_path(path)
        if key in self._files:
            del self._files[key]
            logger.debug(f"Removed file {key}")
            return [key]

        removed = sorted(existing for existing in self._files if is_under(existing, key))
        if not removed:
            raise PathNotFoundError(key)
        self._files = {p: c for p, c in self._files.items() if not is_under(p, key)}
        logger.debug(f"Removed directory {key} with {len(removed)} files")
        return removed

    def rename(self, old_path: str, new_path: str) -> dict[str, str]:
        """
        Moves a file, or every file below a directory, to a new location.

        The new mapping is built completely before it replaces the old one,
        so readers observe either the old or the new key, never both.

        Returns:
            A mapping of moved old paths to their new paths.

        Raises:
            PathNotFoundError: If the source does not exist.
            PathConflictError: If any destination path is occupied.
        """
        old_key = normalize_path(old_path)
        new_key = self._file_key(new_path)

        if old_key in self._files:
            moves = {old_key: new_key}
        else:
            moves = {
                existing: new_key + existing[len(old_key):]
                for existing in self._files
                if is_under(existing, old_key)
            }
            if not moves:
                raise PathNotFoundError(old_key)

        if old_key == new_key:
            raise PathConflictError(new_key)
        if is_under(new_key, old_key):
            raise InvalidPathError(f"Cannot move {old_key} into itself ({new_key}).", new_key)
        if self.exists(new_key):
            raise PathConflictError(new_key)
        self._check_parents(new_key)

        renamed = {p: c for p, c in self._files.items() if p not in moves}
        for source, target in moves.items():
            if target in renamed:
                raise PathConflictError(target)
            renamed[target] = self._files[source]
        self._files = renamed
        logger.debug(f"Renamed {old_key} to {new_key} ({len(moves)} files)")
        return moves

    def list_directory(self, path: str = "/") -> list[FileNode]:
        """
        Lists the immediate children of a directory, directories first.

        Raises:
            PathNotFoundError: If the directory does not exist.
        """
        key = normalize_path(path)
        if not self.is_directory(key):
            raise PathNotFoundError(key)

        prefix = "/" if key == "/" else key + "/"
        directories: set[str] = set()
        files: list[FileNode] = []
        for existing, content in self._files.items():
            if not existing.startswith(prefix):
                continue
            head, sep, _ = existing[len(prefix):].partition("/")
            if sep:
                directories.add(prefix + head)
            else:
                files.append(FileNode(path=existing, kind="file", content=content))

        entries = [FileNode(path=d, kind="directory") for d in sorted(directories)]
        entries.extend(sorted(files, key=lambda node: node.path))
        return entries

    def serialize(self) -> dict[str, str]:
        """Returns a detached copy of the path -> content mapping."""
        return dict(self._files)

    def restore(self, snapshot: Mapping[str, str]) -> None:
        """
        Replaces the whole tree with the content of a snapshot.

        The snapshot is validated in full before anything is replaced.

        Raises:
            SnapshotError: If a key or value is invalid, or two keys collide.
        """
        restored: dict[str, str] = {}
        for raw_path, content in snapshot.items():
            try:
                key = self._file_key(raw_path)
            except InvalidPathError as e:
                raise SnapshotError(f"Invalid snapshot path {raw_path!r}: {e}", str(raw_path)) from e
            if not isinstance(content, str):
                raise SnapshotError(f"Snapshot content for {key} must be a string.", key)
            if key in restored:
                raise SnapshotError(f"Snapshot contains duplicate path {key}.", key)
            restored[key] = content

        for key in restored:
            if any(is_under(other, key) for other in restored):
                raise SnapshotError(f"Snapshot path {key} is both a file and a directory.", key)

        self._files = restored
        logger.debug(f"Restored tree with {len(restored)} files")
