import posixpath

from uigen_mcp.vfs.errors import InvalidPathError


def normalize_path(path_str: str) -> str:
    """
    Normalizes a user-provided path to the canonical form used as a tree key.

    Args:
        path_str: The path string provided by the model or a snapshot.

    Returns:
        An absolute, slash-separated path with a single leading slash and no
        trailing slash. The root is returned as "/".

    Raises:
        InvalidPathError: If the path is not a string, is empty, or escapes the root.
    """
    if not isinstance(path_str, str):
        raise InvalidPathError(f"Path must be a string, got: {type(path_str).__name__}")

    stripped = path_str.strip()
    if not stripped:
        raise InvalidPathError("Path must not be empty.")

    # Windows-style separators from the model are treated as plain slashes.
    stripped = stripped.replace("\\", "/")
    if ".." in stripped.split("/"):
        raise InvalidPathError(f"Path '{path_str}' must not contain '..' segments.")

    normalized = posixpath.normpath("/" + stripped.lstrip("/"))
    # normpath keeps a leading '//' as-is on POSIX
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def file_name(path_str: str | None, default: str = "file") -> str:
    """Returns the last segment of a path, or `default` if there is none."""
    if not path_str:
        return default
    name = path_str.rstrip("/").split("/")[-1]
    return name or default


def is_under(path: str, directory: str) -> bool:
    """Checks whether a normalized path lies strictly below a directory."""
    if directory == "/":
        return path != "/"
    return path.startswith(directory + "/")
