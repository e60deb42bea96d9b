"""Conversion of file trees to and from transport-safe snapshots."""

import json
import logging
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from uigen_mcp.vfs.errors import SnapshotError
from uigen_mcp.vfs.file_tree import FileTree

logger = logging.getLogger(__name__)

Snapshot = dict[str, str]

_snapshot_adapter: TypeAdapter[Snapshot] = TypeAdapter(Snapshot)


def validate_snapshot(data: Any) -> Snapshot:
    """
    Validates an inbound snapshot and returns a detached copy of it.

    Raises:
        SnapshotError: If the data is not a mapping of strings to strings.
    """
    if data is None:
        return {}
    if isinstance(data, Mapping):
        data = dict(data)
    try:
        return dict(_snapshot_adapter.validate_python(data, strict=True))
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e.error_count()} validation error(s): {e}") from e


def serialize_tree(tree: FileTree) -> Snapshot:
    return tree.serialize()


def restore_tree(tree: FileTree, snapshot: Mapping[str, str] | None) -> None:
    """Replaces the content of `tree` with the snapshot, atomically."""
    tree.restore(validate_snapshot(snapshot))


def tree_from_snapshot(snapshot: Mapping[str, str] | None = None) -> FileTree:
    """Builds a fresh tree for a new session, seeded from a snapshot if given."""
    tree = FileTree()
    restore_tree(tree, snapshot)
    logger.info(f"Hydrated file tree with {len(tree)} files")
    return tree


def snapshot_to_json(snapshot: Mapping[str, str]) -> str:
    return json.dumps(dict(snapshot), sort_keys=True)


def snapshot_from_json(text: str | None) -> Snapshot:
    """Parses the JSON form of a snapshot, as stored in a persisted project."""
    if not text:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    return validate_snapshot(data)


def build_request_body(
    tree: FileTree,
    messages: list[dict[str, Any]],
    project_id: str | None = None,
) -> dict[str, Any]:
    """
    Builds the outbound chat request body.

    The full content of every file is included so the model always reasons
    over the current project rather than a diff.
    """
    body: dict[str, Any] = {
        "messages": [dict(message) for message in messages],
        "files": serialize_tree(tree),
    }
    if project_id:
        body["projectId"] = project_id
    return body
