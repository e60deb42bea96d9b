"""
Tracking of anonymous work.

While a session is not bound to a persisted project, the latest conversation
and file snapshot are mirrored into an `AnonWorkStore` so they can be moved
into a real project once the user signs in.
"""

import copy
import logging
from typing import Any, Protocol

from uigen_mcp.models.project import AnonWorkRecord
from uigen_mcp.vfs.file_tree import FileTree

logger = logging.getLogger(__name__)


class AnonWorkStore(Protocol):
    """Storage for the single latest piece of anonymous work."""

    def get_anon_work_data(self) -> AnonWorkRecord | None: ...

    def set_anon_work(self, messages: list[dict[str, Any]], snapshot: dict[str, str]) -> None: ...

    def clear_anon_work(self) -> None: ...


class InMemoryAnonWorkStore:
    """Process-local AnonWorkStore. Stores detached copies only."""

    def __init__(self) -> None:
        self._record: AnonWorkRecord | None = None

    def get_anon_work_data(self) -> AnonWorkRecord | None:
        if self._record is None:
            return None
        return self._record.model_copy(deep=True)

    def set_anon_work(self, messages: list[dict[str, Any]], snapshot: dict[str, str]) -> None:
        self._record = AnonWorkRecord(
            messages=copy.deepcopy(messages),
            file_system_data=dict(snapshot),
        )

    def clear_anon_work(self) -> None:
        self._record = None


class AnonWorkMirror:
    """Keeps the anonymous work store in sync with an unbound session."""

    def __init__(self, store: AnonWorkStore) -> None:
        self.store = store

    def observe(self, messages: list[dict[str, Any]], file_tree: FileTree, project_id: str | None) -> bool:
        """
        Overwrites the stored record with the current (messages, snapshot) pair.

        Nothing is written when the session is bound to a project or when
        there are no messages yet.

        Returns:
            True if the store was updated.
        """
        if project_id or not messages:
            return False
        self.store.set_anon_work(messages, file_tree.serialize())
        logger.debug(f"Mirrored anonymous work: {len(messages)} messages, {len(file_tree)} files")
        return True
