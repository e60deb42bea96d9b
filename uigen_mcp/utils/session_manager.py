import logging

from uigen_mcp.models.session import ProjectSession
from uigen_mcp.tools.base import Tool

logger = logging.getLogger(__name__)


class SessionManager:
    """Manages the project sessions of all connected clients."""

    def __init__(self, tools: list[Tool] | None = None) -> None:
        # Simple dict as an in-process session storage.
        self._storage: dict[str, ProjectSession] = {}
        self._tools = tools

    def get_session(self, session_id: str = "default") -> ProjectSession:
        """Returns or creates the session with an empty file tree."""
        if session_id not in self._storage:
            logger.info(f"Creating project session {session_id}")
            self._storage[session_id] = ProjectSession(session_id=session_id, tools=self._tools)
        return self._storage[session_id]

    def open_session(
        self,
        session_id: str,
        snapshot: dict[str, str] | None = None,
        project_id: str | None = None,
        messages: list[dict] | None = None,
    ) -> ProjectSession:
        """
        Starts a fresh session, hydrated from a persisted snapshot if one is given.

        An invalid snapshot raises before the existing session is replaced.
        """
        session = ProjectSession.from_snapshot(session_id, snapshot, project_id, messages, self._tools)
        self._storage[session_id] = session
        logger.info(f"Opened project session {session_id} with {len(session.file_tree)} files")
        return session

    def close_session(self, session_id: str) -> bool:
        return self._storage.pop(session_id, None) is not None
