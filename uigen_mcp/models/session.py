from dataclasses import dataclass, field

from uigen_mcp.anon_work import AnonWorkMirror, AnonWorkStore, InMemoryAnonWorkStore
from uigen_mcp.engine.sequencer import ToolCallSequencer
from uigen_mcp.tools.base import Tool
from uigen_mcp.vfs.file_tree import FileTree
from uigen_mcp.vfs.snapshot import build_request_body, restore_tree, tree_from_snapshot


@dataclass
class ProjectSession:
    """Everything owned by one chat session: its file tree, sequencer and anonymous work mirror."""

    session_id: str
    file_tree: FileTree = field(default_factory=FileTree)
    project_id: str | None = None
    messages: list[dict] = field(default_factory=list)
    anon_store: AnonWorkStore = field(default_factory=InMemoryAnonWorkStore)
    tools: list[Tool] | None = None
    sequencer: ToolCallSequencer = field(init=False)
    anon_mirror: AnonWorkMirror = field(init=False)

    def __post_init__(self) -> None:
        self.sequencer = ToolCallSequencer(self.file_tree, self.tools)
        self.anon_mirror = AnonWorkMirror(self.anon_store)
        # Tree changes are observable too, not only new messages.
        self.sequencer.add_listener(lambda _call: self._mirror())

    def _mirror(self) -> None:
        self.anon_mirror.observe(self.messages, self.file_tree, self.project_id)

    @classmethod
    def from_snapshot(
        cls,
        session_id: str,
        snapshot: dict[str, str] | None = None,
        project_id: str | None = None,
        messages: list[dict] | None = None,
        tools: list[Tool] | None = None,
    ) -> "ProjectSession":
        return cls(
            session_id=session_id,
            file_tree=tree_from_snapshot(snapshot),
            project_id=project_id,
            messages=list(messages or []),
            tools=tools,
        )

    def bind_project(self, project_id: str) -> None:
        """Binds the session to a persisted project; anonymous mirroring stops."""
        self.project_id = project_id

    def set_messages(self, messages: list[dict]) -> None:
        """Records the latest conversation and lets the anonymous work mirror observe it."""
        self.messages = list(messages)
        self._mirror()

    def load_snapshot(self, snapshot: dict[str, str] | None) -> None:
        """Replaces the session tree with a persisted snapshot; invalid input leaves it untouched."""
        restore_tree(self.file_tree, snapshot)

    def request_body(self) -> dict:
        return build_request_body(self.file_tree, self.messages, self.project_id)
