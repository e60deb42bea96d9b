"""
MCP server definition for the UIGen MCP.
"""

import logging
from typing import Any, List, Optional

from fastapi.middleware.cors import CORSMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware

from mcp.server.fastmcp import Context, FastMCP

from uigen_mcp.prompts import get_prompt
from uigen_mcp.utils.config import ServiceConfig
from uigen_mcp.utils.dependencies import (
    get_base_config,
    get_file_manager_tool_provider,
    get_session_manager,
    get_text_editor_tool_provider,
)
from uigen_mcp.vfs.errors import SnapshotError


# Get a module-level logger
logger = logging.getLogger(__name__)


class CustomFastMCP(FastMCP):
    """Custom FastMCP server with CORS middleware."""

    def _add_cors_middleware(self, app: Starlette) -> Starlette:
        """A helper to add CORS middleware to a Starlette app."""
        app.user_middleware.insert(
            0,
            Middleware(
                CORSMiddleware,
                allow_origin_regex=".*",  # Allow any origin
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        )
        app.middleware_stack = app.build_middleware_stack()
        return app

    def sse_app(self, mount_path: str | None = None) -> Starlette:
        """Overrides the default sse_app to inject CORS middleware."""
        app = super().sse_app(mount_path)
        return self._add_cors_middleware(app)

    def streamable_http_app(self) -> Starlette:
        """Overrides the default streamable_http_app to inject CORS middleware."""
        app = super().streamable_http_app()
        return self._add_cors_middleware(app)


def build_server(config: ServiceConfig) -> CustomFastMCP:
    """Build and configure the FastMCP server instance.

    Args:
        config: The server's service configuration.

    Returns:
        A configured CustomFastMCP instance.
    """
    logger.info(
        "Initializing FastMCP server",
        extra={"host": config.MCP_HOST, "port": config.MCP_PORT},
    )
    return CustomFastMCP(
        "uigen-mcp",
        host=config.MCP_HOST,
        port=config.MCP_PORT,
    )

# Get the base configuration for server initialization.
# This is also imported by main.py to run the server.
server_config = get_base_config()
mcp_app = build_server(server_config)


async def apply_tool_call(tool_name: str, args: dict[str, Any], session_id: str) -> dict[str, Any]:
    """Runs one complete tool call through the session's sequencer."""
    session = get_session_manager().get_session(session_id)
    # Filter out None values so we don't pass them to the tool
    args = {k: v for k, v in args.items() if v is not None}
    call = await session.sequencer.run(tool_name, args)
    response = call.result.to_dict()
    response["tool_call_id"] = call.tool_call_id
    response["label"] = session.sequencer.status(call.tool_call_id).label
    return response


# --- Prompt Handlers ---
@mcp_app.prompt(title="UI Generation System Prompt")
def get_system_prompt() -> str:
    """Provides the main system prompt for the agent."""
    return get_prompt("agent-system-prompt")

# --- Tool Definitions ---

# Descriptions come from the tool classes.
@mcp_app.tool(name="str_replace_editor", description=get_text_editor_tool_provider().get_description())
async def str_replace_editor_tool(
    context: Context,
    command: str,
    path: str,
    file_text: Optional[str] = None,
    old_str: Optional[str] = None,
    new_str: Optional[str] = None,
    insert_line: Optional[int] = None,
    view_range: Optional[List[int]] = None,
    session_id: str = "default",
) -> dict[str, Any]:
    """Forwards a str_replace_editor call to the session sequencer."""
    logger.info(f"Executing str_replace_editor command '{command}' on path '{path}'")
    try:
        return await apply_tool_call(
            "str_replace_editor",
            {
                "command": command,
                "path": path,
                "file_text": file_text,
                "old_str": old_str,
                "new_str": new_str,
                "insert_line": insert_line,
                "view_range": view_range,
            },
            session_id,
        )
    except Exception as e:
        logger.error(f"Error executing str_replace_editor command: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool(name="file_manager", description=get_file_manager_tool_provider().get_description())
async def file_manager_tool(
    context: Context,
    command: str,
    path: str,
    new_path: Optional[str] = None,
    session_id: str = "default",
) -> dict[str, Any]:
    """Forwards a file_manager call to the session sequencer."""
    logger.info(f"Executing file_manager command '{command}' on path '{path}'")
    try:
        return await apply_tool_call(
            "file_manager",
            {"command": command, "path": path, "new_path": new_path},
            session_id,
        )
    except Exception as e:
        logger.error(f"Error executing file_manager command: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "exit_code": 1}


@mcp_app.tool()
async def get_project_files(context: Context, session_id: str = "default") -> dict[str, Any]:
    """
    Returns the full content of every file of the project.

    Args:
        session_id: The project session to read.

    Returns:
        A dictionary mapping each file path to its content.
    """
    session = get_session_manager().get_session(session_id)
    return {"status": "success", "files": session.file_tree.serialize(), "project_id": session.project_id}


@mcp_app.tool()
async def load_project_files(
    context: Context,
    files: dict[str, str],
    session_id: str = "default",
    project_id: Optional[str] = None,
) -> dict[str, Any]:
    """
    Starts a session from a persisted project snapshot, replacing its files.

    Args:
        files: Mapping of file path to file content.
        session_id: The project session to (re)open.
        project_id: The persisted project the files belong to, if any.

    Returns:
        A dictionary with the number of files loaded.
    """
    logger.info(f"Loading {len(files)} files into session '{session_id}'")
    try:
        session = get_session_manager().open_session(session_id, files, project_id)
    except SnapshotError as e:
        logger.error(f"Rejected project snapshot: {e}")
        return {"status": "error", "error": str(e), "exit_code": 1}
    return {"status": "success", "result": f"Loaded {len(session.file_tree)} files", "exit_code": 0}
