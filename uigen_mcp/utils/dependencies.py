"""
Configuration and dependency management for the UIGen MCP server.
"""

import logging
from functools import lru_cache

from uigen_mcp.tools.base import Tool
from uigen_mcp.tools.edit_tool import TextEditorTool
from uigen_mcp.tools.file_manager_tool import FileManagerTool
from uigen_mcp.utils.config import ServiceConfig
from uigen_mcp.utils.session_manager import SessionManager

logger = logging.getLogger(__name__)


@lru_cache
def get_base_config() -> ServiceConfig:
    """
    Retrieves the base server configuration from environment variables.

    This function is cached to avoid repeatedly reading and parsing environment
    variables and .env files.

    Returns:
        A cached instance of the ServiceConfig.
    """
    return ServiceConfig()


@lru_cache
def get_session_manager() -> SessionManager:
    """Returns the singleton SessionManager holding every project session."""
    logger.info("Initializing SessionManager singleton.")
    return SessionManager(tools=get_session_tools())


# --- Tool Providers ---

@lru_cache
def get_text_editor_tool_provider() -> TextEditorTool:
    """Returns a cached instance of the TextEditorTool."""
    logger.info("Initializing TextEditorTool singleton.")
    config = get_base_config()
    return TextEditorTool(
        max_response_len=config.MAX_RESPONSE_LEN,
        snippet_lines=config.SNIPPET_LINES,
    )


@lru_cache
def get_file_manager_tool_provider() -> FileManagerTool:
    """Returns a cached instance of the FileManagerTool."""
    logger.info("Initializing FileManagerTool singleton.")
    return FileManagerTool()


def get_session_tools() -> list[Tool]:
    """The tools every session sequencer dispatches to."""
    return [get_text_editor_tool_provider(), get_file_manager_tool_provider()]
