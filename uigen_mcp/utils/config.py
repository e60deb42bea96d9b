"""Service configuration definition."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from uigen_mcp.tools.utils import constants


class ServiceConfig(BaseSettings):
    """
    Defines the configuration for the UIGen MCP server, loaded from environment
    variables or a .env file.
    """

    # We do not specify env_file here.
    # Environment loading is handled explicitly in main.py via load_dotenv.
    model_config = SettingsConfigDict(extra="ignore")

    # MCP Server transport mechanism (e.g., "stdio", "sse", "streamable-http")
    MCP_TRANSPORT: str = "stdio"
    # Host for the MCP server to bind to. Defaults to 0.0.0.0 for accessibility.
    MCP_HOST: str = "0.0.0.0"
    # Port for the MCP server to listen on.
    MCP_PORT: int = 8660
    # Longest tool output returned to the model before it is clipped.
    MAX_RESPONSE_LEN: int = constants.MAX_RESPONSE_LEN
    # Lines of context shown around an edit.
    SNIPPET_LINES: int = constants.SNIPPET_LINES
    # Root logging level, applied by main.py.
    LOG_LEVEL: str = "INFO"
