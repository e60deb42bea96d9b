"""
Entry point of the UIGen MCP server: loads the .env file, configures logging
from ServiceConfig and runs the server on the configured transport.
"""

import logging
import sys

from dotenv import load_dotenv

from uigen_mcp.utils.config import ServiceConfig
from uigen_mcp.utils.dependencies import get_base_config


def configure_logging(config: ServiceConfig) -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        # stdout carries the MCP stdio protocol
        stream=sys.stderr,
    )


def run_server() -> None:
    # .env must be loaded before the cached config is first built
    load_dotenv()
    config = get_base_config()
    configure_logging(config)

    # The server module registers its tools at import time, against the loaded config.
    from uigen_mcp.server import mcp_app

    logger = logging.getLogger(__name__)
    if config.MCP_TRANSPORT == "stdio":
        logger.info("Starting UIGen MCP server on stdio")
    else:
        logger.info(
            "Starting UIGen MCP server (%s) on %s:%s",
            config.MCP_TRANSPORT,
            config.MCP_HOST,
            config.MCP_PORT,
        )
    mcp_app.run(transport=config.MCP_TRANSPORT)


if __name__ == "__main__":
    run_server()
