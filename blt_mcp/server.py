"""BLT MCP server implementation.

This module provides the MCP server wrapper that:
1. Builds the BLT API client from the loaded configuration
2. Binds the resource router, tool dispatcher and prompt renderer to the
   protocol's list/read resources, list/call tools and list/get prompts
3. Serves the protocol over stdio

Example:
    # Start the server
    python -m blt_mcp

    # Or use the console script
    BLT_API_KEY=... blt-mcp --log-format json
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from blt_mcp.client import BLTClient
from blt_mcp.config import ServerConfig, load_config, with_overrides
from blt_mcp.observability import configure_logging, install_safety_net
from blt_mcp.prompts import PromptRenderer
from blt_mcp.resources import ResourceRouter
from blt_mcp.tools import ToolDispatcher

logger = logging.getLogger(__name__)


class BLTMCPServer:
    """MCP server bridging AI agents with the BLT API.

    Attributes:
        config: Immutable server configuration
        client: BLT API client shared by all handlers
        resources: Resource router
        tools: Tool dispatcher
        prompts: Prompt renderer
        server: Low-level MCP server instance
    """

    def __init__(self, config: ServerConfig, client: BLTClient | None = None) -> None:
        """Initialize BLT MCP server.

        Args:
            config: Server configuration
            client: Optional pre-built API client (tests inject a stubbed one)
        """
        self.config = config
        self.client = client or BLTClient(config)
        self.resources = ResourceRouter(self.client)
        self.tools = ToolDispatcher(self.client)
        self.prompts = PromptRenderer(self.client)

        self.server = Server(config.server_name, version=config.server_version)
        logger.info("Created MCP server: %s", config.server_name)

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register MCP request handlers."""

        @self.server.list_resources()
        async def list_resources() -> list[types.Resource]:
            return self.resources.list_resources()

        @self.server.list_resource_templates()
        async def list_resource_templates() -> list[types.ResourceTemplate]:
            return self.resources.list_resource_templates()

        @self.server.read_resource()
        async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            contents = await self.resources.read_resource(str(uri))
            return [ReadResourceContents(content=contents.text, mime_type=contents.mimeType)]

        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return self.tools.list_tools()

        # Argument checks live in the dispatcher so every failure gets a labelled message
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
            return await self.tools.call_tool(name, arguments)

        @self.server.list_prompts()
        async def list_prompts() -> list[types.Prompt]:
            return self.prompts.list_prompts()

        @self.server.get_prompt()
        async def get_prompt(
            name: str, arguments: dict[str, str] | None
        ) -> types.GetPromptResult:
            return await self.prompts.get_prompt(name, arguments)

        logger.info("Registered resource, tool and prompt handlers")

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        install_safety_net()

        logger.info("BLT MCP server running on stdio")
        logger.info("API key configured: %s", "Yes" if self.config.key_configured else "No")

        try:
            async with stdio_server() as (read, write):
                await self.server.run(read, write, self.server.create_initialization_options())
        finally:
            await self.client.close()


def serve(config: ServerConfig) -> None:
    """Start the MCP server and block until it exits.

    Args:
        config: Server configuration
    """
    try:
        asyncio.run(BLTMCPServer(config).run())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.exception("Server error: %s", e)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the BLT MCP server.

    Configuration comes from ./blt_config.yml (or --config) and BLT_*
    environment variables; --log-level and --log-format override both.
    """
    parser = argparse.ArgumentParser(
        description="BLT MCP Server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start server against the public BLT API
  blt-mcp

  # Authenticated, with JSON logs
  BLT_API_KEY=... blt-mcp --log-format json

  # Custom config file
  blt-mcp --config ./blt_config.yml
        """,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./blt_config.yml)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (overrides BLT_LOG_LEVEL)",
    )

    parser.add_argument(
        "--log-format",
        type=str,
        default=None,
        choices=["text", "json"],
        help="Log output format (overrides BLT_LOG_FORMAT)",
    )

    args = parser.parse_args(argv)

    try:
        config = with_overrides(
            load_config(args.config),
            log_level=args.log_level,
            log_format=args.log_format,
        )
    except ValueError as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    configure_logging(config.log_level, config.log_format)
    serve(config)


__all__ = ["BLTMCPServer", "main", "serve"]


if __name__ == "__main__":
    main()
