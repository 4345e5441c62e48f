"""MCP stdio server exposing the built-in tools.

stdout is reserved for the MCP protocol; logs go to stderr.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import __version__
from .tools import Tool, error_result

logger = logging.getLogger(__name__)

SERVER_NAME = "fs-tools"


class ToolServer:
    """Dispatches MCP tool requests to Tool instances by name."""

    def __init__(self, tools: Sequence[Tool], name: str = SERVER_NAME):
        self.tools: dict[str, Tool] = {tool.name: tool for tool in tools}
        self.server: Server = Server(name, version=__version__)
        self._register_handlers()

    def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=dict(tool.input_schema),
            )
            for tool in self.tools.values()
        ]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        """Run one tool and wrap its JSON result as MCP text content."""
        tool = self.tools.get(name)
        if tool is None:
            logger.warning("call_tool: unknown tool %s", name)
            result = error_result(f"Unknown tool: {name}")
        else:
            logger.info("call_tool: %s", name)
            try:
                result = await tool.execute(arguments or {})
            except TypeError as e:
                logger.warning("call_tool %s: invalid arguments: %s", name, e)
                result = error_result(f"Invalid arguments for {name}: {e}")

        return [types.TextContent(**result.to_dict())]

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return self.list_tools()

        # Tools accept loosely typed flags such as dryRun="true", so the
        # arguments are not validated against the schema here
        @self.server.call_tool(validate_input=False)
        async def call_tool(
            name: str, arguments: dict[str, Any]
        ) -> list[types.TextContent]:
            return await self.call_tool(name, arguments)

    async def run_stdio(self) -> None:
        """Serve over stdin/stdout until the client disconnects."""
        logger.info(
            "Starting %s %s with %d tools (stdio transport)",
            self.server.name,
            __version__,
            len(self.tools),
        )
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
