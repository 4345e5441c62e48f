"""Command line entry point: run the MCP server or call a tool directly."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .logging_config import setup_logging
from .server import ToolServer
from .tools import Tool, get_default_tools


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fs-tools",
        description="Filesystem, shell and web tools served over MCP (stdio)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="JSON config file (default: $FS_TOOLS_CONFIG or ~/.fs-tools.json)",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="Logging level for stderr output (default: from config, INFO)",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("serve", help="Run the MCP server on stdin/stdout (default)")
    subparsers.add_parser("list-tools", help="Show the available tools")

    call = subparsers.add_parser("call", help="Run one tool and print its JSON result")
    call.add_argument("name", help="Tool name, e.g. editFile")
    call.add_argument(
        "arguments",
        nargs="?",
        default="{}",
        help="Tool arguments as a JSON object (default: {})",
    )
    return parser


def _first_line(text: str) -> str:
    return text.strip().splitlines()[0] if text.strip() else ""


def list_tools(tools: list[Tool], console: Console) -> None:
    table = Table(title="fs-tools")
    table.add_column("Tool", style="bold cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Parameters", style="dim")
    for tool in tools:
        properties = tool.input_schema.get("properties", {})
        params = ", ".join(properties) if isinstance(properties, dict) else ""
        table.add_row(tool.name, _first_line(tool.description), params)
    console.print(table)


async def call_tool(tools: list[Tool], name: str, raw_arguments: str) -> int:
    """Run a single tool call and print the result.

    Returns:
        Process exit code: 0 on success, 1 on a tool failure, 2 on bad usage.
    """
    try:
        arguments = json.loads(raw_arguments)
    except json.JSONDecodeError as e:
        print(f"Error: arguments are not valid JSON: {e}", file=sys.stderr)
        return 2
    if not isinstance(arguments, dict):
        print("Error: arguments must be a JSON object", file=sys.stderr)
        return 2

    server = ToolServer(tools)
    contents = await server.call_tool(name, arguments)
    text = contents[0].text
    print(text)

    try:
        success = bool(json.loads(text).get("success"))
    except (json.JSONDecodeError, AttributeError):
        success = False
    return 0 if success else 1


def main(argv: list[str] | None = None) -> int:
    """Entry point for the fs-tools command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings: Settings = load_settings(args.config)
    setup_logging(args.log_level or settings.log_level)

    try:
        tools = get_default_tools(settings)
    except RuntimeError as e:
        # A tool's required command is missing
        print(f"Error: {e}", file=sys.stderr)
        return 1

    command = args.command or "serve"
    if command == "list-tools":
        list_tools(tools, Console())
        return 0
    if command == "call":
        return asyncio.run(call_tool(tools, args.name, args.arguments))

    try:
        asyncio.run(ToolServer(tools).run_stdio())
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
