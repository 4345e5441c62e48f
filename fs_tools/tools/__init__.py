"""Built-in filesystem, shell and web tools.

Each tool is in its own module; ``get_default_tools`` builds the full set
served by ``fs_tools.server``.
"""

from __future__ import annotations

from ..config import Settings
from .base import (
    Desc,
    InputSchemaDict,
    Tool,
    ToolDict,
    convert_input,
    error_result,
    get_call_input_type,
    json_content,
    parse_int,
    schema_from_dataclass,
    success_result,
)
from .bash import ExecuteBashInput, ExecuteBashTool
from .create_directory import CreateDirectoryInput, CreateDirectoryTool
from .edit import EditFileInput, EditFileTool
from .grep import GrepFilesInput, GrepFilesTool
from .list_directory import ListDirectoryInput, ListDirectoryTool
from .read import ReadFileInput, ReadFileTool
from .search import SearchFilesInput, SearchFilesTool
from .webfetch import FetchWebpageInput, FetchWebpageTool, html_to_text
from .write import WriteFileInput, WriteFileTool


def get_default_tools(settings: Settings | None = None) -> list[Tool]:
    """Get the default set of all built-in tools.

    Returns a new list of tool instances each time it's called.
    """
    settings = settings or Settings()
    return [
        ReadFileTool(),
        WriteFileTool(),
        EditFileTool(),
        ListDirectoryTool(),
        SearchFilesTool(),
        GrepFilesTool(default_max_results=settings.grep_max_results),
        CreateDirectoryTool(),
        ExecuteBashTool(
            default_timeout=settings.bash_timeout_seconds,
            disallowed_commands=settings.disallowed_commands,
        ),
        FetchWebpageTool(default_timeout_ms=settings.fetch_timeout_ms),
    ]


__all__ = [
    # Base classes and utilities
    "Tool",
    "ToolDict",
    "InputSchemaDict",
    "Desc",
    "convert_input",
    "get_call_input_type",
    "schema_from_dataclass",
    "json_content",
    "parse_int",
    "success_result",
    "error_result",
    # Tools
    "ReadFileInput",
    "ReadFileTool",
    "WriteFileInput",
    "WriteFileTool",
    "EditFileInput",
    "EditFileTool",
    "ListDirectoryInput",
    "ListDirectoryTool",
    "SearchFilesInput",
    "SearchFilesTool",
    "GrepFilesInput",
    "GrepFilesTool",
    "CreateDirectoryInput",
    "CreateDirectoryTool",
    "ExecuteBashInput",
    "ExecuteBashTool",
    "FetchWebpageInput",
    "FetchWebpageTool",
    "html_to_text",
    "get_default_tools",
]
