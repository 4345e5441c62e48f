"""ListDirectory tool for inspecting directory contents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from ..data_structures import JSONObject, TextContent
from .base import Desc, Tool, error_result, success_result

logger = logging.getLogger(__name__)


@dataclass
class ListDirectoryInput:
    """Input for ListDirectoryTool."""

    path: Annotated[str, Desc("The path to list contents of")]


def _entry_info(entry: Path) -> JSONObject:
    is_dir = entry.is_dir()
    info: JSONObject = {
        "name": entry.name,
        "type": "DIR" if is_dir else "FILE",
        "path": str(entry),
    }
    try:
        stat_info = entry.stat()
    except OSError:
        if not is_dir:
            info["size"] = "unknown"
        info["lastModified"] = "unknown"
        return info

    if not is_dir:
        info["size"] = stat_info.st_size
    info["lastModified"] = int(stat_info.st_mtime * 1000)
    return info


@dataclass
class ListDirectoryTool(Tool):
    """Lists the entries of one directory."""

    name: str = "listDirectory"
    description: str = """Get a detailed listing of all files and directories in a specified path.

Results clearly distinguish between files and directories with FILE and DIR types.
Hidden entries (names starting with '.') are skipped. Directories are listed first,
then files, both alphabetically. Files include their size in bytes; every entry
includes its last-modified time in milliseconds since the epoch."""

    async def __call__(self, input: ListDirectoryInput) -> TextContent:
        """List a directory."""
        path = Path(input.path)

        if not path.exists():
            return error_result(f"Directory does not exist: {input.path}")
        if not path.is_dir():
            return error_result(f"Path is not a directory: {input.path}")

        try:
            entries = [
                _entry_info(entry)
                for entry in path.iterdir()
                if not entry.name.startswith(".")
            ]
        except OSError as e:
            logger.warning("listDirectory %s: %s", input.path, e)
            return error_result(f"Failed to list directory: {e}")

        # Directories first, then files; both by name
        entries.sort(key=lambda e: (e["type"] != "DIR", str(e["name"])))

        return success_result(
            path=input.path,
            entries=entries,
            count=len(entries),
        )
