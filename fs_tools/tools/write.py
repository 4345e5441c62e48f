"""Write tool for creating and overwriting files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from ..data_structures import JSONValue, TextContent
from .base import Desc, Tool, error_result, success_result

logger = logging.getLogger(__name__)


@dataclass
class WriteFileInput:
    """Input for WriteFileTool."""

    path: Annotated[str, Desc("The path to the file to create or overwrite")]
    content: Annotated[str, Desc("The content to write to the file")]


@dataclass
class WriteFileTool(Tool):
    """Writes a file to the local filesystem."""

    name: str = "writeFile"
    description: str = """Create a new file or completely overwrite an existing file with new content.

Usage:
- Use with caution as it will overwrite existing files without warning.
- Content is written as UTF-8.
- Creates parent directories if they don't exist."""

    async def __call__(self, input: WriteFileInput) -> TextContent:
        """Write content to file."""
        path = Path(input.path)
        extra: dict[str, JSONValue] = {}

        # Create parent directories if needed
        parent = path.parent
        if not parent.exists():
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                return error_result(f"Failed to write file: {e}")
            extra["createdDirectories"] = str(parent)

        existed = path.exists()
        data = input.content.encode("utf-8")

        try:
            path.write_bytes(data)
        except OSError as e:
            logger.warning("writeFile %s: %s", input.path, e)
            return error_result(f"Failed to write file: {e}")

        return success_result(
            path=input.path,
            bytesWritten=len(data),
            action="overwritten" if existed else "created",
            **extra,
        )
