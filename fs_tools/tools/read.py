"""Read tool for reading file contents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from ..data_structures import TextContent
from .base import Desc, Tool, error_result, success_result

logger = logging.getLogger(__name__)


@dataclass
class ReadFileInput:
    """Input for ReadFileTool."""

    fullPathFile: Annotated[str, Desc("The full path to the file")]


@dataclass
class ReadFileTool(Tool):
    """Reads a whole file from the local filesystem."""

    name: str = "readFile"
    description: str = """Read the complete contents of a file from the file system.

Provides detailed error messages if the file cannot be read. Use this tool when you
need to examine the contents of a single file.

Returns JSON with the file content, its path and its size in bytes."""

    async def __call__(self, input: ReadFileInput) -> TextContent:
        """Read file contents as UTF-8 text."""
        path = Path(input.fullPathFile)

        if not path.exists():
            return error_result(f"File does not exist: {input.fullPathFile}")
        if not path.is_file():
            return error_result(f"Path is not a regular file: {input.fullPathFile}")

        try:
            # Decode the raw bytes so \r\n line endings are returned untouched
            data = path.read_bytes()
            content = data.decode("utf-8")
        except UnicodeDecodeError:
            return error_result(
                f"Failed to read file: cannot read binary file as text: "
                f"{input.fullPathFile}"
            )
        except OSError as e:
            logger.warning("readFile %s: %s", input.fullPathFile, e)
            return error_result(f"Failed to read file: {e}")

        return success_result(
            content=content,
            path=input.fullPathFile,
            size=len(data),
        )
