"""CreateDirectory tool for ensuring directories exist."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from ..data_structures import JSONValue, TextContent
from .base import Desc, Tool, error_result, success_result

logger = logging.getLogger(__name__)


@dataclass
class CreateDirectoryInput:
    """Input for CreateDirectoryTool."""

    directories: Annotated[list[str], Desc("The list of directories to create")]


@dataclass
class CreateDirectoryTool(Tool):
    """Creates directories, including missing parents."""

    name: str = "createDirectory"
    description: str = """Create a new directory or ensure a directory exists.

Can create multiple directories in one go, including any missing parents.
If a directory already exists, this operation succeeds silently.
Perfect for setting up directory structures for projects or ensuring required paths exist."""

    async def __call__(self, input: CreateDirectoryInput) -> TextContent:
        """Create each directory in order, stopping at the first failure."""
        created: list[JSONValue] = []

        for directory in input.directories:
            path = Path(directory)
            if path.is_dir():
                continue
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning("createDirectory %s: %s", directory, e)
                return error_result(
                    f"Failed to create directory: {e}", created=created
                )
            created.append(directory)

        return success_result(created=created)
