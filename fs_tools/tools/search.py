"""Search tool for glob-based file and directory lookup."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from ..data_structures import TextContent
from .base import Desc, Tool, error_result, success_result

logger = logging.getLogger(__name__)


@dataclass
class SearchFilesInput:
    """Input for SearchFilesTool."""

    path: Annotated[str, Desc("The base path to search in")]
    pattern: Annotated[
        str, Desc("The glob pattern to search for, for example **/*.java")
    ]


def _walk_matches(base: Path, matcher: re.Pattern[str]) -> list[str]:
    """Walk base top-down and collect paths whose relative path or name matches."""
    matches: list[str] = []

    def is_match(path: Path) -> bool:
        relative = path.relative_to(base).as_posix()
        return bool(matcher.match(relative) or matcher.match(path.name))

    for root, dirnames, filenames in os.walk(base):
        dirnames.sort()
        root_path = Path(root)
        for name in dirnames:
            if is_match(root_path / name):
                matches.append(str(root_path / name))
        for name in sorted(filenames):
            if is_match(root_path / name):
                matches.append(str(root_path / name))

    return matches


@dataclass
class SearchFilesTool(Tool):
    """Recursive glob search over a directory tree."""

    name: str = "searchFiles"
    description: str = """Recursively search for files and directories matching a glob pattern.

Searches through all subdirectories from the starting path. An entry matches when
either its path relative to the starting path or its bare name matches the pattern.
Returns full paths to all matching items. Great for finding files when you don't
know their exact location.

Common patterns:
  "*.py"           - All Python files, at any depth
  "src/**/*.tsx"   - TSX files under src/
  "test_*"         - Everything named test_*
  "glob:*.md"      - The "glob:" prefix is accepted and ignored"""

    async def __call__(self, input: SearchFilesInput) -> TextContent:
        """Execute glob pattern matching."""
        base = Path(input.path)
        if not base.exists():
            return error_result(f"Path does not exist: {input.path}")

        pattern = input.pattern.removeprefix("glob:")
        try:
            matcher = re.compile(fnmatch.translate(pattern))
        except re.error as e:
            return error_result(f"Invalid pattern syntax: {e}")

        try:
            # The walk is blocking; keep the event loop free
            matches = await asyncio.to_thread(_walk_matches, base, matcher)
        except OSError as e:
            logger.warning("searchFiles %s: %s", input.path, e)
            return error_result(f"Failed to search the file system: {e}")

        return success_result(matches=matches, count=len(matches))
