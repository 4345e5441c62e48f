"""Grep tool for content searching."""

from __future__ import annotations

import asyncio
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from ..data_structures import JSONObject, TextContent
from ..editing import parse_bool
from .base import Desc, Tool, error_result, parse_int, success_result

logger = logging.getLogger(__name__)


@dataclass
class GrepFilesInput:
    """Input for GrepFilesTool."""

    directory: Annotated[str, Desc("The base directory to search in")]
    pattern: Annotated[str, Desc("The pattern to search for in file contents")]
    fileExtension: Annotated[
        str, Desc("Optional file extension filter (e.g., '.java', '.txt')")
    ] = ""
    useRegex: Annotated[bool, Desc("Whether to use regex for pattern matching")] = (
        False
    )
    contextLines: Annotated[
        int, Desc("Number of context lines to include before/after matches")
    ] = 0
    maxResults: Annotated[
        int, Desc("Maximum number of results to return (0 uses the default)")
    ] = 0
    ignoreCase: Annotated[
        bool, Desc("Whether to ignore case in pattern matching")
    ] = False


@dataclass
class GrepSummary:
    matches: list[JSONObject]
    total_matches: int
    total_files: int
    truncated: bool = False


def _collect_files(base: Path, extension: str) -> list[Path]:
    files: list[Path] = []
    for root, dirnames, filenames in os.walk(base):
        dirnames.sort()
        for name in sorted(filenames):
            if extension and not name.endswith(extension):
                continue
            path = Path(root) / name
            if path.is_file():
                files.append(path)
    return files


def _grep(
    base: Path,
    matcher: re.Pattern[str],
    extension: str,
    context_lines: int,
    max_results: int,
) -> GrepSummary:
    files = _collect_files(base, extension)
    results: list[JSONObject] = []
    total = 0
    truncated = False

    for path in files:
        if truncated:
            break
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError):
            # Unreadable or binary
            continue

        file_matches: list[JSONObject] = []
        for i, line in enumerate(lines):
            if not matcher.search(line):
                continue
            if total >= max_results:
                # One match more than the cap: the result is cut off
                truncated = True
                break
            match: JSONObject = {"lineNumber": i + 1, "line": line}
            if context_lines > 0:
                match["contextBefore"] = lines[max(0, i - context_lines) : i]
                match["contextAfter"] = lines[i + 1 : i + 1 + context_lines]
            file_matches.append(match)
            total += 1

        if file_matches:
            results.append({"file": str(path), "matches": file_matches})

    return GrepSummary(
        matches=results,
        total_matches=total,
        total_files=len(files),
        truncated=truncated,
    )


@dataclass
class GrepFilesTool(Tool):
    """Line-oriented text search across a directory tree."""

    name: str = "grepFiles"
    description: str = """Search for text patterns within files. Returns matching files with line numbers and context.

Similar to the Unix 'grep' command but with additional features for context display.

Usage:
- By default pattern is matched literally; set useRegex=true for regular expressions.
- fileExtension restricts the search to files ending with that suffix (e.g. ".py").
- contextLines adds that many lines before and after each match.
- maxResults caps the total number of matching lines; limitReached tells if it was hit.
- Binary and unreadable files are skipped."""

    default_max_results: int = 100

    async def __call__(self, input: GrepFilesInput) -> TextContent:
        """Search files under a directory for a pattern."""
        base = Path(input.directory)
        if not base.exists():
            return error_result(f"Directory does not exist: {input.directory}")
        if not base.is_dir():
            return error_result(f"Path is not a directory: {input.directory}")

        flags = re.IGNORECASE if parse_bool(input.ignoreCase) else 0
        use_regex = parse_bool(input.useRegex)
        source = input.pattern if use_regex else re.escape(input.pattern)
        try:
            matcher = re.compile(source, flags)
        except re.error as e:
            return error_result(f"Invalid regex pattern: {e}")

        max_results = parse_int(input.maxResults, "maxResults")
        if max_results <= 0:
            max_results = self.default_max_results
        context_lines = max(0, parse_int(input.contextLines, "contextLines"))

        try:
            summary = await asyncio.to_thread(
                _grep,
                base,
                matcher,
                input.fileExtension,
                context_lines,
                max_results,
            )
        except OSError as e:
            logger.warning("grepFiles %s: %s", input.directory, e)
            return error_result(f"Error searching files: {e}")

        return success_result(
            matches=summary.matches,
            totalMatches=summary.total_matches,
            totalFiles=summary.total_files,
            limitReached=summary.truncated,
        )
