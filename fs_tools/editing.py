"""Edit engine behind the editFile tool.

An edit request is parsed from a single string into an ordered sequence of
EditOperation values, applied one after another to an in-memory buffer
seeded with the file's content, rendered as a whole-file diff and finally
written back (unless it is a dry run or nothing changed).

Three input formats are accepted:

    [{"oldText": "a", "newText": "b", "useRegex": "false"}, ...]
    {"oldText": "a", "newText": "b"}
    a----b

Literal edits match after collapsing ``\\r\\n`` and ``\\r`` to ``\\n``; the
collapsed buffer is what gets the replacement, so one literal edit leaves
the whole document with ``\\n`` line endings. Regex edits match with DOTALL
and replace only the first match.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .data_structures import JSONObject
from .exceptions import (
    InvalidPatternError,
    MalformedEditListError,
    MissingFieldError,
    NotARegularFileError,
    PathNotFoundError,
    TextNotFoundError,
    UnrecognizedEditFormatError,
)

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
SIMPLE_SEPARATOR = "----"

# Diagnosis limits
PREVIEW_CHARS = 1000
PROBE_CHARS = 30
PROBE_CONTEXT_BEFORE = 20
PROBE_CONTEXT_AFTER = 50


# =============================================================================
# Data Model
# =============================================================================


@dataclass(frozen=True)
class EditOperation:
    """One requested replacement."""

    old_text: str
    new_text: str
    use_regex: bool = False


@dataclass(frozen=True)
class EditRequest:
    """A fully parsed editFile call."""

    path: str
    edits: tuple[EditOperation, ...]
    dry_run: bool = False

    @classmethod
    def parse(cls, path: str, raw_edits: str, dry_run: bool = False) -> EditRequest:
        return cls(path=path, edits=parse_edits(raw_edits), dry_run=dry_run)


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of running every operation against the file content."""

    final_content: str
    applied_edits: tuple[str, ...]


@dataclass(frozen=True)
class DiagnosisReport:
    """Hints returned when an edit's search text is not found.

    ``preview`` and ``partial_match`` look at the file as it was on disk;
    ``current_preview`` shows the buffer after the edits that did apply and
    is only set when those edits changed something.
    """

    preview: str
    old_text_length: int
    contains_newline: bool
    contains_carriage_return: bool
    contains_space: bool
    contains_tab: bool
    current_preview: str | None = None
    suggestion: str | None = None
    partial_match: str | None = None

    def to_dict(self) -> JSONObject:
        result: JSONObject = {
            "filePreview": self.preview,
            "oldTextLength": self.old_text_length,
            "containsNewline": self.contains_newline,
            "containsCarriageReturn": self.contains_carriage_return,
            "containsSpace": self.contains_space,
            "containsTab": self.contains_tab,
        }
        if self.current_preview is not None:
            result["currentPreview"] = self.current_preview
        if self.suggestion is not None:
            result["suggestion"] = self.suggestion
        if self.partial_match is not None:
            result["partialMatch"] = self.partial_match
        return result


@dataclass(frozen=True)
class EditOutcome:
    """Successful editFile result."""

    path: str
    diff: str
    dry_run: bool
    applied_edits: tuple[str, ...]
    written: bool

    def to_dict(self) -> JSONObject:
        return {
            "success": True,
            "diff": self.diff,
            "dryRun": self.dry_run,
            "editsApplied": len(self.applied_edits),
            "appliedEdits": list(self.applied_edits),
        }


# =============================================================================
# Parsing
# =============================================================================


def parse_bool(value: Any) -> bool:
    """Interpret a loosely-typed flag: real booleans or "true"/"false" strings."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == "true"


def parse_edits(raw: str) -> tuple[EditOperation, ...]:
    """Parse the raw edits string into an ordered tuple of operations.

    Raises:
        MalformedEditListError: JSON input that is invalid or has bad elements.
        MissingFieldError: An object without ``oldText`` or ``newText``.
        UnrecognizedEditFormatError: Neither JSON nor ``old----new``.
    """
    stripped = raw.lstrip()

    if stripped.startswith("["):
        # Valid JSON text starting with "[" is always a list
        data = _load_json(raw)
        return tuple(
            _operation_from_object(item, raw, index) for index, item in enumerate(data)
        )

    if stripped.startswith("{"):
        data = _load_json(raw)
        return (_operation_from_object(data, raw, 0),)

    # Shorthand: only the first separator splits, newText may contain more
    old_text, separator, new_text = raw.partition(SIMPLE_SEPARATOR)
    if not separator:
        raise UnrecognizedEditFormatError(raw)
    return (EditOperation(old_text=old_text, new_text=new_text),)


def _load_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedEditListError(f"Failed to parse edits: {e}", raw) from e


def _operation_from_object(item: Any, raw: str, index: int) -> EditOperation:
    if not isinstance(item, dict):
        raise MalformedEditListError(
            f"Failed to parse edits: edit #{index + 1} is not an object", raw
        )

    old_text = item.get("oldText")
    new_text = item.get("newText")
    if old_text is None or new_text is None:
        raise MissingFieldError(raw, index)
    if not isinstance(old_text, str) or not isinstance(new_text, str):
        raise MalformedEditListError(
            f"Failed to parse edits: 'oldText' and 'newText' must be strings "
            f"(edit #{index + 1})",
            raw,
        )

    return EditOperation(
        old_text=old_text,
        new_text=new_text,
        use_regex=parse_bool(item.get("useRegex", False)),
    )


# =============================================================================
# Application
# =============================================================================


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def apply_edits(content: str, operations: Sequence[EditOperation]) -> ApplyResult:
    """Apply operations in order, each against the result of the previous one.

    Raises:
        TextNotFoundError: An operation matched nothing. ``current_content``
            holds the buffer with all earlier operations applied.
        InvalidPatternError: A regex operation does not compile.
    """
    buffer = content
    applied: list[str] = []
    for index, operation in enumerate(operations):
        buffer = _apply_operation(buffer, operation, index)
        applied.append(operation.old_text)
    return ApplyResult(final_content=buffer, applied_edits=tuple(applied))


def _apply_operation(buffer: str, operation: EditOperation, index: int) -> str:
    if operation.use_regex:
        return _apply_regex(buffer, operation, index)
    return _apply_literal(buffer, operation, index)


def _apply_literal(buffer: str, operation: EditOperation, index: int) -> str:
    normalized = normalize_line_endings(buffer)
    search = normalize_line_endings(operation.old_text)
    if search not in normalized:
        raise TextNotFoundError(operation.old_text, buffer, index)
    return normalized.replace(search, operation.new_text, 1)


def _apply_regex(buffer: str, operation: EditOperation, index: int) -> str:
    try:
        pattern = re.compile(operation.old_text, re.DOTALL)
    except re.error as e:
        raise InvalidPatternError(operation.old_text, str(e)) from e

    match = pattern.search(buffer)
    if match is None:
        raise TextNotFoundError(operation.old_text, buffer, index)

    # newText is a replacement template: \1 and \g<name> are expanded
    try:
        replacement = match.expand(operation.new_text)
    except (re.error, IndexError) as e:
        raise InvalidPatternError(
            operation.old_text, f"bad replacement template: {e}"
        ) from e
    return buffer[: match.start()] + replacement + buffer[match.end() :]


# =============================================================================
# Diagnosis
# =============================================================================


def _preview(text: str) -> str:
    if len(text) > PREVIEW_CHARS:
        return text[:PREVIEW_CHARS] + "..."
    return text


def diagnose(path: str, original: str, current: str, old_text: str) -> DiagnosisReport:
    """Build hints explaining why ``old_text`` was not found."""
    suggestion = None
    if path.endswith((".xml", ".pom")):
        # Some POM files spell the <name> element as <n>
        if "<name>" in old_text and "<n>" in original:
            suggestion = (
                "File uses <n> tags instead of <name> tags. "
                "Try replacing <name> with <n> in your search text."
            )

    partial_match = None
    if len(old_text) > PROBE_CHARS:
        probe = old_text[:PROBE_CHARS]
        idx = original.find(probe)
        if idx >= 0:
            start = max(0, idx - PROBE_CONTEXT_BEFORE)
            end = min(len(original), idx + len(probe) + PROBE_CONTEXT_AFTER)
            partial_match = "Found similar text: " + original[start:end]

    return DiagnosisReport(
        preview=_preview(original),
        old_text_length=len(old_text),
        contains_newline="\n" in old_text,
        contains_carriage_return="\r" in old_text,
        contains_space=" " in old_text,
        contains_tab="\t" in old_text,
        current_preview=_preview(current) if current != original else None,
        suggestion=suggestion,
        partial_match=partial_match,
    )


# =============================================================================
# Diff
# =============================================================================


def _split_lines(text: str) -> list[str]:
    """Split on newlines, dropping trailing empty lines.

    An empty text still counts as one (empty) line.
    """
    if not text:
        return [""]
    lines = text.split("\n")
    while lines and not lines[-1]:
        lines.pop()
    return lines


def generate_diff(path: str, original: str, modified: str) -> str:
    """Render the change as a single whole-file hunk.

    Every original line is shown as removed and every final line as added;
    no attempt is made to align common lines.
    """
    parts = [f"--- {path}\t(original)", f"+++ {path}\t(modified)"]
    original = normalize_line_endings(original)
    modified = normalize_line_endings(modified)

    # A change of line endings alone is not a change of content
    if original == modified:
        parts.append("No changes")
    else:
        original_lines = _split_lines(original)
        modified_lines = _split_lines(modified)
        parts.append(f"@@ -1,{len(original_lines)} +1,{len(modified_lines)} @@")
        parts.extend(f"-{line}" for line in original_lines)
        parts.extend(f"+{line}" for line in modified_lines)

    return "\n".join(parts) + "\n"


# =============================================================================
# File access
# =============================================================================


def validate_path(path: str) -> Path:
    file_path = Path(path)
    if not file_path.exists():
        raise PathNotFoundError(path)
    if not file_path.is_file():
        raise NotARegularFileError(path)
    return file_path


def read_text(path: Path) -> str:
    # newline="" keeps \r\n and \r exactly as stored
    with open(path, encoding=ENCODING, newline="") as f:
        return f.read()


def write_text(path: Path, content: str) -> None:
    with open(path, "w", encoding=ENCODING, newline="") as f:
        f.write(content)


def edit_file(path: str, raw_edits: str, dry_run: bool = False) -> EditOutcome:
    """Validate, read, parse, apply, diff and (maybe) persist one edit request.

    The file is written at most once, after every operation succeeded, and
    only when the content actually changed outside a dry run.

    Raises:
        EditError: Any of the edit failure kinds in ``fs_tools.exceptions``.
        OSError: Reading or writing the file failed.
        UnicodeDecodeError: The file is not valid UTF-8 text.
    """
    file_path = validate_path(path)
    original = read_text(file_path)
    request = EditRequest.parse(path, raw_edits, dry_run)

    try:
        result = apply_edits(original, request.edits)
    except TextNotFoundError as e:
        e.report = diagnose(path, original, e.current_content, e.old_text)
        raise

    diff = generate_diff(path, original, result.final_content)

    written = not request.dry_run and result.final_content != original
    if written:
        write_text(file_path, result.final_content)

    logger.info(
        "Edited %s: %d edit(s), dry_run=%s, written=%s",
        path,
        len(result.applied_edits),
        request.dry_run,
        written,
    )
    return EditOutcome(
        path=path,
        diff=diff,
        dry_run=request.dry_run,
        applied_edits=result.applied_edits,
        written=written,
    )
