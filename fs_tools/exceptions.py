"""
Error kinds raised by the edit engine.

Each class maps to one failure kind of the editFile tool. The tool layer
catches them and serializes ``to_dict()`` into the JSON result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .data_structures import JSONObject

if TYPE_CHECKING:
    from .editing import DiagnosisReport


class EditError(Exception):
    """Base class for editFile failures."""

    def to_dict(self) -> JSONObject:
        return {"success": False, "error": str(self)}


class PathNotFoundError(EditError):
    """The target path does not exist."""

    def __init__(self, path: str):
        super().__init__(f"File does not exist: {path}")
        self.path = path


class NotARegularFileError(EditError):
    """The target exists but is not a plain file."""

    def __init__(self, path: str):
        super().__init__(f"Path is not a regular file: {path}")
        self.path = path


class MalformedEditListError(EditError):
    """The edits looked like JSON but could not be used."""

    def __init__(self, message: str, raw_input: str):
        super().__init__(message)
        self.raw_input = raw_input

    def to_dict(self) -> JSONObject:
        result = super().to_dict()
        result["receivedEdits"] = self.raw_input
        return result


class MissingFieldError(MalformedEditListError):
    """An edit object lacks oldText or newText."""

    def __init__(self, raw_input: str, index: int):
        super().__init__(
            f"Each edit must contain 'oldText' and 'newText' (edit #{index + 1})",
            raw_input,
        )
        self.index = index


class UnrecognizedEditFormatError(EditError):
    """The edits matched none of the supported formats."""

    def __init__(self, raw_input: str):
        super().__init__(
            "Unrecognized edit format: expected a JSON object, a JSON array, "
            "or 'oldText----newText'"
        )
        self.raw_input = raw_input

    def to_dict(self) -> JSONObject:
        result = super().to_dict()
        result["receivedEdits"] = self.raw_input
        return result


class InvalidPatternError(EditError):
    """A regex edit has a pattern (or replacement template) that does not compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regex pattern: {reason}")
        self.pattern = pattern
        self.reason = reason


class TextNotFoundError(EditError):
    """An edit's search text matched nothing in the current buffer.

    Carries the buffer as it stood when the edit failed, so diagnostics see
    the effect of earlier edits in the same request.
    """

    def __init__(self, old_text: str, current_content: str, index: int):
        super().__init__(f"Could not find text to replace: {_echo(old_text)}")
        self.old_text = old_text
        self.current_content = current_content
        self.index = index
        self.report: DiagnosisReport | None = None

    def to_dict(self) -> JSONObject:
        result = super().to_dict()
        if self.report is not None:
            result.update(self.report.to_dict())
        return result


def _echo(text: str, limit: int = 50) -> str:
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text
