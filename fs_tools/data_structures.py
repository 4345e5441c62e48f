"""
Shared data types.

Every tool answers with a single text block holding a JSON document, so
TextContent is the only content type needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias, TypedDict

# Recursive JSON value and object types used for tool results
JSONValue: TypeAlias = (
    str | int | float | bool | None | list["JSONValue"] | dict[str, "JSONValue"]
)
JSONObject: TypeAlias = dict[str, JSONValue]


class TextContentDict(TypedDict):
    type: Literal["text"]
    text: str


@dataclass(frozen=True)
class TextContent:
    """A tool result: JSON text sent back to the client as one text block."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError(f"text must be str, got {type(self.text).__name__}")

    def to_dict(self) -> TextContentDict:
        return {"type": "text", "text": self.text}
