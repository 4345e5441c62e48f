"""Tool base class: schema inference, argument conversion and JSON results.

A tool is a dataclass whose ``__call__`` takes one ``input`` argument typed
as another dataclass. Field annotations of that input dataclass become the
tool's JSON input schema; ``Annotated[..., Desc("...")]`` supplies the
per-field descriptions.
"""

from __future__ import annotations

import dataclasses
import json
import shutil
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    ClassVar,
    TypedDict,
    get_args,
    get_origin,
    get_type_hints,
)

from ..data_structures import JSONObject, TextContent

# Loose type for schema dicts (allows dynamic schema generation)
InputSchemaDict = dict[str, object]

_JSON_TYPES: dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
}

_EMPTY_SCHEMA: InputSchemaDict = {
    "type": "object",
    "properties": {},
    "required": [],
    "additionalProperties": False,
}


class Desc:
    """Field description for JSON schema generation.

    @dataclass
    class ReadFileInput:
        fullPathFile: Annotated[str, Desc("The full path to the file")]
    """

    def __init__(self, description: str):
        self.description = description

    def __repr__(self) -> str:
        return f"Desc({self.description!r})"


# =============================================================================
# Input Types
# =============================================================================


def get_call_input_type(cls: type) -> type | None:
    """Return the dataclass annotated on ``cls.__call__``'s ``input`` parameter.

    Returns None for tools whose ``__call__`` takes no input.

    Raises:
        TypeError: The annotation is not a dataclass.
    """
    hints = get_type_hints(cls.__call__)
    input_type = hints.get("input")
    if input_type is None or input_type is type(None):
        return None
    if not (dataclasses.is_dataclass(input_type) and isinstance(input_type, type)):
        raise TypeError(
            f"{cls.__name__}.__call__ input must be a dataclass, got {input_type!r}"
        )
    return input_type


def _is_required(f: dataclasses.Field[Any]) -> bool:
    return f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING


def convert_input(arguments: dict[str, Any] | None, input_type: type | None) -> Any:
    """Build the typed input dataclass from a raw argument dict.

    Arguments that are null fall back to the field default. Values are
    passed through unconverted; each tool interprets loosely typed flags.

    Raises:
        TypeError: Unknown arguments, or required ones missing.
    """
    if input_type is None:
        return None

    fields = dataclasses.fields(input_type)
    names = {f.name for f in fields}
    given = {k: v for k, v in (arguments or {}).items() if v is not None}

    unknown = sorted(set(given) - names)
    if unknown:
        raise TypeError(f"unexpected argument(s): {', '.join(unknown)}")

    missing = [f.name for f in fields if _is_required(f) and f.name not in given]
    if missing:
        raise TypeError(f"missing required argument(s): {', '.join(missing)}")

    return input_type(**given)


def parse_int(value: Any, name: str) -> int:
    """Interpret a loosely-typed count: an int or a numeric string like "30".

    Raises:
        TypeError: The value is not a whole number.
    """
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise TypeError(f"{name} must be an integer, got {value!r}")


# =============================================================================
# Schema Generation
# =============================================================================


def _json_schema_for(py_type: Any) -> dict[str, Any]:
    origin = get_origin(py_type)
    if origin is list:
        args = get_args(py_type)
        if not args:
            return {"type": "array"}
        return {"type": "array", "items": _json_schema_for(args[0])}
    if origin is dict:
        return {"type": "object"}
    return {"type": _JSON_TYPES.get(py_type, "string")}


def schema_from_dataclass(cls: type) -> InputSchemaDict:
    """Generate a JSON object schema from an input dataclass.

    Fields without a default are required; no extra properties are allowed.
    """
    hints = get_type_hints(cls, include_extras=True)
    properties: dict[str, Any] = {}
    required: list[str] = []

    for f in dataclasses.fields(cls):
        hint = hints.get(f.name, str)
        description = None
        if get_origin(hint) is Annotated:
            hint, *metadata = get_args(hint)
            description = next(
                (m.description for m in metadata if isinstance(m, Desc)), None
            )

        prop = _json_schema_for(hint)
        if description:
            prop["description"] = description
        properties[f.name] = prop

        if _is_required(f):
            required.append(f.name)

    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


# =============================================================================
# Result Shaping
# =============================================================================


def json_content(result: JSONObject) -> TextContent:
    return TextContent(text=json.dumps(result, ensure_ascii=False))


def success_result(**fields: Any) -> TextContent:
    """Build a JSON success result: {"success": true, **fields}."""
    result: JSONObject = {"success": True}
    result.update(fields)
    return json_content(result)


def error_result(message: str, **fields: Any) -> TextContent:
    """Build a JSON error result: {"success": false, "error": message, **fields}."""
    result: JSONObject = {"success": False, "error": message}
    result.update(fields)
    return json_content(result)


# =============================================================================
# Tool Base Class
# =============================================================================


class ToolDict(TypedDict):
    name: str
    description: str
    input_schema: InputSchemaDict


@dataclass
class Tool:
    """Base class for all tools.

    Subclasses declare ``name`` and ``description`` defaults and implement
    ``async def __call__(self, input: SomeInput) -> TextContent``. The input
    schema is computed once per subclass from that annotation.

    Example:
        @dataclass
        class EchoInput:
            text: Annotated[str, Desc("Text to echo back")]

        @dataclass
        class EchoTool(Tool):
            name: str = "echo"
            description: str = "Echo the input"

            async def __call__(self, input: EchoInput) -> TextContent:
                return success_result(text=input.text)
    """

    name: str
    description: str

    _input_type: ClassVar[type | None] = None
    _inferred_schema: ClassVar[InputSchemaDict | None] = None
    # External commands the tool shells out to: {"command": "install hint"}
    _required_commands: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Intermediate bases without their own __call__ keep the parent's schema
        if "__call__" not in cls.__dict__:
            return
        cls._input_type = get_call_input_type(cls)
        if cls._input_type is not None:
            cls._inferred_schema = schema_from_dataclass(cls._input_type)
        else:
            cls._inferred_schema = dict(_EMPTY_SCHEMA)

    def __post_init__(self) -> None:
        missing = [
            (cmd, hint)
            for cmd, hint in self._required_commands.items()
            if shutil.which(cmd) is None
        ]
        if missing:
            lines = [f"Missing required CLI command(s) for {self.name}:"]
            lines.extend(f"  - '{cmd}': {hint}" for cmd, hint in missing)
            raise RuntimeError("\n".join(lines))

    @property
    def input_schema(self) -> InputSchemaDict:
        if self._inferred_schema is not None:
            return self._inferred_schema
        return dict(_EMPTY_SCHEMA)

    def to_dict(self) -> ToolDict:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }

    async def execute(self, arguments: dict[str, Any] | None = None) -> TextContent:
        """Convert raw arguments to the typed input and run the tool.

        Raises:
            TypeError: If the arguments do not fit the input dataclass.
        """
        if self._input_type is None:
            return await self.__call__()  # type: ignore[call-arg]
        return await self.__call__(convert_input(arguments, self._input_type))

    async def __call__(self, input: Any) -> TextContent:
        raise NotImplementedError(f"{self.name} does not implement __call__()")
