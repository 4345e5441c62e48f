"""fs_tools: filesystem, shell and web tools served over MCP

A Python library and stdio server that gives an AI assistant controlled access
to the local machine. The centerpiece is the editFile tool, which applies
ordered, first-occurrence text replacements (literal or regex) to a file,
returns a whole-file diff, and explains in detail why an edit did not match.
"""

__version__ = "0.1.0"

# Configuration and logging
from .config import Settings, load_config, load_settings
from .data_structures import JSONObject, JSONValue, TextContent

# Edit engine
from .editing import (
    ApplyResult,
    DiagnosisReport,
    EditOperation,
    EditOutcome,
    EditRequest,
    apply_edits,
    diagnose,
    edit_file,
    generate_diff,
    parse_edits,
)
from .exceptions import (
    EditError,
    InvalidPatternError,
    MalformedEditListError,
    MissingFieldError,
    NotARegularFileError,
    PathNotFoundError,
    TextNotFoundError,
    UnrecognizedEditFormatError,
)
from .logging_config import setup_logging

# Tools and transport
from .server import ToolServer
from .tools import Tool, get_default_tools

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "load_config",
    "load_settings",
    "setup_logging",
    # Data structures
    "JSONObject",
    "JSONValue",
    "TextContent",
    # Edit engine
    "ApplyResult",
    "DiagnosisReport",
    "EditOperation",
    "EditOutcome",
    "EditRequest",
    "apply_edits",
    "diagnose",
    "edit_file",
    "generate_diff",
    "parse_edits",
    # Errors
    "EditError",
    "InvalidPatternError",
    "MalformedEditListError",
    "MissingFieldError",
    "NotARegularFileError",
    "PathNotFoundError",
    "TextNotFoundError",
    "UnrecognizedEditFormatError",
    # Tools and transport
    "Tool",
    "ToolServer",
    "get_default_tools",
]
