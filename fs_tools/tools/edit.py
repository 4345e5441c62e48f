"""Edit tool for line-based file modifications with dry-run preview."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Annotated

from ..data_structures import TextContent
from ..editing import edit_file, parse_bool
from ..exceptions import EditError, TextNotFoundError
from .base import Desc, Tool, error_result, json_content

logger = logging.getLogger(__name__)


# =============================================================================
# Input Dataclasses
# =============================================================================


@dataclass
class EditFileInput:
    """Input for EditFileTool."""

    path: Annotated[str, Desc("The path to the file to edit")]
    edits: Annotated[
        str,
        Desc(
            "List of edits to apply, each containing oldText and newText. "
            'Accepts a JSON array, a single JSON object, or "oldText----newText"'
        ),
    ]
    dryRun: Annotated[
        bool, Desc("If true, only show diff without changing the file")
    ] = False


# =============================================================================
# Tool Classes
# =============================================================================


@dataclass
class EditFileTool(Tool):
    """Applies ordered text replacements to a file and returns a diff."""

    name: str = "editFile"
    description: str = """Make line-based edits to a text file. Each edit replaces exact line sequences with new content.
Returns a git-style diff showing the changes made.

Usage:
- edits is a JSON array of {"oldText", "newText", "useRegex"} objects, a single such object,
  or the shorthand "oldText----newText".
- Edits are applied in order; each one sees the result of the previous ones.
- Only the first occurrence of oldText is replaced.
- Set useRegex to "true" to treat oldText as a regular expression (dot matches newlines).
- dryRun=true returns the diff without writing the file.
- If any edit fails nothing is written, and the response explains what was not found."""

    async def __call__(self, input: EditFileInput) -> TextContent:
        """Run the edit engine and shape its outcome as JSON."""
        dry_run = parse_bool(input.dryRun)
        # Some clients send the array itself instead of its JSON text
        raw_edits = input.edits
        if not isinstance(raw_edits, str):
            raw_edits = json.dumps(raw_edits)

        try:
            outcome = edit_file(input.path, raw_edits, dry_run=dry_run)
        except TextNotFoundError as e:
            logger.warning("editFile %s: edit #%d not found", input.path, e.index + 1)
            return json_content(e.to_dict())
        except EditError as e:
            logger.warning("editFile %s: %s", input.path, e)
            return json_content(e.to_dict())
        except UnicodeDecodeError:
            return error_result(
                f"Failed to edit file: cannot edit binary file: {input.path}"
            )
        except OSError as e:
            logger.warning("editFile %s: I/O failure: %s", input.path, e)
            return error_result(f"Failed to edit file: {e}")
        except Exception as e:
            logger.exception("editFile %s: unexpected failure", input.path)
            return error_result(f"Unexpected error: {e}")

        return json_content(outcome.to_dict())
