"""Bash tool for executing shell commands."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Annotated, ClassVar

from ..config import DEFAULT_DISALLOWED_COMMANDS
from ..data_structures import TextContent
from .base import Desc, Tool, error_result, parse_int, success_result

logger = logging.getLogger(__name__)

# Grace period between terminate() and kill()
_KILL_GRACE_SECONDS = 2.0


@dataclass
class ExecuteBashInput:
    """Input for ExecuteBashTool."""

    command: Annotated[str, Desc("The Bash command to execute")]
    workingDirectory: Annotated[
        str, Desc("Optional working directory for the command execution")
    ] = ""
    timeoutSeconds: Annotated[
        int,
        Desc("Maximum time in seconds to wait for the command to complete (default: 30)"),
    ] = 0


async def _stop(process: asyncio.subprocess.Process) -> None:
    """Terminate a running process, killing it if it ignores SIGTERM."""
    if process.returncode is not None:
        return
    process.terminate()
    try:
        await asyncio.wait_for(process.wait(), timeout=_KILL_GRACE_SECONDS)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()


@dataclass
class ExecuteBashTool(Tool):
    """Executes a bash command and captures its combined output."""

    name: str = "executeBash"
    description: str = """Execute a Bash command in the system shell and return the output.

This tool allows running system commands and capturing their standard output and error
streams (merged). Use with caution as some commands may have system-wide effects.
DO NOT USE REMOVE OR DELETE COMMANDS!

Usage notes:
  - The command argument is required.
  - workingDirectory sets the directory the command runs in.
  - timeoutSeconds bounds the run time (default 30); the process is killed on expiry.
  - Commands such as rm, mv and dd are refused."""

    default_timeout: int = 30
    disallowed_commands: tuple[str, ...] = DEFAULT_DISALLOWED_COMMANDS

    _required_commands: ClassVar[dict[str, str]] = {
        "bash": "Install bash with your system package manager"
    }

    async def __call__(self, input: ExecuteBashInput) -> TextContent:
        """Execute a bash command with cancellation-safe subprocess handling."""
        command = input.command
        if not command or not command.strip():
            return error_result("Command cannot be empty")

        command_name = os.path.basename(command.split()[0])
        if command_name in self.disallowed_commands:
            return error_result(
                f"Command '{command_name}' is not allowed because it is "
                "potentially dangerous."
            )

        cwd = input.workingDirectory.strip() or None
        if cwd is not None and not os.path.isdir(cwd):
            return error_result(f"Working directory does not exist: {cwd}")

        timeout = parse_int(input.timeoutSeconds, "timeoutSeconds")
        if timeout <= 0:
            timeout = self.default_timeout

        try:
            process = await asyncio.create_subprocess_exec(
                "bash",
                "-c",
                command,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            return error_result(f"IO error occurred: {e}")

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.CancelledError:
            await _stop(process)
            raise
        except asyncio.TimeoutError:
            await _stop(process)
            logger.warning("executeBash timed out after %ss: %s", timeout, command)
            return error_result(f"Command execution timed out after {timeout} seconds")
        except Exception as e:
            await _stop(process)
            logger.exception("executeBash failed: %s", command)
            return error_result(f"Unexpected error: {e}")

        output = "\n".join(stdout.decode(errors="replace").splitlines())
        return success_result(
            command=command,
            exitCode=process.returncode,
            output=output,
        )
