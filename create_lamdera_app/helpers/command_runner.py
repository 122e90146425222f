"""Run external commands (lamdera, git, gh, npm, bun) for scaffolding steps.

Every command runs in the foreground with inherited stdio so the user sees
tool output as it happens. Failures are raised as exceptions and handled by
the CLI entry point, which turns them into exit code 1.

Example:
    >>> run_command(["git", "init"], cwd=project_root)
    >>> run_command(["npm", "install"], cwd=project_root, timeout=300)
"""

from __future__ import annotations

import shlex
import shutil
import signal
import subprocess
from pathlib import Path

from create_lamdera_app.helpers.helpers_logging import print_info

# Seconds to wait for a package install before giving up
DEFAULT_INSTALL_TIMEOUT = 300


class PrerequisiteError(Exception):
    """A required external tool is not installed."""

    def __init__(self, tool: str, hint: str | None = None) -> None:
        self.tool = tool
        self.hint = hint
        message = f"{tool} is not installed. Please install it first."
        if hint:
            message += f" ({hint})"
        super().__init__(message)


class CommandError(Exception):
    """An external command exited with a non-zero status."""

    def __init__(self, command: list[str], returncode: int | None, detail: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.detail = detail
        message = f"Error executing command: {format_command(command)}"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if detail:
            message += f"\n   {detail}"
        super().__init__(message)


class CommandTimeoutError(CommandError):
    """An external command did not finish within its timeout."""

    def __init__(self, command: list[str], timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            command,
            None,
            detail=(
                f"Timed out after {timeout:g}s. "
                f"Try running '{format_command(command)}' manually in the project directory."
            ),
        )


def format_command(command: list[str]) -> str:
    """Render a command list the way a user would type it."""
    return shlex.join(command)


def is_tool_available(tool: str) -> bool:
    """Return True when ``tool`` resolves on PATH."""
    return shutil.which(tool) is not None


def require_tool(tool: str, hint: str | None = None) -> None:
    """Raise PrerequisiteError unless ``tool`` is on PATH."""
    if not is_tool_available(tool):
        raise PrerequisiteError(tool, hint)


def run_command(
    command: list[str],
    cwd: Path | None = None,
    timeout: float | None = None,
    input_text: str | None = None,
) -> None:
    """Run a command, raising on failure.

    Args:
        command: Program and arguments
        cwd: Working directory (defaults to the current directory)
        timeout: Seconds before the command is killed, None for no limit
        input_text: Text fed to the command's stdin (e.g. confirmation answers)

    Raises:
        CommandTimeoutError: If the command exceeded ``timeout``
        CommandError: If the command failed or could not be started
        KeyboardInterrupt: If the command was interrupted with SIGINT
    """
    print_info(f"$ {format_command(command)}")
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            timeout=timeout,
            input=input_text,
            text=input_text is not None,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandTimeoutError(command, exc.timeout) from exc
    except FileNotFoundError as exc:
        raise CommandError(command, None, detail=str(exc)) from exc

    if result.returncode == -signal.SIGINT:
        raise KeyboardInterrupt
    if result.returncode != 0:
        raise CommandError(command, result.returncode)
