"""Shared utility functions for ffbun-cli.

Provides checked async command execution and the Rich-based console helpers
used for every user-facing message.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ffbun_cli.errors import CommandError

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_checked(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float = 300.0,
) -> str:
    """Run a command asynchronously and return its stdout.

    The command is echoed to the console before it starts.

    Args:
        cmd: Program and arguments.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.

    Returns:
        The decoded, stripped stdout of the process.

    Raises:
        CommandError: If the program cannot be started, exits non-zero or
            exceeds *timeout*.
    """
    cmd_str = " ".join(cmd)
    console.print(f"[dim]Executing command:[/dim] {escape(cmd_str)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except OSError as exc:
        raise CommandError(
            f"Could not start command: {cmd_str} ({exc})",
            command=cmd_str,
        ) from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise CommandError(
            f"Command timed out after {timeout}s: {cmd_str}",
            command=cmd_str,
        )

    stdout = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        raise CommandError(
            f"Command failed (exit {process.returncode}): {cmd_str}\n{stderr}",
            command=cmd_str,
            returncode=process.returncode,
            stderr=stderr,
        )

    return stdout


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=escape(title), show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
