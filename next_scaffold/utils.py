"""Shared utility functions for next-scaffold.

Provides async command execution, Rich-based status output, duration
formatting, tool discovery, and the npm registry reachability probe used by
the preflight checks.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

CommandRunner = Callable[..., Awaitable[tuple[int, str, str]]]
"""Signature shared by :func:`run_command` and the fakes used in tests."""


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: Sequence[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = False,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Program and arguments.  Never passed through a shell.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` (the default) waits indefinitely.
        capture: Whether to capture stdout/stderr.  By default they inherit
            the parent's streams so the user sees installer output live.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  If *capture* is ``False``
        the stdout/stderr strings are empty.  A program that cannot be
        started reports return code 127 and the OS error in stderr.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=stdout_pipe,
            stderr=stderr_pipe,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except OSError as exc:
        return (127, "", f"Could not start {cmd[0]}: {exc}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")
    finally:
        # Also reached on cancellation: the child must be gone before the
        # caller starts cleaning up behind it.
        if process.returncode is None:
            process.kill()
            await process.wait()

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


def missing_tools(tools: Sequence[str]) -> list[str]:
    """Return the subset of *tools* that cannot be found on ``PATH``."""
    return [tool for tool in tools if shutil.which(tool) is None]


async def registry_reachable(url: str, timeout: float = 5.0) -> bool:
    """Return ``True`` if the package registry answers with a non-5xx status."""
    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=3.0)) as client:
            response = await client.head(url, follow_redirects=True)
    except httpx.HTTPError:
        return False
    return response.status_code < 500


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(title: str, lines: dict[str, str]) -> None:
    """Print the start-of-run panel."""
    body = "\n".join(f"{key:<8}: {value}" for key, value in lines.items())
    console.print(
        Panel(
            f"[bold bright_cyan]{title}[/bold bright_cyan]\n{body}",
            title="[bold]Scaffold Start[/bold]",
            border_style="bright_cyan",
        )
    )


def print_step(message: str) -> None:
    """Print a cyan step prompt."""
    console.print(f"[cyan]➜[/cyan] {message}")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]✔ {message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]✖ {message}[/bold red]")


def print_info(message: str) -> None:
    """Print a yellow informational message."""
    console.print(f"[yellow]ℹ {message}[/yellow]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()
