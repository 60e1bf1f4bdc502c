"""Shared utility functions for the saru CLI.

Provides JSON I/O, Rich-based console reporting, duration formatting and a
port probe used by the static server.
"""

from __future__ import annotations

import asyncio
import json
import socket
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

console = Console()
err_console = Console(stderr=True)

# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        return {"_root": data}
    return data


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as two-space indented JSON.

    The write itself is performed in a thread-pool executor to avoid blocking
    the event loop.

    Args:
        data: Serialisable data (dict or list).
        path: Destination file path. Its parent must already exist.
    """
    file_path = Path(path)
    content = json.dumps(data, indent=2, ensure_ascii=False, default=str)

    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, file_path.write_text, content, "utf-8")


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


STEP_COLORS: dict[str, str] = {
    "collecting": "bright_cyan",
    "scaffolding": "bright_green",
    "fetching": "bright_yellow",
    "generating": "bright_magenta",
}


def print_step_header(step: str) -> None:
    """Print a full-width rule announcing a workflow step."""
    color = STEP_COLORS.get(step.lower(), "white")
    console.print(Rule(f"[bold {color}] {step.upper()} [/bold {color}]", style=color))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Keys and values are rendered literally; square brackets in a project name
    or path are not read as markup.
    """
    table = Table(title=escape(title), show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(Text(key), Text(str(value)))

    console.print(table)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(Text(message, style="bold green"))


def print_error(message: str) -> None:
    """Print a red error message on standard error."""
    err_console.print(Text(message, style="bold red"), highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(Text(message, style="bold yellow"))


# ---------------------------------------------------------------------------
# Port helpers
# ---------------------------------------------------------------------------


async def check_port_available(port: int, host: str = "127.0.0.1") -> bool:
    """Check whether a TCP port is available for binding.

    Attempts a ``connect`` to host:port. If the connection is *refused* the
    port is available; if it *succeeds* something is already listening.
    """
    loop = asyncio.get_running_loop()

    def _probe() -> bool:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        try:
            # connect_ex returns 0 when something is listening
            return sock.connect_ex((host, port)) != 0
        finally:
            sock.close()

    return await loop.run_in_executor(None, _probe)
