"""Directory skeleton of a saruCanvas project."""

from __future__ import annotations

import asyncio
from pathlib import Path

from saru_cli.errors import FilesystemError

# Created in this order beneath the project directory.
SCAFFOLD_DIRS: tuple[str, ...] = (
    "sarucanvas/css",
    "sarucanvas/js",
    "assets/image",
    "assets/audio",
    "assets/scenes",
)

SCRIPT_DIR = "sarucanvas/js"


def script_dir(project_dir: str | Path) -> Path:
    """Where the framework's script files live inside a project."""
    return Path(project_dir) / SCRIPT_DIR


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Cannot create directory {path}: {exc.strerror or exc}", path)


async def create_scaffold(project_dir: str | Path) -> list[Path]:
    """Ensure the project directory and every ``SCAFFOLD_DIRS`` entry exist.

    Existing directories and their contents are left untouched, so running
    this twice yields the same tree as running it once.

    Returns:
        The scaffold directories in creation order.

    Raises:
        FilesystemError: If a directory cannot be created. Directories made
            before the failure are kept.
    """
    root = Path(project_dir)
    await asyncio.to_thread(_mkdir, root)

    created: list[Path] = []
    for rel in SCAFFOLD_DIRS:
        path = root / rel
        await asyncio.to_thread(_mkdir, path)
        created.append(path)
    return created
