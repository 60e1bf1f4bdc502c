"""Acquisition of the saruCanvas framework sources.

Clones the selected mirror into a staging area, moves the top-level script
files into the project's script directory and throws the rest away.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from pathlib import Path

import httpx
from rich.markup import escape

from saru_cli.config import Config, MirrorSource
from saru_cli.errors import FetchError
from saru_cli.utils import console, print_warning

from .staging import StagingArea


async def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    timeout: float = 300.0,
) -> tuple[str, str]:
    """Run a git command asynchronously and return (stdout, stderr).

    Credential prompts are disabled so an authentication failure surfaces as
    a non-zero exit instead of a hang.

    Raises FetchError if git is missing, exits non-zero or exceeds *timeout*.
    """
    cmd = ["git"] + list(args)
    cmd_str = " ".join(cmd)
    env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=env,
        )
    except FileNotFoundError:
        raise FetchError("git executable not found on PATH", command=cmd_str)

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise FetchError(
            f"Git command timed out after {timeout}s: {cmd_str}",
            command=cmd_str,
        )

    stdout = stdout_bytes.decode("utf-8", errors="replace").strip()
    stderr = stderr_bytes.decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        last_line = stderr.splitlines()[-1] if stderr else ""
        raise FetchError(
            f"Git command failed (exit {process.returncode}): {cmd_str}"
            + (f" -- {last_line}" if last_line else ""),
            command=cmd_str,
            stderr=stderr,
        )

    return stdout, stderr


async def probe_mirror(url: str, timeout: float = 5.0) -> bool:
    """Return ``True`` if the mirror's host answers an HTTP request.

    Non-HTTP addresses (local paths, ``ssh://``) are not probed and count as
    reachable.
    """
    if not url.startswith(("http://", "https://")):
        return True

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout), follow_redirects=True
    ) as client:
        try:
            response = await client.head(url)
        except httpx.HTTPError:
            return False
    return response.status_code < 500


def relocate_scripts(staging: Path, target_dir: Path, extension: str = ".js") -> list[Path]:
    """Move top-level entries of *staging* ending in *extension* into *target_dir*.

    An entry of the same name already in *target_dir* is replaced. Only the
    top level is scanned; nested files stay behind and go with the staging
    area.
    """
    moved: list[Path] = []
    for entry in sorted(staging.iterdir()):
        if not entry.name.endswith(extension):
            continue
        destination = target_dir / entry.name
        if destination.is_dir() and not destination.is_symlink():
            shutil.rmtree(destination)
        elif destination.exists() or destination.is_symlink():
            destination.unlink()
        shutil.move(str(entry), str(destination))
        moved.append(destination)
    return moved


class SourceFetcher:
    """Resolves a mirror name and installs the framework scripts from it."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.last_staging: Path | None = None

    def resolve(self, mirror: str) -> MirrorSource:
        """Look *mirror* up in the configured mirror table."""
        try:
            return self.config.mirrors[mirror]
        except KeyError:
            raise FetchError(
                f"Unknown download source '{mirror}' "
                f"(choose from: {', '.join(self.config.mirror_names())})"
            )

    async def fetch(self, mirror: str, script_dir: str | Path) -> list[Path]:
        """Clone *mirror* and move its script files into *script_dir*.

        The staging clone is removed whether or not the clone or the move
        succeeded.

        Returns:
            Paths of the relocated files.

        Raises:
            FetchError: On clone failure, timeout, or a failed move.
        """
        source = self.resolve(mirror)
        target = Path(script_dir)

        if not await probe_mirror(source.url, timeout=self.config.probe_timeout):
            print_warning(
                f"{source.url} did not answer; trying to clone anyway..."
            )

        staging_area = StagingArea(self.config.staging_root)
        self.last_staging = staging_area.path

        async with staging_area as staging:
            console.print("[yellow]Please wait...[/yellow]")
            console.print(f"  Cloning [bold]{escape(source.url)}[/bold]")
            await _run_git(
                "clone", source.url, str(staging), timeout=self.config.clone_timeout
            )

            try:
                moved = await asyncio.to_thread(
                    relocate_scripts, staging, target, self.config.script_extension
                )
            except OSError as exc:
                raise FetchError(
                    f"Cannot move framework files into {target}: {exc.strerror or exc}"
                )

        console.print(f"  [green]+[/green] {len(moved)} script file(s) installed")
        return moved
