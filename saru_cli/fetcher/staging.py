"""Disposable staging directory for a remote clone."""

from __future__ import annotations

import asyncio
import os
import shutil
import time
from pathlib import Path

from saru_cli.errors import FilesystemError


class StagingArea:
    """Exclusively owned temporary directory, removed on every exit path.

    The directory name is derived from the current time in milliseconds and
    the process id, so concurrent invocations never share one. The directory
    itself is not created here; ``git clone`` creates it.

    Usage::

        async with StagingArea(tmp_root) as staging:
            await _run_git("clone", url, str(staging))
    """

    def __init__(self, root: str | Path, prefix: str = "sarucanvas") -> None:
        self.root = Path(root)
        self.prefix = prefix
        self.path = self._unique_path()

    def _unique_path(self) -> Path:
        stamp = f"{self.prefix}-{int(time.time() * 1000)}-{os.getpid()}"
        candidate = self.root / stamp
        counter = 1
        while candidate.exists():
            candidate = self.root / f"{stamp}-{counter}"
            counter += 1
        return candidate

    async def __aenter__(self) -> Path:
        try:
            await asyncio.to_thread(self.root.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(
                f"Cannot create staging root {self.root}: {exc.strerror or exc}", self.root
            )
        return self.path

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.remove()
        return False

    async def remove(self) -> None:
        """Delete the staging directory if anything was created there."""
        if self.path.exists():
            await asyncio.to_thread(shutil.rmtree, self.path, ignore_errors=True)
