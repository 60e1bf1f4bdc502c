"""Interactive collection of the ``create`` parameters.

Asks for the project directory, the project name and the download source, in
that order, and freezes the answers into a ``ProjectParameters`` instance.
"""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from saru_cli.config import Config
from saru_cli.errors import InputError
from saru_cli.utils import console


class ProjectParameters(BaseModel):
    """Answers collected for one ``create`` run."""

    model_config = ConfigDict(frozen=True)

    project_directory: Path
    project_name: str
    mirror: str


AskFn = Callable[..., str]


class PromptCollector:
    """Runs the prompt dialogue.

    The *ask* callable defaults to ``rich.prompt.Prompt.ask``; each call blocks
    until the user answers, so it runs on a worker thread to keep the
    workflow a plain ``await`` chain.
    """

    def __init__(self, config: Config, ask: AskFn | None = None) -> None:
        self.config = config
        self._ask = ask or Prompt.ask

    async def _prompt(self, message: str, **kwargs: Any) -> str:
        try:
            answer = await self._ask_in_thread(message, **kwargs)
        except EOFError:
            raise InputError(f"No answer given for '{message}' (input closed)")
        answer = (answer or "").strip()
        return answer or kwargs.get("default", "")

    async def _ask_in_thread(self, message: str, **kwargs: Any) -> str:
        """Run *ask* on a daemon thread and await its answer.

        A thread blocked in ``input()`` cannot be stopped. ``asyncio.to_thread``
        would park it in the loop's default executor, which ``asyncio.run``
        joins on shutdown, so Ctrl-C at a prompt would hang until Enter.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def settle(answer: str | None, error: BaseException | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(answer)

        def worker() -> None:
            answer, error = None, None
            try:
                answer = self._ask(message, **kwargs)
            except Exception as exc:
                error = exc
            try:
                loop.call_soon_threadsafe(settle, answer, error)
            except RuntimeError:
                # loop closed while the prompt was open; nobody is waiting
                pass

        threading.Thread(target=worker, name="saru-prompt", daemon=True).start()
        return await future

    async def ask_directory(self) -> str:
        return await self._prompt(
            "Project Directory", default=self.config.default_directory
        )

    async def ask_name(self) -> str:
        return await self._prompt("Name", default=self.config.default_project_name)

    async def ask_mirror(self) -> str:
        """Let the user pick one entry of the mirror table."""
        table = Table(show_header=False, box=None, padding=(0, 2))
        for name, source in self.config.mirrors.items():
            table.add_row(Text(name, style="bold"), Text(source.label or source.url))
        console.print(table)

        return await self._prompt(
            "Select the download source",
            choices=self.config.mirror_names(),
            default=self.config.default_mirror,
        )

    async def collect(self) -> ProjectParameters:
        """Ask every question and return the frozen answers."""
        directory = await self.ask_directory()
        name = await self.ask_name()
        mirror = await self.ask_mirror()

        try:
            project_directory = Path(directory).expanduser().resolve()
        except RuntimeError as exc:
            raise InputError(f"Cannot use project directory '{directory}': {exc}")

        return ProjectParameters(
            project_directory=project_directory,
            project_name=name,
            mirror=mirror,
        )
