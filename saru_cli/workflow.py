"""The ``create`` workflow.

Drives the project-creation state machine:

COLLECTING  -- ask for directory, name and download source.
SCAFFOLDING -- create the directory skeleton.
FETCHING    -- clone the framework and install its scripts.
GENERATING  -- write index.html and saru.json.
DONE        -- report success.

Any ``SaruError`` raised by a step moves the workflow to FAILED. Errors are
caught here and nowhere else; the staging clone is already gone by the time
the error arrives because the fetcher's context manager removed it.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel

from saru_cli.config import Config
from saru_cli.errors import SaruError
from saru_cli.fetcher import SourceFetcher
from saru_cli.prompts import ProjectParameters, PromptCollector
from saru_cli.scaffolder import BootstrapGenerator, create_scaffold, script_dir
from saru_cli.utils import (
    console,
    format_duration,
    print_step_header,
    print_success,
    print_summary_table,
)


class WorkflowState(str, Enum):
    COLLECTING = "collecting"
    SCAFFOLDING = "scaffolding"
    FETCHING = "fetching"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


_NEXT: dict[WorkflowState | None, WorkflowState] = {
    None: WorkflowState.COLLECTING,
    WorkflowState.COLLECTING: WorkflowState.SCAFFOLDING,
    WorkflowState.SCAFFOLDING: WorkflowState.FETCHING,
    WorkflowState.FETCHING: WorkflowState.GENERATING,
    WorkflowState.GENERATING: WorkflowState.DONE,
}

TERMINAL_STATES = frozenset({WorkflowState.DONE, WorkflowState.FAILED})


@dataclass
class WorkflowResult:
    """Outcome of one ``create`` run."""

    state: WorkflowState
    failed_state: WorkflowState | None = None
    error: SaruError | None = None
    params: ProjectParameters | None = None
    scripts: list[Path] = field(default_factory=list)
    artifacts: list[Path] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.state is WorkflowState.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1


class CreateWorkflow:
    """Sequences prompt collection, scaffolding, fetching and generation.

    Collaborators are injectable so each step can be replaced in tests.

    Attributes:
        state: Current state, ``None`` before ``run`` starts.
        transitions: Every state entered, in order.
    """

    def __init__(
        self,
        config: Config,
        collector: PromptCollector | None = None,
        fetcher: SourceFetcher | None = None,
        generator: BootstrapGenerator | None = None,
    ) -> None:
        self.config = config
        self.collector = collector or PromptCollector(config)
        self.fetcher = fetcher or SourceFetcher(config)
        self.generator = generator or BootstrapGenerator(port=config.default_port)
        self.state: WorkflowState | None = None
        self.transitions: list[WorkflowState] = []

    def _enter(self, state: WorkflowState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"Workflow already finished ({self.state.value})")
        if state is not WorkflowState.FAILED and _NEXT.get(self.state) is not state:
            current = self.state.value if self.state else "start"
            raise RuntimeError(f"Illegal transition {current} -> {state.value}")
        self.state = state
        self.transitions.append(state)

    def _step(self, state: WorkflowState) -> None:
        self._enter(state)
        print_step_header(state.value)

    async def run(self) -> WorkflowResult:
        """Execute the workflow once.

        Returns:
            A ``WorkflowResult``; ``exit_code`` is 0 on success and 1 when a
            step raised ``SaruError``.
        """
        started = time.monotonic()
        result = WorkflowResult(state=WorkflowState.COLLECTING)

        console.print(
            Panel(
                "[bold bright_cyan]Create a new saruCanvas project[/bold bright_cyan]",
                border_style="bright_cyan",
            )
        )

        try:
            self._step(WorkflowState.COLLECTING)
            params = await self.collector.collect()
            result.params = params

            self._step(WorkflowState.SCAFFOLDING)
            await create_scaffold(params.project_directory)
            location = escape(str(params.project_directory))
            console.print(f"  [green]+[/green] Scaffold ready in {location}")

            self._step(WorkflowState.FETCHING)
            result.scripts = await self.fetcher.fetch(
                params.mirror, script_dir(params.project_directory)
            )

            self._step(WorkflowState.GENERATING)
            result.artifacts = await self.generator.generate(params)
            for path in result.artifacts:
                console.print(f"  [green]+[/green] {escape(path.name)}")

            self._enter(WorkflowState.DONE)

        except SaruError as exc:
            result.failed_state = self.state
            result.error = exc
            self._enter(WorkflowState.FAILED)

        result.state = self.state
        result.duration = time.monotonic() - started

        if result.success:
            self._print_final_summary(params, result)
        return result

    def _print_final_summary(self, params: ProjectParameters, result: WorkflowResult) -> None:
        print_summary_table(
            {
                "Project": params.project_name,
                "Directory": str(params.project_directory),
                "Source": params.mirror,
                "Scripts": str(len(result.scripts)),
                "Duration": format_duration(result.duration),
            },
            title="saruCanvas project",
        )
        print_success("Finished")
