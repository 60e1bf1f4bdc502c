"""Shared pytest fixtures for the saru test suite.

Provides reusable fixtures for:
- Temporary project and staging directories
- A real local git repository standing in for a remote mirror
- A ``Config`` pointed at that repository
- Scripted prompt answers
- Mock subprocess helpers
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from saru_cli.config import Config, MirrorSource


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Not-yet-existing project directory inside tmp_path."""
    return tmp_path / "demo"


@pytest.fixture
def staging_root(tmp_path: Path) -> Path:
    """Private staging root so tests can check nothing is left behind."""
    root = tmp_path / "staging"
    root.mkdir()
    return root


# ---------------------------------------------------------------------------
# Local mirror
# ---------------------------------------------------------------------------

def _git(*args: str, cwd: Path) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def saru_repo(tmp_path: Path) -> Path:
    """Git repository laid out like the saruCanvas repository.

    Top level holds ``a.js``, ``b.txt``, ``c.js`` and ``saruCanvas.js``; a
    nested ``lib/d.js`` checks that only the top level is relocated.
    """
    repo = tmp_path / "saruCanvas"
    repo.mkdir()
    _git("init", cwd=repo)
    _git("config", "user.email", "test@saru.local", cwd=repo)
    _git("config", "user.name", "Saru Test", cwd=repo)
    _git("config", "commit.gpgsign", "false", cwd=repo)

    (repo / "a.js").write_text("// a\n", encoding="utf-8")
    (repo / "b.txt").write_text("b\n", encoding="utf-8")
    (repo / "c.js").write_text("// c\n", encoding="utf-8")
    (repo / "saruCanvas.js").write_text("// saruCanvas\n", encoding="utf-8")
    (repo / "lib").mkdir()
    (repo / "lib" / "d.js").write_text("// d\n", encoding="utf-8")

    _git("add", ".", cwd=repo)
    _git("commit", "-m", "Initial commit", cwd=repo)
    return repo


@pytest.fixture
def make_config(staging_root: Path) -> Callable[..., Config]:
    """Factory for a ``Config`` whose ``github`` mirror points at *url*."""

    def factory(url: str, **overrides: Any) -> Config:
        mirrors = {
            "github": MirrorSource(name="github", label="GitHub", url=url),
            "gitee": MirrorSource(name="gitee", label="Gitee", url=url),
        }
        kwargs: dict[str, Any] = {
            "mirrors": mirrors,
            "staging_root": staging_root,
            "clone_timeout": 60.0,
        }
        kwargs.update(overrides)
        return Config(**kwargs)

    return factory


# ---------------------------------------------------------------------------
# Prompt answers
# ---------------------------------------------------------------------------

@pytest.fixture
def scripted_ask() -> Callable[[list[str]], MagicMock]:
    """Return a factory for an ``ask`` callable that replays *answers*.

    Usage:
        ask = scripted_ask(["./demo", "MyApp", "github"])
        collector = PromptCollector(config, ask=ask)
    """

    def factory(answers: list[str]) -> MagicMock:
        return MagicMock(side_effect=list(answers))

    return factory


# ---------------------------------------------------------------------------
# Subprocess mocks
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
