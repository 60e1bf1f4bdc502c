"""Bootstrap file generation.

Writes the two files every saruCanvas project starts from: ``index.html``,
which loads the framework script, and the ``saru.json`` manifest read back by
``saru run``.
"""

from __future__ import annotations

import getpass
from pathlib import Path

from pydantic import BaseModel, Field

from saru_cli.errors import FilesystemError
from saru_cli.prompts import ProjectParameters
from saru_cli.utils import save_json

from .layout import SCRIPT_DIR
from .templates import TemplateRenderer

DEFAULT_PORT = 2017
INDEX_FILE = "index.html"
MANIFEST_FILE = "saru.json"
SCRIPT_ENTRY = f"./{SCRIPT_DIR}/saruCanvas.js"


class Manifest(BaseModel):
    """Contents of ``saru.json``."""

    name: str
    author: str
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)


def system_user() -> str:
    """Account name of the invoking user."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # uid without a passwd entry and no LOGNAME/USER set
        return "unknown"


class BootstrapGenerator:
    """Writes ``index.html`` and ``saru.json`` into a scaffolded project."""

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        port: int = DEFAULT_PORT,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.port = port

    def build_manifest(self, params: ProjectParameters) -> Manifest:
        return Manifest(name=params.project_name, author=system_user(), port=self.port)

    async def generate(self, params: ProjectParameters) -> list[Path]:
        """Write both bootstrap files, replacing any previous versions.

        Returns:
            Paths of the written files.

        Raises:
            FilesystemError: If either file cannot be written.
        """
        root = params.project_directory
        index_path = root / INDEX_FILE
        manifest_path = root / MANIFEST_FILE

        context = {"project_name": params.project_name, "script_src": SCRIPT_ENTRY}
        try:
            await self.renderer.render_to_file("index.html.j2", index_path, context)
        except OSError as exc:
            raise FilesystemError(f"Cannot write {index_path}: {exc.strerror or exc}", index_path)

        manifest = self.build_manifest(params)
        try:
            await save_json(manifest.model_dump(), manifest_path)
        except OSError as exc:
            raise FilesystemError(
                f"Cannot write {manifest_path}: {exc.strerror or exc}", manifest_path
            )

        return [index_path, manifest_path]
