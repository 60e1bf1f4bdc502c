"""saru scaffolder -- directory skeleton and bootstrap files.

Quick usage::

    from saru_cli.scaffolder import BootstrapGenerator, create_scaffold

    await create_scaffold(params.project_directory)
    written = await BootstrapGenerator().generate(params)
"""

from saru_cli.scaffolder.generator import (
    DEFAULT_PORT,
    MANIFEST_FILE,
    BootstrapGenerator,
    Manifest,
)
from saru_cli.scaffolder.layout import SCAFFOLD_DIRS, create_scaffold, script_dir
from saru_cli.scaffolder.templates import TemplateRenderer

__all__ = [
    "BootstrapGenerator",
    "DEFAULT_PORT",
    "MANIFEST_FILE",
    "Manifest",
    "SCAFFOLD_DIRS",
    "TemplateRenderer",
    "create_scaffold",
    "script_dir",
]
