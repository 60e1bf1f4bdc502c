"""saru CLI configuration.

Centralised, typed configuration for the project generator. All settings use
Pydantic v2 models so they can be validated at construction time and
overridden from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator


class MirrorSource(BaseModel):
    """A named location the saruCanvas repository can be cloned from."""

    name: str
    label: str = Field(default="", description="Text shown in the source picker")
    url: str


DEFAULT_MIRRORS: dict[str, MirrorSource] = {
    "gitee": MirrorSource(
        name="gitee",
        label="Gitee (mainland China mirror, faster)",
        url="https://gitee.com/lww090627/saruCanvas",
    ),
    "github": MirrorSource(
        name="github",
        label="GitHub",
        url="https://github.com/bil-fis/saruCanvas",
    ),
}


class Config(BaseModel):
    """Global saru configuration.

    Holds the mirror table and every default the ``create`` and ``run``
    commands fall back on. Instances are created once by the CLI entry point
    and passed through the rest of the system.
    """

    mirrors: dict[str, MirrorSource] = Field(
        default_factory=lambda: {k: v.model_copy() for k, v in DEFAULT_MIRRORS.items()}
    )
    default_mirror: str = Field(default="github")
    default_directory: str = Field(default=".")
    default_project_name: str = Field(default="sarucanvas")
    default_port: int = Field(default=2017, ge=1, le=65535)
    clone_timeout: float = Field(
        default=300.0, gt=0, description="Upper bound for git clone in seconds"
    )
    probe_timeout: float = Field(
        default=5.0, gt=0, description="Timeout of the mirror reachability probe"
    )
    staging_root: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    script_extension: str = Field(default=".js")
    debug: bool = Field(default=False, description="Show tracebacks on failure")

    @model_validator(mode="after")
    def _check_default_mirror(self) -> "Config":
        if self.default_mirror not in self.mirrors:
            raise ValueError(
                f"default_mirror '{self.default_mirror}' is not one of: "
                f"{', '.join(self.mirrors)}"
            )
        return self

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def mirror_names(self) -> list[str]:
        """Return the mirror keys in table order."""
        return list(self.mirrors)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            SARU_DEFAULT_MIRROR, SARU_CLONE_TIMEOUT, SARU_STAGING_ROOT,
            SARU_DEBUG.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SARU_DEFAULT_MIRROR"):
            kwargs["default_mirror"] = os.environ["SARU_DEFAULT_MIRROR"]
        if os.environ.get("SARU_CLONE_TIMEOUT"):
            kwargs["clone_timeout"] = float(os.environ["SARU_CLONE_TIMEOUT"])
        if os.environ.get("SARU_STAGING_ROOT"):
            kwargs["staging_root"] = Path(os.environ["SARU_STAGING_ROOT"])
        if os.environ.get("SARU_DEBUG", "").lower() in ("1", "true", "yes"):
            kwargs["debug"] = True
        return cls(**kwargs)
