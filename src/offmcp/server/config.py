import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from offmcp.protocol.base import PROTOCOL_VERSION
from offmcp.protocol.initialization import (
    Implementation,
    ResourcesCapability,
    ServerCapabilities,
)

DEFAULT_SCHEME = "openfoodfacts"
DEFAULT_STATIC_TAXONOMY_IDS = ("categories",)


def _default_project_root() -> str:
    # The server runs from its own folder inside the project checkout.
    return str(Path.cwd().parent.resolve())


@dataclass
class ServerConfig:
    """Everything the server needs to know at startup."""

    project_root: str = field(default_factory=_default_project_root)
    scheme: str = DEFAULT_SCHEME
    developer_mode: bool = False

    # Taxonomy ids answered from canned text instead of the files on disk.
    static_taxonomy_ids: tuple[str, ...] = DEFAULT_STATIC_TAXONOMY_IDS
    indent_unit: int = 2

    info: Implementation = field(
        default_factory=lambda: Implementation(
            name="OpenFoodFacts-MCP", version="1.0.0"
        )
    )
    capabilities: ServerCapabilities = field(
        default_factory=lambda: ServerCapabilities(
            resources=ResourcesCapability(), roots={}
        )
    )
    instructions: str | None = None
    protocol_version: str = PROTOCOL_VERSION
    log_level: int = logging.INFO

    def __post_init__(self) -> None:
        self.project_root = os.path.abspath(self.project_root)
        if self.indent_unit < 1:
            raise ValueError("indent_unit must be a positive integer")

    @property
    def scheme_prefix(self) -> str:
        return f"{self.scheme}://"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "ServerConfig":
        """Build a config from OFF_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        if env.get("OFF_PROJECT_ROOT"):
            kwargs["project_root"] = env["OFF_PROJECT_ROOT"]
        if "OFF_DEVELOPER_MODE" in env:
            kwargs["developer_mode"] = env["OFF_DEVELOPER_MODE"].strip().lower() in (
                "1",
                "true",
                "yes",
                "on",
            )
        if "OFF_STATIC_TAXONOMIES" in env:
            kwargs["static_taxonomy_ids"] = tuple(
                item.strip()
                for item in env["OFF_STATIC_TAXONOMIES"].split(",")
                if item.strip()
            )
        if env.get("OFF_LOG_LEVEL"):
            level = logging.getLevelName(env["OFF_LOG_LEVEL"].strip().upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level: {env['OFF_LOG_LEVEL']}")
            kwargs["log_level"] = level

        return cls(**kwargs)
