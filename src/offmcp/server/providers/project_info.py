import asyncio
import json
import logging
import os
from typing import Any

from offmcp.protocol.resources import ReadResourceResult

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_INFO = {
    "name": "Open Food Facts Server",
    "version": "Unknown",
    "description": (
        "Open Food Facts is a food products database made by everyone, "
        "for everyone."
    ),
}

TECHNOLOGIES = [
    "Perl (core backend)",
    "JavaScript/TypeScript (frontend)",
    "HTML/CSS (UI)",
    "MongoDB (database)",
    "Docker (containerization)",
    "Foundation Framework (UI)",
]


def read_json_file(path: str, default: dict[str, Any]) -> dict[str, Any]:
    """Read a JSON object from disk, falling back to `default` on any problem."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug(f"Using default package info, could not read {path}: {e}")
        return default
    if not isinstance(data, dict):
        return default
    return data


class ProjectInfoProvider:
    """Summarizes the project from its package manifest and top-level layout."""

    def __init__(self, project_root: str):
        self.project_root = project_root

    def collect(self) -> dict[str, Any]:
        package_info = read_json_file(
            os.path.join(self.project_root, "package.json"), DEFAULT_PACKAGE_INFO
        )
        with os.scandir(self.project_root) as entries:
            directories = [entry.name for entry in entries if entry.is_dir()]

        return {
            "name": package_info.get("name") or DEFAULT_PACKAGE_INFO["name"],
            "version": package_info.get("version") or DEFAULT_PACKAGE_INFO["version"],
            "description": package_info.get("description")
            or DEFAULT_PACKAGE_INFO["description"],
            "mainDirectories": directories,
            "technologies": TECHNOLOGIES,
        }

    async def read(self, uri: str) -> ReadResourceResult:
        info = await asyncio.to_thread(self.collect)
        return ReadResourceResult.text(
            uri,
            json.dumps(info, indent=2),
            metadata={"contentType": "application/json"},
        )
