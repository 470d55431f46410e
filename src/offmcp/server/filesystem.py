"""Sandboxed read access to the project checkout.

Every relative path is resolved against a fixed root. A resolved path that
does not start with the root is refused before the filesystem is touched.
Resolution is lexical (no symlink canonicalization), so a symlink inside the
root that points outside it is still followed.
"""

import asyncio
import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

from offmcp.server.failures import FailureKind, ResourceFailure

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = "Access denied: Path outside project directory"


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    kind: Literal["file", "directory"]

    def __str__(self) -> str:
        return f"{self.name} ({self.kind})"


@dataclass(frozen=True)
class FileMetadata:
    filename: str
    extension: str
    size: int
    last_modified: str
    """ISO-8601 UTC timestamp of the last modification."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "extension": self.extension,
            "size": self.size,
            "lastModified": self.last_modified,
        }


@dataclass(frozen=True)
class FileResource:
    content: str
    metadata: FileMetadata


def isoformat_mtime(timestamp: float) -> str:
    """Format a POSIX timestamp like `2024-01-31T12:00:00.000Z`."""
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FilesystemAccessor:
    """Lists directories and reads text files below a fixed root."""

    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def resolve(self, relative_path: str) -> str | ResourceFailure:
        """Resolve a path against the root without touching the filesystem.

        Returns:
            The absolute path, or an ACCESS_DENIED failure if it escapes the root.
        """
        full_path = os.path.abspath(os.path.join(self.root, relative_path))
        if not full_path.startswith(self.root):
            logger.warning(f"Refusing path outside project root: {relative_path!r}")
            return ResourceFailure.access_denied(ACCESS_DENIED_MESSAGE)
        return full_path

    async def list_directory(
        self, relative_path: str
    ) -> list[DirectoryEntry] | ResourceFailure:
        """List a directory's entries in the order the filesystem returns them."""
        full_path = self.resolve(relative_path)
        if isinstance(full_path, ResourceFailure):
            return full_path

        try:
            return await asyncio.to_thread(self._scan, full_path, relative_path)
        except OSError as e:
            return ResourceFailure.from_exception(e)

    async def read_file(self, relative_path: str) -> FileResource | ResourceFailure:
        """Read a whole file as UTF-8 text along with its metadata."""
        full_path = self.resolve(relative_path)
        if isinstance(full_path, ResourceFailure):
            return full_path

        try:
            return await asyncio.to_thread(self._read, full_path, relative_path)
        except (OSError, UnicodeDecodeError) as e:
            return ResourceFailure.from_exception(e)

    def _scan(
        self, full_path: str, relative_path: str
    ) -> list[DirectoryEntry] | ResourceFailure:
        stats = os.stat(full_path)
        if not stat.S_ISDIR(stats.st_mode):
            return ResourceFailure(
                FailureKind.NOT_A_DIRECTORY, f"Not a directory: {relative_path}"
            )

        with os.scandir(full_path) as entries:
            return [
                DirectoryEntry(
                    name=entry.name,
                    kind="directory" if entry.is_dir() else "file",
                )
                for entry in entries
            ]

    def _read(
        self, full_path: str, relative_path: str
    ) -> FileResource | ResourceFailure:
        stats = os.stat(full_path)
        if not stat.S_ISREG(stats.st_mode):
            return ResourceFailure(
                FailureKind.NOT_A_FILE, f"Not a file: {relative_path}"
            )

        with open(full_path, encoding="utf-8") as f:
            content = f.read()

        return FileResource(
            content=content,
            metadata=FileMetadata(
                filename=os.path.basename(relative_path),
                extension=os.path.splitext(relative_path)[1],
                size=stats.st_size,
                last_modified=isoformat_mtime(stats.st_mtime),
            ),
        )
