"""Directory listings and file contents from the project checkout."""

import os
from urllib.parse import unquote, urlsplit

from offmcp.protocol.resources import ReadResourceResult
from offmcp.protocol.roots import Root
from offmcp.server.failures import FailureKind, ResourceFailure
from offmcp.server.filesystem import FilesystemAccessor


class ProjectFilesProvider:
    def __init__(self, accessor: FilesystemAccessor):
        self.accessor = accessor

    async def read_structure(
        self, uri: str, target_path: str
    ) -> ReadResourceResult | ResourceFailure:
        """List a directory, `target_path` being relative to the project root."""
        entries = await self.accessor.list_directory(target_path)
        if isinstance(entries, ResourceFailure):
            return entries

        listing = "\n".join(str(entry) for entry in entries)
        return ReadResourceResult.text(
            uri, f"Directory {target_path or 'root'}:\n{listing}"
        )

    async def read_file(
        self, uri: str, filepath: str
    ) -> ReadResourceResult | ResourceFailure:
        if not filepath:
            return ResourceFailure.parameter_missing("Filepath parameter is required")

        file = await self.accessor.read_file(filepath)
        if isinstance(file, ResourceFailure):
            return file

        return ReadResourceResult.text(
            uri, file.content, metadata=file.metadata.to_dict()
        )


def file_uri_to_path(uri: str) -> str:
    """Convert a `file:` URI to a local absolute path."""
    parts = urlsplit(uri)
    path = unquote(parts.path)
    if parts.netloc and parts.netloc != "localhost":
        path = f"//{parts.netloc}{path}"
    return path or "/"


class RootedFileProvider:
    """Serves `file:` URIs from inside the client root they fall under.

    The root only scopes where reads may go; the file itself is read through
    a `FilesystemAccessor` anchored at the root's directory. The target must
    sit at or below that directory on a path-segment boundary, so neither
    `..` segments nor a sibling sharing the root's name prefix can be reached.
    """

    async def read(
        self, uri: str, root: Root
    ) -> ReadResourceResult | ResourceFailure:
        if root.uri.startswith("file:"):
            base = file_uri_to_path(root.uri)
        else:
            base = "/"

        accessor = FilesystemAccessor(base)
        target = os.path.abspath(file_uri_to_path(uri))
        if os.path.commonpath([accessor.root, target]) != accessor.root:
            return ResourceFailure.access_denied(
                f"Access denied: {uri} is outside root {root.uri}"
            )

        relative = os.path.relpath(target, accessor.root)
        if relative == ".":
            return ResourceFailure(FailureKind.NOT_A_FILE, f"Not a file: {uri}")

        file = await accessor.read_file(relative)
        if isinstance(file, ResourceFailure):
            return file

        metadata = file.metadata.to_dict()
        metadata["root"] = root.name or root.uri
        return ReadResourceResult.text(
            uri, file.content, metadata=metadata, mime_type="text/plain"
        )
