"""
Resource types: the advertised catalog and the read envelope.

A resource is any document the server can hand back by URI: a directory
listing, a file, a formatted taxonomy, or a canned reference text. Every read
answers with a `ReadResourceResult` holding exactly one `ResourceContents`
entry. Failures are entries flagged with `is_error`, never protocol errors.
"""

from typing import Any, Literal

from pydantic import Field

from offmcp.protocol.base import ProtocolModel, Request, Result


class Resource(ProtocolModel):
    """
    A catalog entry advertised to clients through `resources/list`.
    """

    uri: str
    name: str
    description: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")

    developer_only: bool = Field(default=False, exclude=True)
    """
    Hidden from the catalog unless the server runs in developer mode. Never
    sent on the wire.
    """


class ResourceContents(ProtocolModel):
    """
    One entry of a read envelope.
    """

    uri: str
    """
    The URI exactly as the client sent it, even when it failed to parse.
    """

    text: str
    mime_type: str | None = Field(default=None, alias="mimeType")
    metadata: dict[str, Any] | None = None
    """
    Provider details: file stats, taxonomy provenance, mock flags.
    """

    is_error: bool | None = Field(default=None, alias="isError")


class ListResourcesRequest(Request):
    """
    Request the catalog of advertised resources.
    """

    method: Literal["resources/list"] = "resources/list"
    cursor: str | None = None
    """
    Accepted for compatibility. The catalog is small and returned whole.
    """

    @classmethod
    def expected_result_type(cls) -> type["ListResourcesResult"]:
        return ListResourcesResult


class ListResourcesResult(Result):
    resources: list[Resource]
    next_cursor: str | None = Field(default=None, alias="nextCursor")


class ReadResourceRequest(Request):
    """
    Read a resource by URI.
    """

    method: Literal["resources/read"] = "resources/read"
    uri: str

    @classmethod
    def expected_result_type(cls) -> type["ReadResourceResult"]:
        return ReadResourceResult


class ReadResourceResult(Result):
    """
    The uniform envelope returned for every read, success or failure.
    """

    contents: list[ResourceContents]

    @classmethod
    def text(
        cls,
        uri: str,
        text: str,
        metadata: dict[str, Any] | None = None,
        mime_type: str | None = None,
    ) -> "ReadResourceResult":
        return cls(
            contents=[
                ResourceContents(
                    uri=uri, text=text, metadata=metadata, mime_type=mime_type
                )
            ]
        )

    @classmethod
    def error(cls, uri: str, message: str) -> "ReadResourceResult":
        return cls(contents=[ResourceContents(uri=uri, text=message, is_error=True)])

    @property
    def is_error(self) -> bool:
        """True if any entry is flagged as an error."""
        return any(content.is_error for content in self.contents)
