"""
Access boundaries granted by the client.

Roots are URI prefixes the client allows the server to operate within. The
client replaces the whole set at once with `roots/update`; there is no
incremental add or remove. An empty set leaves the server unrestricted.
"""

from typing import Any, Literal

from pydantic import Field, field_validator

from offmcp.protocol.base import Notification, ProtocolModel, Request
from offmcp.protocol.common import EmptyResult


class Root(ProtocolModel):
    """
    A URI prefix the server may serve resources under.
    """

    uri: str = ""
    """
    Compared as a literal string prefix. No normalization is applied.
    """

    name: str | None = None
    """
    Optional human-readable label, reported when a read is attributed to it.
    """

    metadata: dict[str, Any] | None = Field(default=None, alias="_meta")

    @field_validator("uri", mode="before")
    @classmethod
    def coerce_missing_uri(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)


class UpdateRootsRequest(Request):
    """
    Client request replacing the server's root set wholesale.
    """

    method: Literal["roots/update"] = "roots/update"
    items: list[Root] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return v

    @classmethod
    def expected_result_type(cls) -> type[EmptyResult]:
        return EmptyResult


class RootsListChangedNotification(Notification):
    """
    Client notification that its roots changed. The new set arrives through
    `roots/update`.
    """

    method: Literal["notifications/roots/list_changed"] = (
        "notifications/roots/list_changed"
    )
