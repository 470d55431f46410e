"""
Base types shared by every MCP message the server sends or receives.

Protocol models use snake_case attributes in Python and camelCase on the wire.
`to_protocol()` produces the wire dict (without the JSON-RPC envelope) and
`from_protocol()` accepts a full JSON-RPC payload.
"""

import traceback
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROTOCOL_VERSION = "2025-06-18"
JSONRPC_VERSION = "2.0"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = str | int


class ProtocolModel(BaseModel):
    """Base model for all protocol types."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    def to_protocol(self) -> dict[str, Any]:
        """Model dump with wire aliases, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Request(ProtocolModel):
    """
    Base class for requests. Subclasses pin `method` to a literal and add
    their params as fields.
    """

    method: str

    metadata: dict[str, Any] | None = Field(default=None, alias="_meta")
    """
    Free-form `_meta` sent with the request params.
    """

    @classmethod
    def from_protocol(cls, data: dict[str, Any]) -> Self:
        """Build a request from a JSON-RPC payload.

        Raises:
            KeyError: If the payload has no method.
            ValidationError: If the params don't fit the request type.
        """
        params = dict(data.get("params") or {})
        return cls.model_validate({"method": data["method"], **params})

    def to_protocol(self) -> dict[str, Any]:
        """Serialize to `{"method": ..., "params": {...}}`.

        Params are omitted when there are none.
        """
        dumped = super().to_protocol()
        method = dumped.pop("method")
        result: dict[str, Any] = {"method": method}
        if dumped:
            result["params"] = dumped
        return result

    @classmethod
    def expected_result_type(cls) -> type["Result"]:
        return Result


class Notification(ProtocolModel):
    """
    Base class for one-way messages that expect no response.
    """

    method: str

    metadata: dict[str, Any] | None = Field(default=None, alias="_meta")

    @classmethod
    def from_protocol(cls, data: dict[str, Any]) -> Self:
        params = dict(data.get("params") or {})
        return cls.model_validate({"method": data["method"], **params})

    def to_protocol(self) -> dict[str, Any]:
        dumped = super().to_protocol()
        method = dumped.pop("method")
        result: dict[str, Any] = {"method": method}
        if dumped:
            result["params"] = dumped
        return result


class Result(ProtocolModel):
    """
    Base class for successful responses.
    """

    metadata: dict[str, Any] | None = Field(default=None, alias="_meta")

    @classmethod
    def from_protocol(cls, data: dict[str, Any]) -> Self:
        """Build a result from a JSON-RPC response payload."""
        return cls.model_validate(data["result"])


class Error(ProtocolModel):
    """
    JSON-RPC error returned in place of a result.
    """

    code: int
    message: str
    data: str | dict[str, Any] | list[Any] | None = None
    """
    Extra detail. Exceptions are flattened to their formatted traceback.
    """

    @field_validator("data", mode="before")
    @classmethod
    def format_exception(cls, v: Any) -> Any:
        if isinstance(v, BaseException):
            return "".join(traceback.format_exception(v))
        return v

    @classmethod
    def from_protocol(cls, data: dict[str, Any]) -> Self:
        """Build an error from a JSON-RPC error payload.

        Raises:
            KeyError: If code or message is missing.
        """
        error = data["error"] if "error" in data else data
        return cls(
            code=error["code"],
            message=error["message"],
            data=error.get("data"),
        )

    def to_protocol(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result
