"""JSON-RPC message parsing utilities.

Turns raw JSON-RPC payloads into typed protocol objects, reporting bad input
as `Error` values the session can send straight back.
"""

import logging
from typing import Any

from pydantic import ValidationError

from offmcp.protocol.base import (
    INVALID_PARAMS,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    Error,
    Notification,
    Request,
    RequestId,
    Result,
)
from offmcp.protocol.unions import (
    CLIENT_SENT_NOTIFICATION_REGISTRY,
    CLIENT_SENT_REQUEST_REGISTRY,
)

logger = logging.getLogger(__name__)


class MessageParser:
    """Parses client payloads into typed requests and notifications."""

    def parse_request(self, payload: dict[str, Any]) -> Request | Error:
        """Parse a JSON-RPC request payload into a typed Request or an Error.

        Returns:
            The typed request, METHOD_NOT_FOUND for unknown methods, or
            INVALID_PARAMS when the params don't validate.
        """
        method = payload["method"]
        request_type = CLIENT_SENT_REQUEST_REGISTRY.get(method)
        if request_type is None:
            return Error(code=METHOD_NOT_FOUND, message=f"Unknown method: {method}")

        try:
            return request_type.from_protocol(payload)
        except ValidationError as e:
            return Error(
                code=INVALID_PARAMS,
                message=f"Invalid params for {method}",
                data=e.errors(include_url=False, include_context=False),
            )

    def parse_notification(self, payload: dict[str, Any]) -> Notification | None:
        """Parse a JSON-RPC notification payload.

        Returns:
            The typed notification, or None for unknown types and parse failures.
        """
        method = payload["method"]
        notification_type = CLIENT_SENT_NOTIFICATION_REGISTRY.get(method)
        if notification_type is None:
            logger.debug(f"Ignoring unknown notification: {method}")
            return None

        try:
            return notification_type.from_protocol(payload)
        except ValidationError as e:
            logger.warning(f"Invalid notification {method}: {e}")
            return None

    def is_valid_request(self, payload: dict[str, Any]) -> bool:
        """Check if payload is a JSON-RPC request."""
        return (
            isinstance(payload.get("method"), str)
            and "id" in payload
            and isinstance(payload["id"], (str, int))
            and not isinstance(payload["id"], bool)
        )

    def is_valid_notification(self, payload: dict[str, Any]) -> bool:
        """Check if payload is a JSON-RPC notification."""
        return isinstance(payload.get("method"), str) and "id" not in payload


def response_payload(request_id: RequestId, result: Result) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "result": result.to_protocol(),
    }


def error_payload(request_id: RequestId | None, error: Error) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error.to_protocol()}
