"""Message processing mechanics for the server session.

Handles the message loop, parsing and routing so the session can focus on
protocol logic.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from offmcp.protocol.base import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    Error,
    Notification,
    Request,
    Result,
)
from offmcp.shared.message_parser import MessageParser, error_payload, response_payload
from offmcp.transport.server import ClientMessage, ServerTransport

RequestHandler = Callable[[str, Any], Awaitable[Result | Error]]
NotificationHandler = Callable[[str, Any], Awaitable[None]]


class MessageCoordinator:
    """Routes inbound requests and notifications to registered handlers.

    Each request runs in its own task so a slow read never holds up the
    next message.
    """

    def __init__(self, transport: ServerTransport):
        self.transport = transport
        self.parser = MessageParser()
        self._request_handlers: dict[str, RequestHandler] = {}
        self._notification_handlers: dict[str, NotificationHandler] = {}
        self._in_flight: set[asyncio.Task[None]] = set()
        self.logger = logging.getLogger("offmcp.server.coordinator")

    def register_request_handler(self, method: str, handler: RequestHandler) -> None:
        self._request_handlers[method] = handler

    def register_notification_handler(
        self, method: str, handler: NotificationHandler
    ) -> None:
        self._notification_handlers[method] = handler

    # ================================
    # Message loop
    # ================================

    async def run(self) -> None:
        """Process client messages until the transport stops yielding them.

        Errors handling a single message are logged and don't stop the loop.
        Waits for in-flight requests before returning.
        """
        if not self.transport.is_open:
            raise ConnectionError("Cannot start processor: transport is closed")

        try:
            async for client_message in self.transport.client_messages():
                try:
                    self._dispatch(client_message)
                except Exception:
                    self.logger.exception(
                        f"Error handling message from {client_message.client_id}"
                    )
        finally:
            if self._in_flight:
                await asyncio.gather(*self._in_flight, return_exceptions=True)

    def _dispatch(self, client_message: ClientMessage) -> None:
        task = asyncio.create_task(self._respond(client_message))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _respond(self, client_message: ClientMessage) -> None:
        response = await self.handle_payload(
            client_message.client_id, client_message.payload
        )
        if response is not None:
            try:
                await self.transport.send(client_message.client_id, response)
            except (ConnectionError, ValueError) as e:
                self.logger.error(
                    f"Failed to send response to {client_message.client_id}: {e}"
                )

    # ================================
    # Route messages
    # ================================

    async def handle_payload(
        self, client_id: str, payload: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Handle one inbound payload.

        Returns:
            The JSON-RPC response for requests, None for notifications and
            anything that isn't a request.
        """
        if self.parser.is_valid_request(payload):
            return await self._handle_request(client_id, payload)
        if self.parser.is_valid_notification(payload):
            await self._handle_notification(client_id, payload)
            return None

        self.logger.warning(f"Unknown message type from {client_id}: {payload}")
        return None

    async def _handle_request(
        self, client_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        request_id = payload["id"]

        request_or_error = self.parser.parse_request(payload)
        if isinstance(request_or_error, Error):
            return error_payload(request_id, request_or_error)

        request: Request = request_or_error
        handler = self._request_handlers.get(request.method)
        if handler is None:
            return error_payload(
                request_id,
                Error(
                    code=METHOD_NOT_FOUND, message=f"Unknown method: {request.method}"
                ),
            )

        try:
            result_or_error = await handler(client_id, request)
        except Exception as e:
            self.logger.exception(f"Handler for {request.method} failed")
            return error_payload(
                request_id,
                Error(code=INTERNAL_ERROR, message=f"Handler error: {e}"),
            )

        if isinstance(result_or_error, Error):
            return error_payload(request_id, result_or_error)
        return response_payload(request_id, result_or_error)

    async def _handle_notification(
        self, client_id: str, payload: dict[str, Any]
    ) -> None:
        notification: Notification | None = self.parser.parse_notification(payload)
        if notification is None:
            return

        handler = self._notification_handlers.get(notification.method)
        if handler is None:
            self.logger.debug(
                f"Unhandled notification '{notification.method}' from {client_id}"
            )
            return

        try:
            await handler(client_id, notification)
        except Exception:
            self.logger.exception(
                f"Error processing notification '{notification.method}'"
            )
