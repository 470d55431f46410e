"""Server session: protocol handlers for the Open Food Facts resources."""

import logging

from offmcp.protocol.base import METHOD_NOT_FOUND, Error
from offmcp.protocol.common import EmptyResult, PingRequest
from offmcp.protocol.initialization import (
    InitializedNotification,
    InitializeRequest,
    InitializeResult,
)
from offmcp.protocol.resources import (
    ListResourcesRequest,
    ListResourcesResult,
    ReadResourceRequest,
    ReadResourceResult,
)
from offmcp.protocol.roots import RootsListChangedNotification, UpdateRootsRequest
from offmcp.server.config import ServerConfig
from offmcp.server.coordinator import MessageCoordinator
from offmcp.server.roots import RootsRegistry
from offmcp.server.router import ResourceRouter
from offmcp.transport.server import ServerTransport


class ServerSession:
    """Answers MCP requests from the connected client.

    Owns the roots registry and the resource router; the router gets the
    registry at construction, so each session has its own access boundary.
    """

    def __init__(
        self,
        transport: ServerTransport,
        config: ServerConfig,
        roots: RootsRegistry | None = None,
        router: ResourceRouter | None = None,
    ):
        self.transport = transport
        self.server_config = config

        self.roots = roots or RootsRegistry()
        self.router = router or ResourceRouter(config, self.roots)
        self.initialized_clients: set[str] = set()

        self._coordinator = MessageCoordinator(transport)
        self._register_handlers()
        self.logger = logging.getLogger("offmcp.server.session")

    async def run(self) -> None:
        """Serve until the client closes the connection."""
        self.logger.info(
            f"{self.server_config.info.name} serving {self.server_config.project_root}"
        )
        try:
            await self._coordinator.run()
        finally:
            await self.transport.close()

    async def handle_payload(self, client_id: str, payload: dict) -> dict | None:
        """Handle one raw JSON-RPC payload and return the response, if any."""
        return await self._coordinator.handle_payload(client_id, payload)

    # ================================
    # Initialization
    # ================================

    async def _handle_initialize(
        self, client_id: str, request: InitializeRequest
    ) -> InitializeResult:
        self.logger.info(
            f"Client {request.client_info.name} {request.client_info.version} "
            f"connecting with protocol {request.protocol_version}"
        )
        return InitializeResult(
            capabilities=self.server_config.capabilities,
            server_info=self.server_config.info,
            protocol_version=self.server_config.protocol_version,
            instructions=self.server_config.instructions,
        )

    async def _handle_initialized(
        self, client_id: str, notification: InitializedNotification
    ) -> None:
        self.initialized_clients.add(client_id)

    async def _handle_ping(self, client_id: str, request: PingRequest) -> EmptyResult:
        return EmptyResult()

    # ================================
    # Resources
    # ================================

    async def _handle_list_resources(
        self, client_id: str, request: ListResourcesRequest
    ) -> ListResourcesResult | Error:
        if self.server_config.capabilities.resources is None:
            return Error(
                code=METHOD_NOT_FOUND,
                message="Server does not support resources capability",
            )
        return ListResourcesResult(resources=self.router.list_resources())

    async def _handle_read_resource(
        self, client_id: str, request: ReadResourceRequest
    ) -> ReadResourceResult | Error:
        """Failures come back as error-flagged contents, never as an Error."""
        if self.server_config.capabilities.resources is None:
            return Error(
                code=METHOD_NOT_FOUND,
                message="Server does not support resources capability",
            )
        return await self.router.resolve(request.uri)

    # ================================
    # Roots
    # ================================

    async def _handle_update_roots(
        self, client_id: str, request: UpdateRootsRequest
    ) -> EmptyResult:
        return await self.roots.handle_update_roots(request)

    async def _handle_roots_list_changed(
        self, client_id: str, notification: RootsListChangedNotification
    ) -> None:
        self.logger.info(f"Client {client_id} reports changed roots")

    def _register_handlers(self) -> None:
        """Register all protocol handlers with the coordinator."""
        self._coordinator.register_request_handler(
            "initialize", self._handle_initialize
        )
        self._coordinator.register_request_handler("ping", self._handle_ping)
        self._coordinator.register_request_handler(
            "resources/list", self._handle_list_resources
        )
        self._coordinator.register_request_handler(
            "resources/read", self._handle_read_resource
        )
        self._coordinator.register_request_handler(
            "roots/update", self._handle_update_roots
        )

        self._coordinator.register_notification_handler(
            "notifications/initialized", self._handle_initialized
        )
        self._coordinator.register_notification_handler(
            "notifications/roots/list_changed", self._handle_roots_list_changed
        )
