import asyncio
from collections.abc import AsyncIterator
from typing import Any

import pytest

from offmcp.server.config import ServerConfig
from offmcp.transport.server import ClientMessage, ServerTransport


class MockServerTransport(ServerTransport):
    """In-memory transport. The message stream ends after `finish()`."""

    def __init__(self):
        self.sent_messages: dict[str, list[dict[str, Any]]] = {}
        self.client_message_queue: asyncio.Queue[ClientMessage | None] = (
            asyncio.Queue()
        )
        self.closed = False
        self._should_raise_error = False

    @property
    def is_open(self) -> bool:
        return not self.closed

    async def send(self, client_id: str, message: dict[str, Any]) -> None:
        if self._should_raise_error:
            raise ConnectionError("Transport error")
        self.sent_messages.setdefault(client_id, []).append(message)

    def client_messages(self) -> AsyncIterator[ClientMessage]:
        return self._client_message_iterator()

    async def _client_message_iterator(self) -> AsyncIterator[ClientMessage]:
        while True:
            message = await self.client_message_queue.get()
            if message is None:
                return
            yield message

    async def close(self) -> None:
        self.closed = True

    # Test helpers
    def simulate_error(self) -> None:
        """Make every send fail."""
        self._should_raise_error = True

    def add_client_message(self, client_id: str, payload: dict[str, Any]) -> None:
        self.client_message_queue.put_nowait(
            ClientMessage(client_id=client_id, payload=payload, timestamp=0.0)
        )

    def finish(self) -> None:
        self.client_message_queue.put_nowait(None)


@pytest.fixture
def mock_transport():
    return MockServerTransport()


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "checkout" / "server"
    (root / "lib").mkdir(parents=True)
    (root / "lib" / "Display.pm").write_text("package Display;\n", encoding="utf-8")
    (root / "README.md").write_text("# Product Opener\n", encoding="utf-8")
    return root


@pytest.fixture
def server_config(project):
    return ServerConfig(project_root=str(project))
