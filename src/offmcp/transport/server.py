"""Server transport protocol."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator


@dataclass
class ClientMessage:
    """Message from a client with explicit connection context."""

    client_id: str
    payload: dict[str, Any]
    timestamp: float
    metadata: dict[str, Any] | None = None


class ServerTransport(ABC):
    """Moves JSON-RPC payloads between the server and its clients.

    Focuses purely on message passing. Protocol handling lives in the session.
    """

    @abstractmethod
    async def send(self, client_id: str, message: dict[str, Any]) -> None:
        """Send message to a specific client.

        Raises:
            ValueError: If the message can't be serialized.
            ConnectionError: If the client can't be reached.
        """
        ...

    @abstractmethod
    def client_messages(self) -> AsyncIterator[ClientMessage]:
        """Stream of messages from clients. Ends when the input closes."""
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True if the transport can still send and receive."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the transport."""
        ...
