import asyncio
import json
import logging
import sys
import time
from typing import Any, AsyncIterator, TextIO

from offmcp.transport.server import ClientMessage, ServerTransport

logger = logging.getLogger(__name__)


def parse_json_message(line: str) -> dict[str, Any] | None:
    """Parse a line as a JSON object.

    Returns:
        The parsed dict, or None for blank lines, invalid JSON and non-objects.
    """
    line = line.strip()
    if not line:
        return None

    try:
        message = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(message, dict):
        return None
    return message


def serialize_message(message: dict[str, Any]) -> str:
    """Serialize a message to a single line of JSON.

    Raises:
        ValueError: If the message is not JSON serializable.
    """
    try:
        return json.dumps(message, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Failed to serialize message to JSON: {e}") from e


class StdioServerTransport(ServerTransport):
    """Newline-delimited JSON-RPC over stdin and stdout.

    The client launches the server as a subprocess, so there is exactly one
    client. Logging must go to stderr since stdout carries protocol frames.
    """

    CLIENT_ID = "stdio-client"

    def __init__(
        self,
        reader: asyncio.StreamReader | None = None,
        output: TextIO | None = None,
    ) -> None:
        self._stdin_reader = reader
        self._output = output or sys.stdout
        self._closed = False

    async def _setup_stdin_reader(self) -> asyncio.StreamReader:
        if self._stdin_reader is None:
            self._stdin_reader = asyncio.StreamReader()
            protocol = asyncio.StreamReaderProtocol(self._stdin_reader)
            await asyncio.get_running_loop().connect_read_pipe(
                lambda: protocol, sys.stdin
            )
        return self._stdin_reader

    @property
    def is_open(self) -> bool:
        return not self._closed

    async def send(self, client_id: str, message: dict[str, Any]) -> None:
        """Write a message to stdout. `client_id` is ignored (always 1:1)."""
        if self._closed:
            raise ConnectionError("Transport closed")
        line = serialize_message(message)
        try:
            self._output.write(line + "\n")
            self._output.flush()
        except (OSError, ValueError) as e:
            raise ConnectionError(f"Failed to send message: {e}") from e

    def client_messages(self) -> AsyncIterator[ClientMessage]:
        return self._client_message_iterator()

    async def _client_message_iterator(self) -> AsyncIterator[ClientMessage]:
        reader = await self._setup_stdin_reader()

        while not self._closed:
            try:
                line_bytes = await reader.readline()
            except (OSError, ValueError) as e:
                raise ConnectionError(f"Failed to read from stdin: {e}") from e

            if not line_bytes:
                logger.info("stdin closed, stopping")
                self._closed = True
                return

            line = line_bytes.decode("utf-8", errors="replace")
            message = parse_json_message(line)
            if message is None:
                if line.strip():
                    logger.warning(f"Invalid JSON received: {line.strip()}")
                continue

            yield ClientMessage(
                client_id=self.CLIENT_ID,
                payload=message,
                timestamp=time.time(),
            )

    async def close(self) -> None:
        self._closed = True
