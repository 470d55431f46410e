import asyncio
import io

import pytest

from offmcp.transport.stdio import (
    StdioServerTransport,
    parse_json_message,
    serialize_message,
)


def reader_with(*lines: str) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data(line.encode("utf-8"))
    reader.feed_eof()
    return reader


class TestSharedUtils:
    def test_parse_json_message_accepts_objects(self):
        assert parse_json_message('{"jsonrpc":"2.0","method":"ping","id":1}\n') == {
            "jsonrpc": "2.0",
            "method": "ping",
            "id": 1,
        }

    @pytest.mark.parametrize("line", ["", "   \n", "{not json", "[1, 2]", '"text"'])
    def test_parse_json_message_rejects_everything_else(self, line):
        assert parse_json_message(line) is None

    def test_serialize_message_is_compact_single_line(self):
        # Act
        line = serialize_message({"uri": "openfoodfacts://file/é.txt", "n": 1})

        # Assert
        assert line == '{"uri":"openfoodfacts://file/é.txt","n":1}'

    def test_serialize_message_rejects_unserializable(self):
        with pytest.raises(ValueError):
            serialize_message({"method": lambda: None})


class TestSend:
    async def test_send_writes_one_line_per_message(self):
        # Arrange
        output = io.StringIO()
        transport = StdioServerTransport(reader=reader_with(), output=output)

        # Act
        await transport.send("any-client-id", {"jsonrpc": "2.0", "id": 1, "result": {}})

        # Assert
        assert output.getvalue() == '{"jsonrpc":"2.0","id":1,"result":{}}\n'

    async def test_send_after_close_raises(self):
        # Arrange
        transport = StdioServerTransport(reader=reader_with(), output=io.StringIO())
        await transport.close()

        # Act & Assert
        assert not transport.is_open
        with pytest.raises(ConnectionError):
            await transport.send("any-client-id", {"jsonrpc": "2.0"})

    async def test_send_on_broken_output_raises_connection_error(self):
        # Arrange
        output = io.StringIO()
        output.close()
        transport = StdioServerTransport(reader=reader_with(), output=output)

        # Act & Assert
        with pytest.raises(ConnectionError):
            await transport.send("any-client-id", {"jsonrpc": "2.0"})


class TestClientMessages:
    async def test_yields_messages_until_eof(self):
        # Arrange
        transport = StdioServerTransport(
            reader=reader_with(
                '{"jsonrpc":"2.0","id":1,"method":"ping"}\n',
                "\n",
                "garbage\n",
                '{"jsonrpc":"2.0","method":"notifications/initialized"}\n',
            ),
            output=io.StringIO(),
        )

        # Act
        messages = [message async for message in transport.client_messages()]

        # Assert
        assert [m.payload.get("method") for m in messages] == [
            "ping",
            "notifications/initialized",
        ]
        assert {m.client_id for m in messages} == {StdioServerTransport.CLIENT_ID}
        assert not transport.is_open
