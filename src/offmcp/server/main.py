"""Run the server over stdio.

Configuration comes from OFF_* environment variables, see `ServerConfig`.
"""

import asyncio
import logging
import sys

from offmcp.server.config import ServerConfig
from offmcp.server.session import ServerSession
from offmcp.transport.stdio import StdioServerTransport


def configure_logging(level: int) -> None:
    # stdout carries protocol frames
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def serve(config: ServerConfig) -> None:
    session = ServerSession(transport=StdioServerTransport(), config=config)
    await session.run()


def main() -> None:
    config = ServerConfig.from_env()
    configure_logging(config.log_level)
    asyncio.run(serve(config))


if __name__ == "__main__":
    main()
