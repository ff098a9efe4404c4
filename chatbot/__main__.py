import asyncio
import logging
import sys

from .client import ChatClient, build_ssl_context
from .config import BotConfig, parse_config, setup_logging
from .host import GameHost

LOGGER = logging.getLogger("holdem_bot")


async def serve(config: BotConfig) -> None:
    client = ChatClient(
        config.url,
        ssl_context=build_ssl_context(config.server_cert, config.client_cert, config.client_key),
    )
    await client.connect()
    host = GameHost(client, config.table)
    try:
        await host.run()
    finally:
        await client.close()


def main() -> None:
    config = parse_config()
    setup_logging(config)
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        LOGGER.info("Shutting down")
    except OSError as exc:
        LOGGER.error("Bot stopped: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
