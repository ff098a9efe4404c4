from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from holdem.models import TableConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_MAX_BYTES = 32 * 1024 * 1024


@dataclass
class BotConfig:
    url: str = "wss://127.0.0.1:7676/ws"
    datadir: str = os.path.join(os.path.expanduser("~"), ".holdembot")
    server_cert: Optional[str] = None
    client_cert: Optional[str] = None
    client_key: Optional[str] = None
    log_level: str = "INFO"
    table: TableConfig = field(default_factory=TableConfig)

    @property
    def log_path(self) -> str:
        return os.path.join(self.datadir, "logs", "bot.log")


def build_parser() -> argparse.ArgumentParser:
    defaults = BotConfig()
    table = defaults.table
    parser = argparse.ArgumentParser(description="Texas Hold'em bot for group chats")
    parser.add_argument("--url", default=defaults.url, help="WebSocket URL of the chat service RPC endpoint")
    parser.add_argument("--datadir", default=defaults.datadir)
    parser.add_argument("--server-cert", default=None, help="CA certificate of the chat service")
    parser.add_argument("--client-cert", default=None)
    parser.add_argument("--client-key", default=None)
    parser.add_argument("--sb", type=int, default=table.small_blind)
    parser.add_argument("--bb", type=int, default=table.big_blind)
    parser.add_argument("--starting-chips", type=int, default=table.starting_chips)
    parser.add_argument(
        "--min-players",
        type=int,
        default=table.min_players,
        help="Seated players needed before a hand can start",
    )
    parser.add_argument("--log-level", default=defaults.log_level, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def parse_config(argv: Optional[List[str]] = None) -> BotConfig:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not 0 < args.sb <= args.bb:
        parser.error("blinds must satisfy 0 < sb <= bb")
    if args.starting_chips < args.bb:
        parser.error("--starting-chips must cover the big blind")
    if args.min_players < 2:
        parser.error("--min-players must be at least 2")
    return BotConfig(
        url=args.url,
        datadir=args.datadir,
        server_cert=args.server_cert,
        client_cert=args.client_cert,
        client_key=args.client_key,
        log_level=args.log_level,
        table=TableConfig(
            small_blind=args.sb,
            big_blind=args.bb,
            starting_chips=args.starting_chips,
            min_players=args.min_players,
        ),
    )


def setup_logging(config: BotConfig) -> None:
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    os.makedirs(os.path.dirname(config.log_path), mode=0o700, exist_ok=True)
    handler = RotatingFileHandler(config.log_path, maxBytes=LOG_MAX_BYTES, backupCount=3)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)
