from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

PREFIX = "!"
AMOUNT_COMMANDS = {"bet", "raise"}
PLAIN_COMMANDS = {"start", "call", "check", "fold", "status"}


@dataclass(frozen=True)
class Command:
    name: str
    amount: Optional[int] = None


def parse_command(text: str) -> Optional[Command]:
    """Turn a group-chat line into a Command, or None for ordinary chatter."""
    parts = text.strip().split()
    if not parts or not parts[0].startswith(PREFIX):
        return None
    name = parts[0][len(PREFIX):].casefold()
    if name in PLAIN_COMMANDS:
        return Command(name)
    if name in AMOUNT_COMMANDS:
        if len(parts) < 2:
            raise ValueError(f"usage: !{name} <amount>")
        try:
            amount = int(parts[1])
        except ValueError:
            raise ValueError(f"invalid amount: {parts[1]}") from None
        if amount <= 0:
            raise ValueError("amount must be positive")
        return Command(name, amount)
    return None
