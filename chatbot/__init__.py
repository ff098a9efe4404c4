"""Group-chat bot package: wraps the table engine with the chat network."""

from .client import ChatClient, GroupMessage
from .host import GameHost

__all__ = ["ChatClient", "GameHost", "GroupMessage"]
