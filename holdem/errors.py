"""Error kinds raised by the table engine.

``InvalidActionError`` and ``InsufficientPlayersError`` are recoverable: the
caller rejects the request and the table is left untouched. ``EmptyDeckError``
and ``NoEligiblePlayersError`` mean the hand cannot continue and must be
aborted by the caller.
"""

from __future__ import annotations

from typing import Optional


class PokerError(Exception):
    code = "POKER_ERROR"

    def __init__(self, msg: str, code: Optional[str] = None) -> None:
        super().__init__(msg)
        self.msg = msg
        if code is not None:
            self.code = code


class EmptyDeckError(PokerError):
    code = "EMPTY_DECK"


class NoEligiblePlayersError(PokerError):
    code = "NO_ELIGIBLE_PLAYERS"


class InvalidActionError(PokerError, ValueError):
    code = "INVALID_ACTION"


class InsufficientPlayersError(PokerError):
    code = "NEED_MORE_PLAYERS"
