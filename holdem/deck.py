from __future__ import annotations

import random
from typing import List, Optional

from .cards import Card, canonical_deck
from .errors import EmptyDeckError

# The top of the deck is the end of the list. Hole cards, flop, turn and river
# are all drawn from that same end.

# Shared by every deck built without its own rng, so tables that shuffle at the
# same moment still get independent orders.
_DEFAULT_RNG = random.Random()


class Deck:
    """52-card deck owned by a single table.

    Shuffling uses a non-cryptographic ``random.Random``, so it is not
    suitable for real-money play.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.cards: List[Card] = []
        self._rng = rng

    def __len__(self) -> int:
        return len(self.cards)

    def shuffle(self) -> None:
        if not self.cards:
            self.cards = canonical_deck()
        rng = self._rng if self._rng is not None else _DEFAULT_RNG
        rng.shuffle(self.cards)

    def draw(self) -> Card:
        if not self.cards:
            raise EmptyDeckError("Deck is empty")
        return self.cards.pop()

    def draw_many(self, count: int) -> List[Card]:
        if len(self.cards) < count:
            raise EmptyDeckError(f"Cannot draw {count} cards from a deck of {len(self.cards)}")
        return [self.cards.pop() for _ in range(count)]

    def clear(self) -> None:
        self.cards = []
