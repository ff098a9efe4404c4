from __future__ import annotations

from dataclasses import dataclass
from typing import List

VALUES = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")
SUITS = ("Hearts", "Diamonds", "Clubs", "Spades")
SUIT_SYMBOLS = {"Hearts": "♥", "Diamonds": "♦", "Clubs": "♣", "Spades": "♠"}

_SUIT_BY_LETTER = {suit[0].lower(): suit for suit in SUITS}


@dataclass(frozen=True)
class Card:
    value: str
    suit: str

    def __post_init__(self) -> None:
        if self.value not in VALUES:
            raise ValueError(f"Invalid value: {self.value}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{self.value}{SUIT_SYMBOLS[self.suit]}"

    def __str__(self) -> str:
        return self.label


def canonical_deck() -> List[Card]:
    return [Card(value, suit) for suit in SUITS for value in VALUES]


def cards_to_labels(cards: List[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    """Build a card from a short label such as ``"Ah"``, ``"10s"`` or ``"Td"``."""
    if len(label) not in (2, 3):
        raise ValueError(f"Invalid card label: {label}")
    value, letter = label[:-1].upper(), label[-1].lower()
    if value == "T":
        value = "10"
    if letter not in _SUIT_BY_LETTER:
        raise ValueError(f"Invalid card label: {label}")
    return Card(value, _SUIT_BY_LETTER[letter])


def parse_cards(labels: List[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
