from __future__ import annotations

import itertools
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .cards import VALUES, Card

VALUE_ORDER = {value: idx for idx, value in enumerate(VALUES, start=2)}

CATEGORY_NAMES = (
    "high_card",
    "pair",
    "two_pair",
    "three_of_a_kind",
    "straight",
    "flush",
    "full_house",
    "four_of_a_kind",
    "straight_flush",
)

# Strength tuples are packed into one integer, five kicker digits in base 15
# under the category. rank() flips that so lower is stronger.
_BASE = 15
_KICKER_SLOTS = 5
WORST_RANK = len(CATEGORY_NAMES) * _BASE**_KICKER_SLOTS

Strength = Tuple[int, List[int]]


def rank(cards: Sequence[Card]) -> int:
    """Rank up to 7 cards. Lower is stronger; equal hands get equal ranks."""
    if not cards or len(cards) > 7:
        raise ValueError(f"Cannot rank {len(cards)} cards")
    return WORST_RANK - _pack(evaluate_best(cards))


def describe_rank(value: int) -> str:
    category = (WORST_RANK - value) // _BASE**_KICKER_SLOTS
    return CATEGORY_NAMES[category]


def evaluate_best(cards: Sequence[Card]) -> Strength:
    """Return a strength tuple for up to 7 cards. Higher is better."""
    if len(cards) <= 5:
        return _evaluate_combo(cards)
    best: Optional[Strength] = None
    for combo in itertools.combinations(cards, 5):
        strength = _evaluate_combo(combo)
        if best is None or strength > best:
            best = strength
    assert best is not None
    return best


def _pack(strength: Strength) -> int:
    category, kickers = strength
    digits = (list(kickers) + [0] * _KICKER_SLOTS)[:_KICKER_SLOTS]
    packed = category
    for digit in digits:
        packed = packed * _BASE + digit
    return packed


def _evaluate_combo(cards: Sequence[Card]) -> Strength:
    values = sorted((VALUE_ORDER[card.value] for card in cards), reverse=True)
    complete = len(cards) == 5

    is_flush = complete and len({card.suit for card in cards}) == 1
    straight_high = _straight_high(cards) if complete else None

    counts: Dict[str, int] = {}
    for card in cards:
        counts.setdefault(card.value, 0)
        counts[card.value] += 1

    ordered_counts = sorted(counts.items(), key=lambda x: (x[1], VALUE_ORDER[x[0]]), reverse=True)
    count_values = sorted(counts.values(), reverse=True) + [0]

    if straight_high and is_flush:
        return (8, [straight_high])
    if count_values[0] == 4:
        quad_value = VALUE_ORDER[ordered_counts[0][0]]
        kicker = max((VALUE_ORDER[v] for v, c in ordered_counts if v != ordered_counts[0][0]), default=0)
        return (7, [quad_value, kicker])
    if count_values[0] == 3 and count_values[1] == 2:
        trips = VALUE_ORDER[ordered_counts[0][0]]
        pair = VALUE_ORDER[ordered_counts[1][0]]
        return (6, [trips, pair])
    if is_flush:
        return (5, values)
    if straight_high:
        return (4, [straight_high])
    if count_values[0] == 3:
        trips_value = VALUE_ORDER[ordered_counts[0][0]]
        kickers = [VALUE_ORDER[v] for v, c in ordered_counts[1:]]
        return (3, [trips_value] + kickers)
    if count_values[0] == 2 and count_values[1] == 2:
        pair_high = VALUE_ORDER[ordered_counts[0][0]]
        pair_low = VALUE_ORDER[ordered_counts[1][0]]
        kicker = max((VALUE_ORDER[v] for v, c in ordered_counts if c == 1), default=0)
        return (2, [pair_high, pair_low, kicker])
    if count_values[0] == 2:
        pair_value = VALUE_ORDER[ordered_counts[0][0]]
        kickers = [VALUE_ORDER[v] for v, c in ordered_counts[1:]]
        return (1, [pair_value] + kickers)
    return (0, values)


def _straight_high(cards: Iterable[Card]) -> Optional[int]:
    values = {VALUE_ORDER[card.value] for card in cards}
    if 14 in values:  # Ace low
        values.add(1)
    ordered = sorted(values)
    best = None
    for idx in range(len(ordered) - 4):
        window = ordered[idx : idx + 5]
        if window == list(range(window[0], window[0] + 5)):
            best = window[-1]
    return best
