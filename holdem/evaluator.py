from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .cards import Card

RANK_NAMES = {
    14: "Ace",
    13: "King",
    12: "Queen",
    11: "Jack",
    10: "Ten",
    9: "Nine",
    8: "Eight",
    7: "Seven",
    6: "Six",
    5: "Five",
    4: "Four",
    3: "Three",
    2: "Two",
}

WHEEL = (5, 4, 3, 2, 14)


class HandType(IntEnum):
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class HandRanking:
    """Best five-card hand found in a set of cards.

    ``value`` is the primary rank inside the category (top card of a straight,
    rank of the quads, top pair ...). ``kickers`` breaks ties element-wise.
    """

    type: HandType = HandType.HIGH_CARD
    value: int = 0
    kickers: Tuple[Card, ...] = ()
    description: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandRanking):
            return NotImplemented
        return compare_hands(self, other) == 0

    def __lt__(self, other: "HandRanking") -> bool:
        if not isinstance(other, HandRanking):
            return NotImplemented
        return compare_hands(self, other) < 0

    __hash__ = None  # type: ignore[assignment]


def compare_hands(a: HandRanking, b: HandRanking) -> int:
    """Return -1, 0 or 1 as ``a`` is weaker than, equal to, or stronger than ``b``."""
    if a.type != b.type:
        return 1 if a.type > b.type else -1
    if a.value != b.value:
        return 1 if a.value > b.value else -1
    for mine, theirs in zip(a.kickers, b.kickers):
        if mine.value != theirs.value:
            return 1 if mine.value > theirs.value else -1
    return 0


def evaluate_hand(hole_cards: Sequence[Card], community_cards: Sequence[Card] = ()) -> HandRanking:
    """Rank the best hand available from hole + community cards (up to 7)."""
    cards = list(hole_cards) + list(community_cards)
    if not cards:
        raise ValueError("No cards to evaluate")
    if len(cards) > 7:
        raise ValueError(f"Too many cards to evaluate: {len(cards)}")

    for check in _CATEGORY_CHECKS:
        ranking = check(cards)
        if ranking is not None:
            return ranking
    return _high_card(cards)


def describe_rank(ranking: HandRanking) -> str:
    return ranking.type.name.lower()


# Category checks, strongest first ------------------------------------------


def _straight_flush(cards: List[Card]) -> Optional[HandRanking]:
    for suited in _group_by_suit(cards).values():
        if len(suited) < 5:
            continue
        found = _find_straight(suited)
        if found is None:
            continue
        high, run = found
        if high == 14:
            return HandRanking(HandType.ROYAL_FLUSH, 14, tuple(run), "Royal Flush")
        return HandRanking(HandType.STRAIGHT_FLUSH, high, tuple(run), f"Straight Flush, {_name(high)} high")
    return None


def _four_of_a_kind(cards: List[Card]) -> Optional[HandRanking]:
    groups = _group_by_value(cards)
    quads = [value for value, members in groups.items() if len(members) == 4]
    if not quads:
        return None
    value = max(quads)
    kickers = _kickers(cards, exclude={value}, count=1)
    return HandRanking(HandType.FOUR_OF_A_KIND, value, kickers, f"Four {_plural(value)}")


def _full_house(cards: List[Card]) -> Optional[HandRanking]:
    grouped = _group_by_value(cards)
    groups = sorted(grouped.items(), key=lambda item: (len(item[1]), item[0]), reverse=True)
    trips = next((value for value, members in groups if len(members) >= 3), None)
    if trips is None:
        return None
    pair = next((value for value, members in groups if len(members) >= 2 and value != trips), None)
    if pair is None:
        return None
    return HandRanking(
        HandType.FULL_HOUSE,
        trips,
        (grouped[pair][0],),
        f"{_plural(trips)} full of {_plural(pair)}",
    )


def _flush(cards: List[Card]) -> Optional[HandRanking]:
    for suited in _group_by_suit(cards).values():
        if len(suited) >= 5:
            top = _by_value(suited)[:5]
            return HandRanking(HandType.FLUSH, top[0].value, tuple(top), f"Flush, {_name(top[0].value)} high")
    return None


def _straight(cards: List[Card]) -> Optional[HandRanking]:
    found = _find_straight(cards)
    if found is None:
        return None
    high, run = found
    return HandRanking(HandType.STRAIGHT, high, tuple(run), f"Straight, {_name(high)} high")


def _three_of_a_kind(cards: List[Card]) -> Optional[HandRanking]:
    trips = [value for value, members in _group_by_value(cards).items() if len(members) == 3]
    if not trips:
        return None
    value = max(trips)
    kickers = _kickers(cards, exclude={value}, count=2)
    return HandRanking(HandType.THREE_OF_A_KIND, value, kickers, f"Three {_plural(value)}")


def _two_pair(cards: List[Card]) -> Optional[HandRanking]:
    groups = _group_by_value(cards)
    pairs = sorted((value for value, members in groups.items() if len(members) >= 2), reverse=True)
    if len(pairs) < 2:
        return None
    high, low = pairs[0], pairs[1]
    kickers = (groups[low][0],) + _kickers(cards, exclude={high, low}, count=1)
    return HandRanking(HandType.TWO_PAIR, high, kickers, f"{_plural(high)} and {_plural(low)}")


def _pair(cards: List[Card]) -> Optional[HandRanking]:
    pairs = [value for value, members in _group_by_value(cards).items() if len(members) == 2]
    if not pairs:
        return None
    value = max(pairs)
    kickers = _kickers(cards, exclude={value}, count=3)
    return HandRanking(HandType.PAIR, value, kickers, f"Pair of {_plural(value)}")


def _high_card(cards: List[Card]) -> HandRanking:
    top = _by_value(cards)[:5]
    return HandRanking(HandType.HIGH_CARD, top[0].value, tuple(top), f"{_name(top[0].value)} high")


_CATEGORY_CHECKS: Tuple[Callable[[List[Card]], Optional[HandRanking]], ...] = (
    _straight_flush,
    _four_of_a_kind,
    _full_house,
    _flush,
    _straight,
    _three_of_a_kind,
    _two_pair,
    _pair,
)


# Helpers ---------------------------------------------------------------------


def _by_value(cards: Sequence[Card]) -> List[Card]:
    return sorted(cards, key=lambda card: card.value, reverse=True)


def _group_by_value(cards: Sequence[Card]) -> Dict[int, List[Card]]:
    groups: Dict[int, List[Card]] = {}
    for card in _by_value(cards):
        groups.setdefault(card.value, []).append(card)
    return groups


def _group_by_suit(cards: Sequence[Card]) -> Dict[str, List[Card]]:
    groups: Dict[str, List[Card]] = {}
    for card in cards:
        groups.setdefault(card.suit, []).append(card)
    return groups


def _kickers(cards: Sequence[Card], exclude: set, count: int) -> Tuple[Card, ...]:
    # One card per remaining rank, highest first.
    picked: List[Card] = []
    seen = set(exclude)
    for card in _by_value(cards):
        if card.value in seen:
            continue
        seen.add(card.value)
        picked.append(card)
        if len(picked) == count:
            break
    return tuple(picked)


def _find_straight(cards: Sequence[Card]) -> Optional[Tuple[int, List[Card]]]:
    """Return (high value, run cards) for the best five-card run, if any."""
    by_value: Dict[int, Card] = {}
    for card in _by_value(cards):
        by_value.setdefault(card.value, card)

    for high in sorted(by_value, reverse=True):
        run = range(high, high - 5, -1)
        if all(value in by_value for value in run):
            return high, [by_value[value] for value in run]

    # Ace plays low only to complete 5-4-3-2-A.
    if all(value in by_value for value in WHEEL):
        return 5, [by_value[value] for value in WHEEL]
    return None


def _name(value: int) -> str:
    return RANK_NAMES[value]


def _plural(value: int) -> str:
    name = RANK_NAMES[value]
    return f"{name}es" if name.endswith("x") else f"{name}s"
