from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

RANKS = ("A", "K", "Q", "J", "10", "9", "8", "7", "6", "5", "4", "3", "2")
SUITS = ("Hearts", "Diamonds", "Clubs", "Spades")

RANK_VALUE = {rank: value for value, rank in zip(range(14, 1, -1), RANKS)}
SUIT_BY_LETTER = {suit[0].lower(): suit for suit in SUITS}
SUIT_SYMBOLS = {"Hearts": "♥", "Diamonds": "♦", "Clubs": "♣", "Spades": "♠"}

FULL_DECK_SIZE = len(RANKS) * len(SUITS)


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANK_VALUE:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit[0].lower()}"

    def __str__(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"


def create_full_deck() -> List[Card]:
    """Return the 52 cards in a fixed order. Shuffling happens at draw time."""
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


def draw_random(deck: List[Card], rng: Optional[random.Random] = None) -> Card:
    if not deck:
        raise ValueError("Cannot draw from an empty deck")
    rng = rng or random
    return deck.pop(rng.randrange(len(deck)))


def deal(deck: List[Card], count: int, rng: Optional[random.Random] = None) -> List[Card]:
    if len(deck) < count:
        raise ValueError("Not enough cards left in deck")
    return [draw_random(deck, rng) for _ in range(count)]


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    # Accepts "Ah", "10d" and the short "Td" form.
    if len(label) not in (2, 3):
        raise ValueError(f"Invalid card label: {label}")
    rank, suit_letter = label[:-1].upper(), label[-1].lower()
    if rank == "T":
        rank = "10"
    if suit_letter not in SUIT_BY_LETTER:
        raise ValueError(f"Invalid suit: {label[-1]}")
    return Card(rank, SUIT_BY_LETTER[suit_letter])


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
