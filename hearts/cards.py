from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import random
from typing import Iterable, List, Optional, Tuple


class Suit(str, Enum):
    CLUBS = "C"
    DIAMONDS = "D"
    SPADES = "S"
    HEARTS = "H"

    def __str__(self) -> str:
        return {"C": "♣", "D": "♦", "S": "♠", "H": "♥"}[self.value]


class Rank(str, Enum):
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "T"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"

    def __str__(self) -> str:
        return "10" if self is Rank.TEN else self.value


# Hands are displayed clubs, diamonds, spades, hearts.
SUITS: Tuple[Suit, ...] = (Suit.CLUBS, Suit.DIAMONDS, Suit.SPADES, Suit.HEARTS)
RANKS: Tuple[Rank, ...] = tuple(Rank)
RANK_VALUE = {rank: i + 2 for i, rank in enumerate(RANKS)}
SUIT_ORDER = {suit: i for i, suit in enumerate(SUITS)}


@dataclass(frozen=True)
class Card:
    """A playing card. ``id`` is the compact rank+suit code, e.g. ``"QS"``."""

    id: str
    rank: Rank
    suit: Suit

    @classmethod
    def of(cls, rank: Rank, suit: Suit) -> "Card":
        return cls(id=rank.value + suit.value, rank=rank, suit=suit)

    @property
    def value(self) -> int:
        """Rank strength, 2 lowest through Ace = 14."""
        return RANK_VALUE[self.rank]

    def __str__(self) -> str:
        return str(self.rank) + str(self.suit)


TWO_OF_CLUBS = Card.of(Rank.TWO, Suit.CLUBS)
QUEEN_OF_SPADES = Card.of(Rank.QUEEN, Suit.SPADES)


def card_from_id(card_id: str) -> Card:
    """Parse a compact card id such as ``"TD"`` or ``"10D"``."""
    if not isinstance(card_id, str) or len(card_id) < 2:
        raise ValueError(f"Invalid card id: {card_id!r}")
    rank_str, suit_str = card_id[:-1].upper(), card_id[-1].upper()
    if rank_str == "10":
        rank_str = "T"
    try:
        return Card.of(Rank(rank_str), Suit(suit_str))
    except ValueError:
        raise ValueError(f"Invalid card id: {card_id!r}") from None


def make_deck() -> List[Card]:
    return [Card.of(rank, suit) for suit in SUITS for rank in RANKS]


def shuffled_deck(rng: Optional[random.Random] = None) -> List[Card]:
    deck = make_deck()
    (rng or random).shuffle(deck)
    return deck


def sort_key(card: Card) -> Tuple[int, int]:
    return (SUIT_ORDER[card.suit], RANK_VALUE[card.rank])


def sort_hand(cards: Iterable[Card]) -> Tuple[Card, ...]:
    return tuple(sorted(cards, key=sort_key))


def is_queen_of_spades(card: Card) -> bool:
    return card.suit == Suit.SPADES and card.rank == Rank.QUEEN


__all__ = [
    "Card",
    "Rank",
    "Suit",
    "RANKS",
    "RANK_VALUE",
    "SUITS",
    "SUIT_ORDER",
    "TWO_OF_CLUBS",
    "QUEEN_OF_SPADES",
    "card_from_id",
    "is_queen_of_spades",
    "make_deck",
    "shuffled_deck",
    "sort_hand",
    "sort_key",
]
