"""
Bot strategies.

The small ``AIStrategy`` protocol is all a driver needs: pick three cards to
pass, then pick one legal card per turn. ``RandomAI`` is the uniform baseline,
``GreedyAI`` ducks points with a fixed danger ordering.
"""

from __future__ import annotations

from dataclasses import dataclass
import random
from typing import Callable, Dict, List, Optional, Protocol, Sequence, Tuple

from .cards import RANK_VALUE, SUIT_ORDER, Card, Rank, Suit, is_queen_of_spades
from .state import PASS_SIZE, GameState, PassDirection
from .trick import get_valid_plays, trick_contains_points


class AIStrategy(Protocol):
    def select_cards_to_pass(self, hand: Sequence[Card], direction: PassDirection) -> List[Card]:
        """Return exactly three cards drawn from ``hand``."""

    def select_card_to_play(self, state: GameState, player_id: str) -> Card:
        """Return one card from ``get_valid_plays(state, player_id)``."""


def _check_pass_hand(hand: Sequence[Card]) -> None:
    if len(hand) < PASS_SIZE:
        raise ValueError(f"Need at least {PASS_SIZE} cards to pass, hand has {len(hand)}")


def _valid_plays_or_raise(state: GameState, player_id: str) -> List[Card]:
    valid = get_valid_plays(state, player_id)
    if not valid:
        raise ValueError(f"No valid plays available for {player_id}")
    return valid


@dataclass
class RandomAI:
    """Uniformly random legal choices. Pass ``seed`` for reproducible games."""

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def select_cards_to_pass(self, hand: Sequence[Card], direction: PassDirection) -> List[Card]:
        _check_pass_hand(hand)
        return self._rng.sample(list(hand), PASS_SIZE)

    def select_card_to_play(self, state: GameState, player_id: str) -> Card:
        return self._rng.choice(_valid_plays_or_raise(state, player_id))


def _pass_danger_key(card: Card) -> Tuple[int, int, int]:
    # Queen of spades, then high hearts, then everything else high to low.
    if is_queen_of_spades(card):
        tier = 0
    elif card.suit == Suit.HEARTS and RANK_VALUE[card.rank] >= RANK_VALUE[Rank.QUEEN]:
        tier = 1
    else:
        tier = 2
    return (tier, -RANK_VALUE[card.rank], 0 if card.suit == Suit.HEARTS else 1)


def _low_key(card: Card) -> Tuple[int, int]:
    return (RANK_VALUE[card.rank], SUIT_ORDER[card.suit])


def choose_pass(hand: Sequence[Card]) -> List[Card]:
    _check_pass_hand(hand)
    return sorted(hand, key=_pass_danger_key)[:PASS_SIZE]


def choose_play(state: GameState, player_id: str) -> Card:
    legal = _valid_plays_or_raise(state, player_id)
    trick = state.current_trick

    if not trick.cards:
        safe = [c for c in legal if c.suit != Suit.HEARTS]
        return min(safe or legal, key=_low_key)

    if trick_contains_points(trick):
        # Duck. Only give up the queen when nothing else is legal.
        ducks = [c for c in legal if not is_queen_of_spades(c)]
        return min(ducks or legal, key=_low_key)

    return max(legal, key=_low_key)


@dataclass
class GreedyAI:
    """Deterministic heuristic player built on :func:`choose_pass` and :func:`choose_play`."""

    def select_cards_to_pass(self, hand: Sequence[Card], direction: PassDirection) -> List[Card]:
        return choose_pass(hand)

    def select_card_to_play(self, state: GameState, player_id: str) -> Card:
        return choose_play(state, player_id)


# name -> factory taking an optional seed
STRATEGIES: Dict[str, Callable[[Optional[int]], AIStrategy]] = {
    "random": lambda seed: RandomAI(seed=seed),
    "greedy": lambda seed: GreedyAI(),
}


def create_ai(name: str, seed: Optional[int] = None) -> AIStrategy:
    try:
        factory = STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown AI strategy {name!r}; expected one of {sorted(STRATEGIES)}"
        ) from None
    return factory(seed)


def create_default_ai() -> AIStrategy:
    return RandomAI()


__all__ = [
    "AIStrategy",
    "GreedyAI",
    "RandomAI",
    "STRATEGIES",
    "choose_pass",
    "choose_play",
    "create_ai",
    "create_default_ai",
]
