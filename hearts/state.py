"""Immutable game state for a four-player Hearts hand.

Every transition in :mod:`hearts.game` returns a new :class:`GameState`;
collections are tuples so a returned snapshot can never be changed through
an alias held by a caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple

from .cards import Card, Suit
from .errors import UnknownPlayer

NUM_PLAYERS = 4
HAND_SIZE = 13
PASS_SIZE = 3


class Phase(str, Enum):
    DEALING = "dealing"
    PASSING = "passing"
    PLAYING = "playing"
    HAND_COMPLETE = "hand_complete"
    GAME_OVER = "game_over"


class PassDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    ACROSS = "across"
    NONE = "none"


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    hand: Tuple[Card, ...] = ()
    tricks_taken: Tuple[Tuple[Card, ...], ...] = ()
    score: int = 0
    hand_score: int = 0
    selected_cards: Tuple[str, ...] = ()  # card ids chosen for passing
    is_ready: bool = False

    def has_card(self, card_id: str) -> bool:
        return any(c.id == card_id for c in self.hand)

    def find_card(self, card_id: str) -> Optional[Card]:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None


@dataclass(frozen=True)
class Trick:
    cards: Tuple[Tuple[str, Card], ...] = ()  # (player_id, card) in play order
    leading_suit: Optional[Suit] = None
    winner_id: Optional[str] = None

    def is_complete(self) -> bool:
        return len(self.cards) == NUM_PLAYERS


EMPTY_TRICK = Trick()


@dataclass(frozen=True)
class GameState:
    players: Tuple[Player, ...]
    phase: Phase = Phase.DEALING
    current_player_index: int = 0
    current_trick: Trick = EMPTY_TRICK
    completed_tricks: Tuple[Trick, ...] = ()
    pass_direction: PassDirection = PassDirection.LEFT
    hearts_broken: bool = False
    first_trick: bool = True
    hand_number: int = 0
    deck: Tuple[Card, ...] = field(default=(), repr=False)

    def player_index(self, player_id: str) -> int:
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                return idx
        raise UnknownPlayer(player_id)

    def get_player(self, player_id: str) -> Player:
        return self.players[self.player_index(player_id)]

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]


def cards_in_play(state: GameState) -> Iterator[Card]:
    """Every card the hand accounts for: hands, the current trick and completed tricks."""
    for player in state.players:
        yield from player.hand
    for _, card in state.current_trick.cards:
        yield card
    for trick in state.completed_tricks:
        for _, card in trick.cards:
            yield card


def replace_player(players: Tuple[Player, ...], index: int, player: Player) -> Tuple[Player, ...]:
    return players[:index] + (player,) + players[index + 1:]
