"""Builders for hand-crafted game states used across the test suite."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from hearts.cards import Card, card_from_id
from hearts.state import GameState, Phase, Player, Trick


def cards(*ids: str) -> Tuple[Card, ...]:
    return tuple(card_from_id(i) for i in ids)


def trick(*plays: Tuple[str, str]) -> Trick:
    played = tuple((pid, card_from_id(cid)) for pid, cid in plays)
    return Trick(cards=played, leading_suit=played[0][1].suit if played else None)


def make_state(
    hands: Sequence[Iterable[str]],
    *,
    current: int = 0,
    current_trick: Trick = Trick(),
    first_trick: bool = False,
    hearts_broken: bool = False,
    phase: Phase = Phase.PLAYING,
) -> GameState:
    players = tuple(
        Player(id=f"player-{i}", name=f"P{i}", hand=cards(*hand)) for i, hand in enumerate(hands)
    )
    return GameState(
        players=players,
        phase=phase,
        current_player_index=current,
        current_trick=current_trick,
        first_trick=first_trick,
        hearts_broken=hearts_broken,
    )


def ids(card_list: Iterable[Card]) -> set:
    return {c.id for c in card_list}
