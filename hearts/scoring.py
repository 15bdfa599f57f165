from __future__ import annotations

from dataclasses import replace
import logging
from typing import Iterable, Optional, Sequence

from .cards import Card, Suit, is_queen_of_spades
from .state import GameState, Phase, Player

logger = logging.getLogger(__name__)

TARGET_SCORE = 100
MOON_POINTS = 26


def card_points(card: Card) -> int:
    if card.suit == Suit.HEARTS:
        return 1
    if is_queen_of_spades(card):
        return 13
    return 0


def is_point_card(card: Card) -> bool:
    return card_points(card) > 0


def calculate_hand_score(tricks_taken: Iterable[Iterable[Card]]) -> int:
    return sum(card_points(card) for trick in tricks_taken for card in trick)


def check_shoot_moon(players: Sequence[Player]) -> Optional[str]:
    """Id of the player who took exactly all 26 points this hand, if any."""
    for player in players:
        if calculate_hand_score(player.tricks_taken) == MOON_POINTS:
            return player.id
    return None


def apply_scores(state: GameState) -> GameState:
    """
    Score the finished hand and pick the next phase.

    A moon shooter keeps their cumulative score and everyone else takes 26.
    The game ends as soon as any cumulative score reaches ``TARGET_SCORE``.
    """
    moon_shooter = check_shoot_moon(state.players)

    players = []
    for player in state.players:
        points = calculate_hand_score(player.tricks_taken)
        if moon_shooter is None:
            players.append(replace(player, hand_score=points, score=player.score + points))
        elif player.id == moon_shooter:
            players.append(replace(player, hand_score=0))
        else:
            players.append(
                replace(player, hand_score=MOON_POINTS, score=player.score + MOON_POINTS)
            )

    if moon_shooter is not None:
        logger.debug("Hand %d: %s shot the moon", state.hand_number, moon_shooter)

    game_over = any(p.score >= TARGET_SCORE for p in players)
    phase = Phase.GAME_OVER if game_over else Phase.HAND_COMPLETE
    logger.debug(
        "Hand %d scored: %s -> %s",
        state.hand_number,
        {p.id: p.score for p in players},
        phase.value,
    )
    return replace(state, players=tuple(players), phase=phase)


def game_winner(state: GameState) -> Optional[str]:
    """Lowest cumulative score wins once the game is over; ties go to the earlier seat."""
    if state.phase != Phase.GAME_OVER:
        return None
    return min(state.players, key=lambda p: p.score).id
