"""
Driver loop helpers: apply automatic actions to a game state.

``advance`` performs the single next action that needs no human input, so a
server can pace bots with timers while tests and simulations can simply call
it in a loop.
"""

from __future__ import annotations

import logging
import random
from typing import Mapping, Optional, Sequence

from .ai import AIStrategy
from .game import (
    complete_trick,
    create_game,
    deal_cards,
    execute_pass,
    play_card,
    select_card_to_pass,
    start_new_hand,
)
from .state import NUM_PLAYERS, GameState, Phase

logger = logging.getLogger(__name__)


def submit_pass(state: GameState, player_id: str, card_ids: Sequence[str]) -> GameState:
    """Replace the player's selection with ``card_ids`` via ``select_card_to_pass``."""
    player = state.get_player(player_id)
    for card_id in player.selected_cards:
        if card_id not in card_ids:
            state = select_card_to_pass(state, player_id, card_id)
    for card_id in card_ids:
        if card_id not in state.get_player(player_id).selected_cards:
            state = select_card_to_pass(state, player_id, card_id)
    return state


def bot_select_passes(state: GameState, bots: Mapping[str, AIStrategy]) -> GameState:
    for player in state.players:
        bot = bots.get(player.id)
        if bot is None or player.is_ready:
            continue
        cards = bot.select_cards_to_pass(player.hand, state.pass_direction)
        state = submit_pass(state, player.id, [c.id for c in cards])
    return state


def is_bot_turn(state: GameState, bots: Mapping[str, AIStrategy]) -> bool:
    return (
        state.phase == Phase.PLAYING
        and not state.current_trick.is_complete()
        and state.current_player.id in bots
    )


def advance(
    state: GameState,
    bots: Mapping[str, AIStrategy],
    *,
    auto_next_hand: bool = False,
    rng: Optional[random.Random] = None,
) -> GameState:
    """
    Apply the next automatic step, or return ``state`` unchanged when waiting on a human.

    Steps: deal; bots choose passes; execute the pass once everyone is ready;
    complete a full trick; play the current bot's card; optionally start the
    next hand.
    """
    if state.phase == Phase.DEALING:
        return deal_cards(state)

    if state.phase == Phase.PASSING:
        if all(p.is_ready for p in state.players):
            return execute_pass(state)
        return bot_select_passes(state, bots)

    if state.phase == Phase.PLAYING:
        if state.current_trick.is_complete():
            return complete_trick(state)
        if is_bot_turn(state, bots):
            player_id = state.current_player.id
            card = bots[player_id].select_card_to_play(state, player_id)
            return play_card(state, player_id, card.id)
        return state

    if state.phase == Phase.HAND_COMPLETE and auto_next_hand:
        return start_new_hand(state, rng=rng)

    return state


def play_game(
    strategies: Sequence[AIStrategy],
    names: Sequence[str] = ("North", "East", "South", "West"),
    rng: Optional[random.Random] = None,
    max_hands: int = 1000,
) -> GameState:
    """Play a complete all-bot game and return the final (GameOver) state."""
    if len(strategies) != NUM_PLAYERS:
        raise ValueError(f"Need {NUM_PLAYERS} strategies, got {len(strategies)}")

    state = create_game(names, rng=rng)
    bots = {p.id: s for p, s in zip(state.players, strategies)}
    while state.phase != Phase.GAME_OVER:
        if state.hand_number >= max_hands:
            raise RuntimeError(f"Game did not finish within {max_hands} hands")
        next_state = advance(state, bots, auto_next_hand=True, rng=rng)
        if next_state is state:
            raise RuntimeError(f"Game stalled in phase {state.phase.value}")
        state = next_state

    logger.debug(
        "Game over after %d hands: %s",
        state.hand_number + 1,
        {p.name: p.score for p in state.players},
    )
    return state
