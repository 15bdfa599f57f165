"""
Hearts hand lifecycle: deal -> pass -> play -> score -> next hand.

Each transition takes a :class:`GameState` and returns a new one. Inputs are
never modified, so callers may keep older snapshots around for replay or undo.
"""

from __future__ import annotations

from dataclasses import replace
import logging
import random
from typing import List, Optional, Sequence

from .cards import Card, Suit, TWO_OF_CLUBS, shuffled_deck, sort_hand
from .errors import (
    CardNotInHand,
    IllegalPlay,
    InvalidPlayerCount,
    NotYourTurn,
    PlayersNotReady,
    TooManySelected,
    TrickNotComplete,
    WrongPhase,
)
from .scoring import apply_scores
from .state import (
    EMPTY_TRICK,
    HAND_SIZE,
    NUM_PLAYERS,
    PASS_SIZE,
    GameState,
    PassDirection,
    Phase,
    Player,
    Trick,
    replace_player,
)
from .trick import determine_trick_winner, is_valid_play

logger = logging.getLogger(__name__)

PASS_CYCLE = (PassDirection.LEFT, PassDirection.RIGHT, PassDirection.ACROSS, PassDirection.NONE)
TRICKS_PER_HAND = HAND_SIZE


def get_pass_direction(hand_number: int) -> PassDirection:
    return PASS_CYCLE[hand_number % len(PASS_CYCLE)]


def pass_target_index(index: int, direction: PassDirection) -> int:
    """Seat that receives the cards passed by seat ``index``."""
    offset = {
        PassDirection.LEFT: 1,
        PassDirection.RIGHT: NUM_PLAYERS - 1,
        PassDirection.ACROSS: 2,
        PassDirection.NONE: 0,
    }[direction]
    return (index + offset) % NUM_PLAYERS


def pass_sender_index(index: int, direction: PassDirection) -> int:
    """Seat whose passed cards end up with seat ``index``."""
    offset = {
        PassDirection.LEFT: NUM_PLAYERS - 1,
        PassDirection.RIGHT: 1,
        PassDirection.ACROSS: 2,
        PassDirection.NONE: 0,
    }[direction]
    return (index + offset) % NUM_PLAYERS


def find_two_clubs_index(players: Sequence[Player]) -> Optional[int]:
    for idx, player in enumerate(players):
        if TWO_OF_CLUBS in player.hand:
            return idx
    return None


def create_game(player_names: Sequence[str], rng: Optional[random.Random] = None) -> GameState:
    names = list(player_names)
    if len(names) != NUM_PLAYERS:
        raise InvalidPlayerCount(f"Hearts requires exactly {NUM_PLAYERS} players, got {len(names)}")
    if len(set(names)) != NUM_PLAYERS:
        raise InvalidPlayerCount(f"Player names must be distinct: {names}")

    players = tuple(Player(id=f"player-{i}", name=name) for i, name in enumerate(names))
    return GameState(
        players=players,
        phase=Phase.DEALING,
        pass_direction=get_pass_direction(0),
        hand_number=0,
        deck=tuple(shuffled_deck(rng)),
    )


def deal_cards(state: GameState) -> GameState:
    if state.phase != Phase.DEALING:
        raise WrongPhase(f"Can only deal in the dealing phase, not {state.phase.value}")

    hands: List[List[Card]] = [[] for _ in range(NUM_PLAYERS)]
    # Cards come off the end of the deck, one per seat in turn.
    remaining = len(state.deck) - HAND_SIZE * NUM_PLAYERS
    to_deal = state.deck[remaining:]
    for i, card in enumerate(reversed(to_deal)):
        hands[i % NUM_PLAYERS].append(card)

    players = tuple(
        replace(player, hand=sort_hand(hand)) for player, hand in zip(state.players, hands)
    )
    starter = find_two_clubs_index(players) or 0
    phase = Phase.PLAYING if state.pass_direction == PassDirection.NONE else Phase.PASSING
    logger.debug(
        "Hand %d dealt; %s holds the two of clubs, next phase %s",
        state.hand_number,
        players[starter].id,
        phase.value,
    )
    return replace(
        state,
        players=players,
        deck=state.deck[:remaining],
        current_player_index=starter,
        phase=phase,
    )


def select_card_to_pass(state: GameState, player_id: str, card_id: str) -> GameState:
    """Toggle ``card_id`` in the player's pass selection."""
    if state.phase != Phase.PASSING:
        raise WrongPhase(f"Can only select cards in the passing phase, not {state.phase.value}")

    index = state.player_index(player_id)
    player = state.players[index]
    if not player.has_card(card_id):
        raise CardNotInHand(player_id, card_id)

    if card_id in player.selected_cards:
        selected = tuple(cid for cid in player.selected_cards if cid != card_id)
    else:
        if len(player.selected_cards) >= PASS_SIZE:
            raise TooManySelected(f"Can only select {PASS_SIZE} cards to pass")
        selected = player.selected_cards + (card_id,)

    updated = replace(player, selected_cards=selected, is_ready=len(selected) == PASS_SIZE)
    return replace(state, players=replace_player(state.players, index, updated))


def execute_pass(state: GameState) -> GameState:
    if state.phase != Phase.PASSING:
        raise WrongPhase(f"Can only pass in the passing phase, not {state.phase.value}")
    if not all(p.is_ready for p in state.players):
        waiting = [p.id for p in state.players if not p.is_ready]
        raise PlayersNotReady(f"Waiting on {', '.join(waiting)}")

    # Every outgoing set is read from the pre-pass snapshot.
    outgoing = [
        tuple(card for card in p.hand if card.id in p.selected_cards) for p in state.players
    ]

    players = []
    for index, player in enumerate(state.players):
        kept = [card for card in player.hand if card.id not in player.selected_cards]
        received = outgoing[pass_sender_index(index, state.pass_direction)]
        players.append(
            replace(player, hand=sort_hand(kept + list(received)), selected_cards=(), is_ready=False)
        )

    starter = find_two_clubs_index(players)
    logger.debug("Hand %d: cards passed %s", state.hand_number, state.pass_direction.value)
    return replace(
        state,
        players=tuple(players),
        phase=Phase.PLAYING,
        current_player_index=state.current_player_index if starter is None else starter,
    )


def play_card(state: GameState, player_id: str, card_id: str) -> GameState:
    if state.phase != Phase.PLAYING:
        raise NotYourTurn(f"No cards can be played in the {state.phase.value} phase")
    if state.current_trick.is_complete():
        raise NotYourTurn("The current trick must be completed first")

    current = state.current_player
    if current.id != player_id:
        raise NotYourTurn(f"It is {current.id}'s turn, not {player_id}'s")

    card = current.find_card(card_id)
    if card is None:
        raise CardNotInHand(player_id, card_id)
    if not is_valid_play(state, player_id, card):
        raise IllegalPlay(player_id, card_id, "not a valid play for this trick")

    updated = replace(current, hand=tuple(c for c in current.hand if c.id != card_id))
    trick = replace(
        state.current_trick,
        cards=state.current_trick.cards + ((player_id, card),),
        leading_suit=state.current_trick.leading_suit or card.suit,
    )
    return replace(
        state,
        players=replace_player(state.players, state.current_player_index, updated),
        current_trick=trick,
        current_player_index=(state.current_player_index + 1) % NUM_PLAYERS,
        hearts_broken=state.hearts_broken or card.suit == Suit.HEARTS,
    )


def complete_trick(state: GameState) -> GameState:
    """Award the full current trick to its winner, who leads next. Scores the hand after the 13th."""
    if not state.current_trick.is_complete():
        raise TrickNotComplete(
            f"Trick has {len(state.current_trick.cards)} of {NUM_PLAYERS} cards"
        )

    winner_id = determine_trick_winner(state.current_trick)
    if winner_id is None:
        raise TrickNotComplete("Trick has no winner")
    finished: Trick = replace(state.current_trick, winner_id=winner_id)

    winner_index = state.player_index(winner_id)
    winner = state.players[winner_index]
    won_cards = tuple(card for _, card in finished.cards)
    players = replace_player(
        state.players,
        winner_index,
        replace(winner, tricks_taken=winner.tricks_taken + (won_cards,)),
    )
    completed = state.completed_tricks + (finished,)
    logger.debug("Trick %d won by %s", len(completed), winner_id)

    next_state = replace(
        state,
        players=players,
        current_player_index=winner_index,
        current_trick=EMPTY_TRICK,
        completed_tricks=completed,
        first_trick=False,
    )
    if len(completed) == TRICKS_PER_HAND:
        return apply_scores(next_state)
    return next_state


def start_new_hand(state: GameState, rng: Optional[random.Random] = None) -> GameState:
    if state.phase != Phase.HAND_COMPLETE:
        raise WrongPhase(f"Can only start a new hand after a hand completes, not {state.phase.value}")

    hand_number = state.hand_number + 1
    players = tuple(
        replace(
            player,
            hand=(),
            tricks_taken=(),
            hand_score=0,
            selected_cards=(),
            is_ready=False,
        )
        for player in state.players
    )
    return GameState(
        players=players,
        phase=Phase.DEALING,
        current_player_index=0,
        current_trick=EMPTY_TRICK,
        completed_tricks=(),
        pass_direction=get_pass_direction(hand_number),
        hearts_broken=False,
        first_trick=True,
        hand_number=hand_number,
        deck=tuple(shuffled_deck(rng)),
    )
