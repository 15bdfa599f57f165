"""Legal-move computation and trick resolution."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .cards import Card, Suit, TWO_OF_CLUBS, is_queen_of_spades
from .scoring import is_point_card
from .state import GameState, Trick


def can_follow_suit(hand: Sequence[Card], suit: Suit) -> bool:
    return any(card.suit == suit for card in hand)


def can_lead_hearts(state: GameState, hand: Sequence[Card]) -> bool:
    """Hearts may be led once broken, or when nothing but hearts is left."""
    if state.hearts_broken:
        return True
    return all(card.suit == Suit.HEARTS for card in hand)


def _legal_lead(state: GameState, hand: Sequence[Card]) -> List[Card]:
    if state.first_trick and TWO_OF_CLUBS in hand:
        return [TWO_OF_CLUBS]

    if not can_lead_hearts(state, hand):
        non_hearts = [c for c in hand if c.suit != Suit.HEARTS]
        if non_hearts:
            return non_hearts

    return list(hand)


def get_valid_plays(state: GameState, player_id: str) -> List[Card]:
    """
    Cards ``player_id`` may legally play into the current trick, in hand order.

    - Leading the first trick: the Two of Clubs.
    - Leading otherwise: no hearts until broken, unless only hearts remain.
    - Following: must follow suit. When void, the first trick forbids hearts
      and the Queen of Spades unless nothing else is held.
    """
    hand = state.get_player(player_id).hand
    trick = state.current_trick

    if not trick.cards:
        return _legal_lead(state, hand)

    leading_suit = trick.leading_suit
    if leading_suit is not None and can_follow_suit(hand, leading_suit):
        return [c for c in hand if c.suit == leading_suit]

    if state.first_trick:
        allowed = [
            c for c in hand if not (c.suit == Suit.HEARTS or is_queen_of_spades(c))
        ]
        if allowed:
            return allowed

    return list(hand)


def is_valid_play(state: GameState, player_id: str, card: Card) -> bool:
    return any(c.id == card.id for c in get_valid_plays(state, player_id))


def determine_trick_winner(trick: Trick) -> Optional[str]:
    """Holder of the highest card of the leading suit; off-suit cards never win."""
    if not trick.cards or trick.leading_suit is None:
        return None

    winning: Optional[tuple] = None
    for pid, card in trick.cards:
        if card.suit != trick.leading_suit:
            continue
        if winning is None or card.value > winning[1].value:
            winning = (pid, card)
    return winning[0] if winning else None


def trick_contains_hearts(trick: Trick) -> bool:
    return any(card.suit == Suit.HEARTS for _, card in trick.cards)


def trick_contains_points(trick: Trick) -> bool:
    return any(is_point_card(card) for _, card in trick.cards)
