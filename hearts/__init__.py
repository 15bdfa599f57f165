"""Four-player Hearts engine: pure state transitions, legal moves, scoring and bots."""

__version__ = "0.1.0"

from .cards import Card, Rank, Suit, TWO_OF_CLUBS, QUEEN_OF_SPADES, card_from_id, make_deck
from .errors import (
    CardNotInHand,
    HeartsError,
    IllegalPlay,
    InvalidPlayerCount,
    NotYourTurn,
    PlayersNotReady,
    TooManySelected,
    TrickNotComplete,
    UnknownPlayer,
    WrongPhase,
)
from .state import GameState, PassDirection, Phase, Player, Trick
from .game import (
    complete_trick,
    create_game,
    deal_cards,
    execute_pass,
    get_pass_direction,
    play_card,
    select_card_to_pass,
    start_new_hand,
)
from .trick import (
    can_follow_suit,
    can_lead_hearts,
    determine_trick_winner,
    get_valid_plays,
    is_valid_play,
    trick_contains_hearts,
    trick_contains_points,
)
from .scoring import apply_scores, calculate_hand_score, card_points, check_shoot_moon, game_winner
from .ai import AIStrategy, GreedyAI, RandomAI, create_ai, create_default_ai
