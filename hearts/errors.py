"""Named failures raised by the Hearts engine.

Every rejected transition raises a subclass of :class:`HeartsError`. The
``kind`` attribute is a stable identifier clients can switch on.
"""

from __future__ import annotations


class HeartsError(Exception):
    """Base exception for Hearts engine errors."""

    kind = "hearts_error"


class WrongPhase(HeartsError):
    """Raised when a transition is invoked in the wrong game phase."""

    kind = "wrong_phase"


class NotYourTurn(HeartsError):
    """Raised when a player acts out of turn."""

    kind = "not_your_turn"


class IllegalPlay(HeartsError):
    """Raised when a card is not among the player's valid plays."""

    kind = "illegal_play"

    def __init__(self, player_id: str, card_id: str, reason: str):
        self.player_id = player_id
        self.card_id = card_id
        self.reason = reason
        super().__init__(f"{player_id} cannot play {card_id}: {reason}")


class CardNotInHand(IllegalPlay):
    kind = "card_not_in_hand"

    def __init__(self, player_id: str, card_id: str):
        super().__init__(player_id, card_id, "card not in hand")


class TooManySelected(HeartsError):
    kind = "too_many_selected"


class TrickNotComplete(HeartsError):
    kind = "trick_not_complete"


class PlayersNotReady(HeartsError):
    kind = "players_not_ready"


class InvalidPlayerCount(HeartsError):
    kind = "invalid_player_count"


class UnknownPlayer(HeartsError):
    kind = "unknown_player"

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Unknown player: {player_id}")
