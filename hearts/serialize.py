"""
Game state serialization.

Converts a :class:`GameState` to and from JSON-compatible dicts. Cards are
written as their compact ids (``"QS"``) and enums by value, so a restored
state compares equal to the original.
"""
from __future__ import annotations

import json
from typing import Any, Dict

from .cards import Card, Suit, card_from_id
from .state import GameState, PassDirection, Phase, Player, Trick

SCHEMA_VERSION = 1


def _player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "hand": [c.id for c in player.hand],
        "tricks_taken": [[c.id for c in trick] for trick in player.tricks_taken],
        "score": player.score,
        "hand_score": player.hand_score,
        "selected_cards": list(player.selected_cards),
        "is_ready": player.is_ready,
    }


def _player_from_dict(d: Dict[str, Any]) -> Player:
    return Player(
        id=d["id"],
        name=d["name"],
        hand=tuple(card_from_id(c) for c in d.get("hand", [])),
        tricks_taken=tuple(
            tuple(card_from_id(c) for c in trick) for trick in d.get("tricks_taken", [])
        ),
        score=int(d.get("score", 0)),
        hand_score=int(d.get("hand_score", 0)),
        selected_cards=tuple(d.get("selected_cards", [])),
        is_ready=bool(d.get("is_ready", False)),
    )


def trick_to_dict(trick: Trick) -> Dict[str, Any]:
    return {
        "cards": [{"player_id": pid, "card": card.id} for pid, card in trick.cards],
        "leading_suit": trick.leading_suit.value if trick.leading_suit else None,
        "winner_id": trick.winner_id,
    }


def trick_from_dict(d: Dict[str, Any]) -> Trick:
    leading = d.get("leading_suit")
    return Trick(
        cards=tuple((c["player_id"], card_from_id(c["card"])) for c in d.get("cards", [])),
        leading_suit=Suit(leading) if leading else None,
        winner_id=d.get("winner_id"),
    )


def state_to_dict(state: GameState) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "phase": state.phase.value,
        "players": [_player_to_dict(p) for p in state.players],
        "current_player_index": state.current_player_index,
        "current_trick": trick_to_dict(state.current_trick),
        "completed_tricks": [trick_to_dict(t) for t in state.completed_tricks],
        "pass_direction": state.pass_direction.value,
        "hearts_broken": state.hearts_broken,
        "first_trick": state.first_trick,
        "hand_number": state.hand_number,
        "deck": [c.id for c in state.deck],
    }


def state_from_dict(d: Dict[str, Any]) -> GameState:
    version = d.get("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema version {version}, expected {SCHEMA_VERSION}")
    return GameState(
        phase=Phase(d["phase"]),
        players=tuple(_player_from_dict(p) for p in d["players"]),
        current_player_index=int(d.get("current_player_index", 0)),
        current_trick=trick_from_dict(d.get("current_trick", {})),
        completed_tricks=tuple(trick_from_dict(t) for t in d.get("completed_tricks", [])),
        pass_direction=PassDirection(d.get("pass_direction", PassDirection.LEFT.value)),
        hearts_broken=bool(d.get("hearts_broken", False)),
        first_trick=bool(d.get("first_trick", True)),
        hand_number=int(d.get("hand_number", 0)),
        deck=tuple(card_from_id(c) for c in d.get("deck", [])),
    )


def state_to_json(state: GameState) -> str:
    return json.dumps(state_to_dict(state), indent=2)


def state_from_json(s: str) -> GameState:
    return state_from_dict(json.loads(s))


def card_to_dict(card: Card) -> Dict[str, str]:
    return {"id": card.id, "rank": card.rank.value, "suit": card.suit.value, "label": str(card)}


__all__ = [
    "SCHEMA_VERSION",
    "card_to_dict",
    "state_from_dict",
    "state_from_json",
    "state_to_dict",
    "state_to_json",
    "trick_from_dict",
    "trick_to_dict",
]
