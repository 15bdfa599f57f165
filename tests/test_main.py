"""Tests for the FastAPI room server."""

import asyncio
from dataclasses import replace

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from hearts.ai import GreedyAI
from hearts.config import Settings
from hearts.driver import advance
from hearts.main import Room, create_app, handle_action
from hearts.state import Phase

# Long delays keep timer-driven bot turns out of the way of assertions.
SETTINGS = Settings(bot_delay=60.0, trick_delay=60.0)


@pytest.fixture
def client():
    with TestClient(create_app(SETTINGS)) as test_client:
        yield test_client


def _create_room(client) -> str:
    response = client.post("/api/rooms")
    assert response.status_code == 200
    return response.json()["room_id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy", "service": "hearts"}


def test_create_and_get_room(client):
    rid = _create_room(client)
    data = client.get(f"/api/rooms/{rid}").json()
    assert data == {"room_id": rid, "phase": "lobby", "players": [], "max_players": 4}


def test_get_missing_room(client):
    assert client.get("/api/rooms/NOPE00").status_code == 404


def test_socket_to_missing_room_is_closed(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/NOPE00?name=Alice") as ws:
            ws.receive_json()


def test_game_flow_over_websocket(client):
    rid = _create_room(client)
    with client.websocket_connect(f"/ws/{rid}?name=Alice") as ws:
        lobby = ws.receive_json()["state"]
        assert lobby["phase"] == "lobby"
        assert lobby["can_start"]
        assert [p["name"] for p in lobby["players"]] == ["Alice"]

        for _ in range(3):
            ws.send_json({"type": "add_bot"})
            lobby = ws.receive_json()["state"]
        assert [p["is_bot"] for p in lobby["players"]] == [False, True, True, True]

        ws.send_json({"type": "start_game"})
        state = ws.receive_json()["state"]
        assert state["phase"] == "passing"
        assert state["pass_dir"] == "left"
        assert state["your_id"] == "player-0"
        assert len(state["hand"]) == 13
        assert state["pending_pass"]
        assert [p["is_ready"] for p in state["players"]] == [False, True, True, True]

        ws.send_json({"type": "play_card", "card": state["hand"][0]["id"]})
        error = ws.receive_json()
        assert error["type"] == "error"
        assert error["kind"] == "not_your_turn"

        ws.send_json({"type": "pass_cards", "cards": [c["id"] for c in state["hand"][:4]]})
        error = ws.receive_json()
        assert error["kind"] == "too_many_selected"

        ws.send_json({"type": "pass_cards", "cards": [c["id"] for c in state["hand"][-3:]]})
        state = ws.receive_json()["state"]
        assert state["phase"] == "playing"
        assert len(state["hand"]) == 13
        assert not state["pending_pass"]

        ws.send_json({"type": "play_card", "card": "ZZ"})
        error = ws.receive_json()
        assert error["kind"] in ("card_not_in_hand", "not_your_turn")

    data = client.get(f"/api/rooms/{rid}").json()
    assert data["phase"] == "playing"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("HEARTS_BOT_DELAY", "0.1")
    monkeypatch.setenv("HEARTS_BOT_STRATEGY", "Random")
    monkeypatch.setenv("HEARTS_PORT", "9001")
    settings = Settings.from_env()
    assert settings.bot_delay == 0.1
    assert settings.bot_strategy == "random"
    assert settings.port == 9001
    assert settings.trick_delay == Settings().trick_delay


def _full_room(settings: Settings) -> Room:
    room = Room(id="ROOM01", settings=settings)
    room.add_player("Alice")
    room.add_player("Bob")
    room.add_player("Bot 1", is_bot=True)
    room.add_player("Bot 2", is_bot=True)
    room.start_game()
    return room


def test_bot_takes_the_turn_of_a_player_who_leaves():
    async def scenario():
        room = _full_room(Settings(bot_delay=0.0, trick_delay=0.0))
        bob = next(s for s in room.seats.values() if s.name == "Bob")
        bob_id = room.player_ids[bob.id]

        # Everyone plays greedily until Bob is on turn.
        everyone = {pid: GreedyAI() for pid in room.player_ids.values()}
        game = room.game
        while not (
            game.phase == Phase.PLAYING
            and not game.current_trick.is_complete()
            and game.current_player.id == bob_id
        ):
            game = advance(game, everyone)
        room.game = game

        room.remove_player(bob.id)
        assert room.bot_task is not None
        await asyncio.sleep(0.05)
        room.bot_task.cancel()

        assert bob.is_bot
        assert len(room.game.get_player(bob_id).hand) < len(game.get_player(bob_id).hand)

    asyncio.run(scenario())


def test_start_game_is_ignored_mid_game_but_restarts_after_game_over():
    room = _full_room(SETTINGS)
    host = room.seats[room.host_id]
    running = room.game

    handle_action(room, host, {"type": "start_game"})
    assert room.game is running

    room.game = replace(running, phase=Phase.GAME_OVER)
    handle_action(room, host, {"type": "start_game"})
    assert room.game.phase == Phase.PASSING
    assert room.game.hand_number == 0
    assert all(p.score == 0 and len(p.hand) == 13 for p in room.game.players)
