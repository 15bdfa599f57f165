from __future__ import annotations

import asyncio
import logging
import time
import secrets
import string
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect, HTTPException
from fastapi.responses import JSONResponse
import uvicorn

from .ai import AIStrategy, create_ai
from .config import Settings
from .driver import advance, is_bot_turn, submit_pass
from .errors import HeartsError
from .game import (
    complete_trick,
    create_game,
    deal_cards,
    execute_pass,
    play_card,
    select_card_to_pass,
    start_new_hand,
)
from .scoring import game_winner
from .serialize import card_to_dict, trick_to_dict
from .state import NUM_PLAYERS, GameState, Phase
from .trick import get_valid_plays

logger = logging.getLogger(__name__)


@dataclass
class Seat:
    id: str
    name: str
    is_bot: bool = False


@dataclass
class Room:
    id: str
    settings: Settings
    max_players: int = NUM_PLAYERS
    seats: Dict[str, Seat] = field(default_factory=dict)
    host_id: Optional[str] = None
    game: Optional[GameState] = None
    # seat id -> engine player id, fixed when the game starts
    player_ids: Dict[str, str] = field(default_factory=dict)
    bots: Dict[str, AIStrategy] = field(default_factory=dict)
    connections: Dict[str, WebSocket] = field(default_factory=dict)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    next_action_at: float = 0.0
    bot_task: Optional[asyncio.Task] = None

    def add_player(self, name: str, is_bot: bool = False) -> Optional[Seat]:
        if len(self.seats) >= self.max_players:
            return None
        if self.game is not None:
            return None

        taken = {s.name for s in self.seats.values()}
        unique = name
        suffix = 2
        while unique in taken:
            unique = f"{name} {suffix}"
            suffix += 1

        seat = Seat(id=secrets.token_hex(4), name=unique, is_bot=is_bot)
        self.seats[seat.id] = seat
        if not self.host_id:
            self.host_id = seat.id
        logger.info("Room %s: %s joined%s", self.id, unique, " (bot)" if is_bot else "")
        return seat

    def remove_player(self, seat_id: str) -> None:
        self.connections.pop(seat_id, None)
        seat = self.seats.get(seat_id)
        if self.game is not None:
            # Mid-game departures are replaced by a bot in the same seat.
            if seat:
                seat.is_bot = True
                self.bots[self.player_ids[seat_id]] = create_ai(self.settings.bot_strategy)
                logger.info("Room %s: %s left, bot takes over", self.id, seat.name)
                if self.game.phase in (Phase.PASSING, Phase.PLAYING):
                    schedule_bot_tick(self, self.settings.bot_delay)
            return
        self.seats.pop(seat_id, None)
        if self.host_id == seat_id:
            self.host_id = next(iter(self.seats), None)

    def start_game(self) -> None:
        seats = list(self.seats.values())
        game = create_game([s.name for s in seats])
        self.player_ids = {s.id: p.id for s, p in zip(seats, game.players)}
        self.bots = {
            self.player_ids[s.id]: create_ai(self.settings.bot_strategy) for s in seats if s.is_bot
        }
        self.game = deal_cards(game)
        self.next_action_at = 0.0
        logger.info("Room %s: game started", self.id)

    def start_round(self) -> None:
        if self.game is None:
            return
        self.game = deal_cards(start_new_hand(self.game))
        self.next_action_at = 0.0
        logger.info("Room %s: hand %d dealt", self.id, self.game.hand_number)


def room_id() -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(6))


def handle_action(room: Room, seat: Seat, data: Dict[str, Any]) -> None:
    """Apply one client message to the room. Engine failures propagate as HeartsError."""
    action = data.get("type")
    is_host = seat.id == room.host_id

    if action == "add_bot":
        if is_host:
            bot_count = len([s for s in room.seats.values() if s.is_bot])
            room.add_player(f"Bot {bot_count + 1}", is_bot=True)
        return

    if action == "start_game":
        finished = room.game is None or room.game.phase == Phase.GAME_OVER
        if is_host and finished and len(room.seats) == room.max_players:
            room.start_game()
        return

    if action == "start_round":
        if is_host:
            room.start_round()
        return

    game = room.game
    if game is None:
        return
    player_id = room.player_ids[seat.id]

    if action == "select_card":
        room.game = select_card_to_pass(game, player_id, str(data.get("card", "")))
    elif action == "pass_cards":
        cards = [str(c) for c in data.get("cards", [])]
        room.game = submit_pass(game, player_id, cards)
        if all(p.is_ready for p in room.game.players):
            room.game = execute_pass(room.game)
            schedule_bot_tick(room, room.settings.bot_delay)
    elif action == "play_card":
        room.game = play_card(game, player_id, str(data.get("card", "")))
        delay = room.settings.bot_delay
        if room.game.current_trick.is_complete():
            delay = room.settings.trick_delay
        schedule_bot_tick(room, delay)
    else:
        logger.warning("Room %s: unknown action %r from %s", room.id, action, seat.name)


def player_view(room: Room, seat_id: str) -> Dict[str, Any]:
    game = room.game
    player_id = room.player_ids.get(seat_id)

    if game is None:
        players: List[Dict[str, Any]] = [
            {"id": s.id, "name": s.name, "is_bot": s.is_bot, "score": 0}
            for s in room.seats.values()
        ]
    else:
        bot_ids = {room.player_ids[sid] for sid, s in room.seats.items() if s.is_bot}
        players = [
            {
                "id": p.id,
                "name": p.name,
                "is_bot": p.id in bot_ids,
                "score": p.score,
                "hand_score": p.hand_score,
                "hand_size": len(p.hand),
                "tricks_won": len(p.tricks_taken),
                "is_ready": p.is_ready,
            }
            for p in game.players
        ]

    state: Dict[str, Any] = {
        "room_id": room.id,
        "max_players": room.max_players,
        "host_id": room.host_id,
        "phase": game.phase.value if game else "lobby",
        "hand_number": game.hand_number if game else 0,
        "pass_dir": game.pass_direction.value if game else "left",
        "players": players,
        "trick": [],
        "last_trick": [],
        "current_turn": None,
        "hearts_broken": game.hearts_broken if game else False,
        "your_id": player_id or seat_id,
        "hand": [],
        "selected_cards": [],
        "legal_moves": [],
        "pending_pass": False,
        "winner_id": None,
        "can_start": seat_id == room.host_id,
    }
    if game is None:
        return state

    names_by_player = {p.id: p.name for p in game.players}

    def trick_view(cards: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [dict(c, player_name=names_by_player.get(c["player_id"], "")) for c in cards]

    state["trick"] = trick_view(trick_to_dict(game.current_trick)["cards"])
    if game.completed_tricks:
        state["last_trick"] = trick_view(trick_to_dict(game.completed_tricks[-1])["cards"])
    if game.phase == Phase.PLAYING and not game.current_trick.is_complete():
        state["current_turn"] = game.current_player.id
    state["winner_id"] = game_winner(game)

    if player_id is not None:
        me = game.get_player(player_id)
        state["hand"] = [card_to_dict(c) for c in me.hand]
        state["selected_cards"] = list(me.selected_cards)
        state["pending_pass"] = game.phase == Phase.PASSING and not me.is_ready
        if state["current_turn"] == player_id:
            state["legal_moves"] = [c.id for c in get_valid_plays(game, player_id)]
    return state


async def send_state(room: Room, seat_id: str) -> None:
    ws = room.connections.get(seat_id)
    if not ws:
        return
    await ws.send_json({"type": "state", "state": player_view(room, seat_id)})


async def broadcast_state(room: Room) -> None:
    for sid in list(room.connections.keys()):
        await send_state(room, sid)


def schedule_bot_tick(room: Room, delay: float) -> None:
    room.next_action_at = time.monotonic() + max(0.0, delay)
    if room.bot_task and not room.bot_task.done():
        room.bot_task.cancel()

    async def _runner() -> None:
        await asyncio.sleep(max(0.0, delay))
        async with room.lock:
            await advance_bots(room)
        await broadcast_state(room)

    room.bot_task = asyncio.create_task(_runner())


async def advance_bots(room: Room) -> None:
    game = room.game
    if game is None:
        return

    now = time.monotonic()
    if now < room.next_action_at:
        return

    if game.phase == Phase.PASSING:
        game = advance(game, room.bots)
        if all(p.is_ready for p in game.players):
            game = advance(game, room.bots)
        room.game = game
        if game.phase == Phase.PLAYING:
            schedule_bot_tick(room, room.settings.bot_delay)
        return

    if game.phase != Phase.PLAYING:
        return

    if game.current_trick.is_complete():
        room.game = complete_trick(game)
        if room.game.phase != Phase.PLAYING:
            logger.info("Room %s: hand %d finished (%s)", room.id, game.hand_number, room.game.phase.value)
            return
        schedule_bot_tick(room, room.settings.bot_delay)
        return

    if not is_bot_turn(game, room.bots):
        return

    room.game = advance(game, room.bots)
    delay = room.settings.bot_delay
    if room.game.current_trick.is_complete():
        delay = room.settings.trick_delay
    schedule_bot_tick(room, delay)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Hearts")
    rooms: Dict[str, Room] = {}
    app.state.settings = settings
    app.state.rooms = rooms

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "healthy", "service": "hearts"}

    @app.post("/api/rooms")
    async def create_room() -> JSONResponse:
        rid = room_id()
        rooms[rid] = Room(id=rid, settings=settings)
        logger.info("Room %s created", rid)
        return JSONResponse({"room_id": rid})

    @app.get("/api/rooms/{room_id}")
    async def get_room(room_id: str) -> Dict[str, Any]:
        room = rooms.get(room_id)
        if not room:
            raise HTTPException(status_code=404, detail="Room not found")
        return {
            "room_id": room.id,
            "phase": room.game.phase.value if room.game else "lobby",
            "players": [{"name": s.name, "is_bot": s.is_bot} for s in room.seats.values()],
            "max_players": room.max_players,
        }

    @app.websocket("/ws/{room_id}")
    async def room_socket(websocket: WebSocket, room_id: str, name: Optional[str] = None) -> None:
        room = rooms.get(room_id)
        if not room:
            await websocket.close(code=1008)
            return

        await websocket.accept()
        player_name = (name or "Player").strip()[: settings.max_name_length] or "Player"

        async with room.lock:
            seat = room.add_player(player_name)
            if not seat:
                await websocket.close(code=1008)
                return
            room.connections[seat.id] = websocket

        await broadcast_state(room)

        try:
            while True:
                data = await websocket.receive_json()
                async with room.lock:
                    try:
                        handle_action(room, seat, data)
                    except HeartsError as exc:
                        logger.warning("Room %s: %s rejected: %s", room.id, seat.name, exc)
                        await websocket.send_json(
                            {"type": "error", "kind": exc.kind, "message": str(exc)}
                        )
                        continue
                    await advance_bots(room)

                await broadcast_state(room)

        except WebSocketDisconnect:
            async with room.lock:
                room.remove_player(seat.id)
            await broadcast_state(room)

    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
