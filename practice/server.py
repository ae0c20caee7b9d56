from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
from dataclasses import replace
from http import HTTPStatus
from typing import Any, Dict, Optional

import websockets
from websockets.asyncio.server import ServerConnection, serve

from holdem.errors import InvalidAction
from holdem.models import MAX_PLAYERS, MIN_PLAYERS, ActionType, TableConfig

from .session import PracticeSession

LOGGER = logging.getLogger("practice_host")

# The host glues one PracticeSession to one WebSocket client. The client only
# ever submits commands and renders the snapshots it is sent back.


class PracticeServerError(Exception):
    def __init__(self, code: str, msg: str) -> None:
        super().__init__(msg)
        self.code = code
        self.msg = msg


def _config_payload(config: TableConfig) -> Dict[str, Any]:
    return {
        "players": config.num_players,
        "starting_stack": config.starting_stack,
        "sb": config.small_blind,
        "bb": config.big_blind,
        "min_increment": config.min_increment,
    }


def _envelope(msg_type: str, payload: Dict[str, Any]) -> str:
    return json.dumps({"type": msg_type, "v": 1, **payload})


async def _send_json(websocket: ServerConnection, msg_type: str, payload: Dict[str, Any]) -> None:
    try:
        await websocket.send(_envelope(msg_type, payload))
    except websockets.ConnectionClosed:
        pass


async def _send_error(websocket: ServerConnection, code: str, msg: str) -> None:
    await _send_json(websocket, "error", {"code": code, "msg": msg})


def _decode(raw: Any) -> Dict[str, Any]:
    try:
        message = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        return {}
    return message if isinstance(message, dict) else {}


def _player_count(raw: Any, default: int) -> int:
    if raw is None:
        return default
    if not isinstance(raw, int) or isinstance(raw, bool) or not MIN_PLAYERS <= raw <= MAX_PLAYERS:
        raise PracticeServerError("BAD_PLAYERS", f"players must be an integer from {MIN_PLAYERS} to {MAX_PLAYERS}")
    return raw


async def dispatch(session: PracticeSession, message: Dict[str, Any]) -> None:
    """Turn one client message into one session command."""
    msg_type = message.get("type")
    if msg_type == "deal":
        await session.deal()
    elif msg_type == "action":
        try:
            action = ActionType(message.get("action"))
        except ValueError:
            raise PracticeServerError("INVALID_ACTION", "Unknown action") from None
        amount = message.get("amount")
        if amount is not None and (not isinstance(amount, int) or isinstance(amount, bool)):
            raise PracticeServerError("BAD_SCHEMA", "amount must be an integer")
        await session.act(action, amount)
    elif msg_type == "show_cards":
        visible = message.get("visible")
        if not isinstance(visible, bool):
            raise PracticeServerError("BAD_SCHEMA", "visible must be true or false")
        await session.show_cards(visible)
    elif msg_type == "reset":
        players = _player_count(message.get("players"), session.table.config.num_players)
        await session.reset(players)
    else:
        raise PracticeServerError("UNKNOWN_TYPE", "Unsupported message type")


async def _forward_snapshots(websocket: ServerConnection, session: PracticeSession) -> None:
    while True:
        snapshot = await session.snapshots.get()
        await _send_json(websocket, "snapshot", snapshot.to_payload(viewer_id=session.user_id))


async def handle_connection(
    websocket: ServerConnection,
    config: TableConfig,
    bot_delay: float = 0.8,
    seed: Optional[int] = None,
) -> None:
    hello = _decode(await websocket.recv())
    if hello.get("type") != "hello":
        await _send_error(websocket, "BAD_HELLO", "Expected hello")
        return
    try:
        players = _player_count(hello.get("players"), config.num_players)
    except PracticeServerError as exc:
        await _send_error(websocket, exc.code, exc.msg)
        return

    table_config = replace(config, num_players=players)
    rng = random.Random(seed) if seed is not None else None
    session = PracticeSession(table_config, rng=rng, bot_delay=bot_delay)
    await _send_json(websocket, "welcome", {"player_id": session.user_id, "config": _config_payload(table_config)})
    LOGGER.info("Practice table opened with %s players", players)

    session.publish_current()
    sender = asyncio.create_task(_forward_snapshots(websocket, session))
    try:
        async for raw in websocket:
            message = _decode(raw)
            try:
                await dispatch(session, message)
            except InvalidAction as exc:
                LOGGER.warning("Rejected command %s reason=%s", message, exc.code)
                await _send_error(websocket, exc.code, exc.msg)
            except PracticeServerError as exc:
                await _send_error(websocket, exc.code, exc.msg)
    except websockets.ConnectionClosed:
        pass
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Practice session crashed: %s", exc)
    finally:
        await session.close()
        sender.cancel()
        LOGGER.info("Practice table closed")


def _process_request(connection: ServerConnection, request):
    """Return a simple HTTP response for health checks."""

    if request.headers.get("Upgrade", "").lower() == "websocket":
        return None  # let the WebSocket handshake continue
    if request.path in {"/", "/health", "/healthz"}:
        return connection.respond(HTTPStatus.OK, "practice table running\n")
    return connection.respond(HTTPStatus.NOT_FOUND, "not found\n")


async def run_server(
    host: str,
    port: int,
    config: TableConfig,
    bot_delay: float = 0.8,
    seed: Optional[int] = None,
) -> None:
    async def _handler(ws: ServerConnection) -> None:
        await handle_connection(ws, config, bot_delay=bot_delay, seed=seed)

    async with serve(_handler, host, port, process_request=_process_request):
        LOGGER.info("Practice server listening on %s:%s", host, port)
        await asyncio.Future()


def main() -> None:
    parser = argparse.ArgumentParser(description="Hold'em practice table: one player against house bots")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=9876)
    parser.add_argument("--players", type=int, default=2, help="Default table size (2-6) when the client does not ask")
    parser.add_argument("--bot-delay-ms", type=int, default=800, help="Pause before each bot move (milliseconds)")
    parser.add_argument("--seed", type=int, default=None, help="Seed shuffles and bot choices for repeatable games")
    args = parser.parse_args()

    try:
        config = TableConfig(num_players=args.players)
    except ValueError as exc:
        parser.error(str(exc))
    asyncio.run(run_server(args.host, args.port, config, bot_delay=args.bot_delay_ms / 1000, seed=args.seed))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
