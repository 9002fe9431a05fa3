from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict

import websockets

from holdem.cards import parse_cards
from holdem.models import DecisionProvider, Phase, PlayerAction, PlayerActionInfo, PlayerDecisionContext, PlayerStyle

from .remote import PROTOCOL_VERSION

LOGGER = logging.getLogger("bot_server")

# BotServer exposes a local DecisionProvider to remote tables.
# It answers every "act" message with one "action" message.


def context_from_payload(payload: Dict[str, Any]) -> PlayerDecisionContext:
    return PlayerDecisionContext(
        player_name=payload.get("player", ""),
        style=PlayerStyle(payload.get("style", PlayerStyle.BALANCED.value)),
        hole_cards=tuple(parse_cards(payload.get("hole", []))),
        community_cards=tuple(parse_cards(payload.get("community", []))),
        amount_to_call=int(payload.get("to_call", 0)),
        min_raise=int(payload.get("min_raise", 0)),
        remaining_chips=int(payload.get("stack", 0)),
        pot=int(payload.get("pot", 0)),
        phase=Phase(payload.get("phase", Phase.PRE_FLOP.value)),
        position=int(payload.get("position", 0)),
        active_player_count=int(payload.get("active_players", 0)),
        other_players_actions=tuple(
            PlayerActionInfo(
                player_name=entry.get("player", ""),
                action=PlayerAction(entry.get("action", PlayerAction.NONE.value)),
                amount=int(entry.get("amount", 0)),
                is_all_in=bool(entry.get("all_in", False)),
            )
            for entry in payload.get("others", [])
        ),
    )


class BotServer:
    def __init__(self, provider: DecisionProvider) -> None:
        self.provider = provider

    async def start(self, host: str = "0.0.0.0", port: int = 8765) -> None:
        async with websockets.serve(self._handle_connection, host, port):
            LOGGER.info("Bot server listening on %s:%s", host, port)
            await asyncio.Future()

    async def _handle_connection(self, websocket: Any) -> None:
        LOGGER.info("Table connected")
        try:
            async for raw in websocket:
                reply = await self.handle_message(raw)
                await websocket.send(json.dumps(reply))
        except websockets.ConnectionClosed:
            pass
        LOGGER.info("Table disconnected")

    async def handle_message(self, raw: str) -> Dict[str, Any]:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            return self._error("BAD_JSON", "Message is not valid JSON")
        if not isinstance(message, dict) or message.get("type") != "act":
            return self._error("UNKNOWN_TYPE", "Unsupported message type")
        try:
            context = context_from_payload(message)
        except (TypeError, ValueError) as exc:
            return self._error("BAD_SCHEMA", str(exc))

        action, amount = await self.provider.decide(context)
        LOGGER.debug("%s -> %s %s", context.player_name, action.value, amount)
        reply = {"v": PROTOCOL_VERSION, "type": "action", "action": action.value, "amount": amount}
        if "id" in message:
            # Tables match replies to requests by id.
            reply["id"] = message["id"]
        return reply

    def _error(self, code: str, msg: str) -> Dict[str, Any]:
        return {"v": PROTOCOL_VERSION, "type": "error", "code": code, "msg": msg}
