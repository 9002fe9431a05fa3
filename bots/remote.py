from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

import websockets

from holdem.cards import cards_to_labels
from holdem.models import PlayerAction, PlayerDecisionContext

LOGGER = logging.getLogger("remote_bot")

PROTOCOL_VERSION = 1


def context_payload(context: PlayerDecisionContext) -> Dict[str, Any]:
    """Flatten a decision context into the JSON body of an ``act`` message."""
    return {
        "player": context.player_name,
        "style": context.style.value,
        "hole": cards_to_labels(context.hole_cards),
        "community": cards_to_labels(context.community_cards),
        "to_call": context.amount_to_call,
        "min_raise": context.min_raise,
        "stack": context.remaining_chips,
        "pot": context.pot,
        "phase": context.phase.value,
        "position": context.position,
        "active_players": context.active_player_count,
        "legal": [action.value for action in context.legal_actions],
        "others": [
            {
                "player": info.player_name,
                "action": info.action.value,
                "amount": info.amount,
                "all_in": info.is_all_in,
            }
            for info in context.other_players_actions
        ],
    }


def parse_action(message: Dict[str, Any]) -> Tuple[PlayerAction, int]:
    try:
        action = PlayerAction(message["action"])
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Bad action message: {message!r}") from exc
    amount = message.get("amount") or 0
    if not isinstance(amount, int):
        raise ValueError(f"Bad raise amount: {amount!r}")
    return action, amount


class RemoteDecisionProvider:
    """Asks a bot on the other end of a WebSocket for each decision.

    The engine bounds every call with its move timer and folds on any error,
    so this class only has to speak the protocol.
    """

    def __init__(self, url: str, websocket: Optional[Any] = None) -> None:
        self.url = url
        self._websocket = websocket
        self._request_id = 0

    async def connect(self) -> None:
        self._websocket = await websockets.connect(self.url)
        LOGGER.info("Connected to bot at %s", self.url)

    async def close(self) -> None:
        if self._websocket is not None:
            await self._websocket.close()
            self._websocket = None

    async def decide(self, context: PlayerDecisionContext) -> Tuple[PlayerAction, int]:
        if self._websocket is None:
            await self.connect()
        websocket = self._websocket
        assert websocket is not None
        self._request_id += 1
        request_id = self._request_id
        try:
            await websocket.send(
                json.dumps({"v": PROTOCOL_VERSION, "type": "act", "id": request_id, **context_payload(context)})
            )
            while True:
                message = json.loads(await websocket.recv())
                if message.get("id", request_id) != request_id:
                    LOGGER.warning("Dropping stale reply to request %s", message.get("id"))
                    continue
                if message.get("type") == "action":
                    return parse_action(message)
                if message.get("type") == "error":
                    raise ValueError(f"Bot error {message.get('code')}: {message.get('msg')}")
                LOGGER.debug("Ignoring %s message from bot", message.get("type"))
        except (asyncio.CancelledError, websockets.ConnectionClosed, json.JSONDecodeError):
            # The exchange was cut short and a reply may still be in flight.
            await self._discard(websocket)
            raise

    async def _discard(self, websocket: Any) -> None:
        if self._websocket is websocket:
            self._websocket = None
        LOGGER.info("Dropping connection to bot at %s", self.url)
        await websocket.close()
