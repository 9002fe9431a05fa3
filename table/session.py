from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from holdem.game import GameEngine
from holdem.models import DecisionProvider, GameState

LOGGER = logging.getLogger("holdem.session")

# TableSession is the loop a UI would otherwise run: bots go through the
# engine's non-human path, the human seat through ``human_provider``. Both end
# up in GameEngine.make_player_action.


@dataclass
class HandSummary:
    hand_number: int
    winners: List[str]
    message: str
    stacks: List[int] = field(default_factory=list)


class TableSession:
    def __init__(self, engine: GameEngine, human_provider: Optional[DecisionProvider] = None) -> None:
        self.engine = engine
        self.human_provider = human_provider

    async def play_hand(self, state: GameState, seed: Optional[int] = None) -> HandSummary:
        self.engine.start_hand(state, seed=seed)
        while state.is_betting_round_active:
            if await self.engine.process_non_human_turn(state):
                continue
            player = state.current_player
            if not player.is_human:
                raise RuntimeError(f"Seat {state.current_player_index} cannot act")
            if self.human_provider is None:
                raise RuntimeError("Human seat to act but no human input configured")
            context = self.engine.build_decision_context(state, player)
            action, amount = await self.human_provider.decide(context)
            self.engine.make_player_action(state, action, amount)

        summary = HandSummary(
            hand_number=state.hand_number,
            winners=[player.name for player in state.winners],
            message=state.game_message,
            stacks=[player.chips for player in state.players],
        )
        LOGGER.info("Hand %s: %s", summary.hand_number, summary.message)
        return summary

    async def run(self, state: GameState, hands: int, seed: Optional[int] = None) -> List[HandSummary]:
        """Play up to ``hands`` hands on a fresh game, stopping early when one stack remains."""
        self.engine.start_new_game(state)
        summaries: List[HandSummary] = []
        for idx in range(hands):
            if self.engine.is_match_over(state):
                LOGGER.info("Match over after %s hands", len(summaries))
                break
            hand_seed = None if seed is None else seed + idx
            summaries.append(await self.play_hand(state, seed=hand_seed))
        return summaries
