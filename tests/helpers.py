from __future__ import annotations

import random
from typing import Iterable, List, Optional, Tuple

from holdem.game import GameEngine
from holdem.models import DecisionProvider, GameState, PlayerAction, TableConfig


class FirstCardRandom(random.Random):
    """Always draws the top card so a hand can be stacked deterministically."""

    def randrange(self, *args, **kwargs) -> int:  # type: ignore[override]
        return 0


def create_engine(
    *,
    seats: int = 8,
    starting_stack: int = 1_000,
    sb: int = 10,
    bb: int = 20,
    move_time_ms: int = 0,
    side_pots: bool = False,
    provider: Optional[DecisionProvider] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[GameEngine, GameState]:
    """Instantiate an engine plus a freshly seated game."""
    engine = GameEngine(
        TableConfig(
            seats=seats,
            starting_stack=starting_stack,
            sb=sb,
            bb=bb,
            move_time_ms=move_time_ms,
            side_pots=side_pots,
        ),
        provider,
        rng or random.Random(7),
    )
    state = GameState()
    engine.start_new_game(state)
    return engine, state


def start_hand(engine: GameEngine, state: GameState, seed: int = 42) -> GameState:
    engine.start_hand(state, seed=seed)
    assert state.is_betting_round_active
    return state


def perform_actions(
    engine: GameEngine, state: GameState, actions: Iterable[Tuple[PlayerAction, int]]
) -> None:
    """Apply a scripted sequence of (action, amount) for whoever is to act."""
    for action, amount in actions:
        engine.make_player_action(state, action, amount)


def passive_action(engine: GameEngine, state: GameState) -> PlayerAction:
    legal = engine.legal_actions(state)
    if PlayerAction.CHECK in legal:
        return PlayerAction.CHECK
    if PlayerAction.CALL in legal:
        return PlayerAction.CALL
    return PlayerAction.ALL_IN


def auto_complete_hand(engine: GameEngine, state: GameState, limit: int = 500) -> List[int]:
    """Check/call the current hand to completion and return the pot+stack totals seen."""
    totals = [state.total_chips()]
    for _ in range(limit):
        if not state.is_betting_round_active:
            break
        engine.make_player_action(state, passive_action(engine, state))
        totals.append(state.total_chips())
    assert engine.is_hand_complete(state)
    return totals
