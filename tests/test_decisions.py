import asyncio

import pytest

from holdem.models import Phase, PlayerAction, PlayerDecisionContext, PlayerStyle

from .helpers import create_engine, perform_actions, start_hand


class ScriptedProvider:
    """Replays a fixed list of decisions and records every context it saw."""

    def __init__(self, *decisions) -> None:
        self.decisions = list(decisions)
        self.contexts = []

    async def decide(self, context):
        self.contexts.append(context)
        return self.decisions.pop(0)


class FailingProvider:
    async def decide(self, context):
        raise ConnectionError("bot went away")


class SlowProvider:
    async def decide(self, context):
        await asyncio.sleep(1)
        return PlayerAction.CALL, 0


def make_context(**overrides) -> PlayerDecisionContext:
    values = dict(
        player_name="Player 2",
        style=PlayerStyle.BALANCED,
        hole_cards=(),
        community_cards=(),
        amount_to_call=0,
        min_raise=20,
        remaining_chips=500,
        pot=30,
        phase=Phase.PRE_FLOP,
        position=1,
        active_player_count=8,
    )
    values.update(overrides)
    return PlayerDecisionContext(**values)


def test_bot_turn_applies_provider_decision():
    provider = ScriptedProvider((PlayerAction.RAISE, 40))
    engine, state = create_engine(provider=provider)
    start_hand(engine, state)

    assert asyncio.run(engine.process_non_human_turn(state)) is True

    assert state.players[3].last_action == PlayerAction.RAISE
    assert state.current_bet == 60
    assert state.current_player_index == 4
    assert not state.decision_pending
    assert provider.contexts[0].player_name == "Player 4"


def test_human_turn_is_left_to_the_caller():
    provider = ScriptedProvider()
    engine, state = create_engine(provider=provider)
    start_hand(engine, state)
    perform_actions(engine, state, [(PlayerAction.CALL, 0)] * 5)
    assert state.current_player_index == 0

    assert asyncio.run(engine.process_non_human_turn(state)) is False
    assert provider.contexts == []
    assert state.players[0].last_action == PlayerAction.NONE


def test_no_turn_while_decision_pending():
    provider = ScriptedProvider((PlayerAction.CALL, 0))
    engine, state = create_engine(provider=provider)
    start_hand(engine, state)
    state.decision_pending = True

    assert asyncio.run(engine.process_non_human_turn(state)) is False
    with pytest.raises(RuntimeError, match="Waiting on a decision"):
        engine.make_player_action(state, PlayerAction.CALL)
    assert provider.contexts == []


def test_actions_rejected_while_provider_is_thinking():
    engine, state = create_engine()
    seen = []

    class MeddlingProvider:
        async def decide(self, context):
            seen.append(state.decision_pending)
            with pytest.raises(RuntimeError):
                engine.make_player_action(state, PlayerAction.FOLD)
            return PlayerAction.CALL, 0

    engine.decision_provider = MeddlingProvider()
    start_hand(engine, state)
    asyncio.run(engine.process_non_human_turn(state))

    assert seen == [True]
    assert state.players[3].last_action == PlayerAction.CALL
    assert not state.players[3].has_folded


def test_provider_error_folds_the_seat():
    engine, state = create_engine(provider=FailingProvider())
    start_hand(engine, state)

    assert asyncio.run(engine.process_non_human_turn(state)) is True
    assert state.players[3].has_folded
    assert state.players[3].last_action == PlayerAction.FOLD
    assert not state.decision_pending


def test_slow_provider_times_out_to_fold():
    engine, state = create_engine(provider=SlowProvider(), move_time_ms=20)
    start_hand(engine, state)

    asyncio.run(engine.process_non_human_turn(state))
    assert state.players[3].has_folded
    assert state.current_player_index == 4


def test_missing_provider_folds():
    engine, state = create_engine()
    start_hand(engine, state)
    asyncio.run(engine.process_non_human_turn(state))
    assert state.players[3].has_folded


@pytest.mark.parametrize("decision", [(PlayerAction.NONE, 0), ("BOGUS", 0)])
def test_unusable_decision_folds(decision):
    engine, state = create_engine(provider=ScriptedProvider(decision))
    start_hand(engine, state)
    asyncio.run(engine.process_non_human_turn(state))
    assert state.players[3].has_folded


def test_decision_context_describes_the_seat():
    engine, state = create_engine()
    start_hand(engine, state)

    context = engine.build_decision_context(state, state.current_player)
    assert context.player_name == "Player 4"
    assert context.style == PlayerStyle.AGGRESSIVE
    assert len(context.hole_cards) == 2
    assert context.community_cards == ()
    assert context.amount_to_call == 20
    assert context.min_raise == 20
    assert context.remaining_chips == 1_000
    assert context.pot == 30
    assert context.phase == Phase.PRE_FLOP
    assert context.position == 3
    assert context.active_player_count == 8
    assert context.other_players_actions == ()

    engine.make_player_action(state, PlayerAction.CALL)
    context = engine.build_decision_context(state, state.current_player)
    assert [(info.player_name, info.action, info.amount) for info in context.other_players_actions] == [
        ("Player 4", PlayerAction.CALL, 20)
    ]


def test_big_blind_context_owes_nothing():
    engine, state = create_engine()
    start_hand(engine, state)
    perform_actions(engine, state, [(PlayerAction.CALL, 0)] * 7)
    assert state.current_player_index == 2
    context = engine.build_decision_context(state, state.current_player)
    assert context.amount_to_call == 0
    assert PlayerAction.CHECK in context.legal_actions
    assert PlayerAction.CALL not in context.legal_actions


def test_legal_actions_follow_the_stack():
    assert make_context().legal_actions == [
        PlayerAction.FOLD,
        PlayerAction.CHECK,
        PlayerAction.RAISE,
        PlayerAction.ALL_IN,
    ]
    assert make_context(amount_to_call=40).legal_actions == [
        PlayerAction.FOLD,
        PlayerAction.CALL,
        PlayerAction.RAISE,
        PlayerAction.ALL_IN,
    ]
    assert make_context(amount_to_call=500).legal_actions == [
        PlayerAction.FOLD,
        PlayerAction.CALL,
        PlayerAction.ALL_IN,
    ]
    assert make_context(amount_to_call=40, remaining_chips=0).legal_actions == [
        PlayerAction.FOLD,
        PlayerAction.ALL_IN,
    ]
