import pytest

from holdem.cards import parse_cards
from holdem.models import GameState, Player
from holdem.pot import build_side_pots, distribute_pot, rank_contenders, split_pot


def seat(name, hole, chips=0, contributed=0, folded=False):
    return Player(
        name=name,
        chips=chips,
        hole_cards=parse_cards(hole),
        total_bet_this_round=contributed,
        has_folded=folded,
    )


def test_split_pot_is_exact_for_any_winner_count():
    for pot in (0, 1, 7, 100, 1_001):
        for count in range(1, 9):
            winners = [Player(name=f"P{idx}", chips=0) for idx in range(count)]
            payouts = split_pot(pot, winners)
            assert sum(payouts) == pot
            assert max(payouts) - min(payouts) <= 1
            assert [player.chips for player in winners] == payouts


def test_split_pot_gives_odd_chips_to_first_winners():
    winners = [Player(name=name, chips=0) for name in "ABC"]
    assert split_pot(100, winners) == [34, 33, 33]


def test_split_pot_requires_winners():
    with pytest.raises(ValueError):
        split_pot(10, [])


def test_lone_player_takes_pot_without_evaluation():
    state = GameState(
        players=[seat("A", [], folded=True), seat("B", ["2h", "7c"]), seat("C", [], folded=True)],
        pot=90,
    )
    winners = distribute_pot(state)
    assert [player.name for player in winners] == ["B"]
    assert state.players[1].chips == 90
    assert state.players[1].best_hand is None


def test_best_hand_takes_whole_pot():
    state = GameState(
        players=[seat("A", ["Ah", "Ad"]), seat("B", ["Kh", "Kd"]), seat("C", ["2c", "7d"])],
        community_cards=parse_cards(["As", "9c", "5h", "3d", "Jc"]),
        pot=300,
    )
    winners = distribute_pot(state)
    assert [player.name for player in winners] == ["A"]
    assert [player.chips for player in state.players] == [300, 0, 0]
    assert all(player.best_hand is not None for player in state.players)


def test_tied_hands_split_with_remainder_in_ranked_order():
    state = GameState(
        players=[
            seat("A", ["2c", "3d"]),
            seat("B", ["2h", "4d"]),
            seat("C", ["Kh", "Qd"], folded=True),
            seat("D", ["2s", "3h"]),
        ],
        community_cards=parse_cards(["As", "Ks", "Qc", "Jh", "Td"]),
        pot=101,
    )
    winners = distribute_pot(state)
    assert [player.name for player in winners] == ["A", "B", "D"]
    assert [player.chips for player in winners] == [34, 34, 33]
    assert state.players[2].chips == 0


def test_ties_use_hand_order_not_identity():
    state = GameState(
        players=[seat("A", ["9c", "9d"]), seat("B", ["9h", "9s"]), seat("C", ["8c", "8d"])],
        community_cards=parse_cards(["Ac", "Kd", "Qh", "4s", "2c"]),
        pot=40,
    )
    ranked = rank_contenders(state.players, state.community_cards)
    assert [player.name for player in ranked] == ["A", "B", "C"]
    winners = distribute_pot(state)
    assert [player.name for player in winners] == ["A", "B"]
    assert [player.chips for player in state.players] == [20, 20, 0]


def test_side_pots_layer_unequal_stacks():
    players = [
        seat("Short", ["Ah", "Ad"], contributed=100),
        seat("Mid", ["Kh", "Kd"], contributed=300),
        seat("Big", ["2c", "7d"], contributed=300),
        seat("Folder", ["3c", "8d"], contributed=50, folded=True),
    ]
    pots = build_side_pots(players)
    assert [amount for amount, _ in pots] == [350, 400]
    assert [[player.name for player in eligible] for _, eligible in pots] == [
        ["Short", "Mid", "Big"],
        ["Mid", "Big"],
    ]


def test_side_pot_distribution_pays_each_tier():
    state = GameState(
        players=[
            seat("Short", ["Ah", "Ad"], contributed=100),
            seat("Mid", ["Kh", "Kd"], contributed=300),
            seat("Big", ["2c", "7d"], contributed=300),
        ],
        community_cards=parse_cards(["As", "9c", "5h", "3d", "Jc"]),
        pot=700,
    )
    winners = distribute_pot(state, side_pots=True)
    assert [player.name for player in winners] == ["Short", "Mid"]
    assert [player.chips for player in state.players] == [300, 400, 0]
    assert state.side_pot == 400


def test_side_pot_with_folded_top_contributor_keeps_chips():
    state = GameState(
        players=[
            seat("A", ["Ah", "Ad"], contributed=100),
            seat("B", ["Kh", "Kd"], contributed=100),
            seat("C", ["2c", "7d"], contributed=400, folded=True),
        ],
        community_cards=parse_cards(["As", "9c", "5h", "3d", "Jc"]),
        pot=600,
    )
    distribute_pot(state, side_pots=True)
    assert sum(player.chips for player in state.players) == 600
    assert state.players[0].chips == 600


def test_distribute_requires_a_contender():
    state = GameState(players=[seat("A", [], folded=True)], pot=10)
    with pytest.raises(RuntimeError):
        distribute_pot(state)


def test_side_pots_with_nothing_contributed_still_name_a_winner():
    state = GameState(
        players=[seat("A", ["Ah", "Ad"]), seat("B", ["Kh", "Kd"]), seat("C", [], folded=True)],
        community_cards=parse_cards(["As", "9c", "5h", "3d", "Jc"]),
        pot=0,
    )
    assert build_side_pots(state.players) == []

    winners = distribute_pot(state, side_pots=True)

    assert [player.name for player in winners] == ["A"]
    assert [player.chips for player in state.players] == [0, 0, 0]
