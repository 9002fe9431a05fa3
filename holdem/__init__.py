"""Eight-seat Texas Hold'em engine: deck, hand evaluator, betting rounds and showdown."""

from .cards import Card, RANKS, SUITS, create_full_deck, deal, draw_random, parse_cards, parse_label
from .evaluator import HandRanking, HandType, compare_hands, describe_rank, evaluate_hand
from .game import GameEngine
from .models import (
    DecisionProvider,
    GameState,
    Phase,
    Player,
    PlayerAction,
    PlayerActionInfo,
    PlayerDecisionContext,
    PlayerStyle,
    TableConfig,
)
from .pot import build_side_pots, distribute_pot, split_pot

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "create_full_deck",
    "deal",
    "draw_random",
    "parse_cards",
    "parse_label",
    "HandRanking",
    "HandType",
    "compare_hands",
    "describe_rank",
    "evaluate_hand",
    "GameEngine",
    "DecisionProvider",
    "GameState",
    "Phase",
    "Player",
    "PlayerAction",
    "PlayerActionInfo",
    "PlayerDecisionContext",
    "PlayerStyle",
    "TableConfig",
    "build_side_pots",
    "distribute_pot",
    "split_pot",
]
