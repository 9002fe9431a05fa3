from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Tuple

from .cards import Card
from .evaluator import HandRanking


class Phase(str, Enum):
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


class PlayerAction(str, Enum):
    NONE = "NONE"
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class PlayerStyle(str, Enum):
    AGGRESSIVE = "AGGRESSIVE"
    NIT = "NIT"
    BALANCED = "BALANCED"


STYLE_ROTATION = (PlayerStyle.AGGRESSIVE, PlayerStyle.NIT, PlayerStyle.BALANCED)


@dataclass
class TableConfig:
    seats: int = 8
    starting_stack: int = 1_000
    sb: int = 10
    bb: int = 20
    move_time_ms: int = 15_000
    human_seat: Optional[int] = 0
    side_pots: bool = False


@dataclass
class Player:
    name: str
    chips: int
    current_bet: int = 0
    total_bet_this_round: int = 0
    hole_cards: List[Card] = field(default_factory=list)
    is_active: bool = True
    is_dealer: bool = False
    is_human: bool = False
    is_all_in: bool = False
    has_folded: bool = False
    has_acted: bool = False
    last_action: PlayerAction = PlayerAction.NONE
    last_bet_amount: int = 0
    best_hand: Optional[HandRanking] = None
    style: PlayerStyle = PlayerStyle.BALANCED

    def reset_for_hand(self) -> None:
        self.hole_cards.clear()
        self.current_bet = 0
        self.total_bet_this_round = 0
        self.has_folded = False
        self.has_acted = False
        self.is_all_in = False
        self.last_action = PlayerAction.NONE
        self.last_bet_amount = 0
        self.best_hand = None

    def reset_for_round(self) -> None:
        self.current_bet = 0
        self.has_acted = False

    @property
    def can_act(self) -> bool:
        return not self.has_folded and not self.is_all_in


@dataclass
class GameState:
    # The one mutable aggregate of a session. Engines read and write it but
    # never keep their own copy of table or player state.
    players: List[Player] = field(default_factory=list)
    community_cards: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    dealer_position: int = 0
    current_player_index: int = 0
    small_blind: int = 10
    big_blind: int = 20
    min_raise: int = 20
    phase: Phase = Phase.PRE_FLOP
    is_betting_round_active: bool = False
    last_raise_amount: int = 0
    deck: List[Card] = field(default_factory=list)
    game_message: str = ""
    is_game_active: bool = False
    winners: List[Player] = field(default_factory=list)
    side_pot: int = 0
    decision_pending: bool = False
    hand_number: int = 0

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    def total_chips(self) -> int:
        return sum(player.chips for player in self.players) + self.pot


@dataclass(frozen=True)
class PlayerActionInfo:
    player_name: str
    action: PlayerAction
    amount: int
    is_all_in: bool


@dataclass(frozen=True)
class PlayerDecisionContext:
    """Read-only view of the table handed to a decision provider for one turn."""

    player_name: str
    style: PlayerStyle
    hole_cards: Tuple[Card, ...]
    community_cards: Tuple[Card, ...]
    amount_to_call: int
    min_raise: int
    remaining_chips: int
    pot: int
    phase: Phase
    position: int
    active_player_count: int
    other_players_actions: Tuple[PlayerActionInfo, ...] = ()

    @property
    def legal_actions(self) -> List[PlayerAction]:
        legal = [PlayerAction.FOLD]
        if self.amount_to_call <= 0:
            legal.append(PlayerAction.CHECK)
        elif self.remaining_chips > 0:
            legal.append(PlayerAction.CALL)
        if self.remaining_chips > self.amount_to_call:
            legal.append(PlayerAction.RAISE)
        # A stack emptied by an earlier call can still close out as all-in.
        if self.remaining_chips > 0 or self.amount_to_call > 0:
            legal.append(PlayerAction.ALL_IN)
        return legal


class DecisionProvider(Protocol):
    async def decide(self, context: PlayerDecisionContext) -> Tuple[PlayerAction, int]:
        """Return the action for the seat described by ``context`` and a raise size."""
        ...
