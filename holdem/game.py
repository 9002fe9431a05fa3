from __future__ import annotations

import asyncio
import logging
import random
from typing import List, Optional, Tuple

from .cards import FULL_DECK_SIZE, create_full_deck, deal, draw_random
from .evaluator import describe_rank
from .models import (
    STYLE_ROTATION,
    DecisionProvider,
    GameState,
    Phase,
    Player,
    PlayerAction,
    PlayerActionInfo,
    PlayerDecisionContext,
    TableConfig,
)
from .pot import distribute_pot

LOGGER = logging.getLogger("holdem")

# GameEngine holds the rules only. Every call takes the session's GameState,
# so one engine can drive any number of isolated tables.

COMMUNITY_CARDS = 5
NEXT_PHASE = {
    Phase.PRE_FLOP: (Phase.FLOP, 3),
    Phase.FLOP: (Phase.TURN, 1),
    Phase.TURN: (Phase.RIVER, 1),
    Phase.RIVER: (Phase.SHOWDOWN, 0),
}


class GameEngine:
    """No-Limit Texas Hold'em betting engine. Table size comes from ``TableConfig.seats``."""

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        decision_provider: Optional[DecisionProvider] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or TableConfig()
        self.decision_provider = decision_provider
        self.rng = rng or random.Random()

    # Session control -------------------------------------------------

    def start_new_game(self, state: GameState) -> None:
        state.players.clear()
        state.community_cards.clear()
        state.deck.clear()
        state.winners.clear()
        state.pot = 0
        state.side_pot = 0
        state.current_bet = 0
        state.current_player_index = 0
        state.dealer_position = 0
        state.small_blind = self.config.sb
        state.big_blind = self.config.bb
        state.min_raise = self.config.bb
        state.last_raise_amount = 0
        state.phase = Phase.PRE_FLOP
        state.is_betting_round_active = False
        state.decision_pending = False
        state.hand_number = 0
        state.is_game_active = True

        for idx in range(self.config.seats):
            is_human = idx == self.config.human_seat
            state.players.append(
                Player(
                    name="You" if is_human else f"Player {idx + 1}",
                    chips=self.config.starting_stack,
                    is_human=is_human,
                    is_dealer=idx == 0,
                    style=STYLE_ROTATION[idx % len(STYLE_ROTATION)],
                )
            )
        state.game_message = "New game started! Start a hand to begin."
        LOGGER.info("New game: %s seats, %s chips each", self.config.seats, self.config.starting_stack)

    def start_hand(self, state: GameState, seed: Optional[int] = None) -> None:
        LOGGER.info("Starting hand. active=%s players=%s", state.is_game_active, len(state.players))
        if not state.is_game_active:
            state.game_message = "Game is not active!"
            raise RuntimeError("Game is not active")
        if not state.players:
            state.game_message = "No players in game! Please start a new game first."
            raise RuntimeError("No players in game")

        funded = [player for player in state.players if player.chips > 0]
        if len(funded) < 2:
            state.game_message = "Not enough players with chips to start a hand."
            raise RuntimeError("Not enough active players to start a hand")
        if len(funded) * 2 + COMMUNITY_CARDS > FULL_DECK_SIZE:
            raise RuntimeError(f"{len(funded)} players need more cards than one deck holds")

        if seed is not None:
            self.rng.seed(seed)

        for idx, player in enumerate(state.players):
            player.reset_for_hand()
            player.is_dealer = idx == state.dealer_position
            # Busted seats sit the hand out.
            player.is_active = player.chips > 0
            if not player.is_active:
                player.has_folded = True

        state.community_cards.clear()
        state.winners.clear()
        state.pot = 0
        state.side_pot = 0
        state.current_bet = 0
        state.last_raise_amount = 0
        state.phase = Phase.PRE_FLOP
        state.is_betting_round_active = False
        state.decision_pending = False
        state.hand_number += 1

        self._post_blinds(state)
        self._deal_hole_cards(state)
        self._start_betting_round(state)
        LOGGER.info(
            "Hand %s started. dealer=%s first_to_act=%s pot=%s",
            state.hand_number,
            state.dealer_position,
            state.current_player_index,
            state.pot,
        )

    def _post_blinds(self, state: GameState) -> None:
        seats = len(state.players)
        sb_player = state.players[(state.dealer_position + 1) % seats]
        bb_player = state.players[(state.dealer_position + 2) % seats]

        sb_amount = self._commit_chips(sb_player, state.small_blind, state)
        bb_amount = self._commit_chips(bb_player, state.big_blind, state)

        state.current_bet = max(sb_player.current_bet, bb_player.current_bet)
        # A busted big blind posts nothing; keep the configured floor then.
        state.min_raise = bb_amount or state.big_blind
        state.last_raise_amount = bb_amount
        state.game_message = (
            f"{sb_player.name} posts small blind (${sb_amount}), "
            f"{bb_player.name} posts big blind (${bb_amount})"
        )

    def _deal_hole_cards(self, state: GameState) -> None:
        state.deck = create_full_deck()
        # One card to everyone, then the second card to everyone.
        for _ in range(2):
            for player in state.players:
                if player.is_active:
                    player.hole_cards.append(draw_random(state.deck, self.rng))
        LOGGER.debug("Dealt hole cards. deck=%s", len(state.deck))

    def _start_betting_round(self, state: GameState) -> None:
        seats = len(state.players)
        offset = 3 if state.phase == Phase.PRE_FLOP else 1
        state.current_player_index = self._next_eligible_seat(state, (state.dealer_position + offset) % seats)
        state.is_betting_round_active = True
        state.game_message = f"{state.current_player.name}'s turn to act"

    def _commit_chips(self, player: Player, amount: int, state: GameState) -> int:
        amount = max(0, min(amount, player.chips))
        player.chips -= amount
        player.current_bet += amount
        player.total_bet_this_round += amount
        state.pot += amount
        return amount

    # Action handling -------------------------------------------------

    def legal_actions(self, state: GameState) -> List[PlayerAction]:
        if not state.is_betting_round_active:
            return []
        return self.build_decision_context(state, state.current_player).legal_actions

    def make_player_action(self, state: GameState, action: PlayerAction, amount: int = 0) -> None:
        if not state.is_betting_round_active:
            raise RuntimeError("Betting round not active")
        if state.decision_pending:
            raise RuntimeError(f"Waiting on a decision for seat {state.current_player_index}")

        player = state.current_player

        if action == PlayerAction.FOLD:
            player.has_folded = True
            state.game_message = f"{player.name} folds"
        elif action == PlayerAction.CHECK:
            # Callers only offer CHECK when nothing is owed.
            state.game_message = f"{player.name} checks"
        elif action == PlayerAction.CALL:
            paid = self._commit_chips(player, state.current_bet - player.current_bet, state)
            player.last_bet_amount = paid
            state.game_message = f"{player.name} calls ${paid}"
        elif action == PlayerAction.RAISE:
            raise_size = max(amount, state.min_raise)
            target = state.current_bet + raise_size
            paid = self._commit_chips(player, target - player.current_bet, state)
            state.current_bet = max(state.current_bet, player.current_bet)
            state.min_raise = raise_size
            state.last_raise_amount = raise_size
            player.last_bet_amount = paid
            state.game_message = f"{player.name} raises to ${state.current_bet}"
        elif action == PlayerAction.ALL_IN:
            paid = self._commit_chips(player, player.chips, state)
            player.is_all_in = True
            player.last_bet_amount = paid
            state.game_message = f"{player.name} goes all in for ${paid}"
            if player.current_bet > state.current_bet:
                state.current_bet = player.current_bet
                state.min_raise = paid
                state.last_raise_amount = paid
        else:
            raise ValueError(f"Unsupported action {action}")

        player.last_action = action
        player.has_acted = True
        LOGGER.debug(
            "Seat %s %s (amount=%s) pot=%s bet=%s",
            state.current_player_index,
            action.value,
            amount,
            state.pot,
            state.current_bet,
        )

        if self.is_betting_round_complete(state):
            self.end_betting_round(state)
        else:
            self.move_to_next_player(state)

    def is_betting_round_complete(self, state: GameState) -> bool:
        eligible = [player for player in state.players if player.can_act]
        if len(eligible) <= 1:
            return True
        return all(player.has_acted and player.current_bet >= state.current_bet for player in eligible)

    def move_to_next_player(self, state: GameState) -> None:
        state.current_player_index = self._next_eligible_seat(state, state.current_player_index + 1)
        state.game_message = f"{state.current_player.name}'s turn to act"

    def _next_eligible_seat(self, state: GameState, start: int) -> int:
        seats = len(state.players)
        for step in range(seats):
            idx = (start + step) % seats
            if state.players[idx].can_act:
                return idx
        raise RuntimeError("No seat left that can act")

    def end_betting_round(self, state: GameState) -> None:
        while True:
            state.is_betting_round_active = False
            for player in state.players:
                player.reset_for_round()
            state.current_bet = 0

            if sum(1 for player in state.players if not player.has_folded) <= 1:
                # Everyone else folded: no more cards, straight to the award.
                self._showdown(state)
                return

            state.phase, reveal = NEXT_PHASE[state.phase]
            if state.phase == Phase.SHOWDOWN:
                self._showdown(state)
                return
            state.community_cards.extend(deal(state.deck, reveal, self.rng))
            LOGGER.debug("%s: %s", state.phase.value, " ".join(str(card) for card in state.community_cards))

            if sum(1 for player in state.players if player.can_act) >= 2:
                self._start_betting_round(state)
                return
            # Nobody left to bet against; run out the board.

    def _showdown(self, state: GameState) -> None:
        state.phase = Phase.SHOWDOWN
        pot = state.pot
        contested = sum(1 for player in state.players if not player.has_folded) > 1
        winners = distribute_pot(state, side_pots=self.config.side_pots)
        if not winners:
            raise RuntimeError("Showdown produced no winners")
        state.winners = list(winners)

        names = ", ".join(player.name for player in winners)
        if contested:
            hand = winners[0].best_hand
            state.game_message = f"{names} win(s) ${pot} with {hand.description}!"
            LOGGER.info("Showdown: %s win %s with %s", names, pot, describe_rank(hand))
        else:
            state.game_message = f"{names} wins ${pot}!"
            LOGGER.info("Uncontested: %s wins %s", names, pot)

        state.pot = 0
        state.is_betting_round_active = False
        seats = len(state.players)
        state.dealer_position = (state.dealer_position + 1) % seats
        for idx, player in enumerate(state.players):
            player.is_dealer = idx == state.dealer_position
        state.phase = Phase.PRE_FLOP

    # Non-human turns -------------------------------------------------

    def build_decision_context(self, state: GameState, player: Player) -> PlayerDecisionContext:
        position = next(idx for idx, seat in enumerate(state.players) if seat is player)
        others = tuple(
            PlayerActionInfo(
                player_name=other.name,
                action=other.last_action,
                amount=other.last_bet_amount,
                is_all_in=other.is_all_in,
            )
            for other in state.players
            if other is not player and other.last_action != PlayerAction.NONE
        )
        return PlayerDecisionContext(
            player_name=player.name,
            style=player.style,
            hole_cards=tuple(player.hole_cards),
            community_cards=tuple(state.community_cards),
            amount_to_call=max(state.current_bet - player.current_bet, 0),
            min_raise=state.min_raise,
            remaining_chips=player.chips,
            pot=state.pot,
            phase=state.phase,
            position=position,
            active_player_count=sum(1 for seat in state.players if seat.can_act),
            other_players_actions=others,
        )

    async def process_non_human_turn(self, state: GameState) -> bool:
        """Play one turn for the seat to act if it belongs to a bot.

        Returns False without touching the state when the seat is human, cannot
        act, or another decision is still outstanding.
        """
        if not state.is_betting_round_active or state.decision_pending:
            return False
        player = state.current_player
        if player.is_human or not player.can_act:
            return False

        seat = state.current_player_index
        context = self.build_decision_context(state, player)
        state.decision_pending = True
        try:
            action, amount = await self._request_decision(context)
        except Exception:
            LOGGER.exception("Decision for %s failed; folding", player.name)
            action, amount = PlayerAction.FOLD, 0
        finally:
            state.decision_pending = False

        if state.current_player_index != seat:
            raise RuntimeError(f"Turn moved from seat {seat} while its decision was pending")

        LOGGER.info("%s decided %s (raise=%s)", player.name, action.value, amount)
        self.make_player_action(state, action, amount)
        return True

    async def _request_decision(self, context: PlayerDecisionContext) -> Tuple[PlayerAction, int]:
        if self.decision_provider is None:
            raise RuntimeError("No decision provider configured")
        pending = self.decision_provider.decide(context)
        if self.config.move_time_ms > 0:
            action, amount = await asyncio.wait_for(pending, self.config.move_time_ms / 1000)
        else:
            action, amount = await pending
        action = PlayerAction(action)
        if action == PlayerAction.NONE:
            raise ValueError("Decision provider returned no action")
        return action, int(amount or 0)

    # Status helpers --------------------------------------------------

    def is_hand_complete(self, state: GameState) -> bool:
        return not state.is_betting_round_active and bool(state.winners)

    def is_match_over(self, state: GameState) -> bool:
        return sum(1 for player in state.players if player.chips > 0) <= 1
