from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, Tuple

from holdem.cards import Card
from holdem.evaluator import HandType, evaluate_hand
from holdem.models import Phase, PlayerAction, PlayerDecisionContext, PlayerStyle

LOGGER = logging.getLogger("house_bot")


class SimpleDecisionProvider:
    """Check when free, call otherwise, shove when the call covers the stack."""

    async def decide(self, context: PlayerDecisionContext) -> Tuple[PlayerAction, int]:
        LOGGER.debug(
            "%s deciding. to_call=%s chips=%s",
            context.player_name,
            context.amount_to_call,
            context.remaining_chips,
        )
        if context.amount_to_call <= 0:
            return PlayerAction.CHECK, 0
        if context.amount_to_call >= context.remaining_chips:
            return PlayerAction.ALL_IN, 0
        return PlayerAction.CALL, 0


# Style thresholds: (base raise probability, strength needed to continue vs a bet).
_STYLE_PROFILES = {
    PlayerStyle.AGGRESSIVE: (0.35, 18),
    PlayerStyle.BALANCED: (0.2, 24),
    PlayerStyle.NIT: (0.05, 32),
}

_PHASE_BONUS = {
    Phase.PRE_FLOP: 0.0,
    Phase.FLOP: 0.05,
    Phase.TURN: 0.1,
    Phase.RIVER: 0.12,
}


def rough_hand_strength(hole: Sequence[Card], community: Sequence[Card] = ()) -> int:
    """Very rough proxy for hand quality used to drive aggression choices."""
    if len(hole) < 2:
        return 0

    values = [card.value for card in hole]
    score = sum(values)
    if values[0] == values[1]:
        score += 14  # pairs are quite strong pre-flop
    else:
        gap = abs(values[0] - values[1])
        if gap == 1:
            score += 4
        elif gap == 2:
            score += 2
    if hole[0].suit == hole[1].suit:
        score += 3
    if min(values) >= 11:
        score += 2

    if community:
        # Post-flop the made hand matters far more than the starting cards.
        made = evaluate_hand(hole, community)
        score += (made.type - HandType.HIGH_CARD) * 8
    return score


class StyleDecisionProvider:
    """House bot whose aggression follows the seat's style tag."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    async def decide(self, context: PlayerDecisionContext) -> Tuple[PlayerAction, int]:
        legal = context.legal_actions
        base, continue_at = _STYLE_PROFILES.get(context.style, _STYLE_PROFILES[PlayerStyle.BALANCED])
        strength = rough_hand_strength(context.hole_cards, context.community_cards)
        facing_bet = context.amount_to_call > 0

        if PlayerAction.RAISE in legal and self._should_raise(base, strength, context.phase, facing_bet):
            return PlayerAction.RAISE, self._raise_size(context)

        if not facing_bet:
            return PlayerAction.CHECK, 0

        if strength < continue_at and context.amount_to_call > context.pot // 4:
            return PlayerAction.FOLD, 0
        if context.amount_to_call >= context.remaining_chips:
            # Calling would empty the stack; commit explicitly.
            if strength >= continue_at:
                return PlayerAction.ALL_IN, 0
            return PlayerAction.FOLD, 0
        return PlayerAction.CALL, 0

    def _should_raise(self, base: float, strength: int, phase: Phase, facing_bet: bool) -> bool:
        if strength >= 36:
            return True
        probability = base - (0.1 if facing_bet else 0.0) + _PHASE_BONUS.get(phase, 0.0)
        probability += min(strength / 45.0, 0.45)
        probability = max(0.0, min(0.85, probability)) if strength >= 20 else probability / 3
        return self.rng.random() < probability

    def _raise_size(self, context: PlayerDecisionContext) -> int:
        # Raise sizes are the increment over the table bet.
        roll = self.rng.random()
        if roll < 0.5:
            size = context.min_raise
        elif roll < 0.85:
            size = max(context.min_raise, context.pot // 2)
        else:
            size = max(context.min_raise, context.pot)
        return min(size, max(context.remaining_chips - context.amount_to_call, context.min_raise))
