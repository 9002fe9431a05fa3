"""Showdown: rank the remaining hands and pay out the pot."""

from __future__ import annotations

import functools
from typing import Dict, List, Sequence, Tuple

from .cards import Card
from .evaluator import compare_hands, evaluate_hand
from .models import GameState, Player


def split_pot(amount: int, winners: Sequence[Player]) -> List[int]:
    """Pay ``amount`` across ``winners``; the first ``amount % n`` get one extra chip."""
    if not winners:
        raise ValueError("Cannot split a pot without winners")
    share, remainder = divmod(amount, len(winners))
    payouts = []
    for idx, player in enumerate(winners):
        payout = share + (1 if idx < remainder else 0)
        player.chips += payout
        payouts.append(payout)
    return payouts


def rank_contenders(players: Sequence[Player], community: Sequence[Card]) -> List[Player]:
    """Evaluate every non-folded player and return them best hand first.

    The sort is stable, so tied hands keep seat order.
    """
    contenders = [player for player in players if not player.has_folded]
    for player in contenders:
        player.best_hand = evaluate_hand(player.hole_cards, community)
    return sorted(
        contenders,
        key=functools.cmp_to_key(lambda a, b: compare_hands(a.best_hand, b.best_hand)),
        reverse=True,
    )


def best_of(ranked: Sequence[Player]) -> List[Player]:
    top = ranked[0].best_hand
    return [player for player in ranked if compare_hands(player.best_hand, top) == 0]


def _same_players(left: Sequence[Player], right: Sequence[Player]) -> bool:
    return len(left) == len(right) and all(a is b for a, b in zip(left, right))


def build_side_pots(players: Sequence[Player]) -> List[Tuple[int, List[Player]]]:
    """Layer the hand's contributions into (amount, eligible contenders) tiers.

    Tiers are ordered from the main pot upward. Neighbouring tiers with the
    same contenders are merged, and chips from a tier whose contributors all
    folded stay with the tier below it.
    """
    remaining: Dict[int, int] = {
        idx: player.total_bet_this_round
        for idx, player in enumerate(players)
        if player.total_bet_this_round > 0
    }

    pots: List[Tuple[int, List[Player]]] = []
    carry = 0
    while True:
        active = [idx for idx, amount in remaining.items() if amount > 0]
        if not active:
            break
        level = min(remaining[idx] for idx in active)
        tier = carry
        for idx in active:
            tier += level
            remaining[idx] -= level
        contenders = [players[idx] for idx in active if not players[idx].has_folded]
        if contenders and pots and _same_players(pots[-1][1], contenders):
            pots[-1] = (pots[-1][0] + tier, pots[-1][1])
            carry = 0
        elif contenders:
            pots.append((tier, contenders))
            carry = 0
        elif pots:
            amount, below = pots[-1]
            pots[-1] = (amount + tier, below)
        else:
            carry = tier
    if carry:
        everyone = [player for player in players if not player.has_folded]
        pots.append((carry, everyone))
    return pots


def distribute_pot(state: GameState, side_pots: bool = False) -> List[Player]:
    """Award ``state.pot`` and return the winning players.

    A lone remaining player takes everything without a hand evaluation.
    Otherwise the pot (or, with ``side_pots``, each contribution tier) goes
    to every player tied with the best hand.
    """
    contenders = [player for player in state.players if not player.has_folded]
    if not contenders:
        raise RuntimeError("No players left to award the pot to")

    if len(contenders) == 1:
        contenders[0].chips += state.pot
        return contenders

    ranked = rank_contenders(state.players, state.community_cards)
    if not side_pots:
        winners = best_of(ranked)
        split_pot(state.pot, winners)
        return winners

    tiers = build_side_pots(state.players)
    if not tiers:
        # Nobody put chips in (busted blinds, checked down): the best hand wins the empty pot.
        winners = best_of(ranked)
        split_pot(state.pot, winners)
        return winners
    paid = sum(amount for amount, _ in tiers)
    if paid != state.pot:
        raise RuntimeError(f"Side pots ({paid}) do not add up to the pot ({state.pot})")
    state.side_pot = sum(amount for amount, _ in tiers[1:])

    winners: List[Player] = []
    for amount, eligible in tiers:
        tier_ranked = [player for player in ranked if any(player is member for member in eligible)]
        tier_winners = best_of(tier_ranked)
        split_pot(amount, tier_winners)
        for player in tier_winners:
            if not any(player is seen for seen in winners):
                winners.append(player)
    return winners
