"""
Rank order and point tables keyed by contract.

Every contract distributes exactly 152 card points over the 36 cards; the
winner of the last trick gets 5 more, so a hand is always worth 157.
"""
from __future__ import annotations

from typing import Iterable

from .contracts import Contract
from .deck import Card, Rank

R = Rank

# Strongest first.
TRUMP_ORDER = (R.UNDER, R.NINE, R.ACE, R.KING, R.OBER, R.TEN, R.EIGHT, R.SEVEN, R.SIX)
NORMAL_ORDER = (R.ACE, R.KING, R.OBER, R.UNDER, R.TEN, R.NINE, R.EIGHT, R.SEVEN, R.SIX)
OBENABE_ORDER = NORMAL_ORDER
UNDENUFE_ORDER = (R.SIX, R.SEVEN, R.EIGHT, R.NINE, R.TEN, R.UNDER, R.OBER, R.KING, R.ACE)

TRUMP_POINTS = {
    R.UNDER: 20, R.NINE: 14, R.ACE: 11, R.KING: 4, R.OBER: 3, R.TEN: 10,
    R.EIGHT: 0, R.SEVEN: 0, R.SIX: 0,
}
NORMAL_POINTS = {
    R.ACE: 11, R.TEN: 10, R.KING: 4, R.OBER: 3, R.UNDER: 2,
    R.NINE: 0, R.EIGHT: 0, R.SEVEN: 0, R.SIX: 0,
}
OBENABE_POINTS = {
    R.ACE: 11, R.KING: 4, R.OBER: 3, R.UNDER: 2, R.TEN: 10, R.EIGHT: 8,
    R.NINE: 0, R.SEVEN: 0, R.SIX: 0,
}
UNDENUFE_POINTS = {
    R.SIX: 11, R.EIGHT: 8, R.TEN: 10, R.UNDER: 2, R.OBER: 3, R.KING: 4,
    R.SEVEN: 0, R.NINE: 0, R.ACE: 0,
}

CARD_POINTS_TOTAL = 152


def is_trump(card: Card, contract: Contract | None) -> bool:
    """True if the contract has a trump suit and the card belongs to it."""
    if contract is None:
        return False
    trump = contract.trump_suit
    return trump is not None and card.suit == trump


def rank_order(card: Card, contract: Contract) -> tuple[Rank, ...]:
    """The strongest-first order that applies to ``card`` under ``contract``."""
    if contract == Contract.OBENABE:
        return OBENABE_ORDER
    if contract == Contract.UNDENUFE:
        return UNDENUFE_ORDER
    return TRUMP_ORDER if is_trump(card, contract) else NORMAL_ORDER


def rank_strength(card: Card, contract: Contract) -> int:
    """Strength within the applicable order: 8 for the strongest rank, 0 for the weakest."""
    order = rank_order(card, contract)
    return len(order) - 1 - order.index(card.rank)


def card_points(card: Card, contract: Contract) -> int:
    """Point value of ``card`` under ``contract``."""
    if contract == Contract.OBENABE:
        return OBENABE_POINTS[card.rank]
    if contract == Contract.UNDENUFE:
        return UNDENUFE_POINTS[card.rank]
    if is_trump(card, contract):
        return TRUMP_POINTS[card.rank]
    return NORMAL_POINTS[card.rank]


def cards_points(cards: Iterable[Card], contract: Contract) -> int:
    return sum(card_points(c, contract) for c in cards)
