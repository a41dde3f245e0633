"""
Trick-taking: legal moves, card comparison, trick winner.

Must follow the lead suit when holding it; otherwise any card may be played.
Trump beats non-trump; a card of the lead suit beats an off-suit card;
otherwise the stronger rank under the contract wins.
"""
from __future__ import annotations

from typing import Sequence

from .config import FollowRule
from .contracts import Contract
from .deck import Card, Suit
from .ranking import card_points, is_trump, rank_strength

Trick = Sequence[tuple[int, Card]]


def lead_suit(trick: Trick) -> Suit | None:
    """Suit of the first card in the trick, None for an empty trick."""
    if not trick:
        return None
    return trick[0][1].suit


def has_suit(hand: Sequence[Card], suit: Suit) -> bool:
    return any(c.suit == suit for c in hand)


def legal_plays(
    hand: Sequence[Card],
    trick: Trick,
    contract: Contract,
    follow_rule: FollowRule = FollowRule.STRICT,
) -> list[Card]:
    """
    Cards from ``hand`` that may be played onto ``trick``.
    Never empty while ``hand`` is non-empty.
    """
    led = lead_suit(trick)
    if led is None:
        return list(hand)
    following = [c for c in hand if c.suit == led]
    if not following:
        return list(hand)
    if follow_rule == FollowRule.TRUMP_ALLOWED:
        return [c for c in hand if c.suit == led or is_trump(c, contract)]
    return following


def beats(card: Card, other: Card, led: Suit, contract: Contract) -> bool:
    """True if ``card`` beats the currently best ``other`` in a trick led with ``led``."""
    card_trump = is_trump(card, contract)
    other_trump = is_trump(other, contract)
    if card_trump != other_trump:
        return card_trump
    if not card_trump:
        card_follows = card.suit == led
        other_follows = other.suit == led
        if card_follows != other_follows:
            return card_follows
        if not card_follows:
            # Two discards: neither can take the trick.
            return False
    return rank_strength(card, contract) > rank_strength(other, contract)


def winning_play(trick: Trick, contract: Contract) -> tuple[int, Card]:
    """The (seat, card) pair currently taking the trick."""
    if not trick:
        raise ValueError("Empty trick has no winner")
    led = trick[0][1].suit
    best = trick[0]
    for play in trick[1:]:
        if beats(play[1], best[1], led, contract):
            best = play
    return best


def trick_winner(trick: Trick, contract: Contract) -> int:
    """Seat of the player who wins the trick."""
    return winning_play(trick, contract)[0]


def trick_points(trick: Trick, contract: Contract) -> int:
    """Card points in the trick (without the last-trick bonus)."""
    return sum(card_points(c, contract) for _, c in trick)
