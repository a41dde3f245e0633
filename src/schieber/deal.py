"""
Distribution (deal) and seating for four players.

Seats 0..3 play in order 0 -> 1 -> 2 -> 3 -> 0. Partners sit opposite:
team 0 = seats 0 and 2, team 1 = seats 1 and 3.
Cards are dealt in packets of 3, 2, then 4, starting with the forehand
(the seat after the dealer).
"""
from __future__ import annotations

from typing import NamedTuple

from .deck import DECK_SIZE, HAND_SIZE, Card, sort_hand
from .errors import InvariantViolation

NUM_SEATS = 4
DEAL_PACKETS = (3, 2, 4)


class Deal(NamedTuple):
    """Result of a deal: four hands of nine cards, indexed by seat."""
    hands: tuple[tuple[Card, ...], tuple[Card, ...], tuple[Card, ...], tuple[Card, ...]]
    forehand: int


def check_deck(deck: list[Card]) -> None:
    """Raise InvariantViolation unless ``deck`` holds exactly 36 distinct cards."""
    if len(deck) != DECK_SIZE:
        raise InvariantViolation(f"Deck must hold {DECK_SIZE} cards, got {len(deck)}")
    if len(set(deck)) != DECK_SIZE:
        raise InvariantViolation("Deck contains duplicate cards")


def deal_hands(deck: list[Card], forehand: int = 0) -> Deal:
    """
    Deal ``deck`` in its given order: 3-2-4 packets, forehand first.
    Hands are returned sorted by suit and rank.
    """
    check_deck(deck)
    hands: list[list[Card]] = [[], [], [], []]
    idx = 0
    for packet in DEAL_PACKETS:
        for offset in range(NUM_SEATS):
            seat = (forehand + offset) % NUM_SEATS
            hands[seat].extend(deck[idx:idx + packet])
            idx += packet
    assert idx == DECK_SIZE and all(len(h) == HAND_SIZE for h in hands)
    sorted_hands = [sort_hand(h) for h in hands]
    return Deal(
        hands=(sorted_hands[0], sorted_hands[1], sorted_hands[2], sorted_hands[3]),
        forehand=forehand,
    )


def next_dealer(dealer: int) -> int:
    """Dealer rotates in play direction (0 -> 1 -> 2 -> 3 -> 0)."""
    return (dealer + 1) % NUM_SEATS


def forehand_of(dealer: int) -> int:
    """The seat after the dealer has the first right to choose the contract."""
    return (dealer + 1) % NUM_SEATS


def partner_of(seat: int) -> int:
    return (seat + 2) % NUM_SEATS


def team_of(seat: int) -> int:
    """Team index by seat parity: 0 for seats 0/2, 1 for seats 1/3."""
    return seat % 2


def seats_of_team(team: int) -> tuple[int, int]:
    return (team, team + 2)
