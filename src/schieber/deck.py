"""
Swiss deck: 36 cards (4 suits × 9 ranks).
Suits: Eicheln, Schellen, Rosen, Schilten. Ranks 6..10, Under, Ober, König, Ass.
Point values depend on the contract and live in ``schieber.ranking``.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum


class Suit(str, Enum):
    """Swiss-German suits, in canonical order (used for sorting hands)."""
    EICHELN = "eicheln"
    SCHELLEN = "schellen"
    ROSEN = "rosen"
    SCHILTEN = "schilten"


class Rank(str, Enum):
    """Ranks in canonical order 6 < 7 < ... < A (Weis sequences use this order)."""
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    UNDER = "U"
    OBER = "O"
    KING = "K"
    ACE = "A"


SUITS: tuple[Suit, ...] = tuple(Suit)
RANKS: tuple[Rank, ...] = tuple(Rank)

DECK_SIZE = 36
HAND_SIZE = 9

SUIT_NAMES = {
    Suit.EICHELN: "Eicheln",
    Suit.SCHELLEN: "Schellen",
    Suit.ROSEN: "Rosen",
    Suit.SCHILTEN: "Schilten",
}

RANK_NAMES = {
    Rank.SIX: "Sächsi",
    Rank.SEVEN: "Sibni",
    Rank.EIGHT: "Achti",
    Rank.NINE: "Nüni",
    Rank.TEN: "Zähni",
    Rank.UNDER: "Under",
    Rank.OBER: "Ober",
    Rank.KING: "König",
    Rank.ACE: "Ass",
}


def rank_index(rank: Rank) -> int:
    """Position of ``rank`` in canonical order (6 -> 0, A -> 8)."""
    return RANKS.index(rank)


@dataclass(frozen=True)
class Card:
    """
    A single Swiss card. Immutable; its identity is ``(suit, rank)``.

    Points and trump status are not stored here: they depend on the contract
    and are looked up with ``schieber.ranking``.
    """

    suit: Suit
    rank: Rank

    def __post_init__(self) -> None:
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Unknown suit: {self.suit!r}")
        if not isinstance(self.rank, Rank):
            raise ValueError(f"Unknown rank: {self.rank!r}")

    @property
    def id(self) -> str:
        """Opaque stable id, e.g. ``"eicheln-U"``."""
        return f"{self.suit.value}-{self.rank.value}"

    @property
    def display_name(self) -> str:
        return f"{RANK_NAMES[self.rank]} {SUIT_NAMES[self.suit]}"

    def sort_key(self) -> tuple[int, int]:
        return SUITS.index(self.suit), rank_index(self.rank)

    def __str__(self) -> str:
        return self.id

    def __repr__(self) -> str:
        return f"Card({self.id})"


def make_deck_36() -> list[Card]:
    """Build the full 36-card deck, suit-major in canonical order."""
    return [Card(suit, rank) for suit in SUITS for rank in RANKS]


_CARDS_BY_ID = {c.id: c for c in make_deck_36()}


def card_from_id(card_id: str) -> Card:
    """Look up a card by its id. Raises ValueError for unknown ids."""
    try:
        return _CARDS_BY_ID[card_id]
    except KeyError:
        raise ValueError(f"Unknown card id: {card_id!r}") from None


def shuffle(deck: list[Card], rng: random.Random | None = None) -> list[Card]:
    """
    Return a shuffled copy of ``deck`` (Fisher–Yates).

    ``rng`` can be injected for reproducible deals; it only needs to be
    unbiased, not cryptographically strong.
    """
    if rng is None:
        rng = random.Random()
    cards = list(deck)
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]
    return cards


def sort_hand(cards) -> tuple[Card, ...]:
    """Sort by suit, then rank (canonical order)."""
    return tuple(sorted(cards, key=Card.sort_key))
