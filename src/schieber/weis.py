"""
Weis (bonus declarations) detection and comparison.

Sequences of 3/4/5+ consecutive ranks in one suit score 20/50/100, four of a
kind scores 200 (Under), 150 (Nine) or 100 (Ace, King, Ober, Ten), and the
trump King + Ober ("Stöck") scores 20. Only the team holding the strictly best
single declaration scores, and then all of its players' declarations count.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Sequence

from .deck import RANKS, SUITS, Card, Rank, Suit, rank_index

SEQUENCE_POINTS = {3: 20, 4: 50}
LONG_SEQUENCE_POINTS = 100  # five or more

FOUR_OF_A_KIND_POINTS = {
    Rank.UNDER: 200,
    Rank.NINE: 150,
    Rank.ACE: 100,
    Rank.KING: 100,
    Rank.OBER: 100,
    Rank.TEN: 100,
}

STOECK_POINTS = 20

_FOUR_NAMES = {
    Rank.UNDER: "Vier Under",
    Rank.NINE: "Vier Nüni",
    Rank.ACE: "Vier Asse",
    Rank.KING: "Vier Könige",
    Rank.OBER: "Vier Ober",
    Rank.TEN: "Vier Zehner",
}


@dataclass(frozen=True)
class WeisDeclaration:
    """One Weis: its kind, the cards it is made of, and its value."""

    kind: str  # "sequence3" | "sequence4" | "sequence5plus" | "four_<rank>" | "stoeck"
    cards: tuple[Card, ...]
    points: int
    description: str = ""

    @property
    def is_sequence(self) -> bool:
        return self.kind.startswith("sequence")

    def top_rank_index(self) -> int:
        return max(rank_index(c.rank) for c in self.cards)


def _runs(cards: Sequence[Card]) -> list[list[Card]]:
    """Maximal runs of consecutive canonical ranks (cards of one suit)."""
    ordered = sorted(cards, key=lambda c: rank_index(c.rank))
    runs: list[list[Card]] = []
    current: list[Card] = []
    for card in ordered:
        if current and rank_index(card.rank) == rank_index(current[-1].rank) + 1:
            current.append(card)
        else:
            if current:
                runs.append(current)
            current = [card]
    if current:
        runs.append(current)
    return runs


def _sequence(run: list[Card], suit: Suit) -> WeisDeclaration:
    n = len(run)
    label = f"Sequenz {n} ({run[0].rank.value}-{run[-1].rank.value} {suit.value})"
    if n >= 5:
        return WeisDeclaration("sequence5plus", tuple(run), LONG_SEQUENCE_POINTS, label)
    return WeisDeclaration(f"sequence{n}", tuple(run), SEQUENCE_POINTS[n], label)


def detect_weis(hand: Iterable[Card], trump_suit: Suit | None) -> list[WeisDeclaration]:
    """
    All Weis declarations in ``hand`` for a contract whose trump suit is
    ``trump_suit`` (None for Obenabe/Undenufe).
    """
    cards = list(hand)
    found: list[WeisDeclaration] = []

    for suit in SUITS:
        for run in _runs([c for c in cards if c.suit == suit]):
            if len(run) >= 3:
                found.append(_sequence(run, suit))

    for rank in RANKS:
        same = [c for c in cards if c.rank == rank]
        if len(same) == 4 and rank in FOUR_OF_A_KIND_POINTS:
            found.append(
                WeisDeclaration(
                    f"four_{rank.value}",
                    tuple(same),
                    FOUR_OF_A_KIND_POINTS[rank],
                    _FOUR_NAMES[rank],
                )
            )

    if trump_suit is not None:
        king = Card(trump_suit, Rank.KING)
        ober = Card(trump_suit, Rank.OBER)
        if king in cards and ober in cards:
            found.append(
                WeisDeclaration("stoeck", (king, ober), STOECK_POINTS, f"Stöck ({trump_suit.value})")
            )

    return found


def is_weis_better(a: WeisDeclaration, b: WeisDeclaration) -> bool:
    """
    True if ``a`` strictly beats ``b``: more points; on equal points, between
    two sequences, the longer one, then the one with the higher top card.
    Equal-point ties of any other kind are not broken.
    """
    if a.points != b.points:
        return a.points > b.points
    if a.is_sequence and b.is_sequence:
        if len(a.cards) != len(b.cards):
            return len(a.cards) > len(b.cards)
        return a.top_rank_index() > b.top_rank_index()
    return False


def best_weis(declarations: Iterable[WeisDeclaration]) -> WeisDeclaration | None:
    best: WeisDeclaration | None = None
    for w in declarations:
        if best is None or is_weis_better(w, best):
            best = w
    return best


class TeamWeis(NamedTuple):
    """Weis points awarded per team, and each team's best declaration."""
    points: tuple[int, int]
    best: tuple[WeisDeclaration | None, WeisDeclaration | None]


def calculate_team_weis(players) -> TeamWeis:
    """
    Award Weis for a hand. ``players`` are objects with ``team`` (0/1) and
    ``weis`` (declarations) attributes.
    """
    per_team: list[list[WeisDeclaration]] = [[], []]
    for p in players:
        per_team[p.team].extend(p.weis)

    best0 = best_weis(per_team[0])
    best1 = best_weis(per_team[1])
    total0 = sum(w.points for w in per_team[0])
    total1 = sum(w.points for w in per_team[1])

    if best0 is not None and best1 is not None:
        if is_weis_better(best0, best1):
            points = (total0, 0)
        elif is_weis_better(best1, best0):
            points = (0, total1)
        else:
            points = (0, 0)
    elif best0 is not None:
        points = (total0, 0)
    elif best1 is not None:
        points = (0, total1)
    else:
        points = (0, 0)
    return TeamWeis(points=points, best=(best0, best1))
