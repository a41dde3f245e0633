"""
Hand settlement arithmetic: (trick points + Weis) × multiplier, plus the
match bonus for a team that took all 36 cards.
"""
from __future__ import annotations

from typing import NamedTuple

from .config import MultiplierScope

TeamScores = tuple[int, int]


class Settlement(NamedTuple):
    """Settled hand totals and the pieces they are made of."""
    scores: TeamScores
    multiplier: int
    match_bonus_team: int | None


def apply_multiplier(
    raw: TeamScores,
    multiplier: int,
    declarer_team: int,
    scope: MultiplierScope,
) -> TeamScores:
    """
    Multiply team totals by the contract multiplier.
    With ``MultiplierScope.DECLARER`` only the declaring team's total is
    multiplied; with ``MultiplierScope.BOTH`` both are.
    """
    if scope == MultiplierScope.BOTH:
        return (raw[0] * multiplier, raw[1] * multiplier)
    out = [raw[0], raw[1]]
    out[declarer_team] *= multiplier
    return (out[0], out[1])


def settle_scores(
    trick_points: TeamScores,
    weis_points: TeamScores,
    cards_won: TeamScores,
    multiplier: int,
    declarer_team: int,
    scope: MultiplierScope,
    match_bonus: int = 100,
) -> Settlement:
    """
    Settle one hand.

    trick_points: raw card points per team, last-trick bonus included.
    weis_points: awarded Weis per team (see ``weis.calculate_team_weis``).
    cards_won: number of cards each team captured (36 for a match).
    """
    raw = (trick_points[0] + weis_points[0], trick_points[1] + weis_points[1])
    scores = apply_multiplier(raw, multiplier, declarer_team, scope)

    bonus_team: int | None = None
    for team in (0, 1):
        if cards_won[team] == 36:
            bonus_team = team
    if bonus_team is not None:
        bonus = [0, 0]
        bonus[bonus_team] = match_bonus
        bonus_scores = apply_multiplier((bonus[0], bonus[1]), multiplier, declarer_team, scope)
        scores = (scores[0] + bonus_scores[0], scores[1] + bonus_scores[1])

    return Settlement(scores=scores, multiplier=multiplier, match_bonus_team=bonus_team)
