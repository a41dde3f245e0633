"""
Immutable match state.

Every engine operation takes a ``MatchState`` and returns a new one built with
``dataclasses.replace``; collections are tuples, so states can be shared,
compared and kept as history without copying.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import NamedTuple

from .config import EngineConfig
from .contracts import Contract
from .deck import Card
from .errors import Rejection
from .weis import WeisDeclaration


class Phase(str, Enum):
    DEALING = "dealing"
    CONTRACT_SELECTION = "contract_selection"
    PLAYING = "playing"
    RESOLVING = "resolving"
    HAND_SETTLEMENT = "hand_settlement"
    HAND_FINISHED = "finished"
    MATCH_FINISHED = "match_finished"


class Play(NamedTuple):
    seat: int
    card: Card


@dataclass(frozen=True)
class CompletedTrick:
    plays: tuple[Play, ...]
    winner: int
    points: int  # card points plus last-trick bonus where applicable


@dataclass(frozen=True)
class PlayerState:
    """One seat: hand, cards captured this hand, and Weis fixed at contract time."""

    seat: int
    hand: tuple[Card, ...] = ()
    won: tuple[Card, ...] = ()
    weis: tuple[WeisDeclaration, ...] = ()

    @property
    def team(self) -> int:
        return self.seat % 2

    def without(self, card: Card) -> "PlayerState":
        hand = list(self.hand)
        hand.remove(card)
        return replace(self, hand=tuple(hand))


@dataclass(frozen=True)
class HandResult:
    """Summary of a settled hand, kept in ``MatchState.history``."""

    hand_number: int
    dealer: int
    declarer: int
    contract: Contract
    multiplier: int
    trick_points: tuple[int, int]
    weis_points: tuple[int, int]
    match_bonus_team: int | None
    scores: tuple[int, int]


def _empty_players() -> tuple[PlayerState, ...]:
    return tuple(PlayerState(seat=s) for s in range(4))


@dataclass(frozen=True)
class MatchState:
    """Full state of a match: the current hand plus cumulative scores."""

    config: EngineConfig = field(default_factory=EngineConfig)
    phase: Phase = Phase.DEALING
    hand_number: int = 0
    dealer: int | None = None
    forehand: int | None = None
    current_player: int | None = None
    trick_leader: int | None = None
    contract: Contract | None = None
    declarer: int | None = None
    pushed: bool = False
    players: tuple[PlayerState, ...] = field(default_factory=_empty_players)
    current_trick: tuple[Play, ...] = ()
    completed_tricks: tuple[CompletedTrick, ...] = ()
    trick_points: tuple[int, int] = (0, 0)
    weis_points: tuple[int, int] = (0, 0)
    hand_scores: tuple[int, int] = (0, 0)
    scores: tuple[int, int] = (0, 0)
    winner: int | None = None
    history: tuple[HandResult, ...] = ()

    def player(self, seat: int) -> PlayerState:
        return self.players[seat]

    def hand_of(self, seat: int) -> tuple[Card, ...]:
        return self.players[seat].hand

    def weis_of(self, seat: int) -> tuple[WeisDeclaration, ...]:
        return self.players[seat].weis

    @property
    def last_trick(self) -> CompletedTrick | None:
        return self.completed_tricks[-1] if self.completed_tricks else None

    @property
    def all_hands_empty(self) -> bool:
        return all(not p.hand for p in self.players)


class Transition(NamedTuple):
    """Result of a player action: the new state, and why it failed if it did."""
    state: MatchState
    ok: bool
    reason: Rejection | None = None
