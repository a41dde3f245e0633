"""
Drivers that play hands and matches with bots: deal → contract → 9 tricks → settle.

The engine is driven only through its public operations, so these loops double
as a reference for hosts sequencing the calls themselves.
"""
from __future__ import annotations

import logging
import random
from typing import List, Sequence

from .bots import Bot
from .config import EngineConfig
from .deck import Card
from .engine import (
    create_match,
    legal_cards,
    play_card,
    resolve_trick,
    select_contract,
    start_hand,
)
from .errors import InvariantViolation
from .ranking import CARD_POINTS_TOTAL
from .state import HandResult, MatchState, Phase

log = logging.getLogger(__name__)


def _check_bots(bots: Sequence[Bot]) -> None:
    if len(bots) != 4:
        raise ValueError(f"Need exactly 4 bots, got {len(bots)}")


def play_hand(
    state: MatchState,
    bots: Sequence[Bot],
    rng: random.Random | None = None,
    deck: Sequence[Card] | None = None,
) -> MatchState:
    """
    Deal the next hand of ``state`` and play it to settlement with ``bots``
    (indexed by seat). Returns the state in phase ``finished`` or
    ``match_finished``. A bot answer the engine rejects raises ValueError.
    """
    _check_bots(bots)
    state = start_hand(state, rng=rng, deck=deck)

    while state.phase == Phase.CONTRACT_SELECTION:
        seat = state.current_player
        assert seat is not None
        choice = bots[seat].choose_contract(state, seat)
        result = select_contract(state, seat, choice)
        if not result.ok:
            raise ValueError(f"Seat {seat} made a rejected contract choice {choice!r}: {result.reason}")
        state = result.state

    while state.phase in (Phase.PLAYING, Phase.RESOLVING):
        if state.phase == Phase.RESOLVING:
            state = resolve_trick(state)
            continue
        seat = state.current_player
        assert seat is not None
        legal = legal_cards(state, seat)
        card = bots[seat].choose_card(state, seat, legal)
        result = play_card(state, seat, card)
        if not result.ok:
            raise ValueError(f"Illegal play {card}; legal {[str(c) for c in legal]}")
        state = result.state

    return state


def run_match(
    bots: Sequence[Bot],
    config: EngineConfig | None = None,
    rng: random.Random | None = None,
    max_hands: int | None = None,
) -> MatchState:
    """
    Play hands until a team reaches ``config.points_to_win`` (or ``max_hands``
    hands have been played). Dealer rotates 0 -> 1 -> 2 -> 3 -> 0 from
    ``config.first_dealer``.
    """
    _check_bots(bots)
    if rng is None:
        rng = random.Random()
    state = create_match(config)
    while state.phase != Phase.MATCH_FINISHED:
        if max_hands is not None and state.hand_number >= max_hands:
            break
        state = play_hand(state, bots, rng=rng)
    log.info("Match over after %d hands: scores=%s winner=%s", state.hand_number, state.scores, state.winner)
    return state


def simulate_hands(
    num_hands: int,
    bots: Sequence[Bot],
    config: EngineConfig | None = None,
    rng: random.Random | None = None,
) -> List[HandResult]:
    """
    Play ``num_hands`` hands (starting a new match whenever one ends) and
    return every ``HandResult``. Each hand's raw trick points must add up to
    152 plus the last-trick bonus (157 by default), else InvariantViolation.
    """
    _check_bots(bots)
    if rng is None:
        rng = random.Random()
    results: List[HandResult] = []
    state = create_match(config)
    while len(results) < num_hands:
        if state.phase == Phase.MATCH_FINISHED:
            state = create_match(config)
        state = play_hand(state, bots, rng=rng)
        hand = state.history[-1]
        total = sum(hand.trick_points)
        expected = CARD_POINTS_TOTAL + state.config.last_trick_bonus
        if total != expected:
            raise InvariantViolation(f"Hand {hand.hand_number} distributed {total} points, expected {expected}")
        results.append(hand)
    return results


__all__ = ["play_hand", "run_match", "simulate_hands"]
