"""
Schieber state machine: deal → contract selection → 9 tricks → settlement,
repeated until a team reaches the target score.

All operations are pure: they take a ``MatchState`` and return a new one.
Player actions (``select_contract``, ``play_card``) return a ``Transition``
and never raise for rule violations; the state is returned unchanged with
``ok=False`` and a ``Rejection``. Operations the caller sequences itself
(``start_hand``, ``resolve_trick``, ``settle_hand``) raise ``PhaseError``
when called out of order.

Phases:
    dealing -> contract_selection -> playing <-> resolving
            -> hand_settlement -> finished -> (start_hand) ... -> match_finished
"""
from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Sequence

from .config import EngineConfig
from .contracts import SCHIEBEN, Contract, ContractChoice, parse_choice
from .deal import deal_hands, forehand_of, next_dealer, partner_of, team_of
from .deck import HAND_SIZE, Card, card_from_id, make_deck_36, shuffle
from .errors import InvariantViolation, PhaseError, Rejection
from .play import legal_plays, trick_points, trick_winner
from .scoring import settle_scores
from .state import CompletedTrick, HandResult, MatchState, Phase, Play, PlayerState, Transition
from .weis import calculate_team_weis, detect_weis

log = logging.getLogger(__name__)

TRICKS_PER_HAND = HAND_SIZE


def _reject(state: MatchState, reason: Rejection, detail: str) -> Transition:
    log.warning("Rejected (%s): %s", reason.value, detail)
    return Transition(state, False, reason)


def _require_phase(state: MatchState, operation: str, *phases: Phase) -> None:
    if state.phase not in phases:
        raise PhaseError(operation, state.phase.value, tuple(p.value for p in phases))


def _with_player(players: tuple[PlayerState, ...], updated: PlayerState) -> tuple[PlayerState, ...]:
    return tuple(updated if p.seat == updated.seat else p for p in players)


# ---- Match / hand lifecycle ----


def create_match(config: EngineConfig | None = None) -> MatchState:
    """A new match with zero scores, waiting for its first hand."""
    return MatchState(config=config or EngineConfig())


def start_hand(
    state: MatchState,
    rng: random.Random | None = None,
    deck: Sequence[Card] | None = None,
) -> MatchState:
    """
    Rotate the dealer, deal a fresh hand and open contract selection.

    The first hand is dealt by ``config.first_dealer``; every later hand by the
    next seat. ``deck`` may be given to deal a pre-arranged order (it is not
    shuffled); otherwise a new deck is shuffled with ``rng``.
    """
    _require_phase(state, "start_hand", Phase.DEALING, Phase.HAND_FINISHED)
    dealer = state.config.first_dealer if state.dealer is None else next_dealer(state.dealer)
    forehand = forehand_of(dealer)
    cards = list(deck) if deck is not None else shuffle(make_deck_36(), rng)
    deal = deal_hands(cards, forehand=forehand)
    players = tuple(PlayerState(seat=s, hand=deal.hands[s]) for s in range(4))

    log.debug("Hand %d: dealer=%d forehand=%d", state.hand_number + 1, dealer, forehand)
    return replace(
        state,
        phase=Phase.CONTRACT_SELECTION,
        hand_number=state.hand_number + 1,
        dealer=dealer,
        forehand=forehand,
        current_player=forehand,
        trick_leader=None,
        contract=None,
        declarer=None,
        pushed=False,
        players=players,
        current_trick=(),
        completed_tricks=(),
        trick_points=(0, 0),
        weis_points=(0, 0),
        hand_scores=(0, 0),
    )


def select_contract(state: MatchState, seat: int, choice: ContractChoice | str) -> Transition:
    """
    Choose the contract, or push it to the partner with ``SCHIEBEN`` (once).

    On a real contract, every player's Weis is detected from their full hand
    and the dealer leads the first trick.
    """
    if state.phase != Phase.CONTRACT_SELECTION:
        return _reject(state, Rejection.WRONG_PHASE, f"select_contract in phase {state.phase.value}")
    if seat != state.current_player:
        return _reject(
            state, Rejection.NOT_YOUR_TURN, f"seat {seat} chose, current player is {state.current_player}"
        )
    if isinstance(choice, str) and not isinstance(choice, Contract):
        try:
            choice = parse_choice(choice)
        except ValueError:
            return _reject(state, Rejection.UNKNOWN_CONTRACT, f"unknown contract {choice!r}")

    if choice is SCHIEBEN:
        if state.pushed:
            return _reject(state, Rejection.ALREADY_PUSHED, f"seat {seat} cannot push back")
        partner = partner_of(seat)
        log.debug("Seat %d pushes (schieben) to seat %d", seat, partner)
        return Transition(replace(state, pushed=True, current_player=partner), True)

    if not isinstance(choice, Contract):
        return _reject(state, Rejection.UNKNOWN_CONTRACT, f"unknown contract {choice!r}")

    trump = choice.trump_suit
    players = tuple(replace(p, weis=tuple(detect_weis(p.hand, trump))) for p in state.players)
    team_weis = calculate_team_weis(players)
    dealer = state.dealer
    log.info(
        "Hand %d: seat %d declares %s (x%d)", state.hand_number, seat, choice.value, choice.multiplier
    )
    new_state = replace(
        state,
        phase=Phase.PLAYING,
        contract=choice,
        declarer=seat,
        players=players,
        weis_points=team_weis.points,
        current_player=dealer,
        trick_leader=dealer,
    )
    return Transition(new_state, True)


# ---- Trick play ----


def legal_cards(state: MatchState, seat: int) -> list[Card]:
    """
    Cards ``seat`` may play right now. Empty outside the playing phase or when
    it is not this seat's turn.
    """
    if state.phase != Phase.PLAYING or seat != state.current_player or state.contract is None:
        return []
    return legal_plays(
        state.players[seat].hand,
        state.current_trick,
        state.contract,
        state.config.follow_rule,
    )


def play_card(state: MatchState, seat: int, card: Card | str) -> Transition:
    """
    Play ``card`` (a Card or its id) for ``seat``.

    After the fourth card the phase becomes ``resolving``; the trick stays on
    the table until ``resolve_trick`` is called.
    """
    if state.phase != Phase.PLAYING:
        return _reject(state, Rejection.WRONG_PHASE, f"play_card in phase {state.phase.value}")
    if seat != state.current_player:
        return _reject(
            state, Rejection.NOT_YOUR_TURN, f"seat {seat} played, current player is {state.current_player}"
        )
    if len(state.current_trick) >= 4:
        raise InvariantViolation(f"Trick already holds {len(state.current_trick)} cards while playing")
    if isinstance(card, str):
        try:
            card = card_from_id(card)
        except ValueError:
            return _reject(state, Rejection.CARD_NOT_IN_HAND, f"unknown card id {card!r}")

    player = state.players[seat]
    if card not in player.hand:
        return _reject(state, Rejection.CARD_NOT_IN_HAND, f"seat {seat} does not hold {card}")
    if card not in legal_cards(state, seat):
        return _reject(
            state,
            Rejection.ILLEGAL_CARD,
            f"seat {seat} played {card}; trick={[str(p.card) for p in state.current_trick]}",
        )

    trick = state.current_trick + (Play(seat, card),)
    players = _with_player(state.players, player.without(card))
    if len(trick) == 4:
        return Transition(
            replace(state, players=players, current_trick=trick, phase=Phase.RESOLVING, current_player=None),
            True,
        )
    return Transition(
        replace(state, players=players, current_trick=trick, current_player=(seat + 1) % 4),
        True,
    )


def peek_trick_winner(state: MatchState) -> int | None:
    """Seat winning the full trick on the table, without resolving it."""
    if len(state.current_trick) != 4 or state.contract is None:
        return None
    return trick_winner(state.current_trick, state.contract)


def resolve_trick(state: MatchState) -> MatchState:
    """
    Score the full trick on the table: the winner's team gets its points
    (plus the last-trick bonus on the ninth trick) and the winner leads next.
    After the ninth trick the hand is settled.
    """
    _require_phase(state, "resolve_trick", Phase.RESOLVING)
    trick = state.current_trick
    if len(trick) != 4:
        raise InvariantViolation(f"Cannot resolve a trick of {len(trick)} cards")
    assert state.contract is not None

    winner = trick_winner(trick, state.contract)
    is_last = len(state.completed_tricks) + 1 == TRICKS_PER_HAND
    points = trick_points(trick, state.contract)
    if is_last:
        points += state.config.last_trick_bonus

    team = team_of(winner)
    totals = list(state.trick_points)
    totals[team] += points
    winner_state = state.players[winner]
    players = _with_player(
        state.players, replace(winner_state, won=winner_state.won + tuple(p.card for p in trick))
    )
    log.debug("Trick %d won by seat %d for %d points", len(state.completed_tricks) + 1, winner, points)

    new_state = replace(
        state,
        players=players,
        current_trick=(),
        completed_tricks=state.completed_tricks + (CompletedTrick(trick, winner, points),),
        trick_points=(totals[0], totals[1]),
        current_player=winner,
        trick_leader=winner,
    )
    if new_state.all_hands_empty:
        if len(new_state.completed_tricks) != TRICKS_PER_HAND:
            raise InvariantViolation(
                f"Hands empty after {len(new_state.completed_tricks)} tricks"
            )
        return settle_hand(replace(new_state, phase=Phase.HAND_SETTLEMENT, current_player=None))
    return replace(new_state, phase=Phase.PLAYING)


# ---- Settlement ----


def settle_hand(state: MatchState) -> MatchState:
    """
    Fold the finished hand into the match score: trick points plus awarded
    Weis, the contract multiplier, and the match bonus for taking every card.
    Ends the match once a team reaches ``config.points_to_win``.
    """
    _require_phase(state, "settle_hand", Phase.HAND_SETTLEMENT)
    if not state.all_hands_empty:
        raise InvariantViolation("Cannot settle a hand while players still hold cards")
    if len(state.completed_tricks) != TRICKS_PER_HAND:
        raise InvariantViolation(f"Cannot settle after {len(state.completed_tricks)} tricks")
    assert state.contract is not None and state.declarer is not None and state.dealer is not None

    cfg = state.config
    team_weis = calculate_team_weis(state.players)
    cards_won = [0, 0]
    for p in state.players:
        cards_won[p.team] += len(p.won)
    settlement = settle_scores(
        trick_points=state.trick_points,
        weis_points=team_weis.points,
        cards_won=(cards_won[0], cards_won[1]),
        multiplier=state.contract.multiplier,
        declarer_team=team_of(state.declarer),
        scope=cfg.multiplier_scope,
        match_bonus=cfg.match_bonus,
    )
    scores = (state.scores[0] + settlement.scores[0], state.scores[1] + settlement.scores[1])
    result = HandResult(
        hand_number=state.hand_number,
        dealer=state.dealer,
        declarer=state.declarer,
        contract=state.contract,
        multiplier=settlement.multiplier,
        trick_points=state.trick_points,
        weis_points=team_weis.points,
        match_bonus_team=settlement.match_bonus_team,
        scores=settlement.scores,
    )

    phase = Phase.HAND_FINISHED
    winner: int | None = None
    if max(scores) >= cfg.points_to_win:
        phase = Phase.MATCH_FINISHED
        if scores[0] != scores[1]:
            winner = 0 if scores[0] > scores[1] else 1
        log.info("Match finished: scores=%s winner=%s", scores, winner)
    log.info(
        "Hand %d settled: trick=%s weis=%s hand=%s total=%s",
        state.hand_number, state.trick_points, team_weis.points, settlement.scores, scores,
    )
    return replace(
        state,
        phase=phase,
        weis_points=team_weis.points,
        hand_scores=settlement.scores,
        scores=scores,
        winner=winner,
        history=state.history + (result,),
    )


# ---- Read-only helpers ----


def is_match_over(state: MatchState) -> bool:
    return state.phase == Phase.MATCH_FINISHED


__all__ = [
    "create_match",
    "start_hand",
    "select_contract",
    "legal_cards",
    "play_card",
    "peek_trick_winner",
    "resolve_trick",
    "settle_hand",
    "is_match_over",
    "team_of",
    "TRICKS_PER_HAND",
]
