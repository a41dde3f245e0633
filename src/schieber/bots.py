"""
Pluggable bot strategies.

A bot answers the two decisions a seat faces:

    choose_contract(state, seat) -> Contract | SCHIEBEN
    choose_card(state, seat, legal) -> Card

``legal`` is ``engine.legal_cards(state, seat)``; a bot must return one of
those cards. Bots never mutate state; the caller feeds their answers to
``select_contract`` / ``play_card``.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Protocol, Sequence

from .agents import Policy
from .contracts import SCHIEBEN, Contract, ContractChoice
from .deck import SUITS, Card, Rank, Suit
from .env import (
    CONTRACT_ACTIONS,
    action_to_card,
    action_to_choice,
    encode_contract_observation,
    encode_play_observation,
    legal_action_mask_contract,
    legal_action_mask_play_from_hand_and_legal_cards,
)
from .play import beats, winning_play
from .ranking import card_points, is_trump, rank_strength
from .state import MatchState

log = logging.getLogger(__name__)


class Bot(Protocol):
    def choose_contract(self, state: MatchState, seat: int) -> ContractChoice:
        ...

    def choose_card(self, state: MatchState, seat: int, legal: Sequence[Card]) -> Card:
        ...


def _contract_options(state: MatchState) -> List[ContractChoice]:
    return [c for c in CONTRACT_ACTIONS if c is not SCHIEBEN or not state.pushed]


@dataclass
class RandomBot:
    """Uniform over the allowed contract choices and the legal cards."""

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def choose_contract(self, state: MatchState, seat: int) -> ContractChoice:
        return self._rng.choice(_contract_options(state))

    def choose_card(self, state: MatchState, seat: int, legal: Sequence[Card]) -> Card:
        if not legal:
            raise ValueError(f"No legal cards for seat {seat}")
        return self._rng.choice(list(legal))


# ---- Heuristic bot ----

# Per-card weight when judging a suit as trump.
_TRUMP_WEIGHT: Dict[Rank, int] = {
    Rank.UNDER: 5,
    Rank.ACE: 4,
    Rank.KING: 3,
    Rank.OBER: 3,
    Rank.TEN: 2,
    Rank.NINE: 1,
}
_HIGH = (Rank.ACE, Rank.KING, Rank.OBER)
_LOW = (Rank.SIX, Rank.SEVEN, Rank.EIGHT)


def _cheapness(card: Card, contract: Contract) -> tuple[int, int]:
    """Sort key: fewest points first, then weakest."""
    return card_points(card, contract), rank_strength(card, contract)


def winning_cards(legal: Sequence[Card], trick, contract: Contract) -> List[Card]:
    """Cards from ``legal`` that would take the trick as it stands now."""
    if not trick:
        return list(legal)
    led = trick[0][1].suit
    _, best = winning_play(trick, contract)
    return [c for c in legal if beats(c, best, led, contract)]


@dataclass
class HeuristicBot:
    """
    Simple rule-based player.

    Contract: picks the suit with the best count × 2 + honour weight;
    occasionally Obenabe with five high cards or Undenufe with five low ones;
    pushes weak hands to the partner.
    Play: leads high trumps or high side cards; last to play, wins as cheaply
    as possible or throws the cheapest card; lets a winning partner have the
    trick; otherwise wins without spending the trump Under when it can.
    """

    seed: int | None = None
    obenabe_rate: float = 0.1
    undenufe_rate: float = 0.05

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def choose_contract(self, state: MatchState, seat: int) -> ContractChoice:
        hand = state.hand_of(seat)
        counts: Dict[Suit, int] = {s: 0 for s in SUITS}
        weight: Dict[Suit, int] = {s: 0 for s in SUITS}
        for c in hand:
            counts[c.suit] += 1
            weight[c.suit] += _TRUMP_WEIGHT.get(c.rank, 0)

        best_suit = SUITS[0]
        best_score = 0
        for suit in SUITS:
            score = counts[suit] * 2 + weight[suit]
            if score > best_score:
                best_suit, best_score = suit, score

        high = sum(1 for c in hand if c.rank in _HIGH)
        low = sum(1 for c in hand if c.rank in _LOW)
        roll = self._rng.random()
        if high >= 5 and roll < self.obenabe_rate:
            return Contract.OBENABE
        if low >= 5 and roll < self.undenufe_rate:
            return Contract.UNDENUFE

        if not state.pushed:
            strength = sum(weight.values()) + high * 2 - low
            push_prob = 0.2
            if counts[best_suit] >= 4 or best_score >= 10:
                push_prob = 0.05
            if low >= 6:
                push_prob = 0.35
            if strength < 6 and self._rng.random() < push_prob:
                return SCHIEBEN
        return Contract(best_suit.value)

    def choose_card(self, state: MatchState, seat: int, legal: Sequence[Card]) -> Card:
        if not legal:
            raise ValueError(f"No legal cards for seat {seat}")
        contract = state.contract
        assert contract is not None
        trick = state.current_trick
        legal = list(legal)

        if not trick:
            trumps = [c for c in legal if is_trump(c, contract)]
            strong = [c for c in trumps if c.rank in _HIGH]
            if strong:
                return self._rng.choice(strong)
            if len(trumps) <= 2:
                for c in trumps:
                    if c.rank == Rank.UNDER:
                        return c
            high = [c for c in legal if not is_trump(c, contract) and c.rank in _HIGH]
            if high:
                return self._rng.choice(high)
            return self._rng.choice(legal)

        winners = winning_cards(legal, trick, contract)
        if len(trick) == 3:
            if winners:
                return min(winners, key=lambda c: _cheapness(c, contract))
            return min(legal, key=lambda c: _cheapness(c, contract))

        partner = (seat + 2) % 4
        if winning_play(trick, contract)[0] == partner:
            side = [c for c in legal if not is_trump(c, contract)]
            return min(side or legal, key=lambda c: _cheapness(c, contract))

        if winners:
            keep_under = [c for c in winners if c.rank != Rank.UNDER]
            return min(keep_under or winners, key=lambda c: rank_strength(c, contract))
        return self._rng.choice(legal)


# ---- Policy-backed bot ----


@dataclass
class PolicyBot:
    """
    Adapts a ``Policy`` (flat observation + mask → action index) to the bot
    interface. An illegal action from the policy is logged and replaced by
    the first legal one.
    """

    policy: Policy

    def choose_contract(self, state: MatchState, seat: int) -> ContractChoice:
        obs = encode_contract_observation(state, seat)
        mask = legal_action_mask_contract(state)
        action = self.policy.act(obs, mask)
        if not (0 <= action < len(mask) and mask[action]):
            log.warning("Policy chose illegal contract action %d for seat %d", action, seat)
            action = mask.index(True)
        return action_to_choice(action)

    def choose_card(self, state: MatchState, seat: int, legal: Sequence[Card]) -> Card:
        if not legal:
            raise ValueError(f"No legal cards for seat {seat}")
        obs = encode_play_observation(state, seat)
        mask = legal_action_mask_play_from_hand_and_legal_cards(state.hand_of(seat), legal)
        action = self.policy.act(obs, mask)
        if not (0 <= action < len(mask) and mask[action]):
            log.warning("Policy chose illegal card action %d for seat %d", action, seat)
            action = mask.index(True)
        return action_to_card(action)


__all__ = ["Bot", "RandomBot", "HeuristicBot", "PolicyBot", "winning_cards"]
