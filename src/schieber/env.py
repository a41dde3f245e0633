"""
Observation / action encoding for Schieber.

Flat observations that:
- Represent the full hand of the acting seat, card-by-card.
- Encode what is on the table, what each team has captured, and who declared.
- Encode the contract-selection context (dealer, whether the choice was pushed).

Global action space (size NUM_ACTIONS = 43):
  - 0..6   : contract actions (Eicheln, Schellen, Rosen, Schilten, Obenabe,
             Undenufe, Schieben)
  - 7..42  : card actions, one per card in ``make_deck_36()`` order

This module only needs the engine; the env wrapper and neural policies build on it.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from . import engine
from .contracts import SCHIEBEN, Contract, ContractChoice
from .deck import RANKS, SUITS, Card, make_deck_36
from .state import MatchState, Phase

NUM_CARDS: int = 36
CONTRACT_ACTIONS: tuple[ContractChoice, ...] = tuple(Contract) + (SCHIEBEN,)
NUM_CONTRACT_ACTIONS: int = len(CONTRACT_ACTIONS)  # 7
NUM_CARD_ACTIONS: int = NUM_CARDS
NUM_ACTIONS: int = NUM_CONTRACT_ACTIONS + NUM_CARD_ACTIONS  # 7 + 36 = 43

CONTRACT_OBS_SIZE: int = NUM_CARDS + 4 + 4 + 1  # hand, seat, dealer, pushed
PLAY_OBS_SIZE: int = 4 * NUM_CARDS + 4 + 4 + 4 + len(Contract) + 1
OBS_DIM: int = max(CONTRACT_OBS_SIZE, PLAY_OBS_SIZE)

_DECK = make_deck_36()
_CONTRACTS = tuple(Contract)


def _one_hot(index: int | None, size: int) -> List[int]:
    vec = [0] * size
    if index is None:
        return vec
    if 0 <= index < size:
        vec[index] = 1
    return vec


def card_index(card: Card) -> int:
    """
    Stable index 0..35 matching ``make_deck_36()``: suit-major, then rank
    6..A. Neighbouring indices within a suit are neighbouring ranks, which is
    what Weis sequences are made of.
    """
    return SUITS.index(card.suit) * len(RANKS) + RANKS.index(card.rank)


def index_to_card(index: int) -> Card:
    if not 0 <= index < NUM_CARDS:
        raise ValueError(f"Card index out of range: {index}")
    return _DECK[index]


def encode_card_set(cards: Iterable[Card]) -> List[int]:
    """Binary 36-dim vector: 1 if the card is present, else 0."""
    vec = [0] * NUM_CARDS
    for c in cards:
        vec[card_index(c)] = 1
    return vec


def encode_hand(hand: Iterable[Card]) -> List[int]:
    """Alias for encode_card_set when used specifically for a player's hand."""
    return encode_card_set(hand)


def pad_observation(obs: Sequence[float], target_dim: int = OBS_DIM) -> List[float]:
    """
    Pad or truncate an observation to ``target_dim``.

    Contract observations are shorter than play observations; a network
    expects one fixed size, so shorter vectors are zero-padded.
    """
    if len(obs) == target_dim:
        return list(obs)
    if len(obs) > target_dim:
        return list(obs)[:target_dim]
    return list(obs) + [0.0] * (target_dim - len(obs))


# ---- Contract-selection observation ----


def encode_contract_observation(state: MatchState, seat: int) -> List[float]:
    """
    Contract-selection encoding:

    - 36 card bits: the seat's hand
    - 4 bits: seat index
    - 4 bits: dealer index
    - 1 bit: the choice was pushed to this seat (schieben already used)
    """
    vec_int: List[int] = encode_hand(state.hand_of(seat))
    vec_int.extend(_one_hot(seat, 4))
    vec_int.extend(_one_hot(state.dealer, 4))
    vec_int.append(1 if state.pushed else 0)
    assert len(vec_int) == CONTRACT_OBS_SIZE
    return [float(x) for x in vec_int]


def legal_action_mask_contract(state: MatchState) -> List[bool]:
    """
    Legal-action mask for contract selection over the global action space.
    All six contracts are always legal; Schieben only while it is unused.
    """
    mask = [False] * NUM_ACTIONS
    for i, choice in enumerate(CONTRACT_ACTIONS):
        mask[i] = choice is not SCHIEBEN or not state.pushed
    return mask


# ---- Play-phase observation ----


def encode_play_observation(state: MatchState, seat: int) -> List[float]:
    """
    Play-phase encoding:

    - 4 × 36 card bits:
        [0:36)    : the seat's hand
        [36:72)   : current trick (set of cards, order ignored)
        [72:108)  : cards captured by the seat's team this hand
        [108:144) : cards captured by the other team this hand
    - Metadata (one-hot): seat (4), declarer (4), trick leader (4),
      contract (6), plus 1 bit for "the contract was pushed".
    """
    team = seat % 2
    own_won: List[Card] = []
    other_won: List[Card] = []
    for p in state.players:
        (own_won if p.team == team else other_won).extend(p.won)

    vec_int: List[int] = []
    vec_int.extend(encode_hand(state.hand_of(seat)))
    vec_int.extend(encode_card_set(c for _, c in state.current_trick))
    vec_int.extend(encode_card_set(own_won))
    vec_int.extend(encode_card_set(other_won))
    vec_int.extend(_one_hot(seat, 4))
    vec_int.extend(_one_hot(state.declarer, 4))
    vec_int.extend(_one_hot(state.trick_leader, 4))
    c_idx = _CONTRACTS.index(state.contract) if state.contract is not None else None
    vec_int.extend(_one_hot(c_idx, len(_CONTRACTS)))
    vec_int.append(1 if state.pushed else 0)
    assert len(vec_int) == PLAY_OBS_SIZE
    return [float(x) for x in vec_int]


def legal_action_mask_play_from_hand_and_legal_cards(
    hand: Sequence[Card],
    legal_cards: Sequence[Card],
) -> List[bool]:
    """
    Legal-action mask for the play phase: contract actions are always False,
    a card action is True iff the card is both in ``hand`` and legal.
    """
    mask = [False] * NUM_ACTIONS
    legal_set = set(legal_cards)
    for c in hand:
        if c in legal_set:
            mask[NUM_CONTRACT_ACTIONS + card_index(c)] = True
    return mask


# ---- Dispatch by phase ----


def encode_observation(state: MatchState, seat: int) -> List[float]:
    """Observation for whatever decision ``seat`` faces in ``state``."""
    if state.phase == Phase.CONTRACT_SELECTION:
        return encode_contract_observation(state, seat)
    return encode_play_observation(state, seat)


def legal_action_mask(state: MatchState, seat: int) -> List[bool]:
    """Mask for ``seat``'s current decision; all False when it is not their turn."""
    if state.current_player != seat:
        return [False] * NUM_ACTIONS
    if state.phase == Phase.CONTRACT_SELECTION:
        return legal_action_mask_contract(state)
    if state.phase == Phase.PLAYING:
        return legal_action_mask_play_from_hand_and_legal_cards(
            state.hand_of(seat), engine.legal_cards(state, seat)
        )
    return [False] * NUM_ACTIONS


# ---- Action <-> move conversion ----


def choice_to_action(choice: ContractChoice) -> int:
    return CONTRACT_ACTIONS.index(choice)


def action_to_choice(action: int) -> ContractChoice:
    if not 0 <= action < NUM_CONTRACT_ACTIONS:
        raise ValueError(f"Invalid contract action {action}")
    return CONTRACT_ACTIONS[action]


def card_to_action(card: Card) -> int:
    return NUM_CONTRACT_ACTIONS + card_index(card)


def action_to_card(action: int) -> Card:
    if not NUM_CONTRACT_ACTIONS <= action < NUM_ACTIONS:
        raise ValueError(f"Invalid play action {action}")
    return index_to_card(action - NUM_CONTRACT_ACTIONS)


__all__ = [
    "NUM_CARDS",
    "NUM_ACTIONS",
    "NUM_CONTRACT_ACTIONS",
    "NUM_CARD_ACTIONS",
    "CONTRACT_ACTIONS",
    "CONTRACT_OBS_SIZE",
    "PLAY_OBS_SIZE",
    "OBS_DIM",
    "card_index",
    "index_to_card",
    "encode_card_set",
    "encode_hand",
    "pad_observation",
    "encode_contract_observation",
    "encode_play_observation",
    "encode_observation",
    "legal_action_mask_contract",
    "legal_action_mask_play_from_hand_and_legal_cards",
    "legal_action_mask",
    "choice_to_action",
    "action_to_choice",
    "card_to_action",
    "action_to_card",
]
