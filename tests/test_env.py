"""Tests for observation and action encoding."""
import random

import pytest

from schieber.contracts import SCHIEBEN, Contract
from schieber.deck import make_deck_36
from schieber.engine import create_match, legal_cards, play_card, select_contract, start_hand
from schieber.env import (
    CONTRACT_OBS_SIZE,
    NUM_ACTIONS,
    NUM_CONTRACT_ACTIONS,
    OBS_DIM,
    PLAY_OBS_SIZE,
    action_to_card,
    action_to_choice,
    card_index,
    card_to_action,
    choice_to_action,
    encode_contract_observation,
    encode_observation,
    encode_play_observation,
    index_to_card,
    legal_action_mask,
    legal_action_mask_contract,
    pad_observation,
)


def _contract_state(seed: int = 0):
    return start_hand(create_match(), rng=random.Random(seed))


def test_action_space_sizes():
    assert NUM_CONTRACT_ACTIONS == 7
    assert NUM_ACTIONS == 43
    assert OBS_DIM == max(CONTRACT_OBS_SIZE, PLAY_OBS_SIZE)


def test_card_index_matches_deck_order():
    deck = make_deck_36()
    assert [card_index(c) for c in deck] == list(range(36))
    assert all(index_to_card(card_index(c)) == c for c in deck)
    with pytest.raises(ValueError):
        index_to_card(36)


def test_action_conversions():
    assert choice_to_action(Contract.EICHELN) == 0
    assert choice_to_action(SCHIEBEN) == 6
    assert action_to_choice(6) is SCHIEBEN
    card = make_deck_36()[10]
    assert card_to_action(card) == 17
    assert action_to_card(17) == card
    with pytest.raises(ValueError):
        action_to_choice(7)
    with pytest.raises(ValueError):
        action_to_card(3)


def test_contract_observation_and_mask():
    state = _contract_state()
    seat = state.current_player
    obs = encode_contract_observation(state, seat)
    assert len(obs) == CONTRACT_OBS_SIZE
    assert sum(obs[:36]) == 9

    mask = legal_action_mask_contract(state)
    assert len(mask) == NUM_ACTIONS
    assert mask[:7] == [True] * 7
    assert not any(mask[7:])

    pushed = select_contract(state, seat, SCHIEBEN).state
    mask = legal_action_mask(pushed, pushed.current_player)
    assert mask[:6] == [True] * 6
    assert mask[6] is False
    assert encode_contract_observation(pushed, pushed.current_player)[-1] == 1.0


def test_mask_is_empty_for_waiting_seat():
    state = _contract_state()
    other = (state.current_player + 1) % 4
    assert legal_action_mask(state, other) == [False] * NUM_ACTIONS


def test_play_observation_and_mask():
    state = _contract_state(3)
    state = select_contract(state, state.current_player, Contract.SCHILTEN).state
    seat = state.current_player
    obs = encode_observation(state, seat)
    assert len(obs) == PLAY_OBS_SIZE == OBS_DIM

    mask = legal_action_mask(state, seat)
    legal = legal_cards(state, seat)
    assert sum(mask) == len(legal)
    assert not any(mask[:NUM_CONTRACT_ACTIONS])
    assert all(mask[card_to_action(c)] for c in legal)

    state = play_card(state, seat, legal[0]).state
    obs = encode_play_observation(state, seat)
    # The played card left the hand and sits in the trick block.
    assert obs[card_index(legal[0])] == 0.0
    assert obs[36 + card_index(legal[0])] == 1.0


def test_pad_observation():
    assert pad_observation([1.0, 2.0], 4) == [1.0, 2.0, 0.0, 0.0]
    assert pad_observation([1.0, 2.0, 3.0], 2) == [1.0, 2.0]
    assert len(pad_observation(encode_contract_observation(_contract_state(), 1))) == OBS_DIM
