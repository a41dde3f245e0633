"""Tests for match state serialization."""
import json
import random

import pytest

from schieber.bots import HeuristicBot
from schieber.config import EngineConfig, MultiplierScope
from schieber.contracts import Contract
from schieber.engine import (
    create_match,
    legal_cards,
    play_card,
    resolve_trick,
    select_contract,
    start_hand,
)
from schieber.game import play_hand
from schieber.persistence import (
    SCHEMA_VERSION,
    match_from_dict,
    match_from_json,
    match_to_dict,
    match_to_json,
)
from schieber.state import Phase


def _mid_hand_state():
    cfg = EngineConfig(points_to_win=2500, multiplier_scope=MultiplierScope.BOTH)
    bots = [HeuristicBot(seed=s) for s in range(4)]
    rng = random.Random(11)
    state = play_hand(create_match(cfg), bots, rng=rng)
    state = start_hand(state, rng=rng)
    state = select_contract(state, state.current_player, Contract.UNDENUFE).state
    for _ in range(6):
        seat = state.current_player
        state = play_card(state, seat, legal_cards(state, seat)[0]).state
        if state.phase == Phase.RESOLVING:
            state = resolve_trick(state)
    return state


def test_dict_roundtrip_mid_hand():
    state = _mid_hand_state()
    data = match_to_dict(state)
    assert data["schema_version"] == SCHEMA_VERSION
    assert data["contract"] == "undenufe"
    restored = match_from_dict(data)
    assert restored == state


def test_json_roundtrip_and_play_continues():
    state = _mid_hand_state()
    text = match_to_json(state)
    json.loads(text)
    restored = match_from_json(text)
    assert restored == state

    seat = restored.current_player
    card = legal_cards(restored, seat)[0]
    assert play_card(restored, seat, card) == play_card(state, seat, card)


def test_fresh_match_roundtrip():
    state = create_match()
    assert match_from_dict(match_to_dict(state)) == state


def test_newer_schema_rejected():
    data = match_to_dict(create_match())
    data["schema_version"] = SCHEMA_VERSION + 1
    with pytest.raises(ValueError):
        match_from_dict(data)


def test_bad_seats_rejected():
    data = match_to_dict(_mid_hand_state())
    data["players"] = data["players"][:3]
    with pytest.raises(ValueError):
        match_from_dict(data)
