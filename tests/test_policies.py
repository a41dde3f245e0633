"""Tests for NNPolicy and checkpoint loading (if torch is available)."""

import importlib
import json
import random
from pathlib import Path


def _has_torch() -> bool:
    try:
        importlib.import_module("torch")  # noqa: F401
        return True
    except Exception:
        return False


def test_mask_logits_blocks_illegal_actions():
    if not _has_torch():
        return

    import torch
    from schieber.policies import _mask_logits

    logits = torch.zeros(1, 4)
    mask = torch.tensor([[False, True, False, True]])
    masked = _mask_logits(logits, mask)
    assert masked[0, 0] < -1e8 and masked[0, 2] < -1e8
    assert masked[0, 1] == 0.0
    # The input tensor is left untouched.
    assert logits.abs().sum() == 0.0


def test_model_output_shapes():
    if not _has_torch():
        return

    import torch
    from schieber.env import NUM_ACTIONS, OBS_DIM
    from schieber.models import JassActorCritic

    model = JassActorCritic(hidden_dim=16)
    logits, value = model(torch.zeros(3, OBS_DIM))
    assert logits.shape == (3, NUM_ACTIONS)
    assert value.shape == (3,)


def test_contract_and_card_heads_fill_their_blocks():
    if not _has_torch():
        return

    import torch
    from schieber.env import NUM_CARD_ACTIONS, NUM_CONTRACT_ACTIONS, OBS_DIM
    from schieber.models import JassActorCritic, split_logits

    torch.manual_seed(0)
    model = JassActorCritic(hidden_dim=16, suit_dim=4)
    with torch.no_grad():
        model.card_head.weight.zero_()
        model.card_head.bias.fill_(3.0)
        logits, _ = model(torch.rand(2, OBS_DIM))
    contract_logits, card_logits = split_logits(logits)
    assert contract_logits.shape == (2, NUM_CONTRACT_ACTIONS)
    assert card_logits.shape == (2, NUM_CARD_ACTIONS)
    assert torch.all(card_logits == 3.0)


def test_suit_encoder_is_shared_across_suits():
    if not _has_torch():
        return

    import torch
    from schieber.deck import Card, Rank, Suit
    from schieber.env import OBS_DIM, card_index
    from schieber.models import JassActorCritic

    torch.manual_seed(1)
    model = JassActorCritic(hidden_dim=16, suit_dim=8)
    eicheln = torch.zeros(1, OBS_DIM)
    rosen = torch.zeros(1, OBS_DIM)
    for rank in (Rank.UNDER, Rank.NINE, Rank.ACE):
        eicheln[0, card_index(Card(Suit.EICHELN, rank))] = 1.0
        rosen[0, card_index(Card(Suit.ROSEN, rank))] = 1.0

    with torch.no_grad():
        a = model.encode_suits(eicheln)[0]
        b = model.encode_suits(rosen)[0]
    # Same ranks in another suit: the embedding moves to that suit's slot.
    assert torch.allclose(a[0], b[2])
    assert torch.allclose(a[2], b[0])
    assert torch.allclose(a[1], b[1])


def test_model_rejects_observation_without_context():
    if not _has_torch():
        return

    import pytest
    from schieber.models import JassActorCritic

    with pytest.raises(ValueError):
        JassActorCritic(obs_dim=36)


def test_load_policy_from_checkpoint_roundtrip(tmp_path: Path):
    if not _has_torch():
        return

    import torch
    from schieber.env_game import JassEnv
    from schieber.models import PolicyConfig
    from schieber.policies import init_model, load_policy_from_checkpoint, save_policy_checkpoint

    policy_cfg = PolicyConfig(hidden_dim=32)
    model = init_model(policy_cfg, seed=0)
    ckpt_dir = tmp_path / "ckpt"
    save_policy_checkpoint(model, policy_cfg, ckpt_dir)

    assert (ckpt_dir / "policy.pt").exists()
    meta = json.loads((ckpt_dir / "config.json").read_text(encoding="utf-8"))
    assert meta["policy_config"]["hidden_dim"] == 32

    policy = load_policy_from_checkpoint(str(ckpt_dir), device=torch.device("cpu"))
    assert policy.policy_cfg == policy_cfg

    env = JassEnv(learning_seat=0, num_hands=1, rng=random.Random(0))
    step = env.reset()
    steps = 0
    while not step.done and steps < 100:
        action = policy.act(step.obs, step.legal_actions_mask)
        legal_indices = [i for i, ok in enumerate(step.legal_actions_mask) if ok]
        assert isinstance(action, int)
        assert action in legal_indices
        step = env.step(action)
        steps += 1
    assert step.done


def test_policy_bot_with_nn_policy_plays_a_hand():
    if not _has_torch():
        return

    import torch
    from schieber.bots import PolicyBot
    from schieber.engine import create_match
    from schieber.game import play_hand
    from schieber.models import PolicyConfig
    from schieber.policies import NNPolicy, init_model

    policy_cfg = PolicyConfig(hidden_dim=16)
    policy = NNPolicy(
        model=init_model(policy_cfg, seed=1),
        policy_cfg=policy_cfg,
        device=torch.device("cpu"),
        deterministic=True,
    )
    state = play_hand(create_match(), [PolicyBot(policy)] * 4, rng=random.Random(2))
    assert sum(state.trick_points) == 157
