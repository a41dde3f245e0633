"""
Neural policies and checkpoint I/O.

A checkpoint is a directory holding:
  - policy.pt      : model state_dict
  - config.json    : package version and ``PolicyConfig``

``load_policy_from_checkpoint`` turns such a directory into an object
implementing the ``Policy`` protocol; wrap it in ``bots.PolicyBot`` to seat
it at a table. Requires the ``rl`` extra (numpy, torch).
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, Sequence, Tuple

import numpy as np
import torch
from torch.distributions import Categorical

from . import __version__
from .agents import Policy
from .env import pad_observation
from .models import JassActorCritic, PolicyConfig


def _mask_logits(
    logits: torch.Tensor,
    legal_actions_mask: torch.Tensor,
) -> torch.Tensor:
    """Apply a boolean legal-actions mask to logits."""
    illegal = ~legal_actions_mask
    logits = logits.clone()
    logits[illegal] = -1e9
    return logits


@dataclass
class NNPolicy(Policy):
    """
    Policy wrapper around a JassActorCritic network.

    By default actions are sampled stochastically; set ``deterministic=True``
    to always pick the argmax action instead.
    """

    model: JassActorCritic
    policy_cfg: PolicyConfig
    device: torch.device
    deterministic: bool = False

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:  # type: ignore[override]
        obs_vec = pad_observation(obs, self.policy_cfg.obs_dim)
        obs_t = torch.tensor(obs_vec, dtype=torch.float32, device=self.device).unsqueeze(0)
        mask_np = np.array(list(legal_actions_mask), dtype=bool)
        if mask_np.shape[0] == 0 or not mask_np.any():
            raise ValueError("No legal actions in NNPolicy.act")
        mask_t = torch.from_numpy(mask_np).to(self.device).unsqueeze(0)

        with torch.no_grad():
            logits, _ = self.model(obs_t)
            masked_logits = _mask_logits(logits, mask_t)
            if self.deterministic:
                action = torch.argmax(masked_logits, dim=-1)
            else:
                dist = Categorical(logits=masked_logits)
                action = dist.sample()

        return int(action.item())


def init_model(policy_cfg: PolicyConfig | None = None, seed: int | None = None) -> JassActorCritic:
    """Fresh, randomly initialised model (seeded when ``seed`` is given)."""
    policy_cfg = policy_cfg or PolicyConfig()
    if seed is not None:
        torch.manual_seed(seed)
    return JassActorCritic(
        obs_dim=policy_cfg.obs_dim,
        hidden_dim=policy_cfg.hidden_dim,
        suit_dim=policy_cfg.suit_dim,
    )


def save_policy_checkpoint(
    model: JassActorCritic,
    policy_cfg: PolicyConfig,
    directory: str | Path,
) -> Path:
    """Save model weights and config to ``directory`` (created if missing)."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    torch.save(model.state_dict(), out_dir / "policy.pt")
    meta = {
        "version": __version__,
        "policy_config": asdict(policy_cfg),
    }
    with (out_dir / "config.json").open("w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)
    return out_dir


def load_model_from_checkpoint(
    directory: str | Path,
    device: torch.device | None = None,
) -> Tuple[JassActorCritic, PolicyConfig]:
    """Load a model saved by ``save_policy_checkpoint``, in eval mode."""
    device = device or torch.device("cpu")
    ckpt_dir = Path(directory)
    with (ckpt_dir / "config.json").open("r", encoding="utf-8") as f:
        meta = json.load(f)

    policy_cfg = PolicyConfig(**meta.get("policy_config", {}))
    model = JassActorCritic(
        obs_dim=policy_cfg.obs_dim,
        hidden_dim=policy_cfg.hidden_dim,
        suit_dim=policy_cfg.suit_dim,
    ).to(device)
    state_dict = torch.load(ckpt_dir / "policy.pt", map_location=device)
    model.load_state_dict(state_dict)
    model.eval()
    return model, policy_cfg


def load_policy_from_checkpoint(
    directory: str | Path,
    device: torch.device | None = None,
    deterministic: bool = False,
) -> NNPolicy:
    """Load a checkpoint directory as an ``NNPolicy``."""
    device = device or torch.device("cpu")
    model, policy_cfg = load_model_from_checkpoint(directory, device=device)
    return NNPolicy(model=model, policy_cfg=policy_cfg, device=device, deterministic=deterministic)


__all__ = [
    "NNPolicy",
    "init_model",
    "save_policy_checkpoint",
    "load_model_from_checkpoint",
    "load_policy_from_checkpoint",
]
