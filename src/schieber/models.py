"""
Actor-critic network for Schieber policies.

Both observation layouts of ``schieber.env`` start with the acting seat's hand
as 36 suit-major bits (4 suits × 9 ranks). The network reads that block one
suit at a time through a shared suit encoder, so trump strength, honours and
Weis sequences look the same in every suit, and reads the remaining bits
(trick, captured cards, seats, contract) through a separate context encoder.

Two policy heads follow the action split: 7 contract actions (six contracts
plus Schieben) and 36 card actions. Their logits are concatenated into the
43-wide action space; the legal-action mask selects the relevant block.

Requires the ``rl`` extra (torch).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import torch
from torch import nn

from .deck import RANKS, SUITS
from .env import NUM_CARD_ACTIONS, NUM_CARDS, NUM_CONTRACT_ACTIONS, OBS_DIM


class JassActorCritic(nn.Module):
    """
    Input: (batch, obs_dim) observations, contract observations zero-padded.
    Output: logits (batch, 43) laid out as [contract | card], value (batch,).
    """

    def __init__(self, obs_dim: int = OBS_DIM, hidden_dim: int = 128, suit_dim: int = 16) -> None:
        super().__init__()
        if obs_dim <= NUM_CARDS:
            raise ValueError(f"obs_dim must exceed the {NUM_CARDS} hand bits, got {obs_dim}")
        self.suit_encoder = nn.Sequential(nn.Linear(len(RANKS), suit_dim), nn.ReLU())
        self.context_encoder = nn.Sequential(nn.Linear(obs_dim - NUM_CARDS, hidden_dim), nn.ReLU())
        self.trunk = nn.Sequential(
            nn.Linear(len(SUITS) * suit_dim + hidden_dim, hidden_dim),
            nn.ReLU(),
        )
        self.contract_head = nn.Linear(hidden_dim, NUM_CONTRACT_ACTIONS)
        self.card_head = nn.Linear(hidden_dim, NUM_CARD_ACTIONS)
        self.value_head = nn.Linear(hidden_dim, 1)

    def encode_suits(self, obs: torch.Tensor) -> torch.Tensor:
        """Per-suit hand embeddings, shape (batch, 4, suit_dim)."""
        hand = obs[..., :NUM_CARDS].reshape(*obs.shape[:-1], len(SUITS), len(RANKS))
        return self.suit_encoder(hand)

    def forward(self, obs: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:  # type: ignore[override]
        suits = self.encode_suits(obs).flatten(-2)
        context = self.context_encoder(obs[..., NUM_CARDS:])
        x = self.trunk(torch.cat([suits, context], dim=-1))
        logits = torch.cat([self.contract_head(x), self.card_head(x)], dim=-1)
        value = self.value_head(x).squeeze(-1)
        return logits, value


def split_logits(logits: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
    """Split 43-wide logits into (contract logits, card logits)."""
    return logits[..., :NUM_CONTRACT_ACTIONS], logits[..., NUM_CONTRACT_ACTIONS:]


@dataclass
class PolicyConfig:
    """Architecture of a saved policy, stored in the checkpoint's config.json."""

    arch_name: str = "jass_suit_split_v1"
    obs_dim: int = OBS_DIM
    hidden_dim: int = 128
    suit_dim: int = 16


__all__ = ["JassActorCritic", "PolicyConfig", "split_logits"]
