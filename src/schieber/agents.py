"""
Baseline agents and the generic policy interface.

A ``Policy`` works on the flat observations and legal-action masks from
``schieber.env``: ``act(obs, legal_actions_mask) -> action_index`` over the
43-action space (7 contract actions, then 36 card actions). ``PolicyBot`` in
``schieber.bots`` adapts any Policy to the engine.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence


class Policy(Protocol):
    """Anything that maps an encoded decision to one of the 43 action indices."""

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        """Return an index whose mask entry is True. ``PolicyBot`` checks the answer."""


@dataclass
class RandomAgent:
    """
    Policy that samples uniformly among legal actions.

    Usage:
        agent = RandomAgent(seed=42)
        action = agent.act(obs, legal_actions_mask)
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        legal_indices: List[int] = [i for i, ok in enumerate(legal_actions_mask) if ok]
        if not legal_indices:
            raise ValueError("No legal actions available for RandomAgent")
        return self._rng.choice(legal_indices)


@dataclass
class FirstLegalAgent:
    """Deterministic policy: always the lowest legal action index."""

    def act(self, obs: Sequence[float], legal_actions_mask: Iterable[bool]) -> int:
        for i, ok in enumerate(legal_actions_mask):
            if ok:
                return i
        raise ValueError("No legal actions available for FirstLegalAgent")


__all__ = ["Policy", "RandomAgent", "FirstLegalAgent"]
