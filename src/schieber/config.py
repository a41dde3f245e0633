"""
Engine configuration.

Rules that differ between tables (target score, match bonus, how the contract
multiplier is applied, whether trumping is allowed while holding the lead
suit) are collected in one frozen ``EngineConfig`` carried by every match.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict


class MultiplierScope(str, Enum):
    """Which team's hand total is multiplied by the contract multiplier."""
    DECLARER = "declarer"  # only the declaring team; the other team stays ×1
    BOTH = "both"


class FollowRule(str, Enum):
    """What a player holding the lead suit may play."""
    STRICT = "strict"                 # lead suit only
    TRUMP_ALLOWED = "trump_allowed"   # lead suit or any trump


@dataclass(frozen=True)
class EngineConfig:
    """Table rules for a match."""

    points_to_win: int = 1000
    match_bonus: int = 100
    last_trick_bonus: int = 5
    multiplier_scope: MultiplierScope = MultiplierScope.DECLARER
    follow_rule: FollowRule = FollowRule.STRICT
    first_dealer: int = 0

    def __post_init__(self) -> None:
        if self.points_to_win <= 0:
            raise ValueError(f"points_to_win must be positive, got {self.points_to_win}")
        if not 0 <= self.first_dealer < 4:
            raise ValueError(f"first_dealer must be a seat 0..3, got {self.first_dealer}")
        # Accept plain strings, e.g. from JSON.
        object.__setattr__(self, "multiplier_scope", MultiplierScope(self.multiplier_scope))
        object.__setattr__(self, "follow_rule", FollowRule(self.follow_rule))


def config_to_dict(cfg: EngineConfig) -> Dict[str, Any]:
    d = asdict(cfg)
    d["multiplier_scope"] = cfg.multiplier_scope.value
    d["follow_rule"] = cfg.follow_rule.value
    return d


def config_from_dict(d: Dict[str, Any]) -> EngineConfig:
    defaults = EngineConfig()
    return EngineConfig(
        points_to_win=int(d.get("points_to_win", defaults.points_to_win)),
        match_bonus=int(d.get("match_bonus", defaults.match_bonus)),
        last_trick_bonus=int(d.get("last_trick_bonus", defaults.last_trick_bonus)),
        multiplier_scope=MultiplierScope(d.get("multiplier_scope", defaults.multiplier_scope)),
        follow_rule=FollowRule(d.get("follow_rule", defaults.follow_rule)),
        first_dealer=int(d.get("first_dealer", defaults.first_dealer)),
    )


def load_config(path: str | Path) -> EngineConfig:
    """Read an ``EngineConfig`` from a JSON file; missing keys take defaults."""
    with Path(path).open("r", encoding="utf-8") as f:
        return config_from_dict(json.load(f))


def save_config(cfg: EngineConfig, path: str | Path) -> None:
    with Path(path).open("w", encoding="utf-8") as f:
        json.dump(config_to_dict(cfg), f, indent=2)


__all__ = [
    "EngineConfig",
    "FollowRule",
    "MultiplierScope",
    "config_from_dict",
    "config_to_dict",
    "load_config",
    "save_config",
]
