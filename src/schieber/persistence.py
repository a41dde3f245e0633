"""
Match state serialization.

Converts a ``MatchState`` to and from JSON-compatible dicts so hosts can
snapshot a running match (between two operations) and restore it later.
Cards are stored by id, enums by value.
"""
from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List

from .config import config_from_dict, config_to_dict
from .contracts import Contract
from .deck import Card, card_from_id
from .state import CompletedTrick, HandResult, MatchState, Phase, Play, PlayerState
from .weis import WeisDeclaration

SCHEMA_VERSION = 1


def _cards_to_ids(cards) -> List[str]:
    return [c.id for c in cards]


def _cards_from_ids(ids) -> tuple[Card, ...]:
    return tuple(card_from_id(i) for i in ids)


def _pair(values, default=(0, 0)) -> tuple[int, int]:
    if values is None:
        values = default
    return (int(values[0]), int(values[1]))


def _weis_to_dict(w: WeisDeclaration) -> Dict[str, Any]:
    return {
        "kind": w.kind,
        "cards": _cards_to_ids(w.cards),
        "points": w.points,
        "description": w.description,
    }


def _weis_from_dict(d: Dict[str, Any]) -> WeisDeclaration:
    return WeisDeclaration(
        kind=d["kind"],
        cards=_cards_from_ids(d["cards"]),
        points=int(d["points"]),
        description=d.get("description", ""),
    )


def _player_to_dict(p: PlayerState) -> Dict[str, Any]:
    return {
        "seat": p.seat,
        "hand": _cards_to_ids(p.hand),
        "won": _cards_to_ids(p.won),
        "weis": [_weis_to_dict(w) for w in p.weis],
    }


def _player_from_dict(d: Dict[str, Any]) -> PlayerState:
    return PlayerState(
        seat=int(d["seat"]),
        hand=_cards_from_ids(d.get("hand", [])),
        won=_cards_from_ids(d.get("won", [])),
        weis=tuple(_weis_from_dict(w) for w in d.get("weis", [])),
    )


def _plays_to_list(plays) -> List[List[Any]]:
    return [[p.seat, p.card.id] for p in plays]


def _plays_from_list(items) -> tuple[Play, ...]:
    return tuple(Play(int(seat), card_from_id(card_id)) for seat, card_id in items)


def _hand_result_to_dict(r: HandResult) -> Dict[str, Any]:
    return {
        "hand_number": r.hand_number,
        "dealer": r.dealer,
        "declarer": r.declarer,
        "contract": r.contract.value,
        "multiplier": r.multiplier,
        "trick_points": list(r.trick_points),
        "weis_points": list(r.weis_points),
        "match_bonus_team": r.match_bonus_team,
        "scores": list(r.scores),
    }


def _hand_result_from_dict(d: Dict[str, Any]) -> HandResult:
    contract = Contract(d["contract"])
    return HandResult(
        hand_number=int(d["hand_number"]),
        dealer=int(d["dealer"]),
        declarer=int(d["declarer"]),
        contract=contract,
        multiplier=int(d.get("multiplier", contract.multiplier)),
        trick_points=_pair(d.get("trick_points")),
        weis_points=_pair(d.get("weis_points")),
        match_bonus_team=d.get("match_bonus_team"),
        scores=_pair(d.get("scores")),
    )


def match_to_dict(state: MatchState) -> Dict[str, Any]:
    """
    Serialize a MatchState to a JSON-compatible dict.

    Returns:
        Dict with schema_version, exported_at, config and the full state.
    """
    return {
        "schema_version": SCHEMA_VERSION,
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "config": config_to_dict(state.config),
        "phase": state.phase.value,
        "hand_number": state.hand_number,
        "dealer": state.dealer,
        "forehand": state.forehand,
        "current_player": state.current_player,
        "trick_leader": state.trick_leader,
        "contract": state.contract.value if state.contract is not None else None,
        "declarer": state.declarer,
        "pushed": state.pushed,
        "players": [_player_to_dict(p) for p in state.players],
        "current_trick": _plays_to_list(state.current_trick),
        "completed_tricks": [
            {"plays": _plays_to_list(t.plays), "winner": t.winner, "points": t.points}
            for t in state.completed_tricks
        ],
        "trick_points": list(state.trick_points),
        "weis_points": list(state.weis_points),
        "hand_scores": list(state.hand_scores),
        "scores": list(state.scores),
        "winner": state.winner,
        "history": [_hand_result_to_dict(r) for r in state.history],
    }


def match_from_dict(d: Dict[str, Any]) -> MatchState:
    """
    Deserialize a MatchState from a dict produced by ``match_to_dict``.
    Raises ValueError for an unsupported schema version or unknown card ids.
    """
    version = int(d.get("schema_version", SCHEMA_VERSION))
    if version > SCHEMA_VERSION:
        raise ValueError(f"Unsupported schema_version {version} (max {SCHEMA_VERSION})")
    contract = d.get("contract")
    players = d.get("players")
    state = MatchState(
        config=config_from_dict(d.get("config", {})),
        phase=Phase(d.get("phase", Phase.DEALING.value)),
        hand_number=int(d.get("hand_number", 0)),
        dealer=d.get("dealer"),
        forehand=d.get("forehand"),
        current_player=d.get("current_player"),
        trick_leader=d.get("trick_leader"),
        contract=Contract(contract) if contract is not None else None,
        declarer=d.get("declarer"),
        pushed=bool(d.get("pushed", False)),
        current_trick=_plays_from_list(d.get("current_trick", [])),
        completed_tricks=tuple(
            CompletedTrick(_plays_from_list(t["plays"]), int(t["winner"]), int(t["points"]))
            for t in d.get("completed_tricks", [])
        ),
        trick_points=_pair(d.get("trick_points")),
        weis_points=_pair(d.get("weis_points")),
        hand_scores=_pair(d.get("hand_scores")),
        scores=_pair(d.get("scores")),
        winner=d.get("winner"),
        history=tuple(_hand_result_from_dict(r) for r in d.get("history", [])),
    )
    if players:
        restored = tuple(_player_from_dict(p) for p in players)
        if sorted(p.seat for p in restored) != [0, 1, 2, 3]:
            raise ValueError("Snapshot must hold exactly the seats 0..3")
        state = replace(state, players=tuple(sorted(restored, key=lambda p: p.seat)))
    return state


def match_to_json(state: MatchState) -> str:
    """Serialize a MatchState to a JSON string."""
    return json.dumps(match_to_dict(state), indent=2)


def match_from_json(s: str) -> MatchState:
    """Deserialize a MatchState from a JSON string."""
    return match_from_dict(json.loads(s))


__all__ = [
    "match_to_dict",
    "match_from_dict",
    "match_to_json",
    "match_from_json",
    "SCHEMA_VERSION",
]
