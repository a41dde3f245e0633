"""
Errors and rejection reasons.

Expected rule violations (wrong turn, illegal card, ...) are not exceptions:
operations return a ``Transition`` with ``ok=False`` and a ``Rejection``.
Exceptions are reserved for caller sequencing bugs and broken invariants.
"""
from __future__ import annotations

from enum import Enum


class Rejection(str, Enum):
    """Why a player action was refused. The state is left unchanged."""
    WRONG_PHASE = "wrong_phase"
    NOT_YOUR_TURN = "not_your_turn"
    CARD_NOT_IN_HAND = "card_not_in_hand"
    ILLEGAL_CARD = "illegal_card"
    ALREADY_PUSHED = "already_pushed"
    UNKNOWN_CONTRACT = "unknown_contract"


class SchieberError(Exception):
    """Base exception for engine errors."""

    pass


class InvariantViolation(SchieberError):
    """A structural invariant is broken (bad deck, overfull trick, ...)."""

    pass


class PhaseError(SchieberError):
    """An operation was called in a phase where it cannot run."""

    def __init__(self, operation: str, phase: str, expected: tuple[str, ...]):
        self.operation = operation
        self.phase = phase
        self.expected = expected
        super().__init__(
            f"{operation} not allowed in phase {phase!r} (expected one of {', '.join(expected)})"
        )


class UnknownMatchError(SchieberError, KeyError):
    """No match is registered under the given id."""

    def __init__(self, match_id: str):
        self.match_id = match_id
        super().__init__(f"Unknown match id: {match_id}")

    def __str__(self) -> str:
        return self.args[0]
