"""
Match ownership for hosts that run several matches at once.

The engine is pure and takes no locks. ``MatchManager`` keeps the current
``MatchState`` of each match under an id and serializes writers per match:
``apply`` runs an engine operation against the stored state while holding
that match's lock and stores the result.
"""
from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Callable, Dict, List

from .config import EngineConfig
from .engine import create_match
from .errors import UnknownMatchError
from .state import MatchState, Transition

log = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("state", "lock")

    def __init__(self, state: MatchState):
        self.state = state
        self.lock = threading.Lock()


class MatchManager:
    """
    Registry of live matches keyed by id.

    Usage:
        manager = MatchManager()
        match_id = manager.create()
        state = manager.apply(match_id, start_hand, rng)
        result = manager.apply(match_id, select_contract, seat, Contract.ROSEN)
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}
        self._registry_lock = threading.Lock()

    def create(self, config: EngineConfig | None = None, match_id: str | None = None) -> str:
        """Register a fresh match and return its id (a new uuid4 unless given)."""
        match_id = match_id or uuid.uuid4().hex
        with self._registry_lock:
            if match_id in self._entries:
                raise ValueError(f"Match id already in use: {match_id}")
            self._entries[match_id] = _Entry(create_match(config))
        log.debug("Created match %s", match_id)
        return match_id

    def _entry(self, match_id: str) -> _Entry:
        with self._registry_lock:
            try:
                return self._entries[match_id]
            except KeyError:
                raise UnknownMatchError(match_id) from None

    def get(self, match_id: str) -> MatchState:
        """Current state of a match (a frozen snapshot, safe to share)."""
        return self._entry(match_id).state

    def apply(self, match_id: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Run ``fn(state, *args, **kwargs)`` under the match lock and store the result.

        ``fn`` returns either a ``MatchState`` or a ``Transition``; for a
        ``Transition`` its ``state`` is stored (unchanged on rejection) and the
        whole ``Transition`` is returned. Exceptions propagate and leave the
        stored state untouched.
        """
        entry = self._entry(match_id)
        with entry.lock:
            result = fn(entry.state, *args, **kwargs)
            if isinstance(result, Transition):
                entry.state = result.state
            elif isinstance(result, MatchState):
                entry.state = result
            else:
                raise TypeError(
                    f"{getattr(fn, '__name__', fn)!r} returned {type(result).__name__}, "
                    "expected MatchState or Transition"
                )
        return result

    def destroy(self, match_id: str) -> None:
        """Forget a match. Raises UnknownMatchError if it is not registered."""
        with self._registry_lock:
            if self._entries.pop(match_id, None) is None:
                raise UnknownMatchError(match_id)
        log.debug("Destroyed match %s", match_id)

    def ids(self) -> List[str]:
        with self._registry_lock:
            return list(self._entries)

    def __contains__(self, match_id: object) -> bool:
        with self._registry_lock:
            return match_id in self._entries

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._entries)


__all__ = ["MatchManager"]
