"""
Environment wrapper around the Schieber engine for RL.

- Single-agent view: one learning seat per env instance.
- Episode = one match (until a team reaches the target score), or a fixed
  number of hands when ``num_hands`` is given. The reward is given only at the
  end and equals the learning team's score minus the other team's.
- The learning seat is asked for a decision whenever it is its turn: choosing
  (or pushing) the contract, or playing a card. The other three seats are
  driven by bots, ``RandomBot`` unless others are given.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .bots import Bot, RandomBot
from .config import EngineConfig
from .engine import create_match, legal_cards, play_card, resolve_trick, select_contract, start_hand
from .env import (
    NUM_ACTIONS,
    action_to_card,
    action_to_choice,
    encode_observation,
    legal_action_mask,
)
from .state import MatchState, Phase


@dataclass
class StepResult:
    """Container returned by JassEnv.step/reset."""

    obs: List[float]
    reward: float
    done: bool
    info: dict
    legal_actions_mask: List[bool]


class JassEnv:
    """
    Schieber environment (single learning seat).

    Public API (Gym-like, without the dependency):
      - reset() -> StepResult          # new match, first decision for the learning seat
      - step(action: int) -> StepResult
    """

    def __init__(
        self,
        learning_seat: int = 0,
        num_hands: Optional[int] = None,
        config: Optional[EngineConfig] = None,
        rng: Optional[random.Random] = None,
        others: Optional[Sequence[Bot]] = None,
    ) -> None:
        if not 0 <= learning_seat < 4:
            raise ValueError(f"learning_seat must be 0..3, got {learning_seat}")
        self.learning_seat = learning_seat
        self.num_hands = num_hands
        self.config = config or EngineConfig()
        self.rng = rng or random.Random()
        if others is None:
            others = [RandomBot(seed=self.rng.randrange(2**32)) for _ in range(3)]
        if len(others) != 3:
            raise ValueError(f"Need 3 bots for the other seats, got {len(others)}")
        self._bots: List[Optional[Bot]] = []
        it = iter(others)
        for seat in range(4):
            self._bots.append(None if seat == learning_seat else next(it))
        self._state: MatchState = create_match(self.config)
        self._done = True

    @property
    def state(self) -> MatchState:
        return self._state

    # ---- Public API ----

    def reset(self) -> StepResult:
        """Start a new match and return the first decision for the learning seat."""
        self._state = create_match(self.config)
        self._done = False
        return self._advance()

    def step(self, action: int) -> StepResult:
        """
        Apply ``action`` for the learning seat: a contract action during
        contract selection, a card action during play.
        """
        if self._done:
            return self._terminal()
        state = self._state
        seat = self.learning_seat
        mask = legal_action_mask(state, seat)
        if not (0 <= action < NUM_ACTIONS and mask[action]):
            raise ValueError(f"Illegal action {action} in phase {state.phase.value}")
        if state.phase == Phase.CONTRACT_SELECTION:
            result = select_contract(state, seat, action_to_choice(action))
        else:
            result = play_card(state, seat, action_to_card(action))
        if not result.ok:
            raise RuntimeError(f"Engine rejected a masked-legal action: {result.reason}")
        self._state = result.state
        return self._advance()

    # ---- Internal helpers ----

    def _episode_over(self) -> bool:
        state = self._state
        if state.phase == Phase.MATCH_FINISHED:
            return True
        return (
            self.num_hands is not None
            and state.phase == Phase.HAND_FINISHED
            and state.hand_number >= self.num_hands
        )

    def _info(self) -> dict:
        state = self._state
        return {
            "phase": state.phase.value,
            "hand_number": state.hand_number,
            "dealer": state.dealer,
            "scores": state.scores,
        }

    def _terminal(self) -> StepResult:
        self._done = True
        team = self.learning_seat % 2
        scores = self._state.scores
        info = self._info()
        info["phase"] = "done"
        info["winner"] = self._state.winner
        return StepResult(
            obs=[],
            reward=float(scores[team] - scores[1 - team]),
            done=True,
            info=info,
            legal_actions_mask=[False] * NUM_ACTIONS,
        )

    def _advance(self) -> StepResult:
        """Let the bots act until the learning seat must decide, or the episode ends."""
        while True:
            if self._episode_over():
                return self._terminal()
            state = self._state
            if state.phase in (Phase.DEALING, Phase.HAND_FINISHED):
                self._state = start_hand(state, rng=self.rng)
                continue
            if state.phase == Phase.RESOLVING:
                self._state = resolve_trick(state)
                continue

            seat = state.current_player
            assert seat is not None
            if seat == self.learning_seat:
                return StepResult(
                    obs=encode_observation(state, seat),
                    reward=0.0,
                    done=False,
                    info=self._info(),
                    legal_actions_mask=legal_action_mask(state, seat),
                )

            bot = self._bots[seat]
            assert bot is not None
            if state.phase == Phase.CONTRACT_SELECTION:
                result = select_contract(state, seat, bot.choose_contract(state, seat))
            else:
                result = play_card(state, seat, bot.choose_card(state, seat, legal_cards(state, seat)))
            if not result.ok:
                raise RuntimeError(f"Bot at seat {seat} made a rejected move: {result.reason}")
            self._state = result.state


__all__ = ["JassEnv", "StepResult"]
