"""Swiss Jass rules engine (Schieber variant)."""

__version__ = "0.1.0"

from .deck import Card, Rank, Suit, card_from_id, make_deck_36, shuffle
from .contracts import SCHIEBEN, Contract, parse_choice
from .config import EngineConfig, FollowRule, MultiplierScope
from .errors import InvariantViolation, PhaseError, Rejection, SchieberError, UnknownMatchError
from .deal import deal_hands, partner_of, team_of
from .play import legal_plays, trick_winner
from .weis import WeisDeclaration, calculate_team_weis, detect_weis, is_weis_better
from .state import HandResult, MatchState, Phase, PlayerState, Transition
from .engine import (
    create_match,
    legal_cards,
    peek_trick_winner,
    play_card,
    resolve_trick,
    select_contract,
    settle_hand,
    start_hand,
)
from .manager import MatchManager
from .game import play_hand, run_match
