"""Tests for hand settlement arithmetic."""
from schieber.config import MultiplierScope
from schieber.scoring import apply_multiplier, settle_scores


def test_declarer_scope_multiplies_declaring_team_only():
    result = settle_scores(
        trick_points=(50, 30),
        weis_points=(0, 0),
        cards_won=(20, 16),
        multiplier=2,
        declarer_team=0,
        scope=MultiplierScope.DECLARER,
    )
    assert result.scores == (100, 30)
    assert result.multiplier == 2
    assert result.match_bonus_team is None


def test_both_scope_multiplies_both_teams():
    assert apply_multiplier((50, 30), 2, 0, MultiplierScope.BOTH) == (100, 60)
    assert apply_multiplier((50, 30), 3, 1, MultiplierScope.DECLARER) == (50, 90)


def test_weis_is_added_before_multiplying():
    result = settle_scores((80, 77), (50, 0), (20, 16), 4, 0, MultiplierScope.DECLARER)
    assert result.scores == ((80 + 50) * 4, 77)


def test_match_bonus_for_all_36_cards():
    result = settle_scores((157, 0), (0, 0), (36, 0), 2, 0, MultiplierScope.DECLARER)
    assert result.match_bonus_team == 0
    assert result.scores == (157 * 2 + 100 * 2, 0)


def test_match_bonus_follows_multiplier_scope():
    # The defending team takes everything; only the declarer's side is multiplied.
    declarer = settle_scores((0, 157), (0, 0), (0, 36), 3, 0, MultiplierScope.DECLARER)
    assert declarer.scores == (0, 257)
    both = settle_scores((0, 157), (0, 0), (0, 36), 3, 0, MultiplierScope.BOTH)
    assert both.scores == (0, 771)


def test_custom_match_bonus():
    result = settle_scores((157, 0), (0, 0), (36, 0), 1, 0, MultiplierScope.BOTH, match_bonus=50)
    assert result.scores == (207, 0)
