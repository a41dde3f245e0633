"""Tests for Weis detection, comparison and team awards."""
from schieber.deck import Card, Rank, Suit
from schieber.state import PlayerState
from schieber.weis import best_weis, calculate_team_weis, detect_weis, is_weis_better

E, S, R, SH = Suit.EICHELN, Suit.SCHELLEN, Suit.ROSEN, Suit.SCHILTEN


def cards(suit: Suit, *ranks: str) -> list[Card]:
    return [Card(suit, Rank(r)) for r in ranks]


def kinds(declarations) -> list[tuple[str, int]]:
    return [(w.kind, w.points) for w in declarations]


def test_sequence_lengths():
    assert kinds(detect_weis(cards(E, "6", "7", "8") + cards(R, "A"), R)) == [("sequence3", 20)]
    assert kinds(detect_weis(cards(E, "6", "7", "8", "9"), R)) == [("sequence4", 50)]
    assert kinds(detect_weis(cards(E, "6", "7", "8", "9", "10"), R)) == [("sequence5plus", 100)]
    assert kinds(detect_weis(cards(E, "6", "7", "8", "9", "10", "U", "O", "K", "A"), R)) == [
        ("sequence5plus", 100)
    ]


def test_sequences_use_canonical_rank_order():
    # 10-U-O is a sequence regardless of the trump order.
    found = detect_weis(cards(S, "10", "U", "O"), S)
    assert kinds(found) == [("sequence3", 20)]
    # 9 and U are not neighbours.
    assert detect_weis(cards(S, "9", "U", "O"), S) == []


def test_two_runs_in_one_suit():
    found = detect_weis(cards(E, "6", "7", "8", "U", "O", "K"), None)
    assert kinds(found) == [("sequence3", 20), ("sequence3", 20)]


def test_four_of_a_kind():
    unders = [Card(s, Rank.UNDER) for s in Suit]
    nines = [Card(s, Rank.NINE) for s in Suit]
    aces = [Card(s, Rank.ACE) for s in Suit]
    sixes = [Card(s, Rank.SIX) for s in Suit]
    assert kinds(detect_weis(unders, None)) == [("four_U", 200)]
    assert kinds(detect_weis(nines, None)) == [("four_9", 150)]
    assert kinds(detect_weis(aces, None)) == [("four_A", 100)]
    assert detect_weis(sixes, None) == []


def test_stoeck_only_with_trump_suit():
    hand = cards(R, "O", "K") + cards(E, "6")
    assert kinds(detect_weis(hand, R)) == [("stoeck", 20)]
    assert detect_weis(hand, E) == []
    assert detect_weis(hand, None) == []


def test_weis_comparator():
    seq3_low = detect_weis(cards(E, "6", "7", "8"), None)[0]
    seq3_high = detect_weis(cards(R, "O", "K", "A"), None)[0]
    seq4 = detect_weis(cards(S, "6", "7", "8", "9"), None)[0]
    seq5 = detect_weis(cards(S, "6", "7", "8", "9", "10"), None)[0]
    seq6 = detect_weis(cards(R, "7", "8", "9", "10", "U", "O"), None)[0]
    four_aces = detect_weis([Card(s, Rank.ACE) for s in Suit], None)[0]

    assert is_weis_better(seq4, seq3_high)
    assert is_weis_better(seq3_high, seq3_low)
    assert not is_weis_better(seq3_low, seq3_high)
    assert is_weis_better(seq6, seq5)
    # Same points, not both sequences: no winner either way.
    assert not is_weis_better(seq5, four_aces)
    assert not is_weis_better(four_aces, seq5)
    assert best_weis([seq3_low, seq4, seq3_high]) == seq4
    assert best_weis([]) is None


def test_team_with_better_weis_scores_all_declarations():
    players = [
        PlayerState(seat=0, weis=tuple(detect_weis(cards(E, "6", "7", "8", "9"), R))),
        PlayerState(seat=1, weis=tuple(detect_weis(cards(S, "6", "7", "8"), R))),
        PlayerState(seat=2, weis=tuple(detect_weis(cards(R, "O", "K"), R))),
        PlayerState(seat=3),
    ]
    result = calculate_team_weis(players)
    assert result.points == (70, 0)
    assert result.best[0].kind == "sequence4"


def test_weis_tie_scores_nothing():
    players = [
        PlayerState(seat=0, weis=tuple(detect_weis(cards(E, "7", "8", "9"), None))),
        PlayerState(seat=1, weis=tuple(detect_weis(cards(S, "7", "8", "9"), None))),
        PlayerState(seat=2),
        PlayerState(seat=3),
    ]
    assert calculate_team_weis(players).points == (0, 0)


def test_single_team_with_weis_scores():
    players = [
        PlayerState(seat=0),
        PlayerState(seat=1, weis=tuple(detect_weis([Card(s, Rank.NINE) for s in Suit], None))),
        PlayerState(seat=2),
        PlayerState(seat=3, weis=tuple(detect_weis(cards(E, "6", "7", "8"), None))),
    ]
    assert calculate_team_weis(players).points == (0, 170)
    assert calculate_team_weis([PlayerState(seat=s) for s in range(4)]).points == (0, 0)
