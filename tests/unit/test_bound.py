"""
Unit tests for the maximum-points bound.
"""
import pytest

from snooker_draft.bracket import (
    DEFAULT_LADDER,
    Player,
    PlayerStatus,
    PointsLadder,
    bound_for_players,
    classify,
    fallback_max_points,
    max_points,
    player_standings,
    resolve_path,
)


def bound(bracket, *player_ids):
    paths = [resolve_path(p, bracket) for p in player_ids]
    return max_points(classify(paths), DEFAULT_LADDER)


class TestFallbackBound:
    """Tests for the conflict-blind bound."""

    @pytest.mark.parametrize("active,expected", [
        (0, 0),
        (1, 14),
        (2, 24),
        (3, 30),
        (4, 36),
        (6, 36),
    ])
    def test_values(self, active, expected):
        assert fallback_max_points(active) == expected

    def test_custom_ladder(self):
        ladder = PointsLadder(champion=20, rungs=(12, 8, 4, 2))
        assert fallback_max_points(2, ladder) == 32


class TestMaxPoints:
    """Tests for the bracket-aware bound on a fresh 16 draw."""

    def test_no_picks(self, bracket16):
        assert max_points(classify([])) == 0

    def test_single_pick(self, bracket16):
        assert bound(bracket16, "P1") == 14

    def test_opposite_halves(self, bracket16):
        """Champion plus runner-up."""
        assert bound(bracket16, "P1", "P9") == 24

    def test_same_semifinal(self, bracket16):
        """They meet in the semifinal: champion plus a semifinalist."""
        assert bound(bracket16, "P1", "P5") == 20

    def test_same_quarterfinal(self, bracket16):
        assert bound(bracket16, "P1", "P3") == 18

    def test_first_round_opponents(self, bracket16):
        """The loser of an opening match earns nothing."""
        assert bound(bracket16, "P1", "P2") == 14

    def test_two_in_one_half_one_in_other(self, bracket16):
        assert bound(bracket16, "P1", "P5", "P9") == 30

    def test_three_in_one_half(self, bracket16):
        """Champion, a semifinalist and a quarterfinalist."""
        assert bound(bracket16, "P1", "P3", "P5") == 24

    @pytest.mark.parametrize("picks", [
        ("P1", "P2"),
        ("P1", "P2", "P3"),
        ("P1", "P9", "P16"),
        ("P1", "P2", "P3", "P4"),
        ("P1", "P5", "P9", "P13"),
    ])
    def test_never_above_fallback(self, bracket16, picks):
        assert bound(bracket16, *picks) <= fallback_max_points(len(picks))

    def test_unplaced_path_tries_every_slot(self, bracket16):
        """A pick with an unknown semifinal is assumed to sit wherever it scores best."""
        partial = resolve_path("Q1", bracket16, Player("Q1", "Qualifier", progression=((0, "QUAL-7"),)))
        groups = classify([resolve_path("P1", bracket16), partial])

        assert max_points(groups) == 24

    def test_finalists(self, bracket_factory):
        bracket = bracket_factory(4, winners={"R0M0": "P1", "R0M1": "P4"})
        assert bound(bracket, "P1", "P4") == 24


class TestBoundForPlayers:
    """Tests for bound_for_players."""

    def test_exact_with_bracket(self, bracket16, players16):
        result = bound_for_players([players16["P1"], players16["P9"]], bracket16)

        assert result.total == 24
        assert result.locked == 0
        assert result.is_exact

    def test_finished_picks_are_locked(self, finished4):
        players = player_standings(finished4)
        result = bound_for_players([players["P1"], players["P3"]], finished4)

        assert result.total == 24
        assert result.locked == 24
        assert result.is_exact

    def test_mixed_locked_and_live(self, bracket_factory):
        bracket = bracket_factory(16, winners={"R0M0": "P2"})
        players = player_standings(bracket)
        result = bound_for_players([players["P1"], players["P2"]], bracket)

        assert result.locked == 0
        assert result.total == 14

    def test_no_bracket_uses_fallback(self, players16):
        result = bound_for_players([players16["P1"], players16["P2"], players16["P3"]], None)

        assert result.total == 30
        assert not result.is_exact

    def test_unresolved_pick_keeps_current_points(self, bracket16, players16):
        ghost = Player("Q9", "Ghost", status=PlayerStatus.ACTIVE, points=4)
        result = bound_for_players([players16["P1"], ghost], bracket16)

        assert result.total == 18
        assert result.unresolved == ("Q9",)
        assert not result.is_exact
        assert result.to_dict()["unresolved"] == ["Q9"]
