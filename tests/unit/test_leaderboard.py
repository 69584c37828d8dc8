"""
Unit tests for leaderboard scoring and ranking.
"""
import pytest

from snooker_draft.bracket import Player, PlayerStatus, player_standings
from snooker_draft.leaderboard import (
    NO_PICK,
    NOT_FOUND,
    LeaderboardRow,
    Participant,
    assign_ranks,
    compute_leaderboard,
    leaderboard_frame,
    score_participant,
)


class TestParticipant:
    """Tests for the Participant record."""

    def test_blank_picks_become_none(self):
        participant = Participant("1", "Alice", picks=(" P1 ", "", None))
        assert participant.picks == ("P1", None, None)
        assert participant.selected == ["P1"]

    def test_requires_three_slots(self):
        with pytest.raises(ValueError):
            Participant("1", "Alice", picks=("P1", "P2"))


class TestScoreParticipant:
    """Tests for score_participant."""

    def test_fresh_draw(self, bracket16, players16):
        row = score_participant(Participant("1", "Alice", picks=("P1", "P9", "P5")), bracket16, players16)

        assert row.earned_points == 0
        assert row.max_points == 30
        assert row.is_exact_bound
        assert not row.degraded
        assert [p.name for p in row.picks] == ["Player 1", "Player 9", "Player 5"]

    def test_missing_player_is_degraded(self, bracket16, players16):
        row = score_participant(Participant("1", "Alice", picks=("P1", "Nobody", None)), bracket16, players16)

        assert row.degraded
        assert row.picks[1].status == NOT_FOUND
        assert row.picks[2].status == NO_PICK
        assert row.max_points == 14

    def test_no_bracket_is_inexact(self, players16):
        row = score_participant(Participant("1", "Alice", picks=("P1", "P2", "P3")), None, players16)

        assert not row.is_exact_bound
        assert row.max_points == 30

    def test_max_never_below_earned(self, bracket16, players16):
        """Inconsistent provider points are clamped rather than reported below earned."""
        players = dict(players16)
        players["P1"] = Player("P1", "Player 1", status=PlayerStatus.ACTIVE, points=20)

        row = score_participant(Participant("1", "Alice", picks=("P1", None, None)), bracket16, players)
        assert row.earned_points == 20
        assert row.max_points == 20

    def test_all_eliminated(self, finished4):
        players = player_standings(finished4)
        row = score_participant(Participant("1", "Alice", picks=("P2", "P3", "P4")), finished4, players)

        assert row.all_eliminated
        assert row.earned_points == row.max_points == 10


class TestComputeLeaderboard:
    """Tests for compute_leaderboard."""

    def test_sorted_by_max_points(self, bracket16, players16, sample_participants):
        rows = compute_leaderboard(sample_participants, bracket16, players16)

        assert [r.name for r in rows] == ["Alice", "Carol", "Bob"]
        assert [r.max_points for r in rows] == [30, 24, 24]
        assert [r.rank for r in rows] == [1, 2, 3]

    def test_tiebreak_on_previous_rank(self, bracket16, players16):
        """Higher previous rank number wins a tie; a missing rank counts as 999."""
        participants = [
            Participant("1", "Rank5", picks=("P1", None, None), tiebreak=5),
            Participant("2", "Rank2", picks=("P9", None, None), tiebreak=2),
            Participant("3", "Unranked", picks=("P5", None, None)),
        ]
        rows = compute_leaderboard(participants, bracket16, players16)

        assert [r.name for r in rows] == ["Unranked", "Rank5", "Rank2"]

    def test_custom_tiebreak_key(self, bracket16, players16):
        participants = [
            Participant("1", "Zed", picks=("P1", None, None)),
            Participant("2", "Amy", picks=("P9", None, None)),
        ]
        rows = compute_leaderboard(participants, bracket16, players16, tiebreak_key=lambda p: p.name)

        assert [r.name for r in rows] == ["Amy", "Zed"]

    def test_tiebreak_key_returning_none(self, bracket16, players16):
        """A tiebreak key that yields None sorts that participant last instead of failing."""
        participants = [
            Participant("1", "Unranked", picks=("P1", None, None)),
            Participant("2", "Ranked", picks=("P9", None, None), tiebreak=3),
        ]
        rows = compute_leaderboard(participants, bracket16, players16, tiebreak_key=lambda p: p.tiebreak)

        assert [r.name for r in rows] == ["Ranked", "Unranked"]
        assert [r.rank for r in rows] == [1, 2]

    def test_failing_tiebreak_key(self, mocker, bracket16, players16):
        logger = mocker.patch("snooker_draft.leaderboard.logger")
        participants = [
            Participant("1", "Broken", picks=("P1", None, None)),
            Participant("2", "Fine", picks=("P9", None, None), tiebreak=3),
        ]
        rows = compute_leaderboard(participants, bracket16, players16, tiebreak_key=lambda p: 10 // p.tiebreak)

        assert [r.name for r in rows] == ["Fine", "Broken"]
        assert logger.log_error.call_args[0][0] == "tiebreak_key_failed"

    def test_incomparable_tiebreak_values(self, bracket16, players16):
        """Keys of mixed types fall back to max points and input order."""
        participants = [
            Participant("1", "Text", picks=("P1", None, None)),
            Participant("2", "Number", picks=("P9", None, None)),
        ]
        keys = {"Text": "a", "Number": 1}
        rows = compute_leaderboard(participants, bracket16, players16, tiebreak_key=lambda p: keys[p.name])

        assert [r.name for r in rows] == ["Text", "Number"]

    def test_idempotent(self, bracket16, players16, sample_participants):
        first = compute_leaderboard(sample_participants, bracket16, players16)
        second = compute_leaderboard(sample_participants, bracket16, players16)
        assert first == second

    def test_never_raises(self, players16):
        """A scoring failure becomes a degraded zero row."""
        rows = compute_leaderboard([Participant("1", "Alice", picks=("P1", None, None))], object(), players16)

        assert len(rows) == 1
        assert rows[0].degraded
        assert rows[0].max_points == 0

    def test_missing_bracket_logged(self, mocker, players16, sample_participants):
        logger = mocker.patch("snooker_draft.leaderboard.logger")

        rows = compute_leaderboard(sample_participants, None, players16)

        logger.log_warning.assert_any_call("bracket_unavailable", participants=3)
        assert not any(r.is_exact_bound for r in rows)

    def test_empty(self, bracket16, players16):
        assert compute_leaderboard([], bracket16, players16) == []


class TestRanks:
    """Tests for assign_ranks."""

    def test_ties_share_rank(self):
        rows = [
            (LeaderboardRow("1", "A", 0, 30, True), 1),
            (LeaderboardRow("2", "B", 0, 24, True), 2),
            (LeaderboardRow("3", "C", 0, 24, True), 2),
            (LeaderboardRow("4", "D", 0, 14, True), 4),
        ]
        assert [r.rank for r in assign_ranks(rows)] == [1, 2, 2, 4]


class TestLeaderboardFrame:
    """Tests for leaderboard_frame."""

    def test_columns(self, bracket16, players16, sample_participants):
        frame = leaderboard_frame(compute_leaderboard(sample_participants, bracket16, players16))

        assert frame.height == 3
        assert frame.columns[:4] == ["rank", "participant", "earned_points", "max_points"]
        assert frame["pick1"].to_list() == ["Player 1", "Player 2", "Player 1"]
        assert frame["pick2"].to_list()[1] == "No Pick"

    def test_empty_frame(self):
        frame = leaderboard_frame([])
        assert frame.height == 0
        assert "pick3_points" in frame.columns
