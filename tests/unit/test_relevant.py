"""
Unit tests for relevant match listing.
"""
from snooker_draft.leaderboard import Participant
from snooker_draft.relevant import relevant_matches


class TestRelevantMatches:

    def test_lists_matches_with_picks(self, bracket16, players16, sample_participants):
        matches = relevant_matches(bracket16, sample_participants, players16)

        ids = [m.match_id for m in matches]
        assert ids == ["R0M0", "R0M1", "R0M2", "R0M4", "R0M7"]

    def test_pickers_and_names(self, bracket16, players16, sample_participants):
        first = relevant_matches(bracket16, sample_participants, players16)[0]

        assert first.home_name == "Player 1"
        assert first.round_name == "Last 16"
        assert first.pickers == {"P1": ("Alice", "Bob"), "P2": ("Carol",)}
        assert first.is_pick_vs_pick

    def test_decided_matches_skipped(self, bracket_factory, sample_participants):
        bracket = bracket_factory(16, winners={"R0M0": "P1"})
        matches = relevant_matches(bracket, sample_participants)

        ids = [m.match_id for m in matches]
        assert "R0M0" not in ids
        assert "R1M0" in ids

    def test_tbd_opponent(self, bracket_factory):
        bracket = bracket_factory(4, winners={"R0M0": "P1"})
        matches = relevant_matches(bracket, [Participant("1", "Alice", picks=("P1", None, None))])

        assert len(matches) == 1
        assert matches[0].away_name == "TBD"
        assert not matches[0].is_pick_vs_pick
        assert matches[0].to_dict()["pickers"] == {"P1": ["Alice"]}
