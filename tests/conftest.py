# tests/conftest.py
import pytest
from typing import Dict, Optional

from snooker_draft.bracket import Bracket, player_standings
from snooker_draft.core import TournamentSnapshot
from snooker_draft.leaderboard import Participant

# Configure pytest
pytest_plugins = []

# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


def make_rounds(draw_size: int, winners: Optional[Dict[str, str]] = None):
    """
    Round records for a draw of P1..Pn, later rounds TBD.

    Match ids are R{round}M{slot}; winners maps match id -> player id.
    For a 16 draw, P1-P8 sit behind semifinal R2M0 and P9-P16 behind R2M1.
    """
    winners = winners or {}
    rounds = []
    matches = draw_size // 2
    round_num = 0
    while matches >= 1:
        records = []
        for slot in range(matches):
            match_id = f"R{round_num}M{slot}"
            record = {"match_id": match_id, "winner": winners.get(match_id)}
            if round_num == 0:
                record["home"] = f"P{2 * slot + 1}"
                record["away"] = f"P{2 * slot + 2}"
            records.append(record)
        rounds.append(records)
        matches //= 2
        round_num += 1
    return rounds


def make_bracket(draw_size: int = 16, winners: Optional[Dict[str, str]] = None) -> Bracket:
    names = {
        16: ["Last 16", "Quarterfinal", "Semifinal", "Final"],
        8: ["Quarterfinal", "Semifinal", "Final"],
        4: ["Semifinal", "Final"],
    }
    return Bracket.from_rounds(make_rounds(draw_size, winners), round_names=names.get(draw_size, ()))


@pytest.fixture
def bracket_factory():
    """make_bracket for tests that need their own results."""
    return make_bracket


@pytest.fixture
def bracket16():
    """Fresh 16-player draw, nothing played."""
    return make_bracket(16)


@pytest.fixture
def players16(bracket16):
    return player_standings(bracket16, names={f"P{i}": f"Player {i}" for i in range(1, 17)})


@pytest.fixture
def snapshot16(bracket16, players16):
    return TournamentSnapshot(bracket=bracket16, players=players16, source="test", tournament_name="Test Open")


@pytest.fixture
def finished4():
    """4-player draw played to the end: P1 beats P3 in the final."""
    return make_bracket(4, winners={"R0M0": "P1", "R0M1": "P3", "R1M0": "P1"})


@pytest.fixture
def sample_participants():
    return [
        Participant(participant_id="1", name="Alice", picks=("P1", "P9", "P5"), tiebreak=3),
        Participant(participant_id="2", name="Bob", picks=("P1", "P3", "P5"), tiebreak=1),
        Participant(participant_id="3", name="Carol", picks=("P2", None, "P16"), tiebreak=None),
    ]


@pytest.fixture
def wst_draw_response():
    """Minimal WST draws payload: 4-player main draw, one semifinal played."""
    def match(number, home, away, home_name, away_name, winner=0):
        return {
            "tournamentMatchNumber": number,
            "homePlayerID": home,
            "awayPlayerID": away,
            "winningPlayerID": winner,
            "player1Name": home_name,
            "player2Name": away_name,
            "homePlayer": {"seasonStats": [{"season": 2024, "ranking": home}, {"season": 2025, "ranking": home + 1}]} if home else {},
            "awayPlayer": {"seasonStats": [{"season": 2025, "ranking": away + 1}]} if away else {},
        }

    return {
        "data": {
            "attributes": {
                "name": "Test Championship",
                "rounds": [
                    {
                        "roundNumber": 2,
                        "roundName": "Final",
                        "matches": [match(3, 1, 0, "Judd Trump", "TBD")],
                    },
                    {
                        "roundNumber": 1,
                        "roundName": "Semi Finals",
                        "matches": [
                            match(1, 1, 2, "Judd Trump", "Mark Selby", winner=1),
                            match(2, 3, 4, "Mark Allen", "Neil Robertson"),
                        ],
                    },
                ],
            }
        }
    }
