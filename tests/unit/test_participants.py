"""
Unit tests for participant stores and pick linking.
"""
import json

import httpx
import pytest

from snooker_draft.core import ParticipantStore
from snooker_draft.exceptions import ConfigurationError, ParticipantDataError
from snooker_draft.leaderboard import Participant
from snooker_draft.sources.participants import (
    AppsScriptParticipantStore,
    CsvParticipantStore,
    link_picks,
    missing_picks,
    parse_participant_records,
    participant_store_for,
)


CSV = """Participant,Pick1,Pick2,Pick3,PreviousRank
Alice,Player 1,Player 9,Player 5,3
Bob,P1,,player 3,
,Player 2,Player 3,Player 4,1
"""


class TestParseRecords:

    def test_defaults(self):
        participants = parse_participant_records([
            {"Participant": "Alice", "Pick1": "Player 1", "Pick2": None, "Pick3": "Player 2", "PreviousRank": "4"},
        ])

        assert participants == [Participant("1", "Alice", ("Player 1", None, "Player 2"), 4)]

    def test_bad_rank_ignored(self):
        participants = parse_participant_records([{"Participant": "Alice", "PreviousRank": "n/a", "Id": "a-1"}])

        assert participants[0].tiebreak is None
        assert participants[0].participant_id == "a-1"
        assert participants[0].picks == (None, None, None)


class TestCsvParticipantStore:

    def test_load(self, tmp_path):
        path = tmp_path / "participants.csv"
        path.write_text(CSV)

        store = CsvParticipantStore(path)
        participants = store.load_participants()

        assert isinstance(store, ParticipantStore)
        assert [p.name for p in participants] == ["Alice", "Bob"]
        assert participants[0].tiebreak == 3
        assert participants[1].picks == ("P1", None, "player 3")

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParticipantDataError):
            CsvParticipantStore(tmp_path / "nope.csv").load_participants()

    def test_missing_name_column(self, tmp_path):
        path = tmp_path / "participants.csv"
        path.write_text("Name,Pick1\nAlice,P1\n")
        with pytest.raises(ParticipantDataError):
            CsvParticipantStore(path).load_participants()


class TestAppsScriptParticipantStore:

    PAYLOAD = {"Participants": [{"Participant": "Alice", "Pick1": "P1", "Pick2": "P9", "Pick3": "P5"}]}

    def test_from_url(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=self.PAYLOAD)))
        store = AppsScriptParticipantStore("https://script.test/exec", client=client)

        assert store.load_participants()[0].picks == ("P1", "P9", "P5")

    def test_url_error(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
        with pytest.raises(ParticipantDataError):
            AppsScriptParticipantStore("https://script.test/exec", client=client).load_participants()

    def test_from_file(self, tmp_path):
        path = tmp_path / "participants.json"
        path.write_text(json.dumps(self.PAYLOAD))

        assert AppsScriptParticipantStore(str(path)).load_participants()[0].name == "Alice"

    def test_missing_list(self, tmp_path):
        path = tmp_path / "participants.json"
        path.write_text(json.dumps({"rows": []}))
        with pytest.raises(ParticipantDataError):
            AppsScriptParticipantStore(str(path)).load_participants()

    def test_store_for_source(self):
        assert isinstance(participant_store_for("data/participants.csv"), CsvParticipantStore)
        assert isinstance(participant_store_for("https://script.test/exec"), AppsScriptParticipantStore)

    def test_store_for_empty_source(self):
        with pytest.raises(ConfigurationError):
            participant_store_for("  ")


class TestLinkPicks:

    def test_names_linked_to_ids(self, snapshot16):
        participants = [Participant("1", "Alice", ("player 1", "P9", "Nobody"))]

        linked = link_picks(participants, snapshot16)
        assert linked[0].picks == ("P1", "P9", "Nobody")

    def test_missing_picks(self, snapshot16):
        participants = [
            Participant("1", "Alice", ("Player 1", "Nobody", None)),
            Participant("2", "Bob", ("Somebody", "Nobody", "P2")),
        ]
        assert missing_picks(participants, snapshot16) == ["Nobody", "Somebody"]
