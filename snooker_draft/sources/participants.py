"""
Participant stores.

Participants come from a spreadsheet: either a CSV export or the JSON
served by the sheet's Apps Script endpoint. Picks are entered as player
names and linked to player ids against a snapshot.
"""
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

import httpx
import polars as pl

from snooker_draft.core.snapshot import TournamentSnapshot
from snooker_draft.exceptions import ConfigurationError, ParticipantDataError
from snooker_draft.leaderboard import PICK_SLOTS, Participant

logger = logging.getLogger(__name__)

NAME_COLUMN = "Participant"
RANK_COLUMN = "PreviousRank"
ID_COLUMN = "Id"


def parse_participant_records(records: Iterable[Mapping[str, Any]]) -> List[Participant]:
    """
    Convert spreadsheet rows to participants.

    Rows need a `Participant` column and `Pick1`..`Pick3`; `PreviousRank`
    and `Id` are optional. Rows without a name are skipped.
    """
    participants = []
    for index, row in enumerate(records):
        name = _text(row.get(NAME_COLUMN))
        if not name:
            logger.debug(f"Skipping participant row {index} without a name")
            continue

        picks = tuple(_text(row.get(f"Pick{slot + 1}")) for slot in range(PICK_SLOTS))
        participants.append(Participant(
            participant_id=_text(row.get(ID_COLUMN)) or str(index + 1),
            name=name,
            picks=picks,
            tiebreak=_rank(row.get(RANK_COLUMN), name),
        ))
    return participants


class CsvParticipantStore:
    """Participants from a CSV export of the contest sheet."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load_participants(self) -> List[Participant]:
        if not self.path.exists():
            raise ParticipantDataError(f"Participants file not found: {self.path}")
        try:
            df = pl.read_csv(self.path, infer_schema_length=0)
        except (OSError, pl.exceptions.PolarsError) as e:
            raise ParticipantDataError(f"Could not read {self.path}: {e}") from e

        if NAME_COLUMN not in df.columns:
            raise ParticipantDataError(f"{self.path} has no '{NAME_COLUMN}' column")

        participants = parse_participant_records(df.to_dicts())
        logger.info(f"Loaded {len(participants)} participants from {self.path}")
        return participants


class AppsScriptParticipantStore:
    """Participants from Apps Script JSON: {"Participants": [...]}, file or URL."""

    def __init__(self, source: str, timeout_s: float = 10.0, client: Optional[httpx.Client] = None):
        self.source = source
        self.timeout_s = timeout_s
        self.client = client

    def _read(self) -> Dict[str, Any]:
        if self.source.startswith(("http://", "https://")):
            client = self.client or httpx.Client(timeout=self.timeout_s, follow_redirects=True)
            try:
                response = client.get(self.source)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPError as e:
                raise ParticipantDataError(f"Failed to load participants: {e}") from e
            except ValueError as e:
                raise ParticipantDataError("Participants endpoint returned invalid JSON") from e
            finally:
                if self.client is None:
                    client.close()

        path = Path(self.source)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ParticipantDataError(f"Could not read {path}: {e}") from e

    def load_participants(self) -> List[Participant]:
        data = self._read()
        records = data.get("Participants") if isinstance(data, dict) else None
        if records is None:
            raise ParticipantDataError("Participants data has no 'Participants' list")
        return parse_participant_records(records)


def participant_store_for(source: str, timeout_s: float = 10.0):
    """Pick a store from the shape of the source string."""
    if not source or not source.strip():
        raise ConfigurationError("No participants source configured (PARTICIPANTS_SOURCE)")
    if source.lower().endswith(".csv"):
        return CsvParticipantStore(Path(source))
    return AppsScriptParticipantStore(source, timeout_s=timeout_s)


def link_picks(participants: Iterable[Participant], snapshot: TournamentSnapshot) -> List[Participant]:
    """
    Replace pick names with player ids, matching names case-insensitively.

    Picks that already are player ids are kept; unknown names are kept
    as entered and will show up as not-found picks on the leaderboard.
    """
    index = snapshot.name_index()
    linked = []
    for participant in participants:
        picks = tuple(
            _link(pick, snapshot.players, index) for pick in participant.picks
        )
        linked.append(replace(participant, picks=picks))
    return linked


def missing_picks(participants: Iterable[Participant], snapshot: TournamentSnapshot) -> List[str]:
    """Picked names that match no player in the snapshot, sorted."""
    index = snapshot.name_index()
    missing = set()
    for participant in participants:
        for pick in participant.selected:
            if pick not in snapshot.players and pick.strip().lower() not in index:
                missing.add(pick)
    return sorted(missing)


def _link(pick: Optional[str], players: Mapping[str, Any], index: Mapping[str, str]) -> Optional[str]:
    if pick is None or pick in players:
        return pick
    return index.get(pick.strip().lower(), pick)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _rank(value: Any, name: str) -> Optional[int]:
    text = _text(value)
    if text is None:
        return None
    try:
        return int(float(text))
    except ValueError:
        logger.warning(f"Ignoring non-numeric previous rank {text!r} for {name}")
        return None
