"""
Static snapshot files.

A snapshot file holds the bracket and player map in a normalised JSON
layout. Raw WST draw JSON saved to disk is accepted as well.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping

from snooker_draft.bracket.ladder import DEFAULT_LADDER, PointsLadder
from snooker_draft.bracket.models import Bracket, Player
from snooker_draft.bracket.standings import player_standings
from snooker_draft.core.snapshot import TournamentSnapshot
from snooker_draft.exceptions import BracketMalformed, DataSourceError

from .wst import parse_draw

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def snapshot_to_dict(snapshot: TournamentSnapshot) -> Dict[str, Any]:
    """Serialize a snapshot to the normalised layout."""
    return {
        "version": SNAPSHOT_VERSION,
        "tournament_name": snapshot.tournament_name,
        "source": snapshot.source,
        "fetched_at": snapshot.fetched_at.isoformat(),
        "bracket": snapshot.bracket.to_dict() if snapshot.bracket else None,
        "players": {pid: p.to_dict() for pid, p in snapshot.players.items()},
    }


def snapshot_from_dict(
    data: Mapping[str, Any],
    ladder: PointsLadder = DEFAULT_LADDER,
    source: str = "file",
) -> TournamentSnapshot:
    """
    Build a snapshot from the normalised layout or raw WST draw JSON.

    A bracket that fails validation is dropped (bracket=None) rather than
    raised. Players missing from the file are derived from the bracket.
    """
    if "data" in data:
        return parse_draw(data, ladder=ladder, source=source)

    bracket = None
    bracket_data = data.get("bracket")
    if bracket_data:
        try:
            bracket = Bracket.from_rounds(
                bracket_data.get("rounds", []),
                round_names=bracket_data.get("round_names", []),
            )
        except BracketMalformed as e:
            logger.warning(f"Snapshot bracket is malformed, continuing without it: {e}")

    players: Dict[str, Player] = {}
    if bracket is not None:
        players.update(player_standings(bracket, ladder=ladder))
    for player_id, record in (data.get("players") or {}).items():
        players[str(player_id)] = Player.from_dict({"player_id": player_id, **record})

    fetched_at = data.get("fetched_at")
    kwargs = {}
    if fetched_at:
        kwargs["fetched_at"] = datetime.fromisoformat(fetched_at)

    return TournamentSnapshot(
        bracket=bracket,
        players=players,
        source=data.get("source") or source,
        tournament_name=data.get("tournament_name", ""),
        **kwargs,
    )


def load_snapshot(path: Path, ladder: PointsLadder = DEFAULT_LADDER) -> TournamentSnapshot:
    """Load a snapshot file."""
    path = Path(path)
    if not path.exists():
        raise DataSourceError(f"Snapshot file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise DataSourceError(f"Could not read snapshot {path}: {e}") from e

    try:
        snapshot = snapshot_from_dict(data, ladder=ladder, source="file")
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise DataSourceError(f"Invalid snapshot {path}: {e}") from e
    logger.info(f"Loaded snapshot from {path} ({len(snapshot.players)} players)")
    return snapshot


def save_snapshot(snapshot: TournamentSnapshot, path: Path) -> Path:
    """Write a snapshot file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(snapshot_to_dict(snapshot), indent=2), encoding="utf-8")
    return path


class FileSnapshotProvider:
    """Tournament data provider reading a static snapshot file."""

    def __init__(self, path: Path, ladder: PointsLadder = DEFAULT_LADDER):
        self.path = Path(path)
        self.ladder = ladder

    def load_snapshot(self) -> TournamentSnapshot:
        return load_snapshot(self.path, ladder=self.ladder)
