"""
Data collaborators: tournament snapshots and participant stores.
"""
from .wst import WSTClient, WSTProvider, parse_draw
from .snapshot import FileSnapshotProvider, load_snapshot, save_snapshot
from .validation import SnapshotComparison, compare_snapshots
from .participants import (
    CsvParticipantStore,
    AppsScriptParticipantStore,
    participant_store_for,
    link_picks,
    missing_picks,
)

__all__ = [
    "WSTClient",
    "WSTProvider",
    "parse_draw",
    "FileSnapshotProvider",
    "load_snapshot",
    "save_snapshot",
    "SnapshotComparison",
    "compare_snapshots",
    "CsvParticipantStore",
    "AppsScriptParticipantStore",
    "participant_store_for",
    "link_picks",
    "missing_picks",
]
