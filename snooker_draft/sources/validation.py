"""
Static snapshot consistency checks.

Compares a saved snapshot file against the live draw: round names,
player names and match ids, plus how far the live draw has progressed.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from snooker_draft.core.snapshot import TournamentSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotComparison:
    """Differences between a static snapshot and the live draw."""
    round_names: Tuple[Tuple[Optional[str], Optional[str]], ...]   # (static, live) per round
    missing_players: Tuple[str, ...]      # Live players absent from the static file
    extra_players: Tuple[str, ...]        # Static players absent from the live draw
    missing_matches: Tuple[str, ...]
    extra_matches: Tuple[str, ...]
    completed_matches: int = 0
    total_matches: int = 0

    @property
    def mismatched_rounds(self) -> List[int]:
        return [i for i, (static, live) in enumerate(self.round_names) if static != live]

    @property
    def is_consistent(self) -> bool:
        return not (
            self.mismatched_rounds
            or self.missing_players
            or self.extra_players
            or self.missing_matches
            or self.extra_matches
        )

    @property
    def completion_rate(self) -> float:
        if not self.total_matches:
            return 0.0
        return self.completed_matches / self.total_matches

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consistent": self.is_consistent,
            "round_names": [list(pair) for pair in self.round_names],
            "missing_players": list(self.missing_players),
            "extra_players": list(self.extra_players),
            "missing_matches": list(self.missing_matches),
            "extra_matches": list(self.extra_matches),
            "completed_matches": self.completed_matches,
            "total_matches": self.total_matches,
        }


def _round_names(snapshot: TournamentSnapshot) -> List[str]:
    bracket = snapshot.bracket
    if bracket is None:
        return []
    return [bracket.round_name(r) for r in range(len(bracket.rounds))]


def _match_ids(snapshot: TournamentSnapshot) -> List[str]:
    if snapshot.bracket is None:
        return []
    return [node.match_id for node in snapshot.bracket.all_matches]


def _player_names(snapshot: TournamentSnapshot) -> Dict[str, str]:
    """Lower-cased name -> display name."""
    return {p.name.strip().lower(): p.name for p in snapshot.players.values()}


def compare_snapshots(static: TournamentSnapshot, live: TournamentSnapshot) -> SnapshotComparison:
    """
    Compare a static snapshot with the live draw.

    Players are matched by case-insensitive name since ids can differ
    between a hand-written file and the API. Rounds are paired first
    round first; a round missing on one side pairs with None.

    Args:
        static: Snapshot loaded from file
        live: Snapshot from the live provider

    Returns:
        SnapshotComparison
    """
    static_rounds = _round_names(static)
    live_rounds = _round_names(live)
    depth = max(len(static_rounds), len(live_rounds))
    pairs = tuple(
        (
            static_rounds[i] if i < len(static_rounds) else None,
            live_rounds[i] if i < len(live_rounds) else None,
        )
        for i in range(depth)
    )

    static_players = _player_names(static)
    live_players = _player_names(live)

    static_matches = _match_ids(static)
    live_matches = _match_ids(live)
    static_set, live_set = set(static_matches), set(live_matches)

    completed = 0
    if live.bracket is not None:
        completed = sum(1 for node in live.bracket.all_matches if node.is_decided)

    comparison = SnapshotComparison(
        round_names=pairs,
        missing_players=tuple(sorted(live_players[k] for k in live_players.keys() - static_players.keys())),
        extra_players=tuple(sorted(static_players[k] for k in static_players.keys() - live_players.keys())),
        missing_matches=tuple(m for m in live_matches if m not in static_set),
        extra_matches=tuple(m for m in static_matches if m not in live_set),
        completed_matches=completed,
        total_matches=len(live_matches),
    )

    if comparison.is_consistent:
        logger.info("Static snapshot matches the live draw")
    else:
        logger.warning(
            f"Static snapshot differs from the live draw: "
            f"{len(comparison.mismatched_rounds)} round names, "
            f"{len(comparison.missing_players) + len(comparison.extra_players)} players, "
            f"{len(comparison.missing_matches) + len(comparison.extra_matches)} matches"
        )
    return comparison
