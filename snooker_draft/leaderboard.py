"""
Contest leaderboard.

Merges each participant's earned points with the maximum points their
picks can still reach. Every degraded condition (missing player, missing
bracket, unlocatable pick) is reported on the row instead of raised, so a
leaderboard can always be produced.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import polars as pl

from snooker_draft.bracket.bound import bound_for_players
from snooker_draft.bracket.ladder import DEFAULT_LADDER, PointsLadder
from snooker_draft.bracket.models import WORST_SEED, Bracket, Player, PlayerStatus
from snooker_draft.exceptions import DraftContestError, PlayerNotFound
from snooker_draft.utils.observability import Logger

logger = Logger(__name__)

PICK_SLOTS = 3
NO_PICK = "no_pick"
NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Participant:
    """A contest entrant and their three ordered picks (None = no pick)."""
    participant_id: str
    name: str
    picks: Tuple[Optional[str], ...] = (None,) * PICK_SLOTS
    tiebreak: Optional[int] = None      # Previous rank

    def __post_init__(self):
        picks = tuple(_clean_pick(p) for p in self.picks)
        if len(picks) != PICK_SLOTS:
            raise ValueError(
                f"Participant {self.name} must have exactly {PICK_SLOTS} pick slots, got {len(picks)}"
            )
        object.__setattr__(self, "picks", picks)

    @property
    def selected(self) -> List[str]:
        """Picks that were actually made."""
        return [p for p in self.picks if p is not None]


@dataclass(frozen=True)
class PickResult:
    """One pick's contribution to a participant's row."""
    player_id: Optional[str]
    name: str
    status: str
    points: int = 0

    @property
    def is_live(self) -> bool:
        return self.status in (PlayerStatus.NOT_STARTED.value, PlayerStatus.ACTIVE.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "status": self.status,
            "points": self.points,
        }


@dataclass(frozen=True)
class LeaderboardRow:
    """Leaderboard entry for one participant."""
    participant_id: str
    name: str
    earned_points: int
    max_points: int
    is_exact_bound: bool
    degraded: bool = False
    rank: int = 0
    tiebreak: Optional[int] = None
    picks: Tuple[PickResult, ...] = field(default_factory=tuple)
    all_eliminated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "participant_id": self.participant_id,
            "name": self.name,
            "earned_points": self.earned_points,
            "max_points": self.max_points,
            "is_exact_bound": self.is_exact_bound,
            "degraded": self.degraded,
            "all_eliminated": self.all_eliminated,
            "tiebreak": self.tiebreak,
            "picks": [p.to_dict() for p in self.picks],
        }


def default_tiebreak(participant: Participant) -> Any:
    """Higher previous rank number first; a missing rank counts as 999."""
    rank = participant.tiebreak if participant.tiebreak is not None else WORST_SEED
    return -rank


def _tiebreak_value(key: Callable[[Participant], Any], participant: Participant) -> Tuple[bool, Any]:
    """Sortable tiebreak: None or a failing key sorts after every real value."""
    try:
        value = key(participant)
    except Exception as e:
        logger.log_error("tiebreak_key_failed", exc_info=e, participant=participant.name)
        return True, 0
    if value is None:
        return True, 0
    return False, value


def score_participant(
    participant: Participant,
    bracket: Optional[Bracket],
    players: Mapping[str, Player],
    ladder: PointsLadder = DEFAULT_LADDER,
) -> LeaderboardRow:
    """
    Earned points and maximum reachable points for one participant.

    Args:
        participant: Participant with picks referencing player ids
        bracket: Current bracket, or None if unavailable
        players: Player id -> Player from the same snapshot
        ladder: Points ladder

    Returns:
        Unranked LeaderboardRow
    """
    picked: List[Player] = []
    results: List[PickResult] = []
    degraded = False

    for pick in participant.picks:
        if pick is None:
            results.append(PickResult(player_id=None, name="No Pick", status=NO_PICK))
            continue
        try:
            player = _lookup(pick, players)
        except PlayerNotFound as e:
            logger.log_warning("pick_player_not_found", participant=participant.name, pick=e.player_id)
            results.append(PickResult(player_id=pick, name=pick, status=NOT_FOUND))
            degraded = True
            continue
        picked.append(player)
        results.append(PickResult(
            player_id=player.player_id,
            name=player.name,
            status=player.status.value,
            points=player.points,
        ))

    earned = sum(p.points for p in picked)

    try:
        bound = bound_for_players(picked, bracket, ladder)
    except DraftContestError as e:
        logger.log_warning("exact_bound_failed", participant=participant.name, error=str(e))
        bound = bound_for_players(picked, None, ladder)

    if bound.unresolved:
        degraded = True

    max_total = bound.total
    if max_total < earned:
        logger.log_warning(
            "bound_below_earned",
            participant=participant.name,
            bound=bound.total,
            earned=earned,
        )
        max_total = earned

    return LeaderboardRow(
        participant_id=participant.participant_id,
        name=participant.name,
        earned_points=earned,
        max_points=max_total,
        is_exact_bound=bound.is_exact,
        degraded=degraded,
        tiebreak=participant.tiebreak,
        picks=tuple(results),
        all_eliminated=not any(r.is_live for r in results),
    )


def compute_leaderboard(
    participants: Sequence[Participant],
    bracket: Optional[Bracket],
    players: Mapping[str, Player],
    ladder: PointsLadder = DEFAULT_LADDER,
    tiebreak_key: Optional[Callable[[Participant], Any]] = None,
) -> List[LeaderboardRow]:
    """
    Build the ranked leaderboard.

    Rows are sorted by max points (descending), then by the tiebreak key,
    then by input order. Never raises: failures end up as degraded rows.

    Args:
        participants: Contest participants
        bracket: Current bracket, or None if unavailable
        players: Player id -> Player from the same snapshot
        ladder: Points ladder
        tiebreak_key: Sort key for participants with equal max points;
            None or a failing key sorts last

    Returns:
        Ranked LeaderboardRows
    """
    key = tiebreak_key or default_tiebreak
    if bracket is None:
        logger.log_warning("bracket_unavailable", participants=len(participants))

    scored = []
    for participant in participants:
        try:
            row = score_participant(participant, bracket, players, ladder)
        except Exception as e:
            logger.log_error("participant_scoring_failed", exc_info=e, participant=participant.name)
            row = LeaderboardRow(
                participant_id=participant.participant_id,
                name=participant.name,
                earned_points=0,
                max_points=0,
                is_exact_bound=False,
                degraded=True,
                tiebreak=participant.tiebreak,
            )
        scored.append((row, _tiebreak_value(key, participant)))

    try:
        ordered = sorted(scored, key=lambda item: (-item[0].max_points, item[1]))
    except TypeError as e:
        # Tiebreak values of mixed types: order by max points alone
        logger.log_error("tiebreak_not_comparable", exc_info=e)
        ordered = sorted(
            ((row, (True, 0)) for row, _ in scored),
            key=lambda item: -item[0].max_points,
        )
    return assign_ranks(ordered)


def assign_ranks(scored: Sequence[Tuple[LeaderboardRow, Any]]) -> List[LeaderboardRow]:
    """Competition ranking: rows equal on max points and tiebreak share a rank."""
    ranked = []
    previous = None
    rank = 0
    for position, (row, tiebreak) in enumerate(scored, start=1):
        current = (row.max_points, tiebreak)
        if current != previous:
            rank = position
            previous = current
        ranked.append(replace(row, rank=rank))
    return ranked


def leaderboard_frame(rows: Sequence[LeaderboardRow]) -> pl.DataFrame:
    """Flatten rows into a DataFrame with one column per pick slot."""
    records = []
    for row in rows:
        record = {
            "rank": row.rank,
            "participant": row.name,
            "earned_points": row.earned_points,
            "max_points": row.max_points,
            "exact": row.is_exact_bound,
            "degraded": row.degraded,
        }
        for slot in range(PICK_SLOTS):
            pick = row.picks[slot] if slot < len(row.picks) else None
            record[f"pick{slot + 1}"] = pick.name if pick else None
            record[f"pick{slot + 1}_points"] = pick.points if pick else 0
        records.append(record)

    schema = {
        "rank": pl.Int64,
        "participant": pl.Utf8,
        "earned_points": pl.Int64,
        "max_points": pl.Int64,
        "exact": pl.Boolean,
        "degraded": pl.Boolean,
    }
    for slot in range(PICK_SLOTS):
        schema[f"pick{slot + 1}"] = pl.Utf8
        schema[f"pick{slot + 1}_points"] = pl.Int64
    return pl.DataFrame(records, schema=schema)


def _lookup(pick: str, players: Mapping[str, Player]) -> Player:
    player = players.get(pick)
    if player is None:
        raise PlayerNotFound(pick)
    return player


def _clean_pick(pick: Optional[str]) -> Optional[str]:
    if pick is None:
        return None
    text = str(pick).strip()
    return text or None
