"""
Conflict Classifier.

Groups active players' paths by the semifinal slot they feed into. Two
players in the same group cannot both reach the final.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from snooker_draft.exceptions import AmbiguousPath

from .paths import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConflictGroups:
    """Active paths keyed by semifinal slot, plus paths with no known slot."""
    groups: Mapping[str, Tuple[Path, ...]] = field(default_factory=dict)
    unplaced: Tuple[Path, ...] = ()
    final_round: int = 0
    slot_count: int = 2

    @property
    def active_count(self) -> int:
        return sum(len(paths) for paths in self.groups.values()) + len(self.unplaced)

    @property
    def populated(self) -> int:
        """Number of non-empty groups."""
        return sum(1 for paths in self.groups.values() if paths)

    def group_of(self, player_id: str) -> Optional[str]:
        for slot, paths in self.groups.items():
            if any(p.player_id == player_id for p in paths):
                return slot
        return None

    def in_conflict(self, first: str, second: str) -> bool:
        """True if both players are known to sit behind the same semifinal."""
        slot = self.group_of(first)
        return slot is not None and slot == self.group_of(second)


def classify(paths: Iterable[Path], slot_count: int = 2) -> ConflictGroups:
    """
    Group paths by semifinal slot.

    A path whose semifinal slot is not known joins the group of any placed
    path it shares a match with (deepest shared match wins). Otherwise it is
    left unplaced, which the bound calculator treats as compatible with
    every group.

    Args:
        paths: Paths of active players
        slot_count: Semifinal slots in the bracket

    Returns:
        ConflictGroups
    """
    paths = list(paths)
    groups: Dict[str, List[Path]] = {}
    pending: List[Path] = []

    for path in paths:
        try:
            slot = path.require_semifinal()
        except AmbiguousPath:
            pending.append(path)
            continue
        groups.setdefault(slot, []).append(path)

    unplaced = []
    for path in pending:
        slot = _deepest_shared_slot(path, groups)
        if slot is None:
            logger.debug(f"{path.player_id} left unplaced, semifinal slot unknown")
            unplaced.append(path)
        else:
            groups[slot].append(path)

    final_round = max((p.final_round for p in paths), default=0)
    return ConflictGroups(
        groups={slot: tuple(members) for slot, members in groups.items()},
        unplaced=tuple(unplaced),
        final_round=final_round,
        slot_count=max(slot_count, len(groups)),
    )


def _deepest_shared_slot(path: Path, groups: Mapping[str, List[Path]]) -> Optional[str]:
    for round_num, match_id in reversed(list(path.steps())):
        for slot, members in groups.items():
            if any(m.match_at(round_num) == match_id for m in members):
                return slot
    return None
