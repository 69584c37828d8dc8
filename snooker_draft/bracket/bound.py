"""
Bound Calculator - maximum points a set of picks can still reach.

The bracket awards one champion, one finalist, two semifinalists, four
quarterfinalists and so on. Picks that sit in the same subtree must meet
before the final, so only one of them can climb past that meeting point.

The calculation walks the part of the bracket the picks occupy. Every
match is scored twice: the best total of picks already knocked out below
it when the match is won by a pick, and when it is won by somebody else.
Slots no pick can reach are filled by an unpicked player.
"""
from dataclasses import dataclass
from itertools import permutations, product
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from snooker_draft.utils.observability import Logger

from .conflicts import ConflictGroups, classify
from .ladder import DEFAULT_LADDER, PointsLadder
from .models import Bracket, Player
from .paths import Path, resolve_path

logger = Logger(__name__)

NEG = float("-inf")

# (best total when a pick comes out of this subtree, best total when an unpicked player does)
Value = Tuple[float, float]

PICK = (0, NEG)
OPEN = (NEG, 0)


@dataclass(frozen=True)
class BoundResult:
    """Maximum reachable points for one participant's picks."""
    total: int
    locked: int                         # Points already banked by finished picks
    is_exact: bool
    unresolved: Tuple[str, ...] = ()    # Live picks missing from the bracket

    def to_dict(self):
        return {
            "total": self.total,
            "locked": self.locked,
            "is_exact": self.is_exact,
            "unresolved": list(self.unresolved),
        }


def fallback_max_points(active_count: int, ladder: PointsLadder = DEFAULT_LADDER) -> int:
    """
    Conflict-blind bound used when no bracket is available.

    0 -> 0, 1 -> 14, 2 -> 24, 3 -> 30, 4 or more -> 36 with the default
    ladder. Never below the bracket-aware value.
    """
    return sum(ladder.fallback_prizes()[:max(active_count, 0)])


def max_points(conflict_groups: ConflictGroups, ladder: PointsLadder = DEFAULT_LADDER) -> int:
    """
    Best total the classified active picks can still reach.

    Unplaced paths are tried behind every semifinal slot, including slots
    no pick occupies yet, and the best outcome is kept.

    Args:
        conflict_groups: Output of classify()
        ladder: Points ladder

    Returns:
        Maximum reachable points for the active picks
    """
    if conflict_groups.active_count == 0:
        return 0

    slots = list(conflict_groups.groups)
    open_slots = conflict_groups.slot_count - len(slots)
    slots.extend(f"open-{i}" for i in range(max(open_slots, 0)))

    best = NEG
    for assignment in product(slots, repeat=len(conflict_groups.unplaced)):
        members: Dict[str, List[Path]] = {
            slot: list(paths) for slot, paths in conflict_groups.groups.items()
        }
        for path, slot in zip(conflict_groups.unplaced, assignment):
            members.setdefault(slot, []).append(path)
        best = max(best, _evaluate_final(members, conflict_groups.final_round, ladder))

    return int(best) if best != NEG else 0


def bound_for_players(
    players: Sequence[Player],
    bracket: Optional[Bracket],
    ladder: PointsLadder = DEFAULT_LADDER,
) -> BoundResult:
    """
    Maximum reachable points for a participant's picked players.

    Finished picks contribute their banked points. Live picks go through
    path resolution and conflict classification; without a bracket the
    fallback bound is used and the result is marked inexact.
    """
    locked = sum(p.points for p in players if not p.is_live)
    live = [p for p in players if p.is_live]

    if bracket is None:
        return BoundResult(
            total=locked + fallback_max_points(len(live), ladder),
            locked=locked,
            is_exact=False,
        )

    paths = []
    unresolved = []
    for player in live:
        path = resolve_path(player.player_id, bracket, player)
        if path is None:
            # Unknown contribution: keep what the player has banked
            unresolved.append(player.player_id)
            locked += player.points
        else:
            paths.append(path)

    if unresolved:
        logger.log_event("bound_paths_unresolved", players=unresolved)

    groups = classify(paths, slot_count=max(len(bracket.semifinals), 2))
    return BoundResult(
        total=locked + max_points(groups, ladder),
        locked=locked,
        is_exact=not unresolved,
        unresolved=tuple(unresolved),
    )


def _evaluate_final(members: Dict[str, List[Path]], final_round: int, ladder: PointsLadder) -> float:
    sources: List[Value] = []
    for slot, paths in members.items():
        finalists = [p for p in paths if p.entry_round >= final_round]
        others = [p for p in paths if p.entry_round < final_round]
        sources.extend([PICK] * len(finalists))
        if others:
            sources.append(_evaluate_slot(slot, others, final_round, ladder))

    while len(sources) < 2:
        sources.append(OPEN)

    with_pick, without_pick = _merge(sources, final_round, final_round, ladder)
    return max(with_pick + ladder.champion, without_pick)


def _evaluate_slot(slot: str, paths: Iterable[Path], final_round: int, ladder: PointsLadder) -> Value:
    """Score the subtree feeding one semifinal slot."""
    rounds: Dict[str, int] = {slot: final_round - 1}
    parents: Dict[str, str] = {}
    entrants: Dict[str, int] = {}

    # Complete routes first so partial routes hang off known matches
    for path in sorted(paths, key=lambda p: not p.is_complete):
        chain = [(r, m) for r, m in path.steps() if r < final_round]
        first_match = chain[0][1]
        entrants[first_match] = entrants.get(first_match, 0) + 1

        for (round_num, match_id), (_, parent_id) in zip(chain, chain[1:]):
            rounds.setdefault(match_id, round_num)
            parents.setdefault(match_id, parent_id)

        top_round, top = chain[-1]
        rounds.setdefault(top, top_round)
        if top != slot:
            parents.setdefault(top, slot)

    children: Dict[str, List[str]] = {}
    for child, parent in parents.items():
        children.setdefault(parent, []).append(child)

    def evaluate(match_id: str) -> Value:
        sources = [evaluate(c) for c in children.get(match_id, [])]
        sources.extend([PICK] * entrants.get(match_id, 0))
        while len(sources) < 2:
            sources.append(OPEN)
        return _merge(sources, rounds[match_id], final_round, ladder)

    return evaluate(slot)


def _merge(sources: Sequence[Value], round_num: int, final_round: int, ladder: PointsLadder) -> Value:
    """Combine the sides of a match: one winner, everybody else out here or earlier."""
    with_pick = without_pick = NEG
    for i, (pick, unpicked) in enumerate(sources):
        rest = _best_losers(list(sources[:i]) + list(sources[i + 1:]), round_num, final_round, ladder)
        with_pick = max(with_pick, pick + rest)
        without_pick = max(without_pick, unpicked + rest)
    return with_pick, without_pick


def _best_losers(losers: List[Value], round_num: int, final_round: int, ladder: PointsLadder) -> float:
    # A real match has one loser. Extra sides only come from partial
    # routes; they take the places a bracket has one, two, three rounds
    # earlier (1 finalist, 2 semifinalists, 4 quarterfinalists).
    best = NEG
    for order in permutations(losers):
        total = 0
        for position, (pick, unpicked) in enumerate(order):
            depth = (position + 1).bit_length() - 1
            rung = ladder.value_at(round_num - depth, final_round)
            total += max(pick + rung, unpicked)
        best = max(best, total)
    return best
