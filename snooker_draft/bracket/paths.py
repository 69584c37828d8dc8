"""
Path Resolver.

Finds the chain of match slots an active player still has to pass
through, from the match they currently occupy up to the final.
"""
import logging
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Tuple

from snooker_draft.exceptions import AmbiguousPath

from .models import Bracket, BracketNode, Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Path:
    """
    Route of one active player through the bracket.

    `route` lists match ids from `entry_round` upwards. A path built from an
    incomplete progression record may stop short of the final. `semifinal`
    is the semifinal slot on the route, which stays known after it has
    been played (finalists keep the semifinal they won).
    """
    player_id: str
    entry_round: int
    route: Tuple[str, ...]
    final_round: int
    semifinal: Optional[str] = None

    @property
    def current_match(self) -> str:
        return self.route[0]

    @property
    def top_round(self) -> int:
        """Deepest round the route is known for."""
        return self.entry_round + len(self.route) - 1

    @property
    def is_complete(self) -> bool:
        return self.top_round == self.final_round

    @property
    def is_finalist(self) -> bool:
        return self.entry_round == self.final_round

    def steps(self) -> Iterator[Tuple[int, str]]:
        """(round, match_id) pairs along the route."""
        for offset, match_id in enumerate(self.route):
            yield self.entry_round + offset, match_id

    def match_at(self, round_num: int) -> Optional[str]:
        offset = round_num - self.entry_round
        if 0 <= offset < len(self.route):
            return self.route[offset]
        return None

    def require_semifinal(self) -> str:
        if self.semifinal is None:
            raise AmbiguousPath(self.player_id)
        return self.semifinal


def resolve_path(
    player_id: str,
    bracket: Bracket,
    player: Optional[Player] = None,
) -> Optional[Path]:
    """
    Resolve a player's remaining route through the bracket.

    Args:
        player_id: Player to locate
        bracket: Current bracket snapshot
        player: Optional provider record, whose progression is used when
            the player is not drawn into any bracket slot

    Returns:
        Path, or None when the player cannot be located or has nothing
        left to play for
    """
    node = bracket.locate(player_id)

    if node is not None:
        winner = node.forced_winner
        if winner is not None and winner != player_id:
            logger.debug(f"{player_id} already lost {node.match_id}")
            return None
        if winner == player_id:
            if node.round_num == bracket.final_round:
                return None
            # Advanced but not yet drawn into the next slot
            node = bracket.parent_of(node.match_id)
        return _path_from_node(player_id, node, bracket)

    if player is not None and player.progression:
        return _path_from_progression(player, bracket)

    logger.debug(f"Could not locate {player_id} in bracket")
    return None


def _climb(node: BracketNode, bracket: Bracket) -> List[str]:
    route = []
    current: Optional[BracketNode] = node
    while current is not None:
        route.append(current.match_id)
        current = bracket.parent_of(current.match_id)
    return route


def _path_from_node(player_id: str, node: BracketNode, bracket: Bracket) -> Path:
    path = Path(
        player_id=player_id,
        entry_round=node.round_num,
        route=tuple(_climb(node, bracket)),
        final_round=bracket.final_round,
    )
    return replace(path, semifinal=_semifinal_slot(player_id, path, bracket))


def _semifinal_slot(player_id: str, path: Path, bracket: Bracket) -> Optional[str]:
    final = bracket.final
    if not path.is_finalist:
        return path.match_at(bracket.final_round - 1)

    for feeder_id in final.feeders:
        feeder = bracket.get_match(feeder_id)
        if feeder is not None and feeder.forced_winner == player_id:
            return feeder_id

    # No feeder record: each side of the final is its own slot
    if player_id in final.entrants:
        return f"{final.match_id}/{final.entrants.index(player_id)}"
    return None


def _path_from_progression(player: Player, bracket: Bracket) -> Optional[Path]:
    steps = sorted(player.progression)

    # Skip matches already won
    while steps:
        node = bracket.get_match(steps[0][1])
        if node is None or node.forced_winner != player.player_id:
            break
        steps = steps[1:]

    if not steps:
        return None

    entry_round = steps[0][0]
    route: List[str] = []
    for offset, (round_num, match_id) in enumerate(steps):
        if round_num != entry_round + offset:
            break
        route.append(match_id)

    top = bracket.get_match(route[-1])
    if top is not None:
        route.extend(_climb(top, bracket)[1:])

    path = Path(
        player_id=player.player_id,
        entry_round=entry_round,
        route=tuple(route),
        final_round=bracket.final_round,
    )
    if path.is_finalist:
        return path
    return replace(path, semifinal=path.match_at(bracket.final_round - 1))
