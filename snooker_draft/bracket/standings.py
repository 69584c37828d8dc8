"""
Player standings derived from a bracket snapshot.

Status and points come from the deepest match each player has been drawn
into. A bye counts as advancement, so a player who received one is
credited with the rung of the round the bye sent them to.
"""
from typing import Dict, Mapping, Optional, Tuple

from .ladder import PointsLadder, DEFAULT_LADDER
from .models import BYE, WORST_SEED, Bracket, Player, PlayerStatus


def standing_for(
    player_id: str,
    bracket: Bracket,
    ladder: PointsLadder = DEFAULT_LADDER,
) -> Optional[Tuple[PlayerStatus, int]]:
    """
    Status and earned points for one player.

    Returns:
        (status, points), or None if the player is not in the bracket
    """
    node = bracket.locate(player_id)
    if node is None:
        return None

    value = ladder.value_at(node.round_num, bracket.final_round)
    winner = node.forced_winner

    if winner is None:
        played = any(
            n.is_decided and not n.is_bye
            for n in bracket.matches_for(player_id)
        )
        status = PlayerStatus.ACTIVE if played or node.round_num > 0 else PlayerStatus.NOT_STARTED
        return status, value

    if winner == player_id:
        if node.round_num == bracket.final_round:
            return PlayerStatus.CHAMPION, ladder.champion
        return PlayerStatus.ACTIVE, ladder.value_at(node.round_num + 1, bracket.final_round)

    return PlayerStatus.ELIMINATED, value


def player_standings(
    bracket: Bracket,
    names: Optional[Mapping[str, str]] = None,
    seeds: Optional[Mapping[str, int]] = None,
    ladder: PointsLadder = DEFAULT_LADDER,
) -> Dict[str, Player]:
    """
    Build the player map for every entrant of the bracket.

    Args:
        bracket: Bracket snapshot
        names: Optional player id -> display name
        seeds: Optional player id -> seed/ranking
        ladder: Points ladder

    Returns:
        Dict of player id -> Player
    """
    names = names or {}
    seeds = seeds or {}
    players: Dict[str, Player] = {}

    for node in bracket.all_matches:
        for player_id in node.entrants:
            if player_id in (None, BYE) or player_id in players:
                continue
            status, points = standing_for(player_id, bracket, ladder)
            players[player_id] = Player(
                player_id=player_id,
                name=names.get(player_id, player_id),
                seed=seeds.get(player_id, WORST_SEED),
                status=status,
                points=points,
            )

    return players
