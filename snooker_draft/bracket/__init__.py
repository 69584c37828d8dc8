"""
Bracket Conflict Resolver.

Bracket model, points ladder, and the maximum-points bound:
path resolution, conflict classification and bound calculation.
"""
from .ladder import PointsLadder, DEFAULT_LADDER
from .models import Bracket, BracketNode, Player, PlayerStatus, BYE, WORST_SEED, ROUND_NAMES
from .standings import player_standings, standing_for
from .paths import Path, resolve_path
from .conflicts import ConflictGroups, classify
from .bound import BoundResult, max_points, fallback_max_points, bound_for_players

__all__ = [
    "PointsLadder",
    "DEFAULT_LADDER",
    "Bracket",
    "BracketNode",
    "Player",
    "PlayerStatus",
    "BYE",
    "WORST_SEED",
    "ROUND_NAMES",
    "player_standings",
    "standing_for",
    "Path",
    "resolve_path",
    "ConflictGroups",
    "classify",
    "BoundResult",
    "max_points",
    "fallback_max_points",
    "bound_for_players",
]
