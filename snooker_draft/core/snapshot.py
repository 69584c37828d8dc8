"""
Immutable tournament snapshot handed from a data provider to the core.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from snooker_draft.bracket.models import Bracket, Player
from snooker_draft.exceptions import BracketUnavailable


@dataclass(frozen=True)
class TournamentSnapshot:
    """
    Bracket and player state captured at one refresh.

    `bracket` is None when the provider could not supply a valid bracket;
    the leaderboard then falls back to the conflict-blind bound.
    """
    bracket: Optional[Bracket]
    players: Mapping[str, Player]
    source: str = "unknown"
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tournament_name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "players", MappingProxyType(dict(self.players)))

    @property
    def has_bracket(self) -> bool:
        return self.bracket is not None

    def name_index(self) -> Dict[str, str]:
        """Lower-cased player name -> player id."""
        return {p.name.strip().lower(): p.player_id for p in self.players.values()}

    def require_bracket(self) -> Bracket:
        if self.bracket is None:
            raise BracketUnavailable(f"No valid bracket in {self.source} snapshot")
        return self.bracket
