"""
Relevant matches - undecided matches involving at least one picked player.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from snooker_draft.bracket.models import Bracket, Player
from snooker_draft.leaderboard import Participant


@dataclass(frozen=True)
class RelevantMatch:
    """An upcoming match and the participants with a stake in it."""
    match_id: str
    round_num: int
    round_name: str
    home: Optional[str]
    away: Optional[str]
    home_name: str = "TBD"
    away_name: str = "TBD"
    # Player id -> names of participants who picked that player
    pickers: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def is_pick_vs_pick(self) -> bool:
        """Both sides were picked by someone."""
        return self.home in self.pickers and self.away in self.pickers

    def to_dict(self) -> Dict:
        return {
            "match_id": self.match_id,
            "round": self.round_name,
            "home": self.home_name,
            "away": self.away_name,
            "pickers": {k: list(v) for k, v in self.pickers.items()},
        }


def relevant_matches(
    bracket: Bracket,
    participants: Sequence[Participant],
    players: Optional[Mapping[str, Player]] = None,
) -> List[RelevantMatch]:
    """
    List undecided matches that involve a picked player.

    Args:
        bracket: Current bracket
        participants: Participants with picks referencing player ids
        players: Optional player map for display names

    Returns:
        Matches in bracket order, earliest round first
    """
    players = players or {}
    picked_by: Dict[str, List[str]] = {}
    for participant in participants:
        for pick in participant.selected:
            picked_by.setdefault(pick, []).append(participant.name)

    matches = []
    for node in bracket.all_matches:
        if node.is_decided:
            continue
        stakes = {
            player_id: tuple(picked_by[player_id])
            for player_id in node.players
            if player_id in picked_by
        }
        if not stakes:
            continue

        home, away = node.entrants
        matches.append(RelevantMatch(
            match_id=node.match_id,
            round_num=node.round_num,
            round_name=bracket.round_name(node.round_num),
            home=home,
            away=away,
            home_name=_display(home, players),
            away_name=_display(away, players),
            pickers=stakes,
        ))

    return matches


def _display(player_id: Optional[str], players: Mapping[str, Player]) -> str:
    if player_id is None:
        return "TBD"
    player = players.get(player_id)
    return player.name if player else player_id
