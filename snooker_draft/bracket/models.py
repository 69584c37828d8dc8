"""
Tournament Bracket Data Structures.

Immutable snapshot of a single-elimination draw: players, match slots
and the feeder links between rounds. A bracket is rebuilt, never mutated,
when tournament data is refreshed.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from snooker_draft.exceptions import BracketMalformed


# Round name aliases to canonical labels; unlisted names are kept as given
ROUND_NAMES = {
    "Quarter Finals": "Quarterfinal",
    "Quarter-Finals": "Quarterfinal",
    "Quarterfinals": "Quarterfinal",
    "QF": "Quarterfinal",
    "Semi Finals": "Semifinal",
    "Semi-Finals": "Semifinal",
    "Semifinals": "Semifinal",
    "SF": "Semifinal",
    "F": "Final",
}

BYE = "bye"
WORST_SEED = 999


class PlayerStatus(str, Enum):
    """Where a player stands in the event."""
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    ELIMINATED = "eliminated"
    CHAMPION = "champion"


@dataclass(frozen=True)
class Player:
    """A tournament player as supplied by the data provider."""
    player_id: str
    name: str
    seed: int = WORST_SEED
    status: PlayerStatus = PlayerStatus.NOT_STARTED
    points: int = 0
    # (round, match_id) pairs recorded by the provider, used when the
    # player cannot be found among bracket entrants
    progression: Tuple[Tuple[int, str], ...] = ()

    @property
    def is_live(self) -> bool:
        """Still able to earn more points."""
        return self.status in (PlayerStatus.NOT_STARTED, PlayerStatus.ACTIVE)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "seed": self.seed,
            "status": self.status.value,
            "points": self.points,
            "progression": [list(step) for step in self.progression],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Player":
        return cls(
            player_id=str(data["player_id"]),
            name=data.get("name") or str(data["player_id"]),
            seed=int(data.get("seed") or WORST_SEED),
            status=PlayerStatus(data.get("status", PlayerStatus.NOT_STARTED.value)),
            points=int(data.get("points") or 0),
            progression=tuple(
                (int(r), str(m)) for r, m in data.get("progression", [])
            ),
        )


@dataclass(frozen=True)
class BracketNode:
    """One match slot in the bracket."""
    match_id: str
    round_num: int                                  # 0 = first round
    slot: int                                       # Position within round
    entrants: Tuple[Optional[str], Optional[str]] = (None, None)   # None = TBD
    feeders: Tuple[str, ...] = ()                   # Two match ids at round_num - 1
    winner: Optional[str] = None

    @property
    def is_bye(self) -> bool:
        return BYE in self.entrants

    @property
    def forced_winner(self) -> Optional[str]:
        """Recorded winner, or the only real entrant of a bye."""
        if self.winner is not None:
            return self.winner
        if self.is_bye:
            others = [e for e in self.entrants if e not in (BYE, None)]
            if len(others) == 1:
                return others[0]
        return None

    @property
    def is_decided(self) -> bool:
        return self.forced_winner is not None

    @property
    def players(self) -> List[str]:
        """Known entrants, excluding TBD and bye markers."""
        return [e for e in self.entrants if e not in (BYE, None)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_id": self.match_id,
            "round_num": self.round_num,
            "slot": self.slot,
            "home": self.entrants[0],
            "away": self.entrants[1],
            "feeders": list(self.feeders),
            "winner": self.winner,
        }


@dataclass(frozen=True)
class Bracket:
    """
    Complete single-elimination bracket.

    Round r holds 2 ** (R - r) nodes, every node above round 0 is fed by
    exactly two nodes of the previous round and the final is the single
    root. Construction fails with BracketMalformed otherwise.
    """
    rounds: Tuple[Tuple[BracketNode, ...], ...]
    round_names: Tuple[str, ...] = ()
    _index: Dict[str, BracketNode] = field(default_factory=dict, init=False, repr=False, compare=False)
    _parents: Dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._validate()
        index = {node.match_id: node for node in self.all_matches}
        parents = {
            feeder: node.match_id
            for node in self.all_matches
            for feeder in node.feeders
        }
        object.__setattr__(self, "_index", index)
        object.__setattr__(self, "_parents", parents)

    def _validate(self) -> None:
        if not self.rounds:
            raise BracketMalformed("Bracket has no rounds")

        final_round = len(self.rounds) - 1
        seen = set()
        for round_num, nodes in enumerate(self.rounds):
            expected = 2 ** (final_round - round_num)
            if len(nodes) != expected:
                raise BracketMalformed(
                    f"Round {round_num} has {len(nodes)} matches, expected {expected}"
                )
            for node in nodes:
                if node.match_id in seen:
                    raise BracketMalformed(f"Duplicate match id {node.match_id}")
                seen.add(node.match_id)
                if node.round_num != round_num:
                    raise BracketMalformed(
                        f"Match {node.match_id} claims round {node.round_num}, found in round {round_num}"
                    )
                if node.winner is not None and node.winner not in node.entrants:
                    raise BracketMalformed(
                        f"Winner {node.winner} of {node.match_id} is not an entrant"
                    )

        fed = set()
        for round_num in range(1, final_round + 1):
            previous = {n.match_id for n in self.rounds[round_num - 1]}
            for node in self.rounds[round_num]:
                if len(set(node.feeders)) != 2 or not set(node.feeders) <= previous:
                    raise BracketMalformed(
                        f"Match {node.match_id} must have two feeders in round {round_num - 1}"
                    )
                if fed & set(node.feeders):
                    raise BracketMalformed(f"Feeder of {node.match_id} feeds more than one match")
                fed.update(node.feeders)

    @property
    def final_round(self) -> int:
        return len(self.rounds) - 1

    @property
    def final(self) -> BracketNode:
        return self.rounds[-1][0]

    @property
    def semifinals(self) -> Tuple[BracketNode, ...]:
        if self.final_round == 0:
            return ()
        return self.rounds[self.final_round - 1]

    @property
    def all_matches(self) -> List[BracketNode]:
        """All matches in bracket order (first round first)."""
        matches = []
        for nodes in self.rounds:
            matches.extend(nodes)
        return matches

    @property
    def draw_size(self) -> int:
        return 2 * len(self.rounds[0])

    @property
    def champion(self) -> Optional[str]:
        return self.final.forced_winner

    def get_match(self, match_id: str) -> Optional[BracketNode]:
        return self._index.get(match_id)

    def parent_of(self, match_id: str) -> Optional[BracketNode]:
        parent_id = self._parents.get(match_id)
        return self._index.get(parent_id) if parent_id else None

    def round_name(self, round_num: int) -> str:
        if round_num < len(self.round_names):
            return self.round_names[round_num]
        return f"Round {round_num + 1}"

    def matches_for(self, player_id: str) -> Iterator[BracketNode]:
        """Every match the player has been drawn into, first round first."""
        for node in self.all_matches:
            if player_id in node.entrants:
                yield node

    def locate(self, player_id: str) -> Optional[BracketNode]:
        """The deepest match the player has been drawn into."""
        found = None
        for node in self.matches_for(player_id):
            found = node
        return found

    @classmethod
    def from_rounds(
        cls,
        rounds: Sequence[Sequence[Mapping[str, Any]]],
        round_names: Sequence[str] = (),
    ) -> "Bracket":
        """
        Build a bracket from per-round match records in draw order.

        Each record may carry `match_id`, `home`, `away` and `winner`.
        Feeders are linked by position: match i of round r is fed by
        matches 2i and 2i+1 of round r-1. TBD entrants are filled from
        decided feeders.

        Args:
            rounds: Match records per round, first round first
            round_names: Optional display names per round

        Returns:
            Validated Bracket
        """
        built: List[Tuple[BracketNode, ...]] = []

        for round_num, records in enumerate(rounds):
            nodes = []
            for slot, record in enumerate(records):
                match_id = str(record.get("match_id") or f"R{round_num}M{slot}")
                home = _player_ref(record.get("home"))
                away = _player_ref(record.get("away"))
                feeders: Tuple[str, ...] = ()

                if round_num > 0:
                    previous = built[round_num - 1]
                    pair = previous[2 * slot:2 * slot + 2]
                    feeders = tuple(f.match_id for f in pair)
                    home, away = _fill_from_feeders(match_id, (home, away), pair)

                nodes.append(BracketNode(
                    match_id=match_id,
                    round_num=round_num,
                    slot=slot,
                    entrants=(home, away),
                    feeders=feeders,
                    winner=_player_ref(record.get("winner")),
                ))
            built.append(tuple(nodes))

        return cls(rounds=tuple(built), round_names=tuple(round_names))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize bracket to dictionary."""
        return {
            "round_names": list(self.round_names),
            "rounds": [
                [
                    {
                        "match_id": n.match_id,
                        "home": n.entrants[0],
                        "away": n.entrants[1],
                        "winner": n.winner,
                    }
                    for n in nodes
                ]
                for nodes in self.rounds
            ],
        }


def _player_ref(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == "tbd":
        return None
    if text.lower() == BYE:
        return BYE
    return text


def _fill_from_feeders(
    match_id: str,
    entrants: Tuple[Optional[str], Optional[str]],
    feeders: Sequence[BracketNode],
) -> Tuple[Optional[str], Optional[str]]:
    """Fill TBD entrants with the winners of decided feeders."""
    if len(feeders) != 2:
        # Left for validation to report
        return entrants

    known = [e for e in entrants if e is not None]
    result = list(entrants)
    for position, feeder in enumerate(feeders):
        winner = feeder.forced_winner
        if winner is None or winner in known:
            continue
        if result[position] is None:
            result[position] = winner
        elif result[1 - position] is None:
            result[1 - position] = winner
        else:
            raise BracketMalformed(
                f"Winner {winner} of {feeder.match_id} is missing from {match_id}"
            )
        known.append(winner)
    return result[0], result[1]
