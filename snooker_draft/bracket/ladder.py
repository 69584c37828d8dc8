"""
Points ladder: the fixed table mapping round reached to points awarded.

Rungs are indexed by rounds remaining before the final, so the same ladder
works for a 32, 64 or 128 draw. The opening round of a draw earns nothing:
points start with the first match won, so a player beaten in round 1 (or
yet to play) holds `early`.
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PointsLadder:
    """Points for winning the event and for each round reached."""
    champion: int = 14
    # Final (lost), Semifinal, Quarterfinal, Last 16
    rungs: Tuple[int, ...] = (10, 6, 4, 2)
    early: int = 0

    def __post_init__(self):
        values = [self.early] + list(reversed(self.rungs)) + [self.champion]
        if any(v < 0 for v in values):
            raise ValueError("Ladder values must be non-negative")
        if any(a > b for a, b in zip(values, values[1:])):
            raise ValueError(f"Ladder must be non-decreasing, got {values}")

    def value_at(self, round_num: int, final_round: int) -> int:
        """Points for reaching `round_num` (and losing there) in a bracket whose final is `final_round`."""
        remaining = final_round - round_num
        if remaining < 0:
            return self.champion
        # Nothing won yet in the opening round (a lone final is still worth the finalist rung)
        if round_num <= 0 < final_round:
            return self.early
        if remaining < len(self.rungs):
            return self.rungs[remaining]
        return self.early

    @property
    def finalist(self) -> int:
        return self.rungs[0] if self.rungs else self.early

    @property
    def semifinalist(self) -> int:
        return self.rungs[1] if len(self.rungs) > 1 else self.early

    def fallback_prizes(self) -> Tuple[int, ...]:
        """Champion, finalist and the two semifinalist prizes, best first."""
        return (self.champion, self.finalist, self.semifinalist, self.semifinalist)


DEFAULT_LADDER = PointsLadder()
