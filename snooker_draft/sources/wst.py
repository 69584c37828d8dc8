"""
WST tournament API client and draw parser.

Fetches the live draw for one tournament and turns it into a
TournamentSnapshot. Retries and fallback to other sources are left to
the caller.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from snooker_draft.bracket.ladder import DEFAULT_LADDER, PointsLadder
from snooker_draft.bracket.models import ROUND_NAMES, WORST_SEED, Bracket, Player, PlayerStatus
from snooker_draft.bracket.standings import player_standings
from snooker_draft.core.snapshot import TournamentSnapshot
from snooker_draft.exceptions import BracketMalformed, DataSourceError

logger = logging.getLogger(__name__)


class WSTClient:
    """
    WST tournament API client.

    One request per call; HTTP and decoding failures are raised as
    DataSourceError.
    """

    BASE_URL = "https://tournaments.snooker.web.gc.wstservices.co.uk/v2"

    def __init__(
        self,
        tournament_id: str,
        base_url: Optional[str] = None,
        timeout_s: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize client.

        Args:
            tournament_id: WST tournament UUID
            base_url: API root (defaults to the public v2 endpoint)
            timeout_s: Request timeout in seconds
            client: Optional preconfigured httpx.Client (tests inject one)
        """
        self.tournament_id = tournament_id
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.request_count = 0
        self.session = client or httpx.Client(
            timeout=timeout_s,
            headers={"Accept": "application/json"},
        )

    def _fetch(self, endpoint: str) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, params={"format": "json"})
            self.request_count += 1
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise DataSourceError(f"WST request failed with {e.response.status_code}: {url}") from e
        except httpx.HTTPError as e:
            raise DataSourceError(f"WST request failed: {e}") from e
        except ValueError as e:
            raise DataSourceError(f"WST returned invalid JSON: {url}") from e

    def fetch_tournament(self) -> Dict[str, Any]:
        """Tournament metadata and match list."""
        return self._fetch(f"/{self.tournament_id}")

    def fetch_draws(self) -> Dict[str, Any]:
        """Draw data with all rounds and matches."""
        return self._fetch(f"/{self.tournament_id}/draws")

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class WSTProvider:
    """Tournament data provider backed by the live WST draw."""

    def __init__(
        self,
        client: WSTClient,
        ladder: PointsLadder = DEFAULT_LADDER,
        season: Optional[int] = None,
    ):
        self.client = client
        self.ladder = ladder
        self.season = season

    def load_snapshot(self) -> TournamentSnapshot:
        draws = self.client.fetch_draws()
        return parse_draw(draws, ladder=self.ladder, season=self.season, source="wst")


def normalize_round_name(round_name: str) -> str:
    """Map WST round names to canonical labels."""
    return ROUND_NAMES.get(round_name.strip(), round_name.strip())


def current_ranking(season_stats: Optional[List[Mapping[str, Any]]], season: Optional[int] = None) -> int:
    """Ranking from a player's season stats; latest season unless one is given."""
    if not season_stats:
        return WORST_SEED
    stats = [s for s in season_stats if s.get("ranking")]
    if season is not None:
        stats = [s for s in stats if s.get("season") == season]
    if not stats:
        return WORST_SEED
    latest = max(stats, key=lambda s: s.get("season") or 0)
    return int(latest["ranking"])


def parse_draw(
    draw_data: Mapping[str, Any],
    ladder: PointsLadder = DEFAULT_LADDER,
    season: Optional[int] = None,
    source: str = "wst",
) -> TournamentSnapshot:
    """
    Transform WST draw data into a snapshot.

    Leading rounds that do not fit a single-elimination tree (qualifying
    rounds with uneven match counts) are dropped until a valid bracket
    remains. If none does, the snapshot carries bracket=None.

    Args:
        draw_data: Raw JSON from WSTClient.fetch_draws()
        ladder: Points ladder for derived player points
        season: Season used for seeding
        source: Label stored on the snapshot

    Returns:
        TournamentSnapshot
    """
    attributes = (draw_data.get("data") or {}).get("attributes") or {}
    raw_rounds = attributes.get("rounds")
    if not raw_rounds:
        raise DataSourceError("Invalid draw data structure: no rounds")

    raw_rounds = sorted(raw_rounds, key=lambda r: r.get("roundNumber") or 0)
    round_names = [normalize_round_name(r.get("roundName", "")) for r in raw_rounds]
    rounds = [_round_records(r) for r in raw_rounds]
    names, seeds = _player_details(raw_rounds, season)

    bracket = _main_draw(rounds, round_names)

    players: Dict[str, Player] = {}
    if bracket is not None:
        players = player_standings(bracket, names=names, seeds=seeds, ladder=ladder)

    # Players knocked out in rounds outside the bracket
    final_round = len(rounds) - 1
    for round_num, records in enumerate(rounds):
        for record in records:
            for side in ("home", "away"):
                player_id = record.get(side)
                if not player_id or player_id in players:
                    continue
                lost = record.get("winner") not in (None, player_id)
                players[player_id] = Player(
                    player_id=player_id,
                    name=names.get(player_id, player_id),
                    seed=seeds.get(player_id, WORST_SEED),
                    status=PlayerStatus.ELIMINATED if lost else PlayerStatus.ACTIVE,
                    points=ladder.value_at(round_num, final_round),
                )

    logger.info(
        f"Parsed WST draw: {len(rounds)} rounds, {len(players)} players, "
        f"bracket {'available' if bracket else 'unavailable'}"
    )

    return TournamentSnapshot(
        bracket=bracket,
        players=players,
        source=source,
        tournament_name=attributes.get("name", ""),
    )


def _round_records(raw_round: Mapping[str, Any]) -> List[Dict[str, Optional[str]]]:
    matches = sorted(
        raw_round.get("matches") or [],
        key=lambda m: m.get("tournamentMatchNumber") or 0,
    )
    records = []
    for match in matches:
        records.append({
            "match_id": _as_id(match.get("tournamentMatchNumber")),
            "home": _as_id(match.get("homePlayerID")),
            "away": _as_id(match.get("awayPlayerID")),
            "winner": _as_id(match.get("winningPlayerID")),
        })
    return records


def _player_details(
    raw_rounds: List[Mapping[str, Any]],
    season: Optional[int],
) -> Tuple[Dict[str, str], Dict[str, int]]:
    names: Dict[str, str] = {}
    seeds: Dict[str, int] = {}
    for raw_round in raw_rounds:
        for match in raw_round.get("matches") or []:
            for id_key, name_key, detail_key in (
                ("homePlayerID", "player1Name", "homePlayer"),
                ("awayPlayerID", "player2Name", "awayPlayer"),
            ):
                player_id = _as_id(match.get(id_key))
                if not player_id:
                    continue
                name = match.get(name_key)
                if name and name.lower() != "tbd":
                    names[player_id] = name
                detail = match.get(detail_key) or {}
                if detail:
                    seeds[player_id] = current_ranking(detail.get("seasonStats"), season)
    return names, seeds


def _main_draw(rounds: List[List[Dict[str, Optional[str]]]], round_names: List[str]) -> Optional[Bracket]:
    for start in range(len(rounds)):
        try:
            return Bracket.from_rounds(rounds[start:], round_names=round_names[start:])
        except BracketMalformed as e:
            logger.debug(f"No bracket from round {start}: {e}")
    logger.warning("WST draw does not form a valid bracket")
    return None


def _as_id(value: Any) -> Optional[str]:
    if value in (None, "", 0):
        return None
    return str(value)
