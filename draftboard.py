#!/usr/bin/env python
"""
Snooker Draft Contest - Leaderboard CLI
"""
import argparse
import json
import sys
import uuid
from pathlib import Path

from snooker_draft.config import settings
from snooker_draft.utils.observability import initialize_observability, Logger

initialize_observability(
    environment=settings.observability.environment,
    log_level=settings.observability.log_level,
    log_format=settings.observability.log_format,
)

logger = Logger(__name__)


def _load_snapshot(args):
    """Snapshot from the live API or a file, as requested."""
    from snooker_draft.sources import WSTClient, WSTProvider, FileSnapshotProvider

    ladder = settings.scoring.ladder()
    if args.live:
        client = WSTClient(
            tournament_id=settings.provider.tournament_id,
            base_url=settings.provider.base_url,
            timeout_s=settings.provider.timeout_s,
        )
        with client:
            return WSTProvider(client, ladder=ladder, season=settings.provider.season).load_snapshot()

    path = Path(args.snapshot or settings.provider.snapshot_path)
    return FileSnapshotProvider(path, ladder=ladder).load_snapshot()


def _load_participants(args, snapshot):
    from snooker_draft.sources import participant_store_for, link_picks, missing_picks

    source = args.participants or settings.participants.source
    participants = participant_store_for(source, timeout_s=settings.provider.timeout_s).load_participants()

    missing = missing_picks(participants, snapshot)
    if missing:
        logger.log_warning('picks_missing_from_snapshot', players=missing)

    return link_picks(participants, snapshot)


def cmd_leaderboard(args):
    """Compute and print the leaderboard."""
    from snooker_draft.leaderboard import compute_leaderboard, leaderboard_frame

    logger.with_correlation_id(str(uuid.uuid4()))
    snapshot = _load_snapshot(args)
    participants = _load_participants(args, snapshot)

    rows = compute_leaderboard(
        participants,
        snapshot.bracket,
        snapshot.players,
        ladder=settings.scoring.ladder(),
    )
    logger.log_event(
        'leaderboard_computed',
        participants=len(rows),
        source=snapshot.source,
        exact=snapshot.has_bracket,
    )

    if args.format == "json":
        print(json.dumps([row.to_dict() for row in rows], indent=2))
        return

    frame = leaderboard_frame(rows)
    if args.format == "csv":
        print(frame.write_csv(), end="")
        return

    title = snapshot.tournament_name or "Leaderboard"
    print(f"\n=== {title.upper()} ===\n")
    if not snapshot.has_bracket:
        print("(bracket unavailable: max points are approximate)\n")
    for row in rows:
        picks = " | ".join(f"{p.name} ({p.points})" for p in row.picks)
        flag = " *" if row.degraded else ""
        print(f"#{row.rank:<3} {row.name:<24} {row.earned_points:>3} pts  max {row.max_points:>3}{flag}")
        print(f"     {picks}")


def cmd_matches(args):
    """Print upcoming matches involving picked players."""
    from snooker_draft.exceptions import BracketUnavailable
    from snooker_draft.relevant import relevant_matches

    snapshot = _load_snapshot(args)
    try:
        bracket = snapshot.require_bracket()
    except BracketUnavailable as e:
        logger.log_warning('matches_unavailable', error=str(e))
        print("Bracket unavailable, no matches to show.")
        return

    participants = _load_participants(args, snapshot)
    matches = relevant_matches(bracket, participants, snapshot.players)

    print(f"\n=== RELEVANT MATCHES ({len(matches)}) ===\n")
    for match in matches:
        print(f"[{match.round_name}] {match.home_name} vs {match.away_name}")
        for player_id, pickers in match.pickers.items():
            name = snapshot.players[player_id].name if player_id in snapshot.players else player_id
            print(f"    {name}: {', '.join(pickers)}")


def cmd_fetch(args):
    """Fetch the live draw and save it as a snapshot file."""
    from snooker_draft.sources import save_snapshot

    args.live = True
    snapshot = _load_snapshot(args)
    path = save_snapshot(snapshot, Path(args.output or settings.provider.snapshot_path))
    logger.log_event('snapshot_saved', path=str(path), players=len(snapshot.players))
    print(f"Saved snapshot to {path}")


def cmd_check(args):
    """Compare the static snapshot file with the live draw."""
    from snooker_draft.sources import compare_snapshots

    args.live = False
    static = _load_snapshot(args)
    args.live = True
    live = _load_snapshot(args)

    report = compare_snapshots(static, live)
    logger.log_event(
        'snapshot_checked',
        consistent=report.is_consistent,
        completed=report.completed_matches,
        total=report.total_matches,
    )

    if args.format == "json":
        print(json.dumps(report.to_dict(), indent=2))
        return

    print("\n=== SNAPSHOT CHECK ===\n")
    for static_name, live_name in report.round_names:
        mark = "ok" if static_name == live_name else "MISMATCH"
        print(f"[{mark}] static: {static_name} | live: {live_name}")
    for label, items in (
        ("Players missing from snapshot", report.missing_players),
        ("Extra players in snapshot", report.extra_players),
        ("Matches missing from snapshot", report.missing_matches),
        ("Extra matches in snapshot", report.extra_matches),
    ):
        if items:
            print(f"\n{label}:")
            for item in items[:10]:
                print(f"  - {item}")
            if len(items) > 10:
                print(f"  ... and {len(items) - 10} more")
    print(f"\nCompleted matches: {report.completed_matches}/{report.total_matches} "
          f"({report.completion_rate:.1%})")
    print("Snapshot is up to date." if report.is_consistent else "Snapshot is out of date.")


def main():
    parser = argparse.ArgumentParser(description="Snooker Draft Contest")
    subparsers = parser.add_subparsers(dest="command", required=True)

    leaderboard = subparsers.add_parser("leaderboard", help="Show the contest leaderboard")
    leaderboard.add_argument("--live", action="store_true", help="Use the live WST draw")
    leaderboard.add_argument("--snapshot", help="Snapshot file (default from settings)")
    leaderboard.add_argument("--participants", help="Participants CSV/JSON path or URL")
    leaderboard.add_argument("--format", choices=["table", "json", "csv"], default="table")
    leaderboard.set_defaults(func=cmd_leaderboard)

    matches = subparsers.add_parser("matches", help="Show upcoming matches involving picks")
    matches.add_argument("--live", action="store_true")
    matches.add_argument("--snapshot")
    matches.add_argument("--participants")
    matches.set_defaults(func=cmd_matches)

    fetch = subparsers.add_parser("fetch", help="Save the live draw as a snapshot file")
    fetch.add_argument("--output", help="Snapshot file to write")
    fetch.set_defaults(func=cmd_fetch)

    check = subparsers.add_parser("check", help="Compare the snapshot file with the live draw")
    check.add_argument("--snapshot", help="Snapshot file (default from settings)")
    check.add_argument("--format", choices=["table", "json"], default="table")
    check.set_defaults(func=cmd_check)

    args = parser.parse_args()

    try:
        args.func(args)
    except Exception as e:
        logger.log_error('command_failed', exc_info=e, command=args.command)
        sys.exit(1)


if __name__ == "__main__":
    main()
