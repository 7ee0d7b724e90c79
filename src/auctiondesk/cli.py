"""Command-line interface for operating an auction against the snapshot store."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from auctiondesk.config import Settings, get_settings
from auctiondesk.engine import AuctionEngine, AwardResult, NavigationResult
from auctiondesk.export import (
    export_rosters_csv,
    export_rosters_json,
    format_money,
    render_rosters_document,
)
from auctiondesk.ingest import LoadFailure
from auctiondesk.persistence import (
    PersistenceReadFailure,
    PersistenceWriteFailure,
    SnapshotRecord,
    SnapshotStore,
    parse_snapshot,
)
from auctiondesk.session import reset_session, start_session


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a live player auction")
    parser.add_argument("--db", default=None, help="Snapshot database path (default: $AUCTIONDESK_DB_PATH)")
    parser.add_argument("--data", type=Path, default=None, help="Directory holding players/captains/config JSON")
    parser.add_argument("--slot", default=None, help="Snapshot slot name")
    sub = parser.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="Resume or start an auction, asking before discarding a saved one")
    start.add_argument("--restore", action="store_true", help="Restore a saved auction without asking")
    start.add_argument("--fresh", action="store_true", help="Discard any saved auction without asking")

    sub.add_parser("status", help="Show the current player and team budgets")

    award = sub.add_parser("award", help="Award the current player to a captain")
    award.add_argument("captain", type=int, help="Captain index (0-based)")
    award.add_argument("amount", help="Winning bid")
    award.add_argument("--stay", action="store_true", help="Do not advance to the next unsold player")

    best = sub.add_parser("best", help="Award the current player to the richest team with room")
    best.add_argument("amount", help="Winning bid")
    best.add_argument("--stay", action="store_true", help="Do not advance to the next unsold player")

    sub.add_parser("next", help="Move forward one player")
    sub.add_parser("prev", help="Move back one player")
    sub.add_parser("advance", help="Move to the next unsold player")
    jump = sub.add_parser("jump", help="Move to a player by index (0-based)")
    jump.add_argument("index", type=int)

    export = sub.add_parser("export", help="Export final rosters")
    export.add_argument("format", choices=("json", "csv", "html"))
    export.add_argument("--output", type=Path, default=None, help="Write to a file instead of stdout")

    sub.add_parser("reset", help="Discard all progress and reload the source data")

    import_cmd = sub.add_parser("import", help="Load a snapshot JSON saved by the browser version")
    import_cmd.add_argument("snapshot", type=Path)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--restore", action="store_true", help="Restore a saved auction on startup")
    serve.add_argument("--fresh", action="store_true", help="Discard a saved auction on startup")
    return parser.parse_args(argv)


def _keep(record: SnapshotRecord) -> bool:
    return True


def _discard(record: SnapshotRecord) -> bool:
    return False


def _ask_restore(record: SnapshotRecord) -> bool:
    sold = sum(1 for player in record.state.players if player.sold)
    print(
        f"Found saved auction data from {record.saved_at.astimezone().strftime('%Y-%m-%d %H:%M:%S')} "
        f"({sold}/{len(record.state.players)} players sold)."
    )
    answer = input("Restore it? [Y/n] ").strip().lower()
    return answer not in {"n", "no"}


def _print_status(engine: AuctionEngine) -> None:
    state = engine.state
    summary = engine.summary()
    player = engine.current_player
    if player is None:
        print("No players in this auction.")
    else:
        sold_badge = f"  •  SOLD to {player.awarded_to} for {format_money(player.sold_price or 0)}" if player.sold else ""
        print(f"Player {state.current_index + 1} of {len(state.players)}: {player.name}")
        print(f"  {player.position}  •  Rating {player.rating}{sold_badge}")
    print(f"Sold: {summary.sold_players}  Remaining: {summary.remaining_players}")
    for idx, captain in enumerate(state.captains):
        full = "  FULL" if captain.is_full(state.config.team_size) else ""
        print(
            f"  [{idx}] {captain.team_name} ({captain.name}): "
            f"{format_money(captain.budget)} left, {captain.team_count}/{state.config.team_size}{full}"
        )


def _report_award(engine: AuctionEngine, result: AwardResult, stay: bool) -> int:
    if result.failure is not None:
        print(f"{result.failure.kind.value}: {result.failure.message}", file=sys.stderr)
        return 1
    player, captain, amount = result.player, result.captain, result.amount
    if player is None or captain is None or amount is None:
        print("Award succeeded without a player, captain or amount.", file=sys.stderr)
        return 1
    print(f"Awarded {player.name} to {captain.team_name} for {format_money(amount)}.")
    if result.warning:
        print(f"Warning: {result.warning}", file=sys.stderr)
    if not stay:
        _report_navigation(engine, engine.advance_to_next())
    return 0


def _report_navigation(engine: AuctionEngine, result: NavigationResult) -> int:
    if result.complete:
        print("Auction complete!")
        return 0
    if result.failure is not None:
        print(f"{result.failure.kind.value}: {result.failure.message}", file=sys.stderr)
        return 1
    if result.warning:
        print(f"Warning: {result.warning}", file=sys.stderr)
    player = engine.current_player
    if player is not None:
        print(f"Now on player {engine.current_index + 1} of {len(engine.state.players)}: {player.name}")
    return 0


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    import uvicorn

    from auctiondesk.api import create_app

    restore = True if args.restore else False if args.fresh else None
    uvicorn.run(create_app(settings, restore=restore), host=args.host, port=args.port)
    return 0


def run(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings(db_path=args.db, data_dir=args.data, slot=args.slot)
    if args.command == "serve":
        return _serve(settings, args)
    store = SnapshotStore(settings.db_path, slot=settings.slot)

    if args.command == "import":
        try:
            state = parse_snapshot(args.snapshot.read_text(encoding="utf-8"))
        except PersistenceReadFailure as exc:
            print(f"{args.snapshot} is not a usable auction snapshot: {exc}", file=sys.stderr)
            return 1
        try:
            store.save(state)
        except PersistenceWriteFailure as exc:
            print(f"Failed to import {args.snapshot}: {exc}", file=sys.stderr)
            return 1
        print(f"Imported snapshot from {args.snapshot}")
        return 0

    try:
        if args.command == "reset":
            engine = reset_session(store, settings.data_dir)
            print("Auction reset.")
            _print_status(engine)
            return 0
        if args.command == "start" and not args.restore:
            chooser = _discard if args.fresh else _ask_restore
        else:
            chooser = _keep
        engine = start_session(store, settings.data_dir, choose_restore=chooser)
    except LoadFailure as exc:
        print(f"Failed to load auction data: {exc}", file=sys.stderr)
        return 2

    if args.command in {"start", "status"}:
        _print_status(engine)
        return 0
    if args.command == "award":
        return _report_award(engine, engine.award(args.captain, args.amount), args.stay)
    if args.command == "best":
        return _report_award(engine, engine.award_best(args.amount), args.stay)
    if args.command == "next":
        return _report_navigation(engine, engine.advance_next())
    if args.command == "prev":
        return _report_navigation(engine, engine.advance_prev())
    if args.command == "advance":
        return _report_navigation(engine, engine.advance_to_next())
    if args.command == "jump":
        return _report_navigation(engine, engine.jump_to(args.index))
    if args.command == "export":
        if args.format == "json":
            text = export_rosters_json(engine.state)
        elif args.format == "csv":
            text = export_rosters_csv(engine.state)
        else:
            text = render_rosters_document(engine.state, page_lines=settings.page_lines)
        if args.output:
            args.output.write_text(text, encoding="utf-8")
            print(f"Wrote {args.format} export to {args.output}")
        else:
            print(text)
        return 0
    raise ValueError(f"Unknown command {args.command!r}")


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
