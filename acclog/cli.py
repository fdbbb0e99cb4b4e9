"""
Command-line journal.

    acclog add "Shipped the billing migration" --rating 8
    acclog timeframes --granularity year
    acclog show 2026-02
    acclog insight 2026-02 --regenerate

Entries live in the SQLite file at ACCLOG_DB_PATH; --owner scopes them.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

from acclog.errors import JournalError
from acclog.infrastructure.settings import DB_PATH, llm_configured
from acclog.insights.cache import InsightCache
from acclog.insights.orchestrator import InsightOrchestrator
from acclog.journal.aggregator import entry_ids
from acclog.journal.models import Granularity, utc_now
from acclog.journal.service import BucketView, JournalService
from acclog.journal.timekeys import format_relative_time
from acclog.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_OWNER = "local"


def _open_store(db_path: str):
    from acclog.storage.sqlite_store import SQLiteJournalStore

    return SQLiteJournalStore(db_path)


def _make_generator():
    if not llm_configured():
        return None
    from acclog.llm.insight_generator import GeminiInsightGenerator

    return GeminiInsightGenerator()


def _print_bucket(view: BucketView) -> None:
    print(f"\n{view.label}")
    print("-" * 60)
    print(f"{view.stats.count} accomplishment(s), average impact {view.stats.average_rating:.1f}")
    nav = []
    if view.previous_key:
        nav.append(f"older: {view.previous_key}")
    if view.next_key:
        nav.append(f"newer: {view.next_key}")
    if nav:
        print("  ".join(nav))
    print()
    for entry in view.entries:
        print(f"  [{entry.rating:>2}/10] {entry.timestamp:%Y-%m-%d}  {entry.text}")


def cmd_add(args: argparse.Namespace, service: JournalService) -> int:
    entry = service.add_entry(args.text, args.rating)
    print(f"Logged {entry.id} ({entry.rating}/10)")

    if args.compliment:
        generator = _make_generator()
        if generator is None:
            print("AI service not configured; skipping compliment", file=sys.stderr)
        else:
            message = generator.compliment(entry.text, entry.rating)
            if message:
                print(message)
    return 0


def cmd_timeframes(args: argparse.Namespace, service: JournalService) -> int:
    summaries = service.timeframes(args.granularity)
    if not summaries:
        print("No accomplishments yet")
        return 0
    print(f"\n{'Key':<10} {'Label':<20} {'Count':>6} {'Avg':>6}")
    print("-" * 46)
    for s in summaries:
        print(f"{s.key:<10} {s.label:<20} {s.stats.count:>6} {s.stats.average_rating:>6.1f}")
    return 0


def cmd_show(args: argparse.Namespace, service: JournalService) -> int:
    view = service.bucket(args.granularity, args.key)
    if view is None:
        print("No accomplishments yet")
        return 0
    _print_bucket(view)

    insight = InsightCache(service.store, service.owner_id).lookup(view.granularity, view.key)
    if insight is not None:
        stale = InsightCache.is_stale(insight, entry_ids(view.entries))
        print(f"\nInsight (generated {format_relative_time(insight.generated_at, utc_now())})")
        if stale:
            print("(out of date: entries changed since this was generated)")
    return 0


async def _run_insight(args: argparse.Namespace, service: JournalService) -> int:
    view = service.bucket(args.granularity, args.key)
    if view is None:
        print("No accomplishments yet")
        return 0

    orchestrator = InsightOrchestrator(
        InsightCache(service.store, service.owner_id), _make_generator()
    )
    insight = await orchestrator.select(view.granularity, view.key, view.entries)

    if insight is None or args.regenerate:
        print(f"Generating insight for {view.label}...")
        insight = await orchestrator.generate()

    print(f"\n{view.label}")
    print("-" * 60)
    print(insight.content)
    print(f"\nGenerated {format_relative_time(insight.generated_at, utc_now())}", end="")
    print(" (out of date, use --regenerate)" if orchestrator.is_stale else "")
    return 0


def cmd_insight(args: argparse.Namespace, service: JournalService) -> int:
    return asyncio.run(_run_insight(args, service))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="acclog", description="Accomplishment journal")
    parser.add_argument("--owner", default=DEFAULT_OWNER, help="Journal owner id")
    parser.add_argument("--db", default=str(DB_PATH), help="SQLite database path")
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="Log INFO (-v) or DEBUG (-vv)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Log an accomplishment")
    add.add_argument("text")
    add.add_argument("--rating", "-r", type=int, required=True, help="Impact, 1-10")
    add.add_argument("--compliment", action="store_true", help="Ask the AI for encouragement")
    add.set_defaults(func=cmd_add)

    granularity = argparse.ArgumentParser(add_help=False)
    granularity.add_argument(
        "--granularity",
        "-g",
        choices=[g.value for g in Granularity],
        default=Granularity.MONTH.value,
    )

    timeframes = sub.add_parser("timeframes", parents=[granularity], help="List buckets")
    timeframes.set_defaults(func=cmd_timeframes)

    show = sub.add_parser("show", parents=[granularity], help="Show one bucket")
    show.add_argument("key", nargs="?", help="Bucket key (default: most recent)")
    show.set_defaults(func=cmd_show)

    insight = sub.add_parser("insight", parents=[granularity], help="Show or generate an insight")
    insight.add_argument("key", nargs="?", help="Bucket key (default: most recent)")
    insight.add_argument("--regenerate", action="store_true", help="Replace the cached insight")
    insight.set_defaults(func=cmd_insight)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    if args.verbose:
        configure_logging("DEBUG" if args.verbose > 1 else "INFO")
    else:
        configure_logging(os.getenv("ACCLOG_LOG_LEVEL", "WARNING"))

    store = _open_store(args.db)
    try:
        return args.func(args, JournalService(store, args.owner))
    except JournalError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
