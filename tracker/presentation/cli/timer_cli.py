from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence
from uuid import UUID

from tracker.application.timer.display import DisplayValue, format_hms
from tracker.config import load_settings
from tracker.domain.errors import TrackerError
from tracker.domain.value_objects import TaskId
from tracker.infrastructure.db.postgres import PostgresDatabase, load_config_from_env
from tracker.logging_setup import setup_logging
from tracker.presentation.context import build_postgres_context

logger = logging.getLogger(__name__)


def _render(value: DisplayValue) -> str:
    mode = "left" if value.target_mode else "elapsed"
    return f"\r{format_hms(value.seconds)} {mode}  (total {format_hms(value.elapsed)})"


def _print_tick(value: DisplayValue) -> None:
    sys.stdout.write(_render(value))
    sys.stdout.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tracker-timer",
        description="Shows the live timer of a task; Ctrl+C leaves the view.",
    )
    parser.add_argument("task_id", type=UUID)
    parser.add_argument(
        "--target-minutes",
        type=int,
        default=None,
        help="countdown target to set before anything else",
    )
    parser.add_argument(
        "--persist",
        action="store_true",
        help="also save the target as the task's estimate",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--start", action="store_true", help="start or resume the timer")
    action.add_argument("--stop", action="store_true", help="stop the running entry and exit")
    action.add_argument("--finish", action="store_true", help="stop and mark the task completed")
    return parser


async def run_timer(args: argparse.Namespace) -> int:
    settings = load_settings()
    db = PostgresDatabase(load_config_from_env())
    await db.connect()

    try:
        ctx = build_postgres_context(settings, db)
        session = ctx.timer_session(TaskId(args.task_id), on_display=_print_tick)

        async with session:
            for warning in session.snapshot.warnings:
                print(f"warning: {warning}")

            if args.target_minutes is not None:
                await session.set_target(args.target_minutes * 60, persist_to_task=args.persist)

            if args.stop:
                stopped = await session.stop()
                print()
                print("stopped" if stopped is not None else "nothing was running")
                return 0

            if args.finish:
                await session.finish()
                print()
                print("task completed")
                return 0

            if args.start:
                result = await session.start(persist_to_task=args.persist)
                if result.completed:
                    print()
                    print("target already reached, task completed")
                    return 0

            # The view only observes; leaving it keeps a running entry running.
            while session.ticking:
                await asyncio.sleep(settings.timer_tick_seconds)
            return 0
    finally:
        await db.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging(log_dir=settings.log_dir, console_level=logging.WARNING)

    try:
        return asyncio.run(run_timer(args))
    except KeyboardInterrupt:
        print()
        return 0
    except TrackerError as exc:
        print()
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
