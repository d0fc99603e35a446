#!/usr/bin/env python3
"""
CLI entrypoint for batch rescoring.

Usage examples:
    # Rescore everything
    uv run python -m test_scripts.rescore_cli --all
    # Only initiatives that were never scored, in two kanban columns
    uv run python -m test_scripts.rescore_cli --only-missing --status review --status estimation

Flags:
    --batch-size N        Commit every N initiatives (default: settings.SCORING_BATCH_COMMIT_EVERY)
    --all                 Rescore all initiatives (default)
    --only-missing        Only score initiatives that were never scored
    --status CODE         Restrict to a kanban status (repeatable)
    --log-level LEVEL     Logging level (INFO, DEBUG, etc.)
"""

from __future__ import annotations

import argparse
import logging
import sys

from prioritizer.config import setup_json_logging
from prioritizer.db.session import SessionLocal
from prioritizer.jobs.rescore_job import run_rescore_batch
from prioritizer.schemas.classification import normalize_status


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a batch rescoring pass.")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Commit every N initiatives (defaults to SCORING_BATCH_COMMIT_EVERY).",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--all",
        action="store_true",
        help="Rescore all initiatives (default).",
    )
    group.add_argument(
        "--only-missing",
        action="store_true",
        help="Only score initiatives that were never scored.",
    )
    parser.add_argument(
        "--status",
        action="append",
        default=None,
        help="Restrict to a kanban status code or board label (repeatable).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (e.g. INFO, DEBUG).",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    setup_json_logging(getattr(logging, args.log_level.upper(), logging.INFO))
    logger = logging.getLogger("prioritizer.cli.rescore")
    logger.info("rescore.cli.start")

    statuses = None
    if args.status:
        statuses = []
        for raw in args.status:
            status = normalize_status(raw)
            if status is None:
                logger.error("rescore.cli.unknown_status", extra={"reason": raw})
                return 1
            statuses.append(status.value)

    db = SessionLocal()
    try:
        scored = run_rescore_batch(
            db=db,
            commit_every=args.batch_size,
            only_missing_scores=args.only_missing,
            statuses=statuses,
        )
        logger.info("rescore.cli.done", extra={"scored": scored})
        return 0
    except KeyboardInterrupt:
        logger.warning("rescore.cli.interrupted")
        return 130
    except Exception:
        logger.exception("rescore.cli.error")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
