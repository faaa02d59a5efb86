"""
Daemon that delivers queued contact form and reply emails.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio.config import get_settings
from portfolio.dependencies import get_db_client, get_mailer, get_queue_client
from portfolio.worker import process_next, run_loop

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Portfolio email worker")
    parser.add_argument(
        "--poll-seconds",
        type=float,
        default=2.0,
        help="Seconds to block on the queue before polling again",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Drain the queue and any never-queued pending jobs once, then exit",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    if not args.once:
        logger.info("Starting email worker (poll every %.1fs)", args.poll_seconds)
        run_loop(poll_interval_seconds=args.poll_seconds)
        return 0

    db = get_db_client()
    queue = get_queue_client()
    mailer = get_mailer()
    processed = 0
    while process_next(db=db, queue=queue, mailer=mailer, block=False):
        processed += 1
    logger.info("Processed %d email jobs", processed)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
