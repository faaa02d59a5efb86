"""
Backfill slugs for blog posts created before slugs were required.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from content.slugs import is_valid_slug
from content.types import BlogPost
from portfolio.dependencies import get_db_client
from portfolio.services.blog import backfill_slugs

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Give every blog post a slug")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List posts without a slug and exit",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    db = get_db_client()
    if args.dry_run:
        for post in db.list(BlogPost, order_by="created_at"):
            if not post.slug:
                logger.info("Missing slug: %s (%s)", post.title, post.id)
            elif not is_valid_slug(post.slug):
                logger.warning("Malformed slug %r on %s", post.slug, post.id)
        return 0

    updated = backfill_slugs(db)
    logger.info("Backfilled %d post slugs", updated)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
