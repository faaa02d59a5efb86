"""
Create an admin account for the dashboard.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio.dependencies import get_db_client
from portfolio.errors import PortfolioError
from portfolio.services import accounts

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a portfolio admin user")
    parser.add_argument("email", help="Admin email address")
    parser.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    password = args.password or getpass.getpass("Password: ")
    try:
        user = accounts.create_admin(get_db_client(), args.email, password)
    except PortfolioError as exc:
        logger.error("Could not create admin: %s", exc.detail)
        return 1
    logger.info("Admin %s created (id=%s)", user.email, user.id)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
