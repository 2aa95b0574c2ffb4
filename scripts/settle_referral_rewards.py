#!/usr/bin/env python
"""Settle pending referral rewards.

Grants each referrer one reward month per referee that now holds an active
subscription. Safe to run repeatedly: a referral is rewarded at most once.
Meant to be triggered by cron or a scheduler.

Usage
-----
    python scripts/settle_referral_rewards.py

Exit codes
----------
    0  — success
    1  — at least one referral failed to settle (details logged)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import AppConfig  # noqa: E402
from db.ledger import UsageLedger  # noqa: E402
from db.session import SessionLocal  # noqa: E402
from infrastructure.metrics import record_settlement  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Grant pending referral rewards.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = AppConfig.from_env()
    with SessionLocal() as session:
        report = UsageLedger(session, config=config.ledger).settle_referral_rewards()
    record_settlement(processed=report.processed, errors=len(report.errors))

    logger.info("Processed %d referral rewards (%d skipped)", report.processed, report.skipped)
    for error in report.errors:
        logger.error(error)
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
