"""Create the ledger tables (usage_accounts, referrals, saved_progressions).

Usage:
    python -m db.init_db
"""

import logging

from db.models import Base
from db.session import engine

logger = logging.getLogger(__name__)


def init_db() -> list[str]:
    """Create any missing tables. Returns the table names in the schema."""
    Base.metadata.create_all(bind=engine)
    return sorted(Base.metadata.tables)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    logger.info("DB schema ready: %s", ", ".join(init_db()))
