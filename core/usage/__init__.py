"""
core/usage/ — Freemium usage accounting: pure rules and value objects.

The persistent side (guarded SQL updates) lives in ``db.ledger``.
"""

from core.usage.errors import AccountNotFoundError, ReferralCodeExhaustedError
from core.usage.types import (
    AccountSnapshot,
    DemoAccount,
    Denial,
    DenialReason,
    ReferralOutcome,
    ReferralRecord,
    ReferralStats,
    RollGrant,
    SettlementReport,
    UsageStatus,
)

__all__ = [
    "AccountNotFoundError",
    "AccountSnapshot",
    "DemoAccount",
    "Denial",
    "DenialReason",
    "ReferralCodeExhaustedError",
    "ReferralOutcome",
    "ReferralRecord",
    "ReferralStats",
    "RollGrant",
    "SettlementReport",
    "UsageStatus",
]
