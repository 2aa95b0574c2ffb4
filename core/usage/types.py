"""Usage ledger value objects — pure data contracts.

No I/O, no datetime.now(), no imports from db/ or api/. The ledger converts
ORM rows into these snapshots before handing them to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

# ---------------------------------------------------------------------------
# Denials — expected outcomes, returned as values
# ---------------------------------------------------------------------------


class DenialReason(Enum):
    """Why a guarded ledger mutation matched no row."""

    ROLL_LIMIT_REACHED = "limit_reached"
    DAILY_AD_LIMIT_REACHED = "daily_ad_limit_reached"


DENIAL_MESSAGES: dict[DenialReason, str] = {
    DenialReason.ROLL_LIMIT_REACHED: (
        "Dice roll limit reached. Watch an ad or upgrade to premium for unlimited rolls."
    ),
    DenialReason.DAILY_AD_LIMIT_REACHED: (
        "Daily ad limit reached. Come back tomorrow for more free rolls."
    ),
}


@dataclass(frozen=True)
class Denial:
    """A request the ledger refused. Never raised, always returned."""

    reason: DenialReason

    @property
    def message(self) -> str:
        """User-facing, actionable message."""
        return DENIAL_MESSAGES[self.reason]


class ReferralOutcome(Enum):
    """Result of applying a referral code."""

    APPLIED = "applied"
    INVALID_CODE = "invalid_code"
    SELF_REFERRAL = "self_referral"
    ALREADY_REFERRED = "already_referred"

    @property
    def message(self) -> str:
        return _REFERRAL_MESSAGES[self]

    @property
    def ok(self) -> bool:
        return self is ReferralOutcome.APPLIED


_REFERRAL_MESSAGES: dict[ReferralOutcome, str] = {
    ReferralOutcome.APPLIED: "Referral code applied successfully!",
    ReferralOutcome.INVALID_CODE: "Invalid referral code",
    ReferralOutcome.SELF_REFERRAL: "You cannot refer yourself",
    ReferralOutcome.ALREADY_REFERRED: "You have already used a referral code",
}

# ---------------------------------------------------------------------------
# Account views
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccountSnapshot:
    """Point-in-time copy of a UsageAccount row.

    Counters are stored values, not day-adjusted; use ``core.usage.rules``
    to derive effective values for a given day.
    """

    account_id: str
    base_rolls_used: int
    base_rolls_limit: int
    rolls_reset_date: date | None
    extra_roll_tokens: int
    ads_watched_today: int
    ads_watch_date: date | None
    total_ads_watched: int
    subscription_status: str
    subscription_expiry: datetime | None
    subscription_active: bool
    referral_code: str | None
    referred_by_code: str | None
    referral_rewards_earned: int

    @property
    def remaining_rolls(self) -> int:
        """Rolls left according to the stored counters."""
        return max(0, self.base_rolls_limit - self.base_rolls_used) + self.extra_roll_tokens


@dataclass(frozen=True)
class RollGrant:
    """A successful consume_roll. ``unlimited`` is True for subscribers."""

    account: AccountSnapshot
    unlimited: bool = False


@dataclass(frozen=True)
class UsageStatus:
    """Day-adjusted usage counters, as reported by GET /usage/status."""

    base_rolls_used: int
    base_rolls_limit: int
    extra_roll_tokens: int
    total_available_rolls: int
    remaining_rolls: int
    ads_watched_today: int
    can_roll: bool
    subscription_active: bool


@dataclass(frozen=True)
class ReferralRecord:
    """One referrer → referee relationship."""

    referral_id: int
    referrer_id: str
    referee_id: str
    code: str
    signup_date: datetime
    reward_granted: bool
    reward_granted_date: datetime | None = None


@dataclass(frozen=True)
class ReferralStats:
    """Referral dashboard for one account."""

    referral_code: str | None
    referrals: tuple[ReferralRecord, ...]
    total_referred: int
    total_rewards_pending: int
    referral_rewards_earned: int


@dataclass(frozen=True)
class SettlementReport:
    """Outcome of one settle_referral_rewards batch."""

    processed: int = 0
    skipped: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Demo account
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DemoAccount:
    """Unlimited, non-persisted account used for product demos.

    Carries preset entitlements instead of ledger state: every roll is allowed,
    premium genres and modes are unlocked, nothing is ever written.
    """

    account_id: str = "demo-user-id"
    display_name: str = "Demo User"

    @property
    def subscription_active(self) -> bool:
        return True

    def usage_status(self) -> UsageStatus:
        return UsageStatus(
            base_rolls_used=0,
            base_rolls_limit=999_999,
            extra_roll_tokens=999_999,
            total_available_rolls=1_999_998,
            remaining_rolls=1_999_998,
            ads_watched_today=0,
            can_roll=True,
            subscription_active=True,
        )
