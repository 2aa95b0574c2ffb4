"""
Usage ledger — guarded conditional updates against ``usage_accounts``.

Every mutation that can be refused is a single ``UPDATE ... WHERE <guard>``
evaluated by the database. A guard that matches zero rows *is* the denial:
no row locks are taken in Python, no read-then-write races exist, and two
requests racing for the last free slot cannot both win.

Operations:
    create_account            new account, zeroed counters, today's dates
    can_roll / usage_status   day-adjusted reads
    consume_roll              lazy day reset, then base slot, then bonus token
    grant_ad_token            reset-or-increment + cap check in one UPDATE
    generate_referral_code    idempotent, "only set if NULL", 5 attempts
    apply_referral_code       guarded referee claim + referral row, one txn
    referral_stats            dashboard numbers for one referrer
    settle_referral_rewards   batch: claim each reward once, extend referrer
    update_subscription_status  billing webhook hook

Denials are returned (``Denial``, ``ReferralOutcome``); only infrastructure
faults and ``ReferralCodeExhaustedError`` are raised.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import case, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.config import DEFAULT_LEDGER_CONFIG, LedgerConfig
from core.usage import rules
from core.usage.errors import AccountNotFoundError, ReferralCodeExhaustedError
from core.usage.types import (
    AccountSnapshot,
    Denial,
    DenialReason,
    ReferralOutcome,
    ReferralRecord,
    ReferralStats,
    RollGrant,
    SettlementReport,
    UsageStatus,
)
from db.models import Referral, UsageAccount

logger = logging.getLogger(__name__)

# Bulk UPDATEs below never touch objects already loaded in the session;
# reads go through _load(), which always refreshes from the database.
_NO_SYNC = {"synchronize_session": False}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _to_snapshot(row: UsageAccount, now: datetime) -> AccountSnapshot:
    return AccountSnapshot(
        account_id=row.id,
        base_rolls_used=row.base_rolls_used,
        base_rolls_limit=row.base_rolls_limit,
        rolls_reset_date=row.rolls_reset_date,
        extra_roll_tokens=row.extra_roll_tokens,
        ads_watched_today=row.ads_watched_today,
        ads_watch_date=row.ads_watch_date,
        total_ads_watched=row.total_ads_watched,
        subscription_status=row.subscription_status,
        subscription_expiry=(
            rules.as_utc(row.subscription_expiry) if row.subscription_expiry is not None else None
        ),
        subscription_active=rules.is_subscription_active(
            row.subscription_status, row.subscription_expiry, now
        ),
        referral_code=row.referral_code,
        referred_by_code=row.referred_by_code,
        referral_rewards_earned=row.referral_rewards_earned,
    )


def _to_record(row: Referral) -> ReferralRecord:
    return ReferralRecord(
        referral_id=row.id,
        referrer_id=row.referrer_id,
        referee_id=row.referee_id,
        code=row.code,
        signup_date=row.signup_date,
        reward_granted=row.reward_granted,
        reward_granted_date=row.reward_granted_date,
    )


class UsageLedger:
    """Free-tier roll accounting, ad tokens and referrals for one session.

    Args:
        session: Active SQLAlchemy session. The ledger commits its own work.
        config: Limits (base rolls, ad cap, referral code shape).
        clock: Returns the current time; day boundaries use its UTC date.
        rng: Source for referral codes (default: ``random.SystemRandom``).
    """

    def __init__(
        self,
        session: Session,
        config: LedgerConfig = DEFAULT_LEDGER_CONFIG,
        clock: Callable[[], datetime] = _utcnow,
        rng: random.Random | None = None,
    ) -> None:
        self._session = session
        self._config = config
        self._clock = clock
        self._rng = rng or random.SystemRandom()

    @property
    def config(self) -> LedgerConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Accounts                                                             #
    # ------------------------------------------------------------------ #

    def create_account(self, account_id: str | None = None) -> AccountSnapshot:
        """Register a new account with zeroed counters and today's dates."""
        now = self._clock()
        today = rules.utc_today(now)
        row = UsageAccount(
            base_rolls_used=0,
            base_rolls_limit=self._config.base_rolls_limit,
            rolls_reset_date=today,
            extra_roll_tokens=0,
            ads_watched_today=0,
            ads_watch_date=today,
            total_ads_watched=0,
            subscription_status="free",
            referral_rewards_earned=0,
            created_at=now,
            updated_at=now,
        )
        if account_id is not None:
            row.id = account_id
        self._session.add(row)
        self._session.commit()
        logger.info("Created usage account %s", row.id)
        return _to_snapshot(row, now)

    def get_account(self, account_id: str) -> AccountSnapshot:
        """Current stored state of an account.

        Raises:
            AccountNotFoundError: No such account.
        """
        return _to_snapshot(self._load(account_id), self._clock())

    def _load(self, account_id: str) -> UsageAccount:
        row = self._session.get(UsageAccount, account_id, populate_existing=True)
        if row is None:
            raise AccountNotFoundError(account_id)
        return row

    # ------------------------------------------------------------------ #
    # Rolls                                                                #
    # ------------------------------------------------------------------ #

    def can_roll(self, account_id: str) -> bool:
        """True if a roll would currently be granted (subscribers: always)."""
        now = self._clock()
        row = self._load(account_id)
        return rules.can_roll(
            subscription_active=rules.is_subscription_active(
                row.subscription_status, row.subscription_expiry, now
            ),
            base_rolls_used=row.base_rolls_used,
            base_rolls_limit=row.base_rolls_limit,
            extra_roll_tokens=row.extra_roll_tokens,
            rolls_reset_date=row.rolls_reset_date,
            today=rules.utc_today(now),
        )

    def usage_status(self, account_id: str) -> UsageStatus:
        """Day-adjusted counters for display. Read-only: resets nothing."""
        now = self._clock()
        today = rules.utc_today(now)
        row = self._load(account_id)
        active = rules.is_subscription_active(row.subscription_status, row.subscription_expiry, now)
        used = rules.effective_rolls_used(row.base_rolls_used, row.rolls_reset_date, today)
        total = row.base_rolls_limit + row.extra_roll_tokens
        return UsageStatus(
            base_rolls_used=used,
            base_rolls_limit=row.base_rolls_limit,
            extra_roll_tokens=row.extra_roll_tokens,
            total_available_rolls=total,
            remaining_rolls=rules.remaining_rolls(used, row.base_rolls_limit, row.extra_roll_tokens),
            ads_watched_today=rules.effective_ads_watched(
                row.ads_watched_today, row.ads_watch_date, today
            ),
            can_roll=active or used < row.base_rolls_limit or row.extra_roll_tokens > 0,
            subscription_active=active,
        )

    def consume_roll(self, account_id: str) -> RollGrant | Denial:
        """Spend one roll: a base slot first, then an extra roll token.

        Steps, each a single conditional UPDATE:
            1. day rolled over → ``base_rolls_used = 0``, ``rolls_reset_date = today``
            2. ``base_rolls_used < base_rolls_limit`` → used + 1
            3. ``base_rolls_used >= base_rolls_limit AND extra_roll_tokens > 0``
               → used + 1, tokens - 1

        Returns:
            RollGrant with the updated account, or Denial(ROLL_LIMIT_REACHED)
            when neither step 2 nor step 3 matched.
        """
        now = self._clock()
        today = rules.utc_today(now)
        row = self._load(account_id)
        if rules.is_subscription_active(row.subscription_status, row.subscription_expiry, now):
            return RollGrant(account=_to_snapshot(row, now), unlimited=True)

        self._session.execute(
            update(UsageAccount)
            .where(
                UsageAccount.id == account_id,
                or_(
                    UsageAccount.rolls_reset_date.is_(None),
                    UsageAccount.rolls_reset_date != today,
                ),
            )
            .values(base_rolls_used=0, rolls_reset_date=today, updated_at=now)
            .execution_options(**_NO_SYNC)
        )
        self._session.commit()

        base = self._session.execute(
            update(UsageAccount)
            .where(
                UsageAccount.id == account_id,
                UsageAccount.base_rolls_used < UsageAccount.base_rolls_limit,
            )
            .values(base_rolls_used=UsageAccount.base_rolls_used + 1, updated_at=now)
            .execution_options(**_NO_SYNC)
        )
        if base.rowcount == 0:
            token = self._session.execute(
                update(UsageAccount)
                .where(
                    UsageAccount.id == account_id,
                    UsageAccount.base_rolls_used >= UsageAccount.base_rolls_limit,
                    UsageAccount.extra_roll_tokens > 0,
                )
                .values(
                    base_rolls_used=UsageAccount.base_rolls_used + 1,
                    extra_roll_tokens=UsageAccount.extra_roll_tokens - 1,
                    updated_at=now,
                )
                .execution_options(**_NO_SYNC)
            )
            if token.rowcount == 0:
                self._session.rollback()
                logger.info("Roll denied for %s: limit reached", account_id)
                return Denial(DenialReason.ROLL_LIMIT_REACHED)
        self._session.commit()
        return RollGrant(account=_to_snapshot(self._load(account_id), now))

    # ------------------------------------------------------------------ #
    # Ads                                                                  #
    # ------------------------------------------------------------------ #

    def grant_ad_token(self, account_id: str) -> AccountSnapshot | Denial:
        """Credit one extra roll token for a watched ad.

        The daily cap check and the reset-or-increment of ``ads_watched_today``
        are one UPDATE: a new day restarts the count at 1, otherwise the count
        must still be below the cap.

        Returns:
            Updated account, or Denial(DAILY_AD_LIMIT_REACHED).
        """
        now = self._clock()
        today = rules.utc_today(now)
        self._load(account_id)

        new_day = or_(
            UsageAccount.ads_watch_date.is_(None),
            UsageAccount.ads_watch_date != today,
        )
        result = self._session.execute(
            update(UsageAccount)
            .where(
                UsageAccount.id == account_id,
                or_(new_day, UsageAccount.ads_watched_today < self._config.daily_ad_cap),
            )
            .values(
                extra_roll_tokens=UsageAccount.extra_roll_tokens + 1,
                ads_watched_today=case((new_day, 1), else_=UsageAccount.ads_watched_today + 1),
                ads_watch_date=today,
                total_ads_watched=UsageAccount.total_ads_watched + 1,
                updated_at=now,
            )
            .execution_options(**_NO_SYNC)
        )
        if result.rowcount == 0:
            self._session.rollback()
            logger.warning("Ad token denied for %s: daily cap reached", account_id)
            return Denial(DenialReason.DAILY_AD_LIMIT_REACHED)
        self._session.commit()
        return _to_snapshot(self._load(account_id), now)

    def reset_daily_ads(self, account_id: str) -> AccountSnapshot:
        """Zero today's ad count (admin/maintenance only)."""
        now = self._clock()
        result = self._session.execute(
            update(UsageAccount)
            .where(UsageAccount.id == account_id)
            .values(ads_watched_today=0, ads_watch_date=rules.utc_today(now), updated_at=now)
            .execution_options(**_NO_SYNC)
        )
        self._session.commit()
        if result.rowcount == 0:
            raise AccountNotFoundError(account_id)
        return _to_snapshot(self._load(account_id), now)

    # ------------------------------------------------------------------ #
    # Referrals                                                            #
    # ------------------------------------------------------------------ #

    def generate_referral_code(self, account_id: str) -> str:
        """Return the account's referral code, creating it on first call.

        Each attempt writes a fresh code only if the account still has none.
        A unique-constraint conflict (code taken by another account) retries
        with a new code; losing the NULL guard to a concurrent call for the
        same account returns the code that call stored.

        Raises:
            AccountNotFoundError: No such account.
            ReferralCodeExhaustedError: Every attempt collided.
        """
        row = self._load(account_id)
        if row.referral_code:
            return row.referral_code

        attempts = self._config.referral_code_attempts
        for attempt in range(1, attempts + 1):
            code = rules.new_referral_code(self._config.referral_code_length, self._rng)
            try:
                result = self._session.execute(
                    update(UsageAccount)
                    .where(UsageAccount.id == account_id, UsageAccount.referral_code.is_(None))
                    .values(referral_code=code, updated_at=self._clock())
                    .execution_options(**_NO_SYNC)
                )
                self._session.commit()
            except IntegrityError:
                self._session.rollback()
                logger.warning(
                    "Referral code collision for %s (attempt %d/%d)", account_id, attempt, attempts
                )
                continue
            if result.rowcount == 0:
                winner = self._load(account_id).referral_code
                if winner is None:
                    raise RuntimeError(f"Referral code guard failed but {account_id!r} has no code")
                return winner
            logger.info("Generated referral code for %s", account_id)
            return code

        raise ReferralCodeExhaustedError(account_id, attempts)

    def apply_referral_code(self, account_id: str, code: str) -> ReferralOutcome:
        """Link ``account_id`` as the referee of whoever owns ``code``.

        The referee claim (``referred_by_code`` set only while NULL) and the
        referral row insert commit together. The unique ``referee_id``
        constraint turns a concurrent duplicate apply into ALREADY_REFERRED.
        """
        now = self._clock()
        caller = self._load(account_id)
        referrer = self._session.execute(
            select(UsageAccount).where(UsageAccount.referral_code == code)
        ).scalar_one_or_none()

        if referrer is None:
            return ReferralOutcome.INVALID_CODE
        if referrer.id == account_id:
            return ReferralOutcome.SELF_REFERRAL
        if caller.referred_by_code:
            return ReferralOutcome.ALREADY_REFERRED

        try:
            claimed = self._session.execute(
                update(UsageAccount)
                .where(UsageAccount.id == account_id, UsageAccount.referred_by_code.is_(None))
                .values(referred_by_code=code, updated_at=now)
                .execution_options(**_NO_SYNC)
            )
            if claimed.rowcount == 0:
                self._session.rollback()
                return ReferralOutcome.ALREADY_REFERRED
            self._session.add(
                Referral(
                    referrer_id=referrer.id,
                    referee_id=account_id,
                    code=code,
                    signup_date=now,
                    reward_granted=False,
                )
            )
            self._session.commit()
        except IntegrityError:
            self._session.rollback()
            logger.info("Concurrent referral apply for %s lost the race", account_id)
            return ReferralOutcome.ALREADY_REFERRED

        logger.info("Account %s referred by %s", account_id, referrer.id)
        return ReferralOutcome.APPLIED

    def referral_stats(self, account_id: str) -> ReferralStats:
        """Referrals made by ``account_id`` and their reward state."""
        row = self._load(account_id)
        referrals = self._session.execute(
            select(Referral).where(Referral.referrer_id == account_id).order_by(Referral.id)
        ).scalars().all()
        records = tuple(_to_record(r) for r in referrals)
        return ReferralStats(
            referral_code=row.referral_code,
            referrals=records,
            total_referred=len(records),
            total_rewards_pending=sum(1 for r in records if not r.reward_granted),
            referral_rewards_earned=row.referral_rewards_earned,
        )

    def settle_referral_rewards(self) -> SettlementReport:
        """Grant referrers one reward per referee with an active subscription.

        One transaction per referral:
            1. flip ``reward_granted`` to true only if it is still false
            2. if the flip matched, extend the referrer's expiry to
               ``max(now, expiry) + reward months``, mark it active and
               count the reward

        A referral whose flip matches nothing was settled by a concurrent
        run and is skipped. Per-referral database errors are collected; the
        batch continues.
        """
        now = self._clock()
        months = self._config.referral_reward_months
        pending = self._session.execute(
            select(
                Referral.id,
                Referral.referrer_id,
                UsageAccount.subscription_status,
                UsageAccount.subscription_expiry,
            )
            .join(UsageAccount, Referral.referee_id == UsageAccount.id)
            .where(Referral.reward_granted.is_(False), UsageAccount.subscription_status == "active")
            .order_by(Referral.id)
        ).all()
        self._session.commit()

        processed = 0
        skipped = 0
        errors: list[str] = []
        for referral_id, referrer_id, status, expiry in pending:
            if not rules.is_subscription_active(status, expiry, now):
                continue
            try:
                claimed = self._session.execute(
                    update(Referral)
                    .where(Referral.id == referral_id, Referral.reward_granted.is_(False))
                    .values(reward_granted=True, reward_granted_date=now)
                    .execution_options(**_NO_SYNC)
                )
                if claimed.rowcount == 0:
                    self._session.rollback()
                    skipped += 1
                    continue

                referrer = self._session.execute(
                    select(UsageAccount)
                    .where(UsageAccount.id == referrer_id)
                    .with_for_update()
                    .execution_options(populate_existing=True)
                ).scalar_one()
                current = referrer.subscription_expiry
                start = max(now, rules.as_utc(current)) if current is not None else now
                referrer.subscription_expiry = rules.add_months(start, months)
                referrer.subscription_status = "active"
                referrer.referral_rewards_earned = referrer.referral_rewards_earned + 1
                referrer.updated_at = now
                self._session.commit()
                processed += 1
            except SQLAlchemyError as exc:
                self._session.rollback()
                logger.exception("Referral reward %s failed", referral_id)
                errors.append(f"Failed to process reward for referral {referral_id}: {exc}")

        logger.info(
            "Referral settlement: processed=%d skipped=%d errors=%d",
            processed,
            skipped,
            len(errors),
        )
        return SettlementReport(processed=processed, skipped=skipped, errors=tuple(errors))

    # ------------------------------------------------------------------ #
    # Subscription                                                         #
    # ------------------------------------------------------------------ #

    def update_subscription_status(
        self, account_id: str, status: str, expiry: datetime | None = None
    ) -> AccountSnapshot:
        """Record a subscription change pushed by the billing provider."""
        now = self._clock()
        result = self._session.execute(
            update(UsageAccount)
            .where(UsageAccount.id == account_id)
            .values(subscription_status=status, subscription_expiry=expiry, updated_at=now)
            .execution_options(**_NO_SYNC)
        )
        self._session.commit()
        if result.rowcount == 0:
            raise AccountNotFoundError(account_id)
        logger.info("Subscription for %s set to %s", account_id, status)
        return _to_snapshot(self._load(account_id), now)

