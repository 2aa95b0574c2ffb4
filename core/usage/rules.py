"""
core/usage/rules.py — Pure usage-accounting rules.

Day-boundary and entitlement arithmetic shared by the ledger's read paths and
its tests. Callers supply ``today`` / ``now``; nothing here reads the clock.

Day semantics:
    Counters carry the calendar day (UTC) they were last touched. A counter
    whose day differs from ``today`` — or that has no day at all — counts as 0.
    Resets happen lazily when the ledger next mutates the row.
"""

from __future__ import annotations

import calendar
import random
from datetime import UTC, date, datetime

from core.config import REFERRAL_CODE_ALPHABET


def utc_today(now: datetime) -> date:
    """Calendar day of ``now`` in the reference timezone (UTC)."""
    return as_utc(now).date()


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite returns them naive)."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def is_new_day(last_day: date | None, today: date) -> bool:
    """True when a day-scoped counter must be treated as reset."""
    return last_day is None or last_day != today


def effective_rolls_used(base_rolls_used: int, rolls_reset_date: date | None, today: date) -> int:
    """Rolls used today, 0 after a day rollover."""
    return 0 if is_new_day(rolls_reset_date, today) else base_rolls_used


def effective_ads_watched(ads_watched_today: int, ads_watch_date: date | None, today: date) -> int:
    """Ads watched today, 0 after a day rollover."""
    return 0 if is_new_day(ads_watch_date, today) else ads_watched_today


def is_subscription_active(status: str | None, expiry: datetime | None, now: datetime) -> bool:
    """Active means status "active" with an expiry strictly in the future."""
    if status != "active" or expiry is None:
        return False
    return as_utc(expiry) > as_utc(now)


def can_roll(
    *,
    subscription_active: bool,
    base_rolls_used: int,
    base_rolls_limit: int,
    extra_roll_tokens: int,
    rolls_reset_date: date | None,
    today: date,
) -> bool:
    """Whether one more roll would be granted right now.

    Mirrors the two consume guards: a free base slot, or any token left.
    Equal to ``used < limit + tokens`` while ``used <= limit``; after a token
    spend ``used`` exceeds the limit and only the token count matters.
    """
    if subscription_active:
        return True
    used = effective_rolls_used(base_rolls_used, rolls_reset_date, today)
    return used < base_rolls_limit or extra_roll_tokens > 0


def remaining_rolls(used: int, limit: int, tokens: int) -> int:
    """Free base slots left plus unspent tokens."""
    return max(0, limit - used) + tokens


def add_months(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` by whole calendar months, clamping the day.

    Examples:
        >>> add_months(datetime(2026, 1, 31), 1)
        datetime.datetime(2026, 2, 28, 0, 0)
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def new_referral_code(length: int, rng: random.Random | None = None) -> str:
    """Random code over ``[A-Z0-9]``, e.g. ``"Q7K2M9XA"``."""
    rng = rng or random.SystemRandom()
    return "".join(rng.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))
