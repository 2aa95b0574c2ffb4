"""
SQLAlchemy ORM models for the chord dice platform.

One ``UsageAccount`` row per player carries every usage counter; referral
relationships and saved progressions live in their own tables. All ledger
mutations are conditional UPDATEs against ``usage_accounts`` — see ``db.ledger``.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


class UsageAccount(Base):
    """Per-player usage counters, subscription state and referral identity.

    Day-scoped counters (``base_rolls_used``, ``ads_watched_today``) are reset
    lazily by the ledger when their date no longer matches today.
    """

    __tablename__ = "usage_accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)

    base_rolls_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    base_rolls_limit: Mapped[int] = mapped_column(Integer, default=5, nullable=False)
    rolls_reset_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    extra_roll_tokens: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    ads_watched_today: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    ads_watch_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_ads_watched: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    subscription_status: Mapped[str] = mapped_column(String(32), default="free", nullable=False)
    subscription_expiry: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    referral_code: Mapped[str | None] = mapped_column(String(16), unique=True, nullable=True)
    referred_by_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    referral_rewards_earned: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    progressions: Mapped[list["SavedProgression"]] = relationship(
        back_populates="account", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("base_rolls_used >= 0", name="ck_usage_rolls_used_non_negative"),
        CheckConstraint("extra_roll_tokens >= 0", name="ck_usage_tokens_non_negative"),
        CheckConstraint("ads_watched_today >= 0", name="ck_usage_ads_non_negative"),
    )


class Referral(Base):
    """Append-only referrer → referee link.

    ``referee_id`` is unique: an account can be referred once. The constraint
    also settles two concurrent applies for the same account.
    """

    __tablename__ = "referrals"

    id: Mapped[int] = mapped_column(primary_key=True)
    referrer_id: Mapped[str] = mapped_column(
        ForeignKey("usage_accounts.id", ondelete="CASCADE"), index=True
    )
    referee_id: Mapped[str] = mapped_column(
        ForeignKey("usage_accounts.id", ondelete="CASCADE"), unique=True
    )
    code: Mapped[str] = mapped_column(String(16))
    signup_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    reward_granted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reward_granted_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class SavedProgression(Base):
    """A roll result the player chose to keep."""

    __tablename__ = "saved_progressions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    account_id: Mapped[str | None] = mapped_column(
        ForeignKey("usage_accounts.id", ondelete="CASCADE"), index=True, nullable=True
    )
    mode: Mapped[str] = mapped_column(String(16))
    chords: Mapped[list[str]] = mapped_column(JSON)
    genre: Mapped[str] = mapped_column(String(32), default="any")
    color_roll: Mapped[int | None] = mapped_column(Integer, nullable=True)
    number_roll: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    account: Mapped["UsageAccount | None"] = relationship(back_populates="progressions")
