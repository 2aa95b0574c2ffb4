"""Pydantic schemas for /accounts, /usage and /subscription endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AccountResponse(BaseModel):
    account_id: str
    base_rolls_used: int
    base_rolls_limit: int
    extra_roll_tokens: int
    total_ads_watched: int
    subscription_active: bool
    referral_code: str | None = None


class CreateAccountRequest(BaseModel):
    account_id: str | None = Field(default=None, min_length=1, max_length=64)


class UsageStatusResponse(BaseModel):
    """Day-adjusted usage counters."""

    base_rolls_used: int
    base_rolls_limit: int
    extra_roll_tokens: int
    total_available_rolls: int
    remaining_rolls: int
    ads_watched_today: int
    can_roll: bool
    subscription_active: bool


class WatchAdResponse(BaseModel):
    success: bool
    extra_roll_tokens: int
    ads_watched_today: int
    message: str


class SubscriptionStatusResponse(BaseModel):
    subscription_status: str
    subscription_expiry: datetime | None = None
    subscription_active: bool
