"""Pydantic schemas for /referrals endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class ReferralCodeResponse(BaseModel):
    referral_code: str
    message: str


class ApplyReferralRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=20)

    @field_validator("code", mode="before")
    @classmethod
    def _normalize(cls, value: object) -> object:
        # Strip before the length constraints run so blank codes are rejected.
        if isinstance(value, str):
            return value.strip().upper()
        return value


class ApplyReferralResponse(BaseModel):
    success: bool
    message: str


class ReferralEntry(BaseModel):
    referee_id: str
    signup_date: datetime
    reward_granted: bool
    reward_granted_date: datetime | None = None


class ReferralDashboardResponse(BaseModel):
    referral_code: str | None
    referrals: list[ReferralEntry]
    total_referred: int
    total_rewards_pending: int
    referral_rewards_earned: int
