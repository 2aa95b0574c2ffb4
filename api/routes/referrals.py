"""
api/routes/referrals.py — Referral code endpoints.

Endpoints:
    POST /referrals/generate-code — Get (or create) the caller's referral code
    POST /referrals/apply         — Redeem another account's referral code
    GET  /referrals/dashboard     — Referrals made by the caller

Rewards are granted later by ``scripts/settle_referral_rewards.py`` once the
referee holds an active subscription.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from api.deps import Caller, Ledger, registered_account
from api.schemas.referrals import (
    ApplyReferralRequest,
    ApplyReferralResponse,
    ReferralCodeResponse,
    ReferralDashboardResponse,
    ReferralEntry,
)
from core.usage.errors import AccountNotFoundError, ReferralCodeExhaustedError
from infrastructure.metrics import record_referral_applied

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/referrals", tags=["referrals"])


@router.post("/generate-code", response_model=ReferralCodeResponse)
def generate_code(caller: Caller, ledger: Ledger) -> ReferralCodeResponse:
    """Return the caller's referral code, creating it on first call.

    Raises:
        404: Unknown account.
        503: No free code found within the retry budget.
    """
    account_id = registered_account(caller)
    try:
        code = ledger.generate_referral_code(account_id)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Account not found: {account_id!r}") from exc
    except ReferralCodeExhaustedError as exc:
        logger.error("Referral code generation exhausted for %s", account_id)
        raise HTTPException(
            status_code=503,
            detail={
                "code": "referral_code_exhausted",
                "message": "Could not allocate a referral code, please retry later.",
            },
        ) from exc
    return ReferralCodeResponse(referral_code=code, message="Share this code with your friends!")


@router.post("/apply", response_model=ApplyReferralResponse)
def apply_code(body: ApplyReferralRequest, caller: Caller, ledger: Ledger) -> ApplyReferralResponse:
    """Redeem a referral code for the caller.

    Raises:
        400: Invalid code, self-referral, or the caller was already referred.
        404: Unknown account.
    """
    account_id = registered_account(caller)
    try:
        outcome = ledger.apply_referral_code(account_id, body.code)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Account not found: {account_id!r}") from exc

    record_referral_applied(outcome.value)
    if not outcome.ok:
        raise HTTPException(
            status_code=400,
            detail={"code": outcome.value, "message": outcome.message},
        )
    return ApplyReferralResponse(success=True, message=outcome.message)


@router.get("/dashboard", response_model=ReferralDashboardResponse)
def dashboard(caller: Caller, ledger: Ledger) -> ReferralDashboardResponse:
    """Return the caller's code and the referrals made with it."""
    account_id = registered_account(caller)
    try:
        stats = ledger.referral_stats(account_id)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Account not found: {account_id!r}") from exc
    return ReferralDashboardResponse(
        referral_code=stats.referral_code,
        referrals=[
            ReferralEntry(
                referee_id=r.referee_id,
                signup_date=r.signup_date,
                reward_granted=r.reward_granted,
                reward_granted_date=r.reward_granted_date,
            )
            for r in stats.referrals
        ],
        total_referred=stats.total_referred,
        total_rewards_pending=stats.total_rewards_pending,
        referral_rewards_earned=stats.referral_rewards_earned,
    )
