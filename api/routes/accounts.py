"""
api/routes/accounts.py — Account, usage and subscription endpoints.

Endpoints:
    POST /accounts             — Register a usage account (called at signup)
    GET  /usage/status         — Day-adjusted roll/ad counters
    POST /usage/watch-ad       — Credit one extra roll token for a watched ad
    GET  /subscription/status  — Subscription status and expiry
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from api.deps import Caller, Ledger, get_app_config, registered_account
from api.schemas.usage import (
    AccountResponse,
    CreateAccountRequest,
    SubscriptionStatusResponse,
    UsageStatusResponse,
    WatchAdResponse,
)
from core.config import AppConfig
from core.usage.errors import AccountNotFoundError
from core.usage.types import AccountSnapshot, DemoAccount, Denial
from infrastructure.metrics import record_ad_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["usage"])


def _not_found(account_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Account not found: {account_id!r}")


def _to_account_response(account: AccountSnapshot) -> AccountResponse:
    return AccountResponse(
        account_id=account.account_id,
        base_rolls_used=account.base_rolls_used,
        base_rolls_limit=account.base_rolls_limit,
        extra_roll_tokens=account.extra_roll_tokens,
        total_ads_watched=account.total_ads_watched,
        subscription_active=account.subscription_active,
        referral_code=account.referral_code,
    )


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(body: CreateAccountRequest, ledger: Ledger) -> AccountResponse:
    """Create a usage account with zeroed counters.

    Raises:
        409: An account with this id already exists.
    """
    if body.account_id is not None:
        try:
            ledger.get_account(body.account_id)
        except AccountNotFoundError:
            pass
        else:
            raise HTTPException(status_code=409, detail=f"Account already exists: {body.account_id!r}")
    return _to_account_response(ledger.create_account(body.account_id))


@router.get("/usage/status", response_model=UsageStatusResponse)
def usage_status(caller: Caller, ledger: Ledger) -> UsageStatusResponse:
    """Return the caller's roll and ad counters for today."""
    if isinstance(caller, DemoAccount):
        status = caller.usage_status()
    else:
        try:
            status = ledger.usage_status(caller)
        except AccountNotFoundError as exc:
            raise _not_found(caller) from exc
    return UsageStatusResponse(
        base_rolls_used=status.base_rolls_used,
        base_rolls_limit=status.base_rolls_limit,
        extra_roll_tokens=status.extra_roll_tokens,
        total_available_rolls=status.total_available_rolls,
        remaining_rolls=status.remaining_rolls,
        ads_watched_today=status.ads_watched_today,
        can_roll=status.can_roll,
        subscription_active=status.subscription_active,
    )


@router.post("/usage/watch-ad", response_model=WatchAdResponse)
def watch_ad(
    caller: Caller,
    ledger: Ledger,
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> WatchAdResponse:
    """Credit one extra roll token after a rewarded ad.

    Raises:
        403: Demo account.
        404: Unknown account.
        429: Daily ad cap reached (``daily_ad_limit_reached``).
        503: Ad rewards are switched off (``ADS_ENABLED=false``).
    """
    if not config.ads_enabled:
        raise HTTPException(status_code=503, detail="Ad rewards are temporarily disabled")
    account_id = registered_account(caller)
    try:
        result = ledger.grant_ad_token(account_id)
    except AccountNotFoundError as exc:
        raise _not_found(account_id) from exc

    if isinstance(result, Denial):
        record_ad_token("daily_cap")
        raise HTTPException(
            status_code=429,
            detail={"code": result.reason.value, "message": result.message},
        )
    record_ad_token("granted")
    return WatchAdResponse(
        success=True,
        extra_roll_tokens=result.extra_roll_tokens,
        ads_watched_today=result.ads_watched_today,
        message="Extra roll earned!",
    )


@router.get("/subscription/status", response_model=SubscriptionStatusResponse)
def subscription_status(caller: Caller, ledger: Ledger) -> SubscriptionStatusResponse:
    """Return the caller's subscription status."""
    if isinstance(caller, DemoAccount):
        return SubscriptionStatusResponse(subscription_status="active", subscription_active=True)
    try:
        account = ledger.get_account(caller)
    except AccountNotFoundError as exc:
        raise _not_found(caller) from exc
    return SubscriptionStatusResponse(
        subscription_status=account.subscription_status,
        subscription_expiry=account.subscription_expiry,
        subscription_active=account.subscription_active,
    )
