"""Prometheus metrics for the chord dice platform.

Exposes product context in metrics so dashboards show how players roll and
where the free tier pushes back, not just generic HTTP stats.

Metrics:
    dice_rolls_total                 Counter by mode, genre and outcome
                                     (granted/limit_reached/premium_required/demo)
    dice_ad_tokens_total             Counter by outcome (granted/daily_cap)
    dice_referrals_applied_total     Counter by outcome (applied/invalid_code/...)
    dice_referral_rewards_total      Rewards granted by settlement runs
    dice_referral_settle_errors_total  Per-referral settlement failures

Usage::

    from infrastructure.metrics import record_roll

    record_roll(mode="riff", genre="jazz", outcome="granted")
"""

from __future__ import annotations

import logging

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

dice_rolls_total = Counter(
    "dice_rolls_total",
    "Roll requests by mode, genre and outcome",
    ["mode", "genre", "outcome"],
    registry=_REGISTRY,
)

ad_tokens_total = Counter(
    "dice_ad_tokens_total",
    "Rewarded-ad token requests by outcome",
    ["outcome"],
    registry=_REGISTRY,
)

referrals_applied_total = Counter(
    "dice_referrals_applied_total",
    "Referral code applications by outcome",
    ["outcome"],
    registry=_REGISTRY,
)

referral_rewards_total = Counter(
    "dice_referral_rewards_total",
    "Referral rewards granted by settlement runs",
    registry=_REGISTRY,
)

referral_settle_errors_total = Counter(
    "dice_referral_settle_errors_total",
    "Referrals that failed to settle",
    registry=_REGISTRY,
)

logger.info("Prometheus metrics registry initialized")


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_roll(*, mode: str, genre: str, outcome: str) -> None:
    """Record a /roll request.

    Args:
        mode: "single", "riff", "random" or "tapping".
        genre: Genre id of the request.
        outcome: "granted", "limit_reached", "premium_required" or "demo".
    """
    dice_rolls_total.labels(mode=mode, genre=genre, outcome=outcome).inc()


def record_ad_token(outcome: str) -> None:
    """Record a watch-ad request ("granted" or "daily_cap")."""
    ad_tokens_total.labels(outcome=outcome).inc()


def record_referral_applied(outcome: str) -> None:
    """Record a referral code application by ReferralOutcome value."""
    referrals_applied_total.labels(outcome=outcome).inc()


def record_settlement(*, processed: int, errors: int) -> None:
    """Record one settlement batch.

    Args:
        processed: Rewards granted in the batch.
        errors: Referrals that failed.
    """
    referral_rewards_total.inc(processed)
    referral_settle_errors_total.inc(errors)


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST
