"""
Configuration dataclasses for the usage ledger and the API.

Immutable config objects passed explicitly into the ledger and the route
dependencies, so no module reads global state at call time.

Environment variables (read by ``AppConfig.from_env``)
------------------------------------------------------
``BASE_ROLLS_LIMIT``   free daily rolls per account (default ``5``)
``DAILY_AD_CAP``       rewarded ads per account per day (default ``5``)
``ADS_ENABLED``        ``"false"`` disables the watch-ad endpoint (default ``true``)
``DEMO_ACCOUNT_ID``    account id served as an unlimited demo account
                       (default ``demo-user-id``; empty disables demo mode)
"""

from __future__ import annotations

import os
import string
from dataclasses import dataclass, field

from dotenv import load_dotenv

REFERRAL_CODE_ALPHABET: str = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class LedgerConfig:
    """
    Limits and constants for the usage ledger.

    Attributes:
        base_rolls_limit: Free rolls per calendar day. Defaults to 5.
        daily_ad_cap: Rewarded ads that may be watched per calendar day.
            Each ad grants one extra roll token. Defaults to 5.
        referral_code_length: Characters in a generated referral code.
        referral_code_attempts: Uniqueness retries before giving up.
        referral_reward_months: Subscription months granted per settled referral.

    Example:
        >>> config = LedgerConfig(base_rolls_limit=3)
        >>> ledger = UsageLedger(session, config=config)
    """

    base_rolls_limit: int = 5
    daily_ad_cap: int = 5
    referral_code_length: int = 8
    referral_code_attempts: int = 5
    referral_reward_months: int = 1

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.base_rolls_limit < 0:
            raise ValueError(f"base_rolls_limit must be non-negative, got {self.base_rolls_limit}")
        if self.daily_ad_cap < 0:
            raise ValueError(f"daily_ad_cap must be non-negative, got {self.daily_ad_cap}")
        if self.referral_code_length <= 0:
            raise ValueError(
                f"referral_code_length must be positive, got {self.referral_code_length}"
            )
        if self.referral_code_attempts <= 0:
            raise ValueError(
                f"referral_code_attempts must be positive, got {self.referral_code_attempts}"
            )
        if self.referral_reward_months <= 0:
            raise ValueError(
                f"referral_reward_months must be positive, got {self.referral_reward_months}"
            )


@dataclass(frozen=True)
class AppConfig:
    """
    Process-wide settings resolved once at startup.

    Attributes:
        ledger: Limits applied by the usage ledger.
        ads_enabled: When False, POST /usage/watch-ad answers 503.
        demo_account_id: Account id that resolves to a DemoAccount, or None.
    """

    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    ads_enabled: bool = True
    demo_account_id: str | None = "demo-user-id"

    @classmethod
    def from_env(cls) -> AppConfig:
        """Build the config from environment variables (``.env`` is loaded first)."""
        load_dotenv()
        ledger = LedgerConfig(
            base_rolls_limit=int(os.getenv("BASE_ROLLS_LIMIT", "5")),
            daily_ad_cap=int(os.getenv("DAILY_AD_CAP", "5")),
        )
        demo_id = os.getenv("DEMO_ACCOUNT_ID", "demo-user-id").strip()
        return cls(
            ledger=ledger,
            ads_enabled=os.getenv("ADS_ENABLED", "true").strip().lower() not in {"0", "false", "no"},
            demo_account_id=demo_id or None,
        )


# Pre-defined configurations

DEFAULT_LEDGER_CONFIG = LedgerConfig()
"""Default limits: 5 free rolls/day, 5 ads/day, 8-char referral codes."""

DEFAULT_APP_CONFIG = AppConfig()
"""Defaults without reading the environment."""
