"""
FastAPI dependency providers.

Reuses the canonical session factory from ``db.session`` to avoid
duplicate engine/sessionmaker definitions. The app config is resolved once
from the environment and handed to the ledger explicitly, so no route reads
global state directly.

Caller identity arrives in the ``X-Account-Id`` header; authentication is
handled upstream. The configured demo id resolves to a ``DemoAccount``.
"""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from core.config import AppConfig
from core.usage.errors import AccountNotFoundError
from core.usage.types import DemoAccount
from db.ledger import UsageLedger
from db.session import get_session


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session for FastAPI dependency injection."""
    yield from get_session()


_app_config: AppConfig | None = None


def get_app_config() -> AppConfig:
    """
    Return the cached ``AppConfig`` singleton.

    Reads environment variables on first call and reuses the result.
    """
    global _app_config  # noqa: PLW0603
    if _app_config is None:
        _app_config = AppConfig.from_env()
    return _app_config


def get_ledger(
    db: Annotated[Session, Depends(get_db)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> UsageLedger:
    """Usage ledger bound to the request's session."""
    return UsageLedger(db, config=config.ledger)


def get_caller(
    config: Annotated[AppConfig, Depends(get_app_config)],
    x_account_id: Annotated[str | None, Header()] = None,
) -> str | DemoAccount:
    """Resolve the caller: a registered account id or the demo account.

    Raises:
        401: Missing ``X-Account-Id`` header.
    """
    if not x_account_id or not x_account_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-Account-Id header")
    account_id = x_account_id.strip()
    if config.demo_account_id and account_id == config.demo_account_id:
        return DemoAccount(account_id=account_id)
    return account_id


Ledger = Annotated[UsageLedger, Depends(get_ledger)]
Caller = Annotated[str | DemoAccount, Depends(get_caller)]


def has_premium(caller: str | DemoAccount, ledger: UsageLedger) -> bool:
    """True for demo callers and accounts with an active subscription.

    Raises:
        404: Unknown account.
    """
    if isinstance(caller, DemoAccount):
        return True
    try:
        return ledger.get_account(caller).subscription_active
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Account not found: {caller!r}") from exc


def registered_account(caller: str | DemoAccount) -> str:
    """Account id of a registered caller.

    Raises:
        403: The demo account keeps no persistent state.
    """
    if isinstance(caller, DemoAccount):
        raise HTTPException(status_code=403, detail="Not available in demo mode")
    return caller
