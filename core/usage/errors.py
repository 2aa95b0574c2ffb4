"""Exceptions raised by the usage ledger.

Denials (limit reached, ad cap, bad referral code) are *not* exceptions —
see ``core.usage.types``. These cover the faults a caller cannot act on.
"""

from __future__ import annotations


class AccountNotFoundError(KeyError):
    """No UsageAccount row exists for the given id."""

    def __init__(self, account_id: str) -> None:
        self.account_id = account_id
        super().__init__(f"account not found: {account_id!r}")


class ReferralCodeExhaustedError(RuntimeError):
    """Referral code generation hit a uniqueness conflict on every attempt.

    Distinct from a plain database failure: the store is reachable, but the
    code space looks saturated.

    Args:
        account_id: Account the code was being generated for.
        attempts: Number of attempts made.
    """

    def __init__(self, account_id: str, attempts: int) -> None:
        self.account_id = account_id
        self.attempts = attempts
        super().__init__(
            f"Failed to generate unique referral code for {account_id!r} "
            f"after {attempts} attempts (exhausted retry budget)"
        )
