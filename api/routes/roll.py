"""
api/routes/roll.py — Dice roll endpoint.

Endpoints:
    POST /roll — Roll a chord, riff or random progression, spending one roll

Premium genres and modes are checked before any roll is spent. For free
accounts ``can_roll`` is a cheap pre-check; ``consume_roll`` is the
authoritative, race-safe spend and may still deny.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from api.deps import Caller, Ledger, has_premium
from api.schemas.roll import RollRequest, RollResponse
from core.dice import PREMIUM_GENRES, PREMIUM_MODES, RollResult
from core.dice.engine import roll_dice, roll_riff, roll_single_chord, sample_progression
from core.usage.errors import AccountNotFoundError
from core.usage.types import DENIAL_MESSAGES, DemoAccount, Denial, DenialReason
from infrastructure.metrics import record_roll

logger = logging.getLogger(__name__)

router = APIRouter(tags=["roll"])


def _limit_reached() -> HTTPException:
    return HTTPException(
        status_code=403,
        detail={
            "code": DenialReason.ROLL_LIMIT_REACHED.value,
            "message": DENIAL_MESSAGES[DenialReason.ROLL_LIMIT_REACHED],
            "remaining_rolls": 0,
        },
    )


def _generate(request: RollRequest) -> RollResult:
    if request.mode in ("random", "tapping"):
        return sample_progression(request.mode)
    if request.color_roll is not None and request.number_roll is not None:
        color_roll, number_roll = request.color_roll, request.number_roll
    else:
        rolled_color, rolled_number = roll_dice()
        color_roll = request.color_roll or rolled_color
        number_roll = request.number_roll or rolled_number
    if request.mode == "riff":
        return roll_riff(color_roll, number_roll, request.genre)
    return roll_single_chord(color_roll, number_roll, request.genre)


def _to_response(result: RollResult, remaining_rolls: int | None) -> RollResponse:
    return RollResponse(
        mode=result.mode,
        genre=result.genre,  # type: ignore[arg-type]
        root_note=result.root_note,
        chord=result.chord,
        progression=list(result.progression) if result.progression else None,
        color_group_name=result.color_group_name,
        color_roll=result.color_roll,
        number_roll=result.number_roll,
        remaining_rolls=remaining_rolls,
    )


@router.post("/roll", response_model=RollResponse)
def roll(request: RollRequest, caller: Caller, ledger: Ledger) -> RollResponse:
    """Roll the dice for the calling account.

    Raises:
        403: Premium genre/mode without a subscription (``premium_required``)
             or no rolls left (``limit_reached``).
        404: Unknown account.
    """
    premium = request.genre in PREMIUM_GENRES or request.mode in PREMIUM_MODES
    if premium and not has_premium(caller, ledger):
        record_roll(mode=request.mode, genre=request.genre, outcome="premium_required")
        raise HTTPException(
            status_code=403,
            detail={
                "code": "premium_required",
                "message": "Upgrade to premium to unlock this genre or mode.",
            },
        )

    if isinstance(caller, DemoAccount):
        result = _generate(request)
        record_roll(mode=request.mode, genre=request.genre, outcome="demo")
        return _to_response(result, None)

    try:
        if not ledger.can_roll(caller):
            record_roll(mode=request.mode, genre=request.genre, outcome="limit_reached")
            raise _limit_reached()
        grant = ledger.consume_roll(caller)
    except AccountNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Account not found: {caller!r}") from exc

    if isinstance(grant, Denial):
        record_roll(mode=request.mode, genre=request.genre, outcome="limit_reached")
        raise _limit_reached()

    result = _generate(request)
    record_roll(mode=request.mode, genre=request.genre, outcome="granted")
    logger.info("Roll %s/%s for %s", request.mode, request.genre, caller)
    return _to_response(result, None if grant.unlimited else grant.account.remaining_rolls)
