"""
api/routes/practice.py — Premium practice generators.

Endpoints:
    POST /generate/scale-combination  — 2–3 soloing scales to blend
    POST /generate/octave-combination — 2–4 octave chord shapes

Neither endpoint spends a roll. Both require premium (subscription or demo).
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from api.deps import Caller, Ledger, has_premium
from api.schemas.practice import (
    OctaveChordOut,
    OctaveCombinationResponse,
    ScaleCombinationResponse,
    ScaleOut,
)
from core.dice.scales import generate_octave_combination, generate_scale_combination

router = APIRouter(prefix="/generate", tags=["practice"])


def _require_premium(caller: Caller, ledger: Ledger) -> None:
    if not has_premium(caller, ledger):
        raise HTTPException(
            status_code=403,
            detail={"code": "premium_required", "message": "Premium subscription required."},
        )


@router.post("/scale-combination", response_model=ScaleCombinationResponse)
def scale_combination(caller: Caller, ledger: Ledger) -> ScaleCombinationResponse:
    """Pick 2–3 distinct soloing scales."""
    _require_premium(caller, ledger)
    scales = generate_scale_combination()
    return ScaleCombinationResponse(
        scales=[
            ScaleOut(slug=s.slug, name=s.name, notes=list(s.notes), description=s.description)
            for s in scales
        ]
    )


@router.post("/octave-combination", response_model=OctaveCombinationResponse)
def octave_combination(caller: Caller, ledger: Ledger) -> OctaveCombinationResponse:
    """Pick 2–4 distinct octave chord shapes."""
    _require_premium(caller, ledger)
    chords = generate_octave_combination()
    return OctaveCombinationResponse(
        chords=[
            OctaveChordOut(
                name=c.name, octave=c.octave, notes=list(c.notes), fret_position=c.fret_position
            )
            for c in chords
        ]
    )
