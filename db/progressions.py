"""
Saved chord progressions — plain CRUD over ``saved_progressions``.

Roll results are transient; a player keeps one by saving it here and may
flag it as a favourite.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import SavedProgression

_UPDATABLE_FIELDS: frozenset[str] = frozenset({"chords", "genre", "is_favorite"})


def list_progressions(session: Session, account_id: str | None = None) -> list[SavedProgression]:
    """All saved progressions, newest first, optionally for one account."""
    stmt = select(SavedProgression).order_by(SavedProgression.created_at.desc())
    if account_id is not None:
        stmt = stmt.where(SavedProgression.account_id == account_id)
    return list(session.execute(stmt).scalars().all())


def list_favorites(session: Session, account_id: str) -> list[SavedProgression]:
    """Favourite progressions of one account."""
    stmt = (
        select(SavedProgression)
        .where(SavedProgression.account_id == account_id, SavedProgression.is_favorite.is_(True))
        .order_by(SavedProgression.created_at.desc())
    )
    return list(session.execute(stmt).scalars().all())


def get_progression(session: Session, progression_id: str) -> SavedProgression | None:
    """Fetch one progression by id. Returns None if not found."""
    return session.get(SavedProgression, progression_id)


def create_progression(
    session: Session,
    *,
    mode: str,
    chords: Sequence[str],
    account_id: str | None = None,
    genre: str = "any",
    color_roll: int | None = None,
    number_roll: int | None = None,
    is_favorite: bool = False,
) -> SavedProgression:
    """Persist a roll result.

    Raises:
        ValueError: Empty chord list or a mode other than single/riff/random/tapping.
    """
    if not chords:
        raise ValueError("chords must not be empty")
    if mode not in {"single", "riff", "random", "tapping"}:
        raise ValueError(f"Unknown mode {mode!r}")
    progression = SavedProgression(
        account_id=account_id,
        mode=mode,
        chords=list(chords),
        genre=genre,
        color_roll=color_roll,
        number_roll=number_roll,
        is_favorite=is_favorite,
    )
    session.add(progression)
    session.commit()
    session.refresh(progression)
    return progression


def update_progression(session: Session, progression_id: str, **changes: object) -> SavedProgression | None:
    """Apply ``changes`` to a saved progression. Returns None if not found.

    Raises:
        ValueError: A field outside chords / genre / is_favorite was given.
    """
    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")
    progression = session.get(SavedProgression, progression_id)
    if progression is None:
        return None
    for name, value in changes.items():
        if name == "chords":
            value = list(value)  # type: ignore[call-overload]
        setattr(progression, name, value)
    session.commit()
    return progression


def delete_progression(session: Session, progression_id: str) -> bool:
    """Delete a progression. Returns True if a row was deleted."""
    progression = session.get(SavedProgression, progression_id)
    if progression is None:
        return False
    session.delete(progression)
    session.commit()
    return True
