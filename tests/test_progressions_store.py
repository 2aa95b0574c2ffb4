"""Tests for db/progressions.py — saved progression CRUD."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import Session

from db import progressions as store
from db.ledger import UsageLedger


@pytest.fixture()
def owner(ledger: UsageLedger) -> str:
    return ledger.create_account("owner").account_id


class TestCreateProgression:
    def test_create_and_get(self, session: Session, owner: str) -> None:
        saved = store.create_progression(
            session,
            mode="riff",
            chords=("C", "G", "Am", "F"),
            account_id=owner,
            genre="rock",
            color_roll=3,
            number_roll=6,
        )
        fetched = store.get_progression(session, saved.id)
        assert fetched is not None
        assert fetched.chords == ["C", "G", "Am", "F"]
        assert fetched.genre == "rock"
        assert fetched.is_favorite is False

    def test_empty_chords_raise(self, session: Session) -> None:
        with pytest.raises(ValueError, match="chords must not be empty"):
            store.create_progression(session, mode="single", chords=[])

    def test_unknown_mode_raises(self, session: Session) -> None:
        with pytest.raises(ValueError, match="Unknown mode"):
            store.create_progression(session, mode="arpeggio", chords=["C"])

    def test_get_missing_returns_none(self, session: Session) -> None:
        assert store.get_progression(session, "missing") is None


class TestListProgressions:
    def test_filter_by_account(self, session: Session, ledger: UsageLedger, owner: str) -> None:
        ledger.create_account("someone-else")
        store.create_progression(session, mode="single", chords=["C"], account_id=owner)
        store.create_progression(session, mode="single", chords=["D"], account_id="someone-else")

        assert [p.chords for p in store.list_progressions(session, owner)] == [["C"]]
        assert len(store.list_progressions(session)) == 2

    def test_favorites(self, session: Session, owner: str) -> None:
        store.create_progression(session, mode="single", chords=["C"], account_id=owner)
        fav = store.create_progression(
            session, mode="single", chords=["E"], account_id=owner, is_favorite=True
        )
        assert [p.id for p in store.list_favorites(session, owner)] == [fav.id]


class TestUpdateAndDelete:
    def test_toggle_favorite(self, session: Session, owner: str) -> None:
        saved = store.create_progression(session, mode="single", chords=["C"], account_id=owner)
        updated = store.update_progression(session, saved.id, is_favorite=True)
        assert updated is not None
        assert updated.is_favorite is True

    def test_update_chords(self, session: Session, owner: str) -> None:
        saved = store.create_progression(session, mode="single", chords=["C"], account_id=owner)
        updated = store.update_progression(session, saved.id, chords=("Dm7",))
        assert updated is not None
        assert updated.chords == ["Dm7"]

    def test_update_rejects_other_fields(self, session: Session, owner: str) -> None:
        saved = store.create_progression(session, mode="single", chords=["C"], account_id=owner)
        with pytest.raises(ValueError, match="Cannot update fields"):
            store.update_progression(session, saved.id, account_id="thief")

    def test_update_missing_returns_none(self, session: Session) -> None:
        assert store.update_progression(session, "missing", is_favorite=True) is None

    def test_delete(self, session: Session, owner: str) -> None:
        saved = store.create_progression(session, mode="single", chords=["C"], account_id=owner)
        assert store.delete_progression(session, saved.id) is True
        assert store.get_progression(session, saved.id) is None
        assert store.delete_progression(session, saved.id) is False
