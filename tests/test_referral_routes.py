"""Tests for /referrals endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from core.usage.errors import ReferralCodeExhaustedError
from db.ledger import UsageLedger

DEMO = {"X-Account-Id": "demo-user-id"}
REFERRER = {"X-Account-Id": "referrer"}
NEWBIE = {"X-Account-Id": "newbie"}


@pytest.fixture(autouse=True)
def _accounts(ledger: UsageLedger) -> None:
    ledger.create_account("referrer")
    ledger.create_account("newbie")


class TestGenerateCodeEndpoint:
    def test_returns_code(self, api_client: TestClient) -> None:
        resp = api_client.post("/referrals/generate-code", headers=REFERRER)
        assert resp.status_code == 200
        assert len(resp.json()["referral_code"]) == 8

    def test_idempotent(self, api_client: TestClient) -> None:
        first = api_client.post("/referrals/generate-code", headers=REFERRER).json()
        second = api_client.post("/referrals/generate-code", headers=REFERRER).json()
        assert first["referral_code"] == second["referral_code"]

    def test_exhausted_returns_503(
        self, api_client: TestClient, ledger: UsageLedger, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _exhausted(account_id: str) -> str:
            raise ReferralCodeExhaustedError(account_id, 5)

        monkeypatch.setattr(ledger, "generate_referral_code", _exhausted)
        resp = api_client.post("/referrals/generate-code", headers=REFERRER)
        assert resp.status_code == 503
        assert resp.json()["detail"]["code"] == "referral_code_exhausted"

    def test_demo_forbidden(self, api_client: TestClient) -> None:
        assert api_client.post("/referrals/generate-code", headers=DEMO).status_code == 403

    def test_unknown_account(self, api_client: TestClient) -> None:
        resp = api_client.post("/referrals/generate-code", headers={"X-Account-Id": "ghost"})
        assert resp.status_code == 404


class TestApplyCodeEndpoint:
    def _code(self, client: TestClient) -> str:
        return client.post("/referrals/generate-code", headers=REFERRER).json()["referral_code"]

    def test_apply_lowercase_code(self, api_client: TestClient, ledger: UsageLedger) -> None:
        code = self._code(api_client)
        resp = api_client.post("/referrals/apply", json={"code": f"  {code.lower()} "}, headers=NEWBIE)
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Referral code applied successfully!"}
        assert ledger.get_account("newbie").referred_by_code == code

    def test_self_referral_returns_400(self, api_client: TestClient) -> None:
        code = self._code(api_client)
        resp = api_client.post("/referrals/apply", json={"code": code}, headers=REFERRER)
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "self_referral"

    def test_second_apply_returns_400(self, api_client: TestClient) -> None:
        code = self._code(api_client)
        api_client.post("/referrals/apply", json={"code": code}, headers=NEWBIE)
        resp = api_client.post("/referrals/apply", json={"code": code}, headers=NEWBIE)
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "already_referred"

    def test_invalid_code_returns_400(self, api_client: TestClient) -> None:
        resp = api_client.post("/referrals/apply", json={"code": "NOSUCH"}, headers=NEWBIE)
        assert resp.status_code == 400
        assert resp.json()["detail"] == {"code": "invalid_code", "message": "Invalid referral code"}

    @pytest.mark.parametrize("code", ["", "   ", "X" * 21, f" {'X' * 21} "])
    def test_code_length_validated(self, api_client: TestClient, code: str) -> None:
        resp = api_client.post("/referrals/apply", json={"code": code}, headers=NEWBIE)
        assert resp.status_code == 422

    def test_blank_code_never_reaches_ledger(
        self, api_client: TestClient, ledger: UsageLedger, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[str] = []
        monkeypatch.setattr(ledger, "apply_referral_code", lambda *args: calls.append(args[1]))
        resp = api_client.post("/referrals/apply", json={"code": " \t "}, headers=NEWBIE)
        assert resp.status_code == 422
        assert calls == []

    def test_padded_code_within_limit_accepted(self, api_client: TestClient) -> None:
        code = self._code(api_client)
        padded = {"code": f"{code}{' ' * 15}"}
        resp = api_client.post("/referrals/apply", json=padded, headers=NEWBIE)
        assert resp.status_code == 200


class TestDashboardEndpoint:
    def test_dashboard(self, api_client: TestClient) -> None:
        code = api_client.post("/referrals/generate-code", headers=REFERRER).json()["referral_code"]
        api_client.post("/referrals/apply", json={"code": code}, headers=NEWBIE)

        data = api_client.get("/referrals/dashboard", headers=REFERRER).json()

        assert data["referral_code"] == code
        assert data["total_referred"] == 1
        assert data["total_rewards_pending"] == 1
        assert data["referral_rewards_earned"] == 0
        assert data["referrals"][0]["referee_id"] == "newbie"
        assert data["referrals"][0]["reward_granted"] is False

    def test_empty_dashboard(self, api_client: TestClient) -> None:
        data = api_client.get("/referrals/dashboard", headers=NEWBIE).json()
        assert data["referral_code"] is None
        assert data["referrals"] == []
