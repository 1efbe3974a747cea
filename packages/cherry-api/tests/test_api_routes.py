"""
Tests for the Cherry HTTP surface.

Tests cover:
- Escrow routes (initialize, deposit, withdraw, lookups)
- Bridge routes (in, out, out/self)
- Error mapping and request IDs
- Transaction rollback per request
- Event listing
"""
from __future__ import annotations

import pytest


def allowance(client, token="tokenA"):
    return client.get(f"/api/v1/escrow/tokens/{token}").json()["allowance"]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["contracts"] == ["escrow", "gateway"]


class TestEscrowRoutes:
    def test_seeded_allowance(self, client):
        assert allowance(client) == "150"

    def test_unknown_token_allowance_is_null(self, client):
        assert allowance(client, "tokenZ") is None

    def test_initialize(self, client):
        response = client.post("/api/v1/escrow/tokens", json={"token": "tokenB", "initial_value": 7})

        assert response.status_code == 201
        assert response.json() == {"token": "tokenB", "allowance": "7"}

    def test_reinitialize_conflict(self, client):
        response = client.post("/api/v1/escrow/tokens", json={"token": "tokenA", "initial_value": 7})

        assert response.status_code == 409
        assert response.json()["error"] == "TOKEN_ALREADY_INITIALIZED"
        assert allowance(client) == "150"

    def test_deposit_and_record(self, client):
        response = client.post(
            "/api/v1/escrow/deposit", json={"token": "tokenA", "amount": 50, "agent": "X"},
        )

        assert response.json()["allowance"] == "200"
        record = client.get("/api/v1/escrow/tokens/tokenA/deposits/X").json()
        assert record == {"token": "tokenA", "agent": "X", "balance": "200"}

    def test_withdraw_insufficient(self, client):
        response = client.post(
            "/api/v1/escrow/withdraw", json={"token": "tokenA", "amount": 200, "agent": "Y"},
        )

        body = response.json()
        assert response.status_code == 409
        assert body["error"] == "INSUFFICIENT_ALLOWANCE"
        assert body["recoverable"] is True
        assert allowance(client) == "150"

    def test_withdraw_and_record(self, client):
        client.post("/api/v1/escrow/withdraw", json={"token": "tokenA", "amount": 100, "agent": "Y"})

        record = client.get("/api/v1/escrow/tokens/tokenA/withdrawals/Y").json()
        assert record["balance"] == "50"

    def test_deposit_unknown_token_aborts(self, client):
        response = client.post(
            "/api/v1/escrow/deposit", json={"token": "tokenZ", "amount": 1, "agent": "X"},
        )

        assert response.status_code == 404
        assert response.json()["recoverable"] is False

    def test_negative_amount_rejected_by_schema(self, client):
        response = client.post(
            "/api/v1/escrow/deposit", json={"token": "tokenA", "amount": -1, "agent": "X"},
        )

        assert response.status_code == 422


class TestBridgeRoutes:
    def test_bridge_in(self, client):
        response = client.post(
            "/api/v1/bridge/in", json={"token": "tokenA", "origin_chain": "chainX", "amount": 10},
        )

        assert response.status_code == 200
        assert response.json()["recipient"] == "gateway"
        assert response.json()["origin_chain"] == "chainX"
        assert allowance(client) == "150"

    def test_bridge_out_deposit(self, client):
        response = client.post("/api/v1/bridge/out", json={
            "token": "tokenA", "recipient": "escrow", "agent": "X", "amount": 10, "action": "deposit",
        })

        assert response.status_code == 200
        assert response.json()["kind"] == "BridgeOut"
        assert allowance(client) == "160"

    def test_bridge_out_invalid_recipient(self, client):
        response = client.post("/api/v1/bridge/out", json={
            "token": "tokenA", "recipient": "alice", "agent": "X", "amount": 10, "action": "deposit",
        })

        assert response.status_code == 422
        assert response.json()["error"] == "INVALID_RECIPIENT"
        events = client.get("/api/v1/events", params={"kind": "BridgeOut"}).json()
        assert events == []

    def test_bridge_out_remote_failure(self, client):
        response = client.post("/api/v1/bridge/out", json={
            "token": "tokenA", "recipient": "escrow", "agent": "X", "amount": 999, "action": "withdraw",
        })

        body = response.json()
        assert response.status_code == 502
        assert body["error"] == "REMOTE_CALL_FAILED"
        assert body["details"]["cause"]["error"] == "INSUFFICIENT_ALLOWANCE"
        assert allowance(client) == "150"

    def test_bridge_out_unknown_action(self, client):
        response = client.post("/api/v1/bridge/out", json={
            "token": "tokenA", "recipient": "escrow", "agent": "X", "amount": 1, "action": "transfer",
        })

        assert response.status_code == 422

    def test_bridge_out_from_self(self, client):
        response = client.post("/api/v1/bridge/out/self", json={
            "token": "tokenA", "recipient": "escrow", "amount": 5, "action": "withdraw",
        })

        assert response.json()["agent"] == "gateway"
        assert allowance(client) == "145"


class TestEventsAndContext:
    def test_event_listing(self, client):
        client.post("/api/v1/escrow/deposit", json={"token": "tokenA", "amount": 1, "agent": "X"})

        events = client.get("/api/v1/events").json()

        assert [e["kind"] for e in events] == ["Initiated", "Deposited"]
        assert events[1]["fields"] == {"token": "tokenA", "amount": "1", "agent": "X"}

    def test_event_limit(self, client):
        for _ in range(3):
            client.post("/api/v1/bridge/in", json={"token": "tokenA", "origin_chain": "c", "amount": 1})

        events = client.get("/api/v1/events", params={"limit": 2}).json()

        assert len(events) == 2
        assert events[-1]["sequence"] == 3

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req_test"})

        assert response.headers["X-Request-ID"] == "req_test"

    def test_error_carries_request_id(self, client):
        response = client.post(
            "/api/v1/escrow/withdraw",
            json={"token": "tokenA", "amount": 999, "agent": "Y"},
            headers={"X-Request-ID": "req_err"},
        )

        assert response.json()["request_id"] == "req_err"


class TestCallerAllowlist:
    @pytest.fixture
    def guarded_client(self):
        from fastapi.testclient import TestClient

        from cherry_api import create_app
        from cherry_core import CherrySettings

        settings = CherrySettings(
            _env_file=None,
            escrow_address="escrow",
            gateway_address="gateway",
            initial_allowances={"tokenA": 10},
            authorized_callers=["gateway", "trusted"],
            caller_api_keys={"sk_trusted": "trusted", "sk_other": "other"},
        )
        with TestClient(create_app(settings)) as test_client:
            yield test_client

    def test_direct_deposit_forbidden(self, guarded_client):
        response = guarded_client.post(
            "/api/v1/escrow/deposit", json={"token": "tokenA", "amount": 1, "agent": "X"},
        )

        assert response.status_code == 403

    def test_bridge_out_through_gateway_allowed(self, guarded_client):
        response = guarded_client.post("/api/v1/bridge/out", json={
            "token": "tokenA", "recipient": "escrow", "agent": "X", "amount": 1, "action": "deposit",
        })

        assert response.status_code == 200
        assert allowance(guarded_client) == "11"

    def test_body_agent_is_not_the_caller(self, guarded_client):
        response = guarded_client.post(
            "/api/v1/escrow/withdraw", json={"token": "tokenA", "amount": 10, "agent": "trusted"},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "UNAUTHORIZED_CALLER"
        assert allowance(guarded_client) == "10"

    def test_api_key_identifies_caller(self, guarded_client):
        response = guarded_client.post(
            "/api/v1/escrow/withdraw",
            json={"token": "tokenA", "amount": 4, "agent": "X"},
            headers={"X-API-Key": "sk_trusted"},
        )

        assert response.status_code == 200
        assert allowance(guarded_client) == "6"
        assert guarded_client.get("/api/v1/escrow/tokens/tokenA/withdrawals/X").json()["balance"] == "6"

    def test_known_key_off_allowlist_forbidden(self, guarded_client):
        response = guarded_client.post(
            "/api/v1/escrow/deposit",
            json={"token": "tokenA", "amount": 1, "agent": "trusted"},
            headers={"X-API-Key": "sk_other"},
        )

        assert response.status_code == 403

    def test_unknown_key_rejected(self, guarded_client):
        response = guarded_client.post(
            "/api/v1/escrow/deposit",
            json={"token": "tokenA", "amount": 1, "agent": "X"},
            headers={"X-API-Key": "sk_forged"},
        )

        assert response.status_code == 401
        assert allowance(guarded_client) == "10"
