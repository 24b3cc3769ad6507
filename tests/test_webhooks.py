# =============================================================================
# tests/test_webhooks.py - Clerk Webhook Tests
# =============================================================================
# The receiver is exercised with real svix signatures; the admin self-test
# is exercised with an httpx.MockTransport standing in for the receiver.
# =============================================================================

import json
from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest
from svix.webhooks import Webhook

from app.config import settings
from app.dependencies import get_http_client
from app.routers.webhooks import TEST_WEBHOOK_HEADER, build_test_payload, verify_clerk_payload

ADMIN_HEADERS = {"x-admin-key": "test-admin-key"}

USER_CREATED = {
    "type": "user.created",
    "data": {
        "id": "user_2abc",
        "email_addresses": [{"email_address": "ana@example.com"}],
        "first_name": "Ana",
        "last_name": "",
        "image_url": None,
    },
}


def signed_headers(body: str, msg_id: str = "msg_1") -> dict[str, str]:
    timestamp = datetime.now(tz=timezone.utc)
    signature = Webhook(settings.CLERK_WEBHOOK_SECRET).sign(msg_id, timestamp, body)
    return {
        "svix-id": msg_id,
        "svix-timestamp": str(int(timestamp.timestamp())),
        "svix-signature": signature,
        "content-type": "application/json",
    }


class TestClerkReceiver:

    def test_signed_user_created(self, client, db):
        db.queue("rpc:generate_api_key", data="ak_live_123")
        body = json.dumps(USER_CREATED)

        response = client.post("/api/webhook/clerk", content=body, headers=signed_headers(body))

        assert response.status_code == 200
        assert response.json() == {"received": True, "action": "created"}
        inserted = db.queries_for("users")[0].called("insert")[0][0]
        assert inserted["clerk_user_id"] == "user_2abc"
        assert inserted["email"] == "ana@example.com"
        assert inserted["last_name"] is None
        assert inserted["api_key"] == "ak_live_123"
        assert inserted["subscription_status"] == "free"

    def test_payload_comes_from_body_not_verifier(self):
        body = json.dumps(USER_CREATED)
        with patch.object(Webhook, "verify", return_value=None):
            payload = verify_clerk_payload(body.encode(), signed_headers(body))

        assert payload == USER_CREATED

    def test_bad_signature(self, client):
        body = json.dumps(USER_CREATED)
        headers = signed_headers(body)
        headers["svix-signature"] = "v1,AAAA"

        response = client.post("/api/webhook/clerk", content=body, headers=headers)

        assert response.status_code == 400
        assert response.json()["code"] == "WEBHOOK_VERIFICATION_FAILED"

    def test_missing_svix_headers(self, client):
        response = client.post("/api/webhook/clerk", json=USER_CREATED)
        assert response.status_code == 400

    def test_test_header_skips_verification_outside_production(self, client, db):
        response = client.post(
            "/api/webhook/clerk",
            json={"type": "user.deleted", "data": {"id": "user_2abc"}},
            headers={TEST_WEBHOOK_HEADER: "true"},
        )

        assert response.json()["action"] == "deleted"
        assert db.queries_for("users")[0].called("eq") == [("clerk_user_id", "user_2abc")]

    def test_test_header_ignored_in_production(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

        response = client.post("/api/webhook/clerk", json=USER_CREATED, headers={TEST_WEBHOOK_HEADER: "true"})

        assert response.status_code == 400

    def test_unhandled_type_is_acknowledged(self, client):
        response = client.post(
            "/api/webhook/clerk",
            json={"type": "session.created", "data": {}},
            headers={TEST_WEBHOOK_HEADER: "true"},
        )
        assert response.json() == {"received": True, "action": "ignored"}

    def test_create_without_id_is_400(self, client, db):
        response = client.post(
            "/api/webhook/clerk",
            json={"type": "user.created", "data": {"email_addresses": []}},
            headers={TEST_WEBHOOK_HEADER: "true"},
        )

        assert response.status_code == 400
        assert db.queries_for("users") == []

    def test_delete_without_id_is_400(self, client):
        response = client.post(
            "/api/webhook/clerk",
            json={"type": "user.deleted", "data": {}},
            headers={TEST_WEBHOOK_HEADER: "true"},
        )
        assert response.status_code == 400


class TestWebhookSelfTest:

    @pytest.fixture
    def forwarded(self, app_instance):
        """Captures what the self-test sends and answers 500 "boom"."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["header"] = request.headers.get(TEST_WEBHOOK_HEADER)
            seen["body"] = json.loads(request.content)
            return httpx.Response(500, text="boom")

        app_instance.dependency_overrides[get_http_client] = lambda: httpx.AsyncClient(
            transport=httpx.MockTransport(handler)
        )
        return seen

    def test_requires_admin_key(self, client):
        response = client.post("/api/test/webhook")
        assert response.status_code == 401

    @pytest.mark.parametrize("key", [
        b"wrong-key",
        b"test-admin-key-2",
        "clav\u00e9".encode(),
    ])
    def test_mismatched_admin_key(self, client, key):
        response = client.post("/api/test/webhook", headers={"x-admin-key": key})

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_unset_admin_key_rejects_everything(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_SYNC_KEY", "")

        assert client.post("/api/test/webhook", headers=ADMIN_HEADERS).status_code == 401
        assert client.post("/api/test/webhook", headers={"x-admin-key": ""}).status_code == 401

    def test_reports_receiver_status_verbatim(self, client, forwarded):
        response = client.post("/api/test/webhook", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == 500
        assert body["result"] == "boom"
        assert forwarded["url"] == "http://testserver/api/webhook/clerk"
        assert forwarded["header"] == "true"
        assert forwarded["body"] == body["payload"]

    def test_payload_shape(self):
        payload = build_test_payload()
        assert payload["type"] == "user.created"
        assert payload["data"]["id"].startswith("test_user_")
        assert payload["data"]["email_addresses"][0]["email_address"] == "test@example.com"
