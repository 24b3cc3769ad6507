# =============================================================================
# app/routers/webhooks.py - Clerk Webhook Endpoints
# =============================================================================
# POST /api/webhook/clerk   Receives Clerk user events (svix-signed)
# POST /api/test/webhook    Admin self-test: sends a synthetic user.created
#                           event to the receiver above and reports back
#
# Outside production, requests carrying x-test-webhook skip signature
# verification so the self-test can reach the receiver.
# =============================================================================

import json
import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from svix.webhooks import Webhook, WebhookVerificationError as SvixVerificationError

from app.config import settings
from app.dependencies import DatabaseDep, HttpClientDep, require_admin_key
from app.exceptions import WebhookVerificationError
from core.models.account import ClerkEvent
from core.services.user_sync_service import UserSyncService

logger = logging.getLogger(__name__)

router = APIRouter()

TEST_WEBHOOK_HEADER = "x-test-webhook"
CLERK_WEBHOOK_PATH = "api/webhook/clerk"


# =============================================================================
# Response Models
# =============================================================================

class WebhookAck(BaseModel):
    received: bool = True
    action: str


class WebhookTestResponse(BaseModel):
    status: int
    result: str
    payload: dict[str, Any]


# =============================================================================
# Helpers
# =============================================================================

def verify_clerk_payload(body: bytes, headers: dict[str, str]) -> dict[str, Any]:
    """
    Check the svix signature of a webhook body and parse it.

    Raises:
        WebhookVerificationError: If the secret is unset, headers are missing,
            or the signature does not match
    """
    if not settings.CLERK_WEBHOOK_SECRET:
        raise WebhookVerificationError("CLERK_WEBHOOK_SECRET is not configured")
    svix_headers = {key: headers.get(key) for key in ("svix-id", "svix-timestamp", "svix-signature")}
    if not all(svix_headers.values()):
        raise WebhookVerificationError("missing svix headers")
    try:
        Webhook(settings.CLERK_WEBHOOK_SECRET).verify(body, svix_headers)
    except SvixVerificationError as e:
        logger.warning(f"Rejected Clerk webhook: {e}")
        raise WebhookVerificationError(str(e))
    return json.loads(body)


def build_test_payload() -> dict[str, Any]:
    """Synthetic user.created event with a unique user id."""
    return {
        "type": "user.created",
        "data": {
            "id": f"test_user_{int(time.time() * 1000)}",
            "email_addresses": [{"email_address": "test@example.com"}],
            "first_name": "Test",
            "last_name": "User",
            "image_url": "https://example.com/avatar.jpg",
        },
    }


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/webhook/clerk", response_model=WebhookAck)
async def clerk_webhook(request: Request, db: DatabaseDep):
    """
    Apply a Clerk user event to the users table.

    Handles user.created, user.updated and user.deleted; any other type
    is acknowledged without changes.
    """
    body = await request.body()
    if request.headers.get(TEST_WEBHOOK_HEADER) and not settings.is_production:
        logger.info("Processing test webhook")
        payload = await request.json()
    else:
        payload = verify_clerk_payload(body, dict(request.headers))

    event = ClerkEvent(**payload)
    action = UserSyncService(db).handle_event(event)
    return WebhookAck(action=action)


@router.post(
    "/test/webhook",
    response_model=WebhookTestResponse,
    dependencies=[Depends(require_admin_key)],
)
async def test_webhook(request: Request, http_client: HttpClientDep):
    """
    Send a synthetic user.created event to the Clerk receiver.

    `status` is the receiver's HTTP status and `result` its raw body.
    Requires the x-admin-key header.
    """
    payload = build_test_payload()
    url = f"{request.base_url}{CLERK_WEBHOOK_PATH}"

    response = await http_client.post(
        url,
        json=payload,
        headers={TEST_WEBHOOK_HEADER: "true"},
    )
    logger.info(f"Webhook self-test answered {response.status_code}")

    return WebhookTestResponse(status=response.status_code, result=response.text, payload=payload)
