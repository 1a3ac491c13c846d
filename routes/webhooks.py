# routes/webhooks.py
"""
Identity provider webhook.

Deliveries are signed with svix; the signature is checked against
WEBHOOK_SECRET before anything is written.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session
from svix.webhooks import Webhook, WebhookVerificationError

from config import settings
from config.db import get_db
from services import identity_sync

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/webhooks", tags=["Webhooks"])

SIGNATURE_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")

HANDLERS = {
    "user.created": identity_sync.handle_user_created,
    "user.updated": identity_sync.handle_user_updated,
    "user.deleted": identity_sync.handle_user_deleted,
}


@router.post("/identity")
async def identity_webhook(request: Request, db: Session = Depends(get_db)):
    if not settings.WEBHOOK_SECRET:
        logger.error("WEBHOOK_SECRET is not configured")
        return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})

    headers = {name: request.headers.get(name) for name in SIGNATURE_HEADERS}
    if not all(headers.values()):
        return PlainTextResponse("Missing headers", status_code=400)

    body = await request.body()
    try:
        Webhook(settings.WEBHOOK_SECRET).verify(body, headers)
    except WebhookVerificationError as e:
        logger.warning("Webhook verification failed: %s", e)
        return PlainTextResponse("Invalid signature", status_code=400)

    # verify() only checks the signature; the event is read from the body
    try:
        event = json.loads(body)
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return PlainTextResponse("Invalid payload", status_code=400)
    if not isinstance(event, dict):
        return PlainTextResponse("Invalid payload", status_code=400)

    event_type = event.get("type")
    handler = HANDLERS.get(event_type)
    if handler is None:
        logger.info("Ignoring webhook event %s", event_type)
        return {"success": True}

    try:
        handler(db, event.get("data") or {})
    except Exception:
        db.rollback()
        logger.exception("Webhook processing failed for %s", event_type)
        return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})

    return {"success": True}
