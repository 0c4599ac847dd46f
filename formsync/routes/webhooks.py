"""Airtable webhook ingestion endpoints."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from formsync.http.problem import problem_response
from formsync.logic.problem_factory import problem_webhook_invalid
from formsync.logic.webhooks import WebhookPayloadError, process_webhook


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/airtable", summary="Receive Airtable change notifications", operation_id="airtableWebhook", tags=["Webhooks"])
async def airtable_webhook(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = None
    try:
        summary = process_webhook(body)
    except WebhookPayloadError:
        return problem_response(problem_webhook_invalid())
    return {"success": True, "message": "Webhook processed successfully", "summary": summary.as_dict()}


@router.get("/webhooks/health", summary="Webhook endpoint liveness", operation_id="webhookHealth", tags=["Webhooks"])
def webhook_health():
    return {
        "status": "healthy",
        "message": "Webhook endpoint is active",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
