"""Airtable webhook ingestion.

Reconciles stored responses with record changes reported by Airtable:
changed records are marked synced, destroyed records are flagged as deleted,
and created records unknown to this service are only logged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
import logging

from sqlalchemy.exc import SQLAlchemyError

from formsync.logic.events import RESPONSE_DELETED_IN_AIRTABLE, publish
from formsync.logic.repository_responses import (
    find_response_by_record_id,
    mark_record_deleted,
    mark_record_synced,
)

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("base", "webhook", "timestamp")


class WebhookPayloadError(ValueError):
    pass


@dataclass
class WebhookSummary:
    updated: int = 0
    created_unknown: int = 0
    deleted: int = 0
    failed: int = 0

    def as_dict(self) -> dict:
        return {
            "updated": self.updated,
            "createdUnknown": self.created_unknown,
            "deleted": self.deleted,
            "failed": self.failed,
        }


def _handle_update(record_id: str, summary: WebhookSummary) -> None:
    if mark_record_synced(record_id):
        summary.updated += 1


def _handle_creation(record_id: str, summary: WebhookSummary) -> None:
    if find_response_by_record_id(record_id) is None:
        logger.info("webhook.record_created_externally record_id=%s", record_id)
        summary.created_unknown += 1


def _handle_deletion(record_id: str, summary: WebhookSummary) -> None:
    if mark_record_deleted(record_id):
        summary.deleted += 1
        publish(RESPONSE_DELETED_IN_AIRTABLE, {"airtableRecordId": record_id})


def _apply(handler, record_id: str, summary: WebhookSummary) -> None:
    try:
        handler(str(record_id), summary)
    except SQLAlchemyError:
        summary.failed += 1
        logger.error("webhook.record_failed record_id=%s handler=%s", record_id, handler.__name__, exc_info=True)


def process_webhook(body: Any) -> WebhookSummary:
    """Apply every record change in a webhook notification body."""
    if not isinstance(body, Mapping) or any(not body.get(k) for k in REQUIRED_KEYS):
        raise WebhookPayloadError("Invalid webhook payload")

    base = body.get("base")
    base_id = base.get("id") if isinstance(base, Mapping) else None
    summary = WebhookSummary()
    payloads = body.get("payloads")
    if not isinstance(payloads, list):
        logger.info("webhook.no_payloads base_id=%s", base_id)
        return summary

    for payload in payloads:
        if not isinstance(payload, Mapping):
            continue
        tables = payload.get("changedTablesById")
        if not isinstance(tables, Mapping):
            continue
        for table_id, changes in tables.items():
            if not isinstance(changes, Mapping):
                continue
            logger.info("webhook.table_changes base_id=%s table_id=%s", base_id, table_id)
            for record_id in (changes.get("changedRecordsById") or {}):
                _apply(_handle_update, record_id, summary)
            for record_id in (changes.get("createdRecordsById") or {}):
                _apply(_handle_creation, record_id, summary)
            for record_id in (changes.get("destroyedRecordIds") or []):
                _apply(_handle_deletion, record_id, summary)

    logger.info("webhook.processed base_id=%s summary=%s", base_id, summary.as_dict())
    return summary


__all__ = ["WebhookPayloadError", "WebhookSummary", "process_webhook"]
