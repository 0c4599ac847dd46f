"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by
form creation, submission and webhook flows.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

FORM_CREATED = "form.created"
RESPONSE_SUBMITTED = "response.submitted"
RESPONSE_SYNC_FAILED = "response.sync_failed"
RESPONSE_DELETED_IN_AIRTABLE = "response.deleted_in_airtable"


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    In this minimal implementation, we log the event for observability.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


# In-memory buffer for domain events (test-only visibility)
EVENT_BUFFER: List[Dict[str, Any]] = []


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events

__all__ = [
    "FORM_CREATED",
    "RESPONSE_SUBMITTED",
    "RESPONSE_SYNC_FAILED",
    "RESPONSE_DELETED_IN_AIRTABLE",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
