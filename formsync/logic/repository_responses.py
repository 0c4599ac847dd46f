"""Form response data access helpers.

Responses are keyed by their Airtable record id for webhook reconciliation.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import insert, select, update

from formsync.db.base import get_engine
from formsync.models.records import FormResponseRecord

_RESPONSES = FormResponseRecord.__table__

STATUS_SUBMITTED = "submitted"
STATUS_SYNCED = "synced"
STATUS_ERROR = "error"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _row_to_response(row: Any) -> Dict[str, Any]:
    return {
        "id": row["response_id"],
        "formId": row["form_id"],
        "airtableRecordId": row["airtable_record_id"],
        "answers": json.loads(row["answers_json"] or "{}"),
        "status": row["status"],
        "deletedInAirtable": bool(row["deleted_in_airtable"]),
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
    }


def create_response(
    form_id: str,
    airtable_record_id: str,
    answers: Dict[str, Any],
    status: str = STATUS_SUBMITTED,
) -> Dict[str, Any]:
    response_id = str(uuid.uuid4())
    now = _now()
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            insert(_RESPONSES).values(
                response_id=response_id,
                form_id=form_id,
                airtable_record_id=airtable_record_id,
                answers_json=json.dumps(answers),
                status=status,
                deleted_in_airtable=False,
                created_at=now,
                updated_at=now,
            )
        )
        row = conn.execute(
            select(_RESPONSES).where(_RESPONSES.c.response_id == response_id)
        ).mappings().one()
    return _row_to_response(row)


def list_responses_for_form(form_id: str) -> List[Dict[str, Any]]:
    """Return a form's responses, newest first."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            select(_RESPONSES)
            .where(_RESPONSES.c.form_id == form_id)
            .order_by(_RESPONSES.c.created_at.desc())
        ).mappings().all()
    return [_row_to_response(r) for r in rows]


def find_response_by_record_id(airtable_record_id: str) -> Optional[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            select(_RESPONSES).where(_RESPONSES.c.airtable_record_id == airtable_record_id)
        ).mappings().first()
    return _row_to_response(row) if row is not None else None


def mark_record_synced(airtable_record_id: str) -> bool:
    """Mark the response for a record as synced; False when no response matches."""
    eng = get_engine()
    with eng.begin() as conn:
        result = conn.execute(
            update(_RESPONSES)
            .where(_RESPONSES.c.airtable_record_id == airtable_record_id)
            .values(status=STATUS_SYNCED, updated_at=_now())
        )
    return (result.rowcount or 0) > 0


def mark_record_deleted(airtable_record_id: str) -> bool:
    """Flag the response for a record as deleted in Airtable."""
    eng = get_engine()
    with eng.begin() as conn:
        result = conn.execute(
            update(_RESPONSES)
            .where(_RESPONSES.c.airtable_record_id == airtable_record_id)
            .values(status=STATUS_SYNCED, deleted_in_airtable=True, updated_at=_now())
        )
    return (result.rowcount or 0) > 0


__all__ = [
    "STATUS_SUBMITTED",
    "STATUS_SYNCED",
    "STATUS_ERROR",
    "create_response",
    "list_responses_for_form",
    "find_response_by_record_id",
    "mark_record_synced",
    "mark_record_deleted",
]
