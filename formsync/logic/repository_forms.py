"""Form data access helpers.

Keeps SQL out of route handlers. Questions are stored as one ordered JSON
document per form and returned in the same order they were authored.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import insert, select, update

from formsync.db.base import get_engine
from formsync.models.records import FormRecord

_FORMS = FormRecord.__table__


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _row_to_form(row: Any) -> Dict[str, Any]:
    return {
        "id": row["form_id"],
        "title": row["title"],
        "description": row["description"] or "",
        "airtableBaseId": row["airtable_base_id"],
        "airtableTableId": row["airtable_table_id"],
        "airtableTableName": row["airtable_table_name"],
        "questions": json.loads(row["questions_json"] or "[]"),
        "isPublished": bool(row["is_published"]),
        "responseCount": int(row["response_count"] or 0),
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
    }


def create_form(
    *,
    title: str,
    description: str,
    airtable_base_id: str,
    airtable_table_id: str,
    airtable_table_name: str,
    questions: List[Dict[str, Any]],
) -> Dict[str, Any]:
    """Insert a validated form and return its stored representation."""
    form_id = str(uuid.uuid4())
    now = _now()
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            insert(_FORMS).values(
                form_id=form_id,
                title=title.strip(),
                description=description or "",
                airtable_base_id=airtable_base_id,
                airtable_table_id=airtable_table_id,
                airtable_table_name=airtable_table_name or "Table",
                questions_json=json.dumps(questions),
                is_published=True,
                response_count=0,
                created_at=now,
                updated_at=now,
            )
        )
        row = conn.execute(select(_FORMS).where(_FORMS.c.form_id == form_id)).mappings().one()
    return _row_to_form(row)


def get_form(form_id: str) -> Optional[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(select(_FORMS).where(_FORMS.c.form_id == form_id)).mappings().first()
    if row is None:
        return None
    return _row_to_form(row)


def list_forms() -> List[Dict[str, Any]]:
    """Return all forms, newest first, without their question lists."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(select(_FORMS).order_by(_FORMS.c.created_at.desc())).mappings().all()
    result: List[Dict[str, Any]] = []
    for r in rows:
        form = _row_to_form(r)
        form.pop("questions", None)
        result.append(form)
    return result


def increment_response_count(form_id: str) -> None:
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            update(_FORMS)
            .where(_FORMS.c.form_id == form_id)
            .values(response_count=_FORMS.c.response_count + 1, updated_at=_now())
        )


__all__ = ["create_form", "get_form", "list_forms", "increment_response_count"]
