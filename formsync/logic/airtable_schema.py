"""Derive draft form questions from an Airtable table schema."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from formsync.models.question_type import UNSUPPORTED_TYPES


def _choice_names(field: Mapping[str, Any]) -> List[str]:
    options = field.get("options")
    if not isinstance(options, Mapping):
        return []
    choices = options.get("choices")
    if not isinstance(choices, list):
        return []
    return [str(c.get("name")) for c in choices if isinstance(c, Mapping) and c.get("name") is not None]


def describe_fields(table: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Return the table's fields with a flag marking types forms cannot render."""
    out: List[Dict[str, Any]] = []
    for field in table.get("fields") or []:
        ftype = str(field.get("type") or "")
        out.append(
            {
                "id": field.get("id"),
                "name": field.get("name"),
                "type": ftype,
                "options": _choice_names(field),
                "supported": ftype not in UNSUPPORTED_TYPES,
            }
        )
    return out


def fields_to_questions(table: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Build draft questions (``q_1``, ``q_2`` ...) for the supported fields.

    Drafts carry no conditional rules; authors add those before creating the
    form.
    """
    questions: List[Dict[str, Any]] = []
    for field in describe_fields(table):
        if not field["supported"]:
            continue
        questions.append(
            {
                "questionKey": f"q_{len(questions) + 1}",
                "airtableFieldId": field["id"],
                "label": field["name"],
                "type": field["type"],
                "required": False,
                "options": field["options"],
                "conditionalRules": None,
            }
        )
    return questions


def find_table(tables: List[Mapping[str, Any]], table: str) -> Optional[Mapping[str, Any]]:
    """Look a table up by id or by name."""
    for candidate in tables:
        if candidate.get("id") == table or candidate.get("name") == table:
            return candidate
    return None


__all__ = ["describe_fields", "fields_to_questions", "find_table"]
