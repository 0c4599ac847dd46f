"""Submission payload shaping for Airtable.

Answers are keyed by question key while the form is filled; Airtable expects
them keyed by field label. Only answered questions of forwardable types are
sent.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from formsync.models.question_type import SUBMITTABLE_TYPES


def build_airtable_fields(questions: Iterable[Any], answers: Mapping[str, Any]) -> Dict[str, Any]:
    """Map answers onto Airtable field labels.

    Questions without an answer (absent or empty string) and questions whose
    type cannot be forwarded (attachments) are skipped.
    """
    fields: Dict[str, Any] = {}
    for question in questions:
        if question.type not in SUBMITTABLE_TYPES:
            continue
        answer = answers.get(question.question_key)
        if answer is None or answer == "":
            continue
        fields[question.label] = answer
    return fields


__all__ = ["build_airtable_fields"]
