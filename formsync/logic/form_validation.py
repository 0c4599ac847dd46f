"""Form definition and submission validation.

Authoring-side gate run before a form is stored: checks the envelope fields,
each question's shape, and each question's conditional rules through the
shared rule engine. Failures name the offending question so the author can
fix it. Submission-side checks reuse the same engine to decide which answers
count.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping
import logging

from formsync.logic.conditional_rules import (
    get_visible_questions,
    hidden_question_keys,
    referenced_question_keys,
    validate_conditional_rules,
)
from formsync.models.forms import ConditionalRules

logger = logging.getLogger(__name__)

REQUIRED_FORM_FIELDS = ("title", "airtableBaseId", "airtableTableId", "questions")
REQUIRED_QUESTION_FIELDS = ("questionKey", "airtableFieldId", "label", "type")


class FormValidationError(ValueError):
    """Raised when a form definition or submission is rejected."""

    def __init__(self, code: str, message: str, question_key: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.question_key = question_key


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_form_payload(payload: Any) -> None:
    """Validate a create-form body.

    - title, airtableBaseId, airtableTableId and a questions list are required
    - every question needs questionKey, airtableFieldId, label and type
    - question keys are unique within the form
    - conditionalRules must pass the shared rule validator and may only
      reference other questions of the same form
    """
    if not isinstance(payload, Mapping):
        raise FormValidationError("missing_required_fields", "Request body must be a JSON object")
    missing = [f for f in REQUIRED_FORM_FIELDS if _is_blank(payload.get(f))]
    if missing or not isinstance(payload.get("questions"), list):
        raise FormValidationError(
            "missing_required_fields",
            "Missing required fields: title, airtableBaseId, airtableTableId, questions",
        )

    questions = payload["questions"]
    keys: list[str] = []
    for question in questions:
        if not isinstance(question, Mapping) or any(_is_blank(question.get(f)) for f in REQUIRED_QUESTION_FIELDS):
            raise FormValidationError(
                "invalid_question_format",
                "Invalid question format. Each question must have: questionKey, airtableFieldId, label, type",
            )
        key = str(question["questionKey"])
        if key in keys:
            raise FormValidationError(
                "duplicate_question_key",
                f"Duplicate question key: {key}",
                question_key=key,
            )
        keys.append(key)

    for question in questions:
        key = str(question["questionKey"])
        rules = question.get("conditionalRules")
        if not validate_conditional_rules(rules):
            logger.info("form_validation.rules_rejected question_key=%s", key)
            raise FormValidationError(
                "invalid_conditional_rules",
                f"Invalid conditional rules for question: {key}",
                question_key=key,
            )
        for ref in referenced_question_keys(rules):
            if ref == key or ref not in keys:
                raise FormValidationError(
                    "unknown_condition_reference",
                    f"Conditional rules for question {key} reference unknown question: {ref}",
                    question_key=key,
                )


def normalize_questions(questions: Iterable[Mapping[str, Any]]) -> list[Dict[str, Any]]:
    """Return validated questions with rules reduced to their declared fields."""
    out: list[Dict[str, Any]] = []
    for question in questions:
        item = dict(question)
        rules = item.get("conditionalRules")
        if rules is not None:
            item["conditionalRules"] = ConditionalRules.model_validate(rules).model_dump(by_alias=True)
        out.append(item)
    return out


def _is_unanswered(value: Any) -> bool:
    return value is None or value == "" or value == []


def validate_submission(questions: Iterable[Any], answers: Mapping[str, Any]) -> Dict[str, Any]:
    """Return the answers that belong to currently visible questions.

    Answers to hidden questions are dropped. A visible required question
    without an answer raises ``required_answer_missing``.
    """
    questions = list(questions)
    visible = get_visible_questions(questions, answers)
    accepted: Dict[str, Any] = {}
    for question in visible:
        key = question.question_key
        value = answers.get(key)
        if _is_unanswered(value):
            if question.required:
                raise FormValidationError(
                    "required_answer_missing",
                    f"Answer required for question: {key}",
                    question_key=key,
                )
            continue
        accepted[key] = value
    hidden = [k for k in hidden_question_keys(questions, answers) if k in answers]
    if hidden:
        logger.info("submission.hidden_answers_dropped keys=%s", hidden)
    return accepted


__all__ = [
    "FormValidationError",
    "validate_form_payload",
    "normalize_questions",
    "validate_submission",
]
