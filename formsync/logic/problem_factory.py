"""Centralised construction of problem+json payloads.

Provides helpers that return dicts with stable codes so route modules do not
embed error strings.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
import logging


logger = logging.getLogger(__name__)


def _problem(title: str, status: int, detail: str, code: str, **extra: Any) -> Dict[str, object]:
    problem: Dict[str, object] = {
        "title": title,
        "status": status,
        "detail": detail,
        "error": detail,
        "code": code,
    }
    problem.update({k: v for k, v in extra.items() if v is not None})
    logger.info("error_handler.handle", extra={"code": code, "status": status})
    return problem


def problem_form_invalid(code: str, message: str, question_key: Optional[str] = None) -> Dict[str, object]:
    """Return a 400 problem for a rejected form definition or submission."""
    return _problem("Invalid Form", 400, message, code.upper(), questionKey=question_key)


def problem_form_not_found(form_id: str) -> Dict[str, object]:
    """Return a 404 problem for an unknown form id."""
    return _problem("Not Found", 404, "Form not found", "FORM_NOT_FOUND", formId=form_id)


def problem_answers_required() -> Dict[str, object]:
    """Return a 400 problem when the answers object is missing."""
    return _problem("Invalid Request", 400, "Answers object is required", "ANSWERS_REQUIRED")


def problem_webhook_invalid() -> Dict[str, object]:
    """Return a 400 problem for a malformed webhook notification."""
    return _problem("Invalid Request", 400, "Invalid webhook payload", "WEBHOOK_PAYLOAD_INVALID")


def problem_airtable_unavailable(
    details: Any = None,
    response_id: Optional[str] = None,
    message: str = "Form submission failed",
) -> Dict[str, object]:
    """Return a 502 problem when Airtable rejected or could not be reached."""
    return _problem(
        "Bad Gateway",
        502,
        message,
        "AIRTABLE_SYNC_FAILED",
        details=details,
        responseId=response_id,
    )


def problem_airtable_not_configured() -> Dict[str, object]:
    """Return a 400 problem when no Airtable token is configured."""
    return _problem(
        "Airtable Not Configured",
        400,
        "Airtable personal access token is not configured",
        "AIRTABLE_NOT_CONFIGURED",
    )


def problem_table_not_found(table: str) -> Dict[str, object]:
    return _problem("Not Found", 404, f"Table not found: {table}", "AIRTABLE_TABLE_NOT_FOUND")


__all__ = [
    "problem_form_invalid",
    "problem_form_not_found",
    "problem_answers_required",
    "problem_webhook_invalid",
    "problem_airtable_unavailable",
    "problem_airtable_not_configured",
    "problem_table_not_found",
]
