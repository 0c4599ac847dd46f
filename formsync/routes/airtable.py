"""Airtable schema endpoints used while authoring a form."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from formsync.airtable.client import AirtableClient, AirtableError
from formsync.http.problem import problem_response
from formsync.logic.airtable_schema import describe_fields, fields_to_questions, find_table
from formsync.logic.problem_factory import (
    problem_airtable_not_configured,
    problem_airtable_unavailable,
    problem_table_not_found,
)
from formsync.routes.dependencies import airtable_client


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/airtable/bases/{base_id}/tables/{table}/fields",
    summary="List a table's fields with draft questions",
    operation_id="getTableFields",
    tags=["Airtable"],
)
def get_table_fields(base_id: str, table: str, client: AirtableClient = Depends(airtable_client)):
    if not client.has_token:
        return problem_response(problem_airtable_not_configured())
    try:
        tables = client.list_tables(base_id)
    except AirtableError as exc:
        logger.error("table_fields_fetch_failed base_id=%s status=%s", base_id, exc.status_code)
        return problem_response(
            problem_airtable_unavailable(exc.details or str(exc), message="Failed to fetch table fields")
        )
    found = find_table(tables, table)
    if found is None:
        return problem_response(problem_table_not_found(table))
    fields = describe_fields(found)
    return {
        "success": True,
        "table": {"id": found.get("id"), "name": found.get("name")},
        "availableFields": fields,
        "totalFields": len(fields),
        "draftQuestions": fields_to_questions(found),
    }
