"""Form authoring, rendering and submission endpoints."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from formsync.airtable.client import AirtableClient, AirtableError
from formsync.http.problem import problem_response
from formsync.logic.conditional_rules import get_visible_questions
from formsync.logic.events import FORM_CREATED, RESPONSE_SUBMITTED, RESPONSE_SYNC_FAILED, publish
from formsync.logic.form_validation import (
    FormValidationError,
    normalize_questions,
    validate_form_payload,
    validate_submission,
)
from formsync.logic.problem_factory import (
    problem_airtable_unavailable,
    problem_answers_required,
    problem_form_invalid,
    problem_form_not_found,
)
from formsync.logic.repository_forms import create_form, get_form, increment_response_count, list_forms
from formsync.logic.repository_responses import (
    STATUS_ERROR,
    STATUS_SYNCED,
    create_response,
    list_responses_for_form,
)
from formsync.logic.submission import build_airtable_fields
from formsync.models.forms import AnswersPayload, FormCreate, FormSummary, FormView, Question, ResponseView
from formsync.routes.dependencies import airtable_client


router = APIRouter()
logger = logging.getLogger(__name__)


def _dump(model: Any) -> Any:
    return jsonable_encoder(model.model_dump(by_alias=True))


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        logger.info("request_body_not_json path=%s", request.url.path)
        return None


def _answers_from(body: Any) -> Dict[str, Any] | None:
    try:
        return AnswersPayload.model_validate(body).answers
    except PydanticValidationError:
        return None


def _questions_of(form: Dict[str, Any]) -> List[Question]:
    return [Question.model_validate(q) for q in form.get("questions") or []]


@router.get("/forms", summary="List forms", operation_id="listForms", tags=["Forms"])
def list_all_forms():
    forms = [_dump(FormSummary.model_validate(f)) for f in list_forms()]
    return {"success": True, "forms": forms}


@router.post("/forms", summary="Create a form", operation_id="createForm", tags=["Forms"])
async def create_new_form(request: Request):
    payload = await _json_body(request)
    try:
        validate_form_payload(payload)
    except FormValidationError as exc:
        logger.info("form_create_rejected code=%s question_key=%s", exc.code, exc.question_key)
        return problem_response(problem_form_invalid(exc.code, exc.message, exc.question_key))

    try:
        questions = normalize_questions(payload["questions"])
    except PydanticValidationError as exc:
        logger.info("form_create_rejected code=invalid_question_format errors=%s", exc.error_count())
        return problem_response(
            problem_form_invalid(
                "invalid_question_format",
                "Invalid question format. Each question must have: questionKey, airtableFieldId, label, type",
            )
        )

    try:
        draft = {
            **payload,
            "questions": questions,
            "airtableTableName": payload.get("airtableTableName") or "Table",
            "description": payload.get("description") or "",
        }
        parsed = FormCreate.model_validate(draft)
    except PydanticValidationError as exc:
        in_questions = any(err["loc"] and err["loc"][0] == "questions" for err in exc.errors())
        code = "invalid_question_format" if in_questions else "invalid_form_fields"
        logger.info("form_create_rejected code=%s errors=%s", code, exc.error_count())
        if in_questions:
            message = "Invalid question format. Each question must have: questionKey, airtableFieldId, label, type"
        else:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            message = f"Invalid form fields: {', '.join(fields)}"
        return problem_response(problem_form_invalid(code, message))

    stored = create_form(
        title=parsed.title,
        description=parsed.description,
        airtable_base_id=parsed.airtable_base_id,
        airtable_table_id=parsed.airtable_table_id,
        airtable_table_name=parsed.airtable_table_name,
        questions=[q.model_dump(by_alias=True) for q in parsed.questions],
    )
    publish(FORM_CREATED, {"formId": stored["id"], "questions": len(parsed.questions)})
    logger.info("form_created form_id=%s questions=%s", stored["id"], len(parsed.questions))
    body = {
        "success": True,
        "message": "Form created successfully",
        "form": _dump(FormView.model_validate(stored)),
    }
    return JSONResponse(body, status_code=201)


@router.get("/forms/{form_id}", summary="Get a form", operation_id="getForm", tags=["Forms"])
def get_single_form(form_id: str):
    form = get_form(form_id)
    if form is None:
        return problem_response(problem_form_not_found(form_id))
    return {"success": True, "form": _dump(FormView.model_validate(form))}


@router.post(
    "/forms/{form_id}/visible-questions",
    summary="Compute the questions visible for the current answers",
    operation_id="getVisibleQuestions",
    tags=["Rendering"],
)
async def visible_questions(form_id: str, request: Request):
    form = get_form(form_id)
    if form is None:
        return problem_response(problem_form_not_found(form_id))
    answers = _answers_from(await _json_body(request))
    if answers is None:
        return problem_response(problem_answers_required())
    visible = get_visible_questions(_questions_of(form), answers)
    return {
        "formId": form_id,
        "questions": [_dump(q) for q in visible],
        "questionKeys": [q.question_key for q in visible],
    }


@router.post("/forms/{form_id}/submit", summary="Submit a response", operation_id="submitForm", tags=["Responses"])
async def submit_form(
    form_id: str,
    request: Request,
    client: AirtableClient = Depends(airtable_client),
):
    answers = _answers_from(await _json_body(request))
    if answers is None:
        return problem_response(problem_answers_required())
    form = get_form(form_id)
    if form is None:
        return problem_response(problem_form_not_found(form_id))

    questions = _questions_of(form)
    try:
        accepted = validate_submission(questions, answers)
    except FormValidationError as exc:
        return problem_response(problem_form_invalid(exc.code, exc.message, exc.question_key))

    fields = build_airtable_fields(questions, accepted)
    try:
        record_id = await run_in_threadpool(
            client.create_record, form["airtableBaseId"], form["airtableTableName"], fields
        )
    except AirtableError as exc:
        failed = create_response(form_id, f"ERROR_{int(time.time() * 1000)}", accepted, status=STATUS_ERROR)
        publish(RESPONSE_SYNC_FAILED, {"formId": form_id, "responseId": failed["id"]})
        logger.error(
            "submission_failed form_id=%s response_id=%s status=%s",
            form_id,
            failed["id"],
            exc.status_code,
        )
        return problem_response(problem_airtable_unavailable(exc.details or str(exc), failed["id"]))

    saved = create_response(form_id, record_id, accepted, status=STATUS_SYNCED)
    increment_response_count(form_id)
    publish(RESPONSE_SUBMITTED, {"formId": form_id, "responseId": saved["id"], "airtableRecordId": record_id})
    return {
        "success": True,
        "message": "Form submitted successfully",
        "responseId": saved["id"],
        "airtableRecordId": record_id,
    }


@router.get(
    "/forms/{form_id}/responses",
    summary="List a form's responses",
    operation_id="listResponses",
    tags=["Responses"],
)
def list_form_responses(form_id: str):
    form = get_form(form_id)
    if form is None:
        return problem_response(problem_form_not_found(form_id))
    responses = [_dump(ResponseView.model_validate(r)) for r in list_responses_for_form(form_id)]
    return {
        "success": True,
        "form": {"title": form["title"], "responseCount": form["responseCount"]},
        "responses": responses,
    }


__all__ = ["router"]
