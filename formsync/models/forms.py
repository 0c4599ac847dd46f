"""Pydantic models for form definitions, submissions and stored responses.

Wire format is camelCase (``questionKey``, ``conditionalRules``); Python
attributes are snake_case. ``conditional_rules`` is kept as raw JSON so the
shared rule validator always sees the untrusted shape it must judge.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Condition(_CamelModel):
    question_key: str = Field(alias="questionKey", min_length=1)
    operator: Literal["equals", "notEquals", "contains"]
    value: Any


class ConditionalRules(_CamelModel):
    logic: Literal["AND", "OR"]
    conditions: List[Condition]


class Question(_CamelModel):
    question_key: str = Field(alias="questionKey")
    airtable_field_id: str = Field(alias="airtableFieldId")
    label: str
    type: str
    required: bool = False
    options: List[str] = Field(default_factory=list)
    conditional_rules: Optional[Dict[str, Any]] = Field(default=None, alias="conditionalRules")


class FormCreate(_CamelModel):
    title: str
    description: str = ""
    airtable_base_id: str = Field(alias="airtableBaseId")
    airtable_table_id: str = Field(alias="airtableTableId")
    airtable_table_name: str = Field(default="Table", alias="airtableTableName")
    questions: List[Question]


class FormView(FormCreate):
    id: str
    is_published: bool = Field(default=True, alias="isPublished")
    response_count: int = Field(default=0, alias="responseCount")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class FormSummary(_CamelModel):
    id: str
    title: str
    description: str = ""
    is_published: bool = Field(default=True, alias="isPublished")
    response_count: int = Field(default=0, alias="responseCount")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


class AnswersPayload(BaseModel):
    """Body of visible-question and submit requests."""

    answers: Dict[str, Any]


class ResponseView(_CamelModel):
    id: str
    form_id: str = Field(alias="formId")
    airtable_record_id: str = Field(alias="airtableRecordId")
    answers: Dict[str, Any]
    status: Literal["submitted", "synced", "error"]
    deleted_in_airtable: bool = Field(default=False, alias="deletedInAirtable")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")


__all__ = [
    "Condition",
    "ConditionalRules",
    "Question",
    "FormCreate",
    "FormView",
    "FormSummary",
    "AnswersPayload",
    "ResponseView",
]
