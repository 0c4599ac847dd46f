"""Functional test bootstrap.

Points the service at a shared in-memory SQLite database before any app
import, and replaces the Airtable network transport with an
``httpx.MockTransport`` so submissions never leave the process.
"""

from __future__ import annotations

import json
import os
from typing import Any, Callable, Dict, List

import httpx
import pytest

os.environ["TEST_DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["AIRTABLE_PERSONAL_ACCESS_TOKEN"] = "pat_test_token"
os.environ["AIRTABLE_API_URL"] = "https://airtable.test"


class AirtableStub:
    """Records Airtable calls and answers them from configurable handlers."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.record_counter = 0
        self.fail_with: int | None = None
        self.tables: List[Dict[str, Any]] = []

    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(r.content or b"{}") for r in self.requests if r.method == "POST"]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": {"type": "INVALID_REQUEST_UNKNOWN"}})
        if request.method == "GET" and request.url.path.startswith("/v0/meta/bases/"):
            return httpx.Response(200, json={"tables": self.tables})
        if request.method == "POST":
            self.record_counter += 1
            return httpx.Response(200, json={"records": [{"id": f"rec{self.record_counter:04d}", "fields": {}}]})
        return httpx.Response(404, json={"error": "NOT_FOUND"})


@pytest.fixture
def airtable_stub() -> AirtableStub:
    return AirtableStub()


@pytest.fixture
def app_factory(airtable_stub: AirtableStub) -> Callable[[], Any]:
    from formsync.main import create_app

    def build():
        return create_app(airtable_transport=httpx.MockTransport(airtable_stub))

    return build


@pytest.fixture
def client(app_factory):
    from fastapi.testclient import TestClient

    with TestClient(app_factory()) as c:
        yield c


@pytest.fixture(autouse=True)
def clean_tables():
    """Empty every table and the event buffer after each test."""
    yield
    from formsync.db.base import get_engine
    from formsync.logic.events import get_buffered_events
    from formsync.models.records import Base

    engine = get_engine()
    Base.metadata.create_all(engine)
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    get_buffered_events(clear=True)


@pytest.fixture
def form_payload() -> Dict[str, Any]:
    return {
        "title": "Job application",
        "description": "Apply for a role",
        "airtableBaseId": "appBASE123",
        "airtableTableId": "tblAPPLY",
        "airtableTableName": "Applicants",
        "questions": [
            {
                "questionKey": "q1",
                "airtableFieldId": "fld1",
                "label": "Name",
                "type": "singleLineText",
                "required": True,
            },
            {
                "questionKey": "q2",
                "airtableFieldId": "fld2",
                "label": "Role",
                "type": "singleSelect",
                "options": ["Engineer", "Designer"],
            },
            {
                "questionKey": "q3",
                "airtableFieldId": "fld3",
                "label": "GitHub URL",
                "type": "url",
                "required": True,
                "conditionalRules": {
                    "logic": "AND",
                    "conditions": [{"questionKey": "q2", "operator": "equals", "value": "Engineer"}],
                },
            },
        ],
    }
