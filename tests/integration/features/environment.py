"""Behave environment hooks for integration tests.

Live mode drives a running API at TEST_BASE_URL over httpx. Without it the
scenarios run in-process: the app is built with an in-memory SQLite database
and a mock Airtable transport, and steps talk to it through TestClient.
"""

from __future__ import annotations

import os
from typing import Any

import httpx


class _AirtableRecorder:
    def __init__(self) -> None:
        self.records: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        import json

        if request.method == "POST":
            body = json.loads(request.content or b"{}")
            self.records.append(body)
            return httpx.Response(200, json={"records": [{"id": f"rec{len(self.records):04d}", "fields": {}}]})
        return httpx.Response(200, json={"tables": []})


def before_all(context: Any) -> None:  # pragma: no cover - executed by Behave
    base_url = (os.getenv("TEST_BASE_URL") or "").rstrip("/")
    context.api_prefix = os.getenv("TEST_API_PREFIX", "/api/v1")
    if base_url:
        context.http = httpx.Client(base_url=base_url, timeout=10.0)
        context.airtable = None
        print(f"[env] live mode against {base_url}")
        return

    os.environ.setdefault("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
    os.environ.setdefault("AIRTABLE_PERSONAL_ACCESS_TOKEN", "pat_integration")
    from fastapi.testclient import TestClient
    from formsync.main import create_app

    context.airtable = _AirtableRecorder()
    context.http = TestClient(create_app(airtable_transport=httpx.MockTransport(context.airtable)))
    print("[env] in-process mode with mock Airtable transport")


def before_scenario(context: Any, scenario: Any) -> None:  # pragma: no cover - executed by Behave
    context.vars = {}
    context.answers = {}
    context.response = None


def after_all(context: Any) -> None:  # pragma: no cover - executed by Behave
    http = getattr(context, "http", None)
    if http is not None:
        http.close()
