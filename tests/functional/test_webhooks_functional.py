"""Functional tests for Airtable webhook ingestion and schema lookup."""

from __future__ import annotations

from formsync.logic.events import RESPONSE_DELETED_IN_AIRTABLE, get_buffered_events
from formsync.logic.repository_responses import create_response, find_response_by_record_id


def _notification(**tables):
    return {
        "base": {"id": "appBASE123"},
        "webhook": {"id": "achWEBHOOK"},
        "timestamp": "2026-10-01T10:00:00.000Z",
        "payloads": [{"changedTablesById": tables}],
    }


def test_webhook_rejects_incomplete_notification(client):
    resp = client.post("/webhooks/airtable", json={"base": {"id": "app1"}})
    assert resp.status_code == 400
    assert resp.json()["code"] == "WEBHOOK_PAYLOAD_INVALID"


def test_webhook_without_payloads_is_accepted(client):
    body = _notification()
    body.pop("payloads")
    resp = client.post("/webhooks/airtable", json=body)
    assert resp.status_code == 200
    assert resp.json()["summary"] == {"updated": 0, "createdUnknown": 0, "deleted": 0, "failed": 0}


def test_webhook_reconciles_changed_created_and_destroyed_records(client):
    create_response("form-1", "recCHANGED", {"q1": "a"}, status="submitted")
    create_response("form-1", "recGONE", {"q1": "b"}, status="synced")

    body = _notification(
        tblAPPLY={
            "changedRecordsById": {"recCHANGED": {"current": {"cellValuesByFieldId": {}}}},
            "createdRecordsById": {"recNEW": {"createdTime": "2026-10-01T10:00:00.000Z"}},
            "destroyedRecordIds": ["recGONE", "recUNKNOWN"],
        }
    )
    resp = client.post("/webhooks/airtable", json=body)
    assert resp.status_code == 200
    assert resp.json()["summary"] == {"updated": 1, "createdUnknown": 1, "deleted": 1, "failed": 0}

    changed = find_response_by_record_id("recCHANGED")
    assert changed["status"] == "synced"
    assert changed["deletedInAirtable"] is False
    gone = find_response_by_record_id("recGONE")
    assert gone["deletedInAirtable"] is True
    assert gone["status"] == "synced"
    assert [e["type"] for e in get_buffered_events()] == [RESPONSE_DELETED_IN_AIRTABLE]


def test_webhook_health(client):
    body = client.get("/webhooks/health").json()
    assert body["status"] == "healthy"
    assert body["timestamp"]


def test_table_fields_produce_draft_questions(client, airtable_stub):
    airtable_stub.tables = [
        {
            "id": "tblAPPLY",
            "name": "Applicants",
            "fields": [
                {"id": "fld1", "name": "Name", "type": "singleLineText"},
                {
                    "id": "fld2",
                    "name": "Role",
                    "type": "singleSelect",
                    "options": {"choices": [{"id": "sel1", "name": "Engineer"}, {"id": "sel2", "name": "Designer"}]},
                },
                {"id": "fld3", "name": "CV", "type": "multipleAttachments"},
                {"id": "fld4", "name": "Notes", "type": "multilineText"},
            ],
        }
    ]
    resp = client.get("/airtable/bases/appBASE123/tables/Applicants/fields")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["table"] == {"id": "tblAPPLY", "name": "Applicants"}
    assert body["totalFields"] == 4
    assert [f["supported"] for f in body["availableFields"]] == [True, True, False, True]
    drafts = body["draftQuestions"]
    assert [(q["questionKey"], q["label"]) for q in drafts] == [("q_1", "Name"), ("q_2", "Role"), ("q_3", "Notes")]
    assert drafts[1]["options"] == ["Engineer", "Designer"]
    assert all(q["conditionalRules"] is None for q in drafts)
    assert airtable_stub.requests[-1].url.path == "/v0/meta/bases/appBASE123/tables"


def test_table_fields_unknown_table_is_404(client, airtable_stub):
    airtable_stub.tables = [{"id": "tblA", "name": "A", "fields": []}]
    resp = client.get("/airtable/bases/appBASE123/tables/tblB/fields")
    assert resp.status_code == 404
    assert resp.json()["code"] == "AIRTABLE_TABLE_NOT_FOUND"


def test_table_fields_upstream_failure_is_502(client, airtable_stub):
    airtable_stub.fail_with = 403
    resp = client.get("/airtable/bases/appBASE123/tables/tblA/fields")
    assert resp.status_code == 502
    assert resp.json()["error"] == "Failed to fetch table fields"
