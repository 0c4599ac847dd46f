"""Airtable REST client.

Wraps the two calls the service needs: creating a record from a form
submission and reading a base's table schema. Credentials come from
`AirtableConfig`; nothing here is read from the environment directly.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from formsync.config import AirtableConfig

logger = logging.getLogger(__name__)


class AirtableError(RuntimeError):
    """Raised when Airtable rejects a call or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AirtableClient:
    def __init__(self, config: AirtableConfig, transport: Optional[httpx.BaseTransport] = None) -> None:
        headers = {"Content-Type": "application/json"}
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        self._client = httpx.Client(
            base_url=config.api_url,
            headers=headers,
            timeout=config.timeout_seconds,
            transport=transport,
        )
        self.has_token = bool(config.token)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AirtableClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("airtable_request_failed method=%s path=%s error=%s", method, path, exc)
            raise AirtableError(f"Airtable request failed: {exc}") from exc
        if resp.status_code >= 400:
            try:
                details: Any = resp.json()
            except ValueError:
                details = resp.text
            logger.error(
                "airtable_request_rejected method=%s path=%s status=%s",
                method,
                path,
                resp.status_code,
            )
            raise AirtableError("Airtable rejected the request", status_code=resp.status_code, details=details)
        try:
            return resp.json()
        except ValueError as exc:
            raise AirtableError("Airtable returned a non-JSON body", status_code=resp.status_code) from exc

    def create_record(self, base_id: str, table_name: str, fields: Dict[str, Any]) -> str:
        """Create one record and return its Airtable record id."""
        path = f"/v0/{quote(base_id, safe='')}/{quote(table_name, safe='')}"
        body = self._request("POST", path, json={"records": [{"fields": fields}]})
        try:
            record_id = body["records"][0]["id"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AirtableError("Airtable response did not include a record id", details=body) from exc
        logger.info("airtable_record_created base_id=%s table=%s record_id=%s", base_id, table_name, record_id)
        return str(record_id)

    def list_tables(self, base_id: str) -> List[Dict[str, Any]]:
        """Return the table schemas of a base (id, name, fields)."""
        body = self._request("GET", f"/v0/meta/bases/{quote(base_id, safe='')}/tables")
        tables = body.get("tables") if isinstance(body, dict) else None
        return list(tables or [])


__all__ = ["AirtableClient", "AirtableError"]
