"""FastAPI dependencies shared by route modules."""

from __future__ import annotations

from typing import Iterator

from fastapi import Request

from formsync.airtable.client import AirtableClient
from formsync.config import AppConfig


def airtable_client(request: Request) -> Iterator[AirtableClient]:
    """Yield an Airtable client bound to the app's config and transport."""
    config: AppConfig = request.app.state.config
    transport = getattr(request.app.state, "airtable_transport", None)
    client = AirtableClient(config.airtable, transport=transport)
    try:
        yield client
    finally:
        client.close()
