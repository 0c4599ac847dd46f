"""FastAPI application package init for the Airtable form service.

This package exposes a small FastAPI application factory. It wires only
cross-cutting middleware (request-id and CORS) and mounts the API routers.
Business logic lives in `formsync/logic/` and route handlers in
`formsync/routes/`; the shared visibility rule engine is
`formsync/logic/conditional_rules.py`.
"""

from __future__ import annotations

from formsync.main import create_app

__all__ = ["create_app"]
