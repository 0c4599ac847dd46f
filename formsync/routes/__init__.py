"""APIRouter registration for the form service."""

from __future__ import annotations

from fastapi import APIRouter

from formsync.routes.airtable import router as airtable_router
from formsync.routes.forms import router as forms_router
from formsync.routes.webhooks import router as webhooks_router

api_router = APIRouter()
api_router.include_router(forms_router)
api_router.include_router(webhooks_router)
api_router.include_router(airtable_router)

__all__ = ["api_router"]
