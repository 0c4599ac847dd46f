from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from formsync.config import AppConfig, load_config
from formsync.db.base import get_engine
from formsync.db.schema import ensure_schema
from formsync.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from formsync.http.request_id import RequestIdMiddleware
from formsync.logging_setup import configure_logging
from formsync.middleware.cors import apply_cors
from formsync.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError:
            logger.warning("health_check_db_unavailable", exc_info=True)
            return {"status": "degraded", "db": False}

    return check


def create_app(
    config: Optional[AppConfig] = None,
    *,
    airtable_transport: Optional[httpx.BaseTransport] = None,
) -> FastAPI:
    """Build the FastAPI application.

    ``airtable_transport`` replaces the network transport of every Airtable
    client the app creates (tests pass an ``httpx.MockTransport``).
    """
    configure_logging()
    cfg = config or load_config()

    app = FastAPI(title="formsync", version="1.0.0")
    app.state.config = cfg
    app.state.airtable_transport = airtable_transport

    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)
    apply_cors(app, origins=cfg.cors.origins)

    # Schema creation happens here rather than at import time
    ensure_schema(get_engine(cfg.database.dsn))

    app.include_router(api_router)
    app.include_router(api_router, prefix="/api/v1", include_in_schema=False)

    health_check = _health_check()

    @app.get("/health")
    def health():
        return health_check()

    logger.info("app_created airtable_token=%s origins=%s", bool(cfg.airtable.token), cfg.cors.origins)
    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
