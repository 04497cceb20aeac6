"""Problem-details mapping for storage errors, plus logging setup."""

import json
import logging

import pytest
from sqlalchemy.exc import DBAPIError
from starlette.requests import Request

from portal.core.exceptions import database_error_handler
from portal.core.logging import configure_logging


class _DriverError(Exception):
    def __init__(self, sqlstate: str):
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


def _request(path: str = "/api/v1/members") -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("test", 80),
            "path": path,
            "query_string": b"",
            "headers": [],
        }
    )


@pytest.mark.asyncio
async def test_rls_denial_becomes_actionable_503():
    exc = DBAPIError("SELECT 1", {}, _DriverError("42501"))
    response = await database_error_handler(_request(), exc)
    assert response.status_code == 503
    body = json.loads(response.body)
    assert body["type"] == "storage-permission-denied"
    assert "row-level security" in body["detail"]
    assert body["instance"] == "/api/v1/members"


@pytest.mark.asyncio
async def test_other_database_errors_are_500():
    exc = DBAPIError("SELECT 1", {}, _DriverError("23505"))
    response = await database_error_handler(_request(), exc)
    assert response.status_code == 500


def test_configure_logging_is_idempotent():
    configure_logging("DEBUG")
    configure_logging("INFO")
    marked = [h for h in logging.getLogger().handlers if getattr(h, "_portal_handler", False)]
    assert len(marked) == 1
    assert logging.getLogger().level == logging.INFO
