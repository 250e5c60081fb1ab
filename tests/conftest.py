"""Shared test fixtures."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from vosescout.scrapers import base

FIXED_TODAY = date(2026, 2, 13)


@pytest.fixture
def fixed_today(monkeypatch: pytest.MonkeyPatch) -> date:
    """Pin the scrapers' notion of "today" to the date used in the fixtures."""
    monkeypatch.setattr(base, "local_today", lambda: FIXED_TODAY)
    return FIXED_TODAY


def mock_response(
    text: str = "",
    json_data: object = None,
    status_code: int = 200,
    error: Exception | None = None,
) -> MagicMock:
    """An httpx.Response stand-in."""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.json = MagicMock(return_value=json_data)
    response.raise_for_status = MagicMock(side_effect=error)
    return response


def mock_client(get=None, post=None) -> AsyncMock:
    """An httpx.AsyncClient stand-in usable as an async context manager."""
    client = AsyncMock()
    if get is not None:
        client.get = get
    if post is not None:
        client.post = post
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client
