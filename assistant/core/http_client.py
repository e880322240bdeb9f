"""Reusable HTTP client utilities."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx


@asynccontextmanager
async def async_http_client(timeout: float = 120.0) -> AsyncIterator[httpx.AsyncClient]:
    """Yield one AsyncClient for the whole session and close it afterwards.

    The completion SDK sends every request through this client, so the
    connection pool and timeout are shared by the loop and ``gpt_tool``.
    """

    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
        yield client
