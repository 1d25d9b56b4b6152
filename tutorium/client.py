"""
HTTP client for the KU Tutorium backend.

Each endpoint returns the full collection as a JSON array; there is no
paging or streaming at this boundary. Uses HTTPX so the dashboard loader can
issue the fetches concurrently.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from tutorium.config import Settings, get_settings

logger = logging.getLogger(__name__)


class TutoriumApiClient:
    """
    Async client for the admin collections.

    Use as an async context manager so one connection pool serves all the
    fetches of a page load:

        async with TutoriumApiClient() as api:
            reports = await api.get_reports()
    """

    REPORTS_PATH = "/reports"
    BAN_LEARNERS_PATH = "/ban_learners"
    BAN_TEACHERS_PATH = "/ban_teachers"
    PAYMENT_TRANSACTIONS_PATH = "/payment_transactions"
    USERS_PATH = "/users"

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = settings or get_settings()
        self.base_url = settings.api_base_url.rstrip("/")
        self.timeout = settings.api_timeout_seconds
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "TutoriumApiClient":
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def _get_list(self, path: str) -> List[Dict[str, Any]]:
        if self._http is None:
            raise RuntimeError("TutoriumApiClient must be used inside 'async with'")
        response = await self._http.get(path)
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, list):
            raise ValueError(f"Expected a JSON array from {path}, got {type(body).__name__}")
        logger.debug("GET %s -> %d records", path, len(body))
        return body

    async def get_reports(self) -> List[Dict[str, Any]]:
        return await self._get_list(self.REPORTS_PATH)

    async def get_ban_learners(self) -> List[Dict[str, Any]]:
        return await self._get_list(self.BAN_LEARNERS_PATH)

    async def get_ban_teachers(self) -> List[Dict[str, Any]]:
        return await self._get_list(self.BAN_TEACHERS_PATH)

    async def get_payment_transactions(self) -> List[Dict[str, Any]]:
        return await self._get_list(self.PAYMENT_TRANSACTIONS_PATH)

    async def get_users(self) -> List[Dict[str, Any]]:
        return await self._get_list(self.USERS_PATH)
