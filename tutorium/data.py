from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional

import httpx
import pandas as pd

from tutorium.client import TutoriumApiClient
from tutorium.config import Settings
from tutorium.errors import DashboardLoadError
from tutorium.records import bans_frame, reports_frame, transactions_frame, users_frame

logger = logging.getLogger(__name__)

COLLECTIONS = ("reports", "ban_learners", "ban_teachers", "transactions", "users")


async def _gather_all(*aws: Awaitable[Any]) -> List[Any]:
    """Await everything concurrently; the first failure cancels the rest."""
    tasks = [asyncio.ensure_future(a) for a in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


async def fetch_dashboard_collections(api: TutoriumApiClient) -> Dict[str, List[Dict[str, Any]]]:
    results = await _gather_all(
        api.get_reports(),
        api.get_ban_learners(),
        api.get_ban_teachers(),
        api.get_payment_transactions(),
        api.get_users(),
    )
    return dict(zip(COLLECTIONS, results))


def build_context(raw: Dict[str, List[Dict[str, Any]]]) -> Dict[str, pd.DataFrame]:
    return {
        "reports": reports_frame(raw.get("reports", [])),
        "ban_learners": bans_frame(raw.get("ban_learners", [])),
        "ban_teachers": bans_frame(raw.get("ban_teachers", [])),
        "transactions": transactions_frame(raw.get("transactions", [])),
        "users": users_frame(raw.get("users", [])),
    }


def _run(coro_factory, settings: Optional[Settings], transport: Optional[httpx.AsyncBaseTransport]):
    async def _main():
        async with TutoriumApiClient(settings, transport=transport) as api:
            return await coro_factory(api)

    try:
        return asyncio.run(_main())
    except Exception as exc:
        logger.warning("dashboard load failed: %s", exc)
        raise DashboardLoadError(str(exc) or type(exc).__name__) from exc


# ---------------- Public API (Streamlit + FastAPI use) ----------------
def load_dashboard_data(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, pd.DataFrame]:
    """Fetch all five collections; any failure fails the whole load."""
    raw = _run(fetch_dashboard_collections, settings, transport)
    ctx = build_context(raw)
    logger.info("dashboard data loaded: %s", {k: len(v) for k, v in ctx.items()})
    return ctx


def load_transactions(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> pd.DataFrame:
    raw = _run(lambda api: api.get_payment_transactions(), settings, transport)
    df = transactions_frame(raw)
    logger.info("payment transactions loaded: %d", len(df))
    return df
