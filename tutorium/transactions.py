from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

import pandas as pd

from tutorium.filters import KNOWN_CHANNELS, TransactionFilters
from tutorium.formatting import channel_label, format_created, format_thb, satang_to_thb, status_badge
from tutorium.records import end_of_day, is_missing, lower_text, start_of_day

PAGE_SIZE = 10


# ---------------- Predicates ----------------
def _match_query(df: pd.DataFrame, query: str) -> pd.Series:
    q = (query or "").lower()
    if not q:
        return pd.Series(True, index=df.index)
    hit = pd.Series(False, index=df.index)
    for col in ("id", "user_id", "charge_id"):
        hit |= lower_text(df[col]).str.contains(q, regex=False)
    return hit


def _match_status(df: pd.DataFrame, status: str) -> pd.Series:
    if status == "all":
        return pd.Series(True, index=df.index)
    return lower_text(df["status"]).eq(status.lower())


def _match_channel(df: pd.DataFrame, channel: str) -> pd.Series:
    if channel == "all":
        return pd.Series(True, index=df.index)
    ch = lower_text(df["channel"])
    if channel == "other":
        return ~ch.isin(KNOWN_CHANNELS)
    return ch.eq(channel.lower())


def _match_date_range(df: pd.DataFrame, filters: TransactionFilters) -> pd.Series:
    mask = pd.Series(True, index=df.index)
    created = df["created_ts"]
    if filters.start_date is not None:
        mask &= created >= pd.Timestamp(start_of_day(filters.start_date))
    if filters.end_date is not None:
        mask &= created <= pd.Timestamp(end_of_day(filters.end_date))
    return mask


def filter_transactions(transactions: pd.DataFrame, filters: TransactionFilters) -> pd.DataFrame:
    """Apply query, status, channel and date-range filters, newest first."""
    if transactions.empty:
        return transactions.copy()
    df = transactions
    df = df[_match_query(df, filters.query)]
    df = df[_match_status(df, filters.status)]
    df = df[_match_channel(df, filters.channel)]
    df = df[_match_date_range(df, filters)]
    return df.sort_values("created_ts", ascending=False, na_position="last", kind="mergesort")


# ---------------- Pagination ----------------
@dataclass(frozen=True)
class Page:
    items: pd.DataFrame
    page: int
    total_pages: int
    total_count: int
    page_size: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(count / page_size))


def paginate(rows: pd.DataFrame, page: int, page_size: int = PAGE_SIZE) -> Page:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    count = int(len(rows))
    pages = total_pages(count, page_size)
    current = max(1, min(int(page), pages))
    start = (current - 1) * page_size
    return Page(
        items=rows.iloc[start : start + page_size],
        page=current,
        total_pages=pages,
        total_count=count,
        page_size=page_size,
    )


# ---------------- Payloads ----------------
def _cell(value: object) -> Any:
    return None if is_missing(value) else value


def table_rows(items: pd.DataFrame) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for rec in items.to_dict(orient="records"):
        label, tone = status_badge(_cell(rec.get("status")))
        rows.append(
            {
                "id": _cell(rec.get("id")),
                "user_id": _cell(rec.get("user_id")),
                "charge_id": _cell(rec.get("charge_id")),
                "amount_thb": satang_to_thb(rec.get("amount_satang")),
                "amount_display": format_thb(satang_to_thb(rec.get("amount_satang"))),
                "currency": _cell(rec.get("currency")),
                "channel": _cell(rec.get("channel")),
                "channel_label": channel_label(_cell(rec.get("channel"))),
                "status": _cell(rec.get("status")),
                "status_label": label,
                "status_tone": tone,
                "failure_code": _cell(rec.get("failure_code")),
                "failure_message": _cell(rec.get("failure_message")),
                "created_at": _cell(rec.get("created_at")),
                "created_display": format_created(rec.get("created_ts")),
            }
        )
    return rows


def compute_transactions_page(
    transactions: pd.DataFrame,
    filters: TransactionFilters,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> Dict[str, Any]:
    filtered = filter_transactions(transactions, filters)
    current = paginate(filtered, page, page_size)
    return {
        "filters": filters.to_dict(),
        "page": current.page,
        "total_pages": current.total_pages,
        "total_count": current.total_count,
        "page_size": current.page_size,
        "has_prev": current.has_prev,
        "has_next": current.has_next,
        "rows": table_rows(current.items),
    }
