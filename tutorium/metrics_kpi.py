from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

import pandas as pd

from tutorium.formatting import format_thb
from tutorium.records import local_now, lower_text, parse_instant


def _now(now: Optional[datetime]) -> datetime:
    return local_now(now)


def _on_day(ts: pd.Series, ref: datetime) -> pd.Series:
    if ts.empty:
        return pd.Series(False, index=ts.index, dtype=bool)
    # NaT compares unequal, so unparsable dates never match
    return ts.dt.normalize() == pd.Timestamp(ref.date())


def count_pending(reports: pd.DataFrame) -> int:
    if reports.empty:
        return 0
    return int(lower_text(reports["report_status"]).eq("pending").sum())


def is_ban_active(ban_start: object, ban_end: object, now: Optional[datetime] = None) -> bool:
    now = _now(now)
    start = parse_instant(ban_start)
    if start is None:
        return False
    end = parse_instant(ban_end)
    if end is None:
        return now >= start
    return start <= now <= end


def _active_mask(bans: pd.DataFrame, now: datetime) -> pd.Series:
    start = bans["ban_start_ts"]
    end = bans["ban_end_ts"]
    ts_now = pd.Timestamp(now)
    open_ended = start.notna() & end.isna() & (start <= ts_now)
    bounded = start.notna() & end.notna() & (start <= ts_now) & (ts_now <= end)
    return open_ended | bounded


def count_active_bans(learner_bans: pd.DataFrame, teacher_bans: pd.DataFrame, now: Optional[datetime] = None) -> int:
    now = _now(now)
    total = 0
    for bans in (learner_bans, teacher_bans):
        if not bans.empty:
            total += int(_active_mask(bans, now).sum())
    return total


def sum_paid_today(transactions: pd.DataFrame, now: Optional[datetime] = None) -> float:
    """Paid volume created on the local calendar day of ``now``, in THB."""
    now = _now(now)
    if transactions.empty:
        return 0.0
    paid = lower_text(transactions["status"]).eq("paid")
    today = _on_day(transactions["created_ts"], now)
    satang = int(transactions.loc[paid & today, "amount_satang"].sum())
    return satang / 100


def count_new_users_today(users: pd.DataFrame, now: Optional[datetime] = None) -> int:
    now = _now(now)
    if users.empty:
        return 0
    return int(_on_day(users["created_ts"], now).sum())


def compute_kpis(data_ctx: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    now = _now(now)
    empty = pd.DataFrame()
    paid_today = sum_paid_today(data_ctx.get("transactions", empty), now)
    return {
        "as_of": now.isoformat(timespec="seconds"),
        "pending_reports": count_pending(data_ctx.get("reports", empty)),
        "active_bans": count_active_bans(data_ctx.get("ban_learners", empty), data_ctx.get("ban_teachers", empty), now),
        "paid_today_thb": paid_today,
        "paid_today_display": format_thb(paid_today),
        "new_users_today": count_new_users_today(data_ctx.get("users", empty), now),
    }
