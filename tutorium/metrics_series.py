from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

import altair as alt
import pandas as pd

from tutorium.charts import to_vega_spec
from tutorium.records import local_now, lower_text, start_of_day

DEFAULT_WINDOW_DAYS = 14


def build_daily_series(
    transactions: pd.DataFrame,
    window_days: int = DEFAULT_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> pd.DataFrame:
    """Paid volume per local calendar day over the trailing ``window_days``.

    Always returns exactly ``window_days`` contiguous rows, oldest first and
    ending today; days without paid transactions carry 0.
    """
    if window_days < 1:
        raise ValueError(f"window_days must be >= 1, got {window_days}")
    today = pd.Timestamp(start_of_day(local_now(now)))
    days = pd.date_range(end=today, periods=window_days, freq="D")

    sums: Dict[Any, float] = {}
    if not transactions.empty:
        paid = transactions[lower_text(transactions["status"]).eq("paid") & transactions["created_ts"].notna()]
        if not paid.empty:
            by_day = paid.assign(day=paid["created_ts"].dt.date).groupby("day")["amount_satang"].sum()
            sums = {day: float(satang) / 100 for day, satang in by_day.items()}

    return pd.DataFrame(
        {
            "date": days,
            "label": days.strftime("%d/%m"),
            "value_thb": [sums.get(d.date(), 0.0) for d in days],
        }
    )


def compute_revenue_series(
    data_ctx: Dict[str, Any],
    window_days: int = DEFAULT_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    series = build_daily_series(data_ctx.get("transactions", pd.DataFrame()), window_days, now)

    bar = (
        alt.Chart(series)
        .mark_bar(color="#2563eb")
        .encode(
            x=alt.X("label:O", title="Day", sort=None),
            y=alt.Y("value_thb:Q", title="Paid volume (THB)", axis=alt.Axis(format=",.0f")),
            tooltip=[alt.Tooltip("date:T", format="%d/%m/%Y"), alt.Tooltip("value_thb:Q", title="THB", format=",.2f")],
        )
        .properties(height=260)
    )

    points = [
        {"date": row.date.date().isoformat(), "label": row.label, "value_thb": float(row.value_thb)}
        for row in series.itertuples(index=False)
    ]
    return {
        "window_days": window_days,
        "points": points,
        "total_thb": float(series["value_thb"].sum()),
        "chart": to_vega_spec(bar),
    }
