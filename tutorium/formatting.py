"""Display helpers shared by the API payloads and the Streamlit tables."""

from __future__ import annotations

from typing import Optional, Tuple

import pandas as pd

THB_SYMBOL = "฿"


def format_thb(value: object) -> str:
    """Format a THB amount the way th-TH currency formatting renders it (฿1,234.50)."""
    if value is None or pd.isna(value):
        return "N/A"
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return "N/A"
    sign = "-" if amount < 0 else ""
    return f"{sign}{THB_SYMBOL}{abs(amount):,.2f}"


def satang_to_thb(value: object) -> float:
    if value is None or pd.isna(value):
        return 0.0
    return float(value) / 100  # type: ignore[arg-type]


def status_badge(status: Optional[str]) -> Tuple[str, str]:
    """Return ``(label, tone)`` for a transaction status pill."""
    s = (status or "").lower()
    if s in ("paid", "successful"):
        return "paid", "green"
    if s == "pending":
        return "pending", "yellow"
    if s == "failed":
        return "failed", "red"
    return status or "—", "gray"


def channel_label(channel: Optional[str]) -> str:
    return (channel or "").replace("_", " ", 1).title()


def format_created(ts: object) -> str:
    if ts is None or pd.isna(ts):
        return "—"
    return pd.Timestamp(ts).strftime("%d/%m/%Y %H:%M:%S")
