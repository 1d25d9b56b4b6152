from __future__ import annotations

from datetime import date
from typing import Optional

import pandas as pd

from tutorium.records import is_missing

CSV_COLUMNS = [
    "id",
    "user_id",
    "charge_id",
    "amount_thb",
    "currency",
    "channel",
    "status",
    "failure_code",
    "failure_message",
    "created_at",
]
DEFAULT_CURRENCY = "THB"


def _plain_number(value: float) -> str:
    # 15000 satang -> "150", 15050 -> "150.5"
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _text(value: object) -> str:
    if is_missing(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def export_frame(filtered: pd.DataFrame) -> pd.DataFrame:
    """Filtered transactions laid out as the export columns, all as text."""
    if filtered.empty:
        return pd.DataFrame(columns=CSV_COLUMNS)
    out = pd.DataFrame(index=filtered.index)
    for col in CSV_COLUMNS:
        if col == "amount_thb":
            satang = pd.to_numeric(filtered["amount_satang"], errors="coerce").fillna(0)
            out[col] = (satang / 100).map(_plain_number)
        elif col == "currency":
            out[col] = filtered[col].map(lambda v: DEFAULT_CURRENCY if is_missing(v) else str(v))
        else:
            out[col] = filtered[col].map(_text)
    return out


def transactions_to_csv(filtered: pd.DataFrame) -> str:
    """Serialize the filtered (not paginated) transactions to CSV text.

    Fields containing a comma, double quote or newline are quoted with inner
    quotes doubled. Missing values are written as empty fields, except a
    missing currency, which is written as ``THB``.
    """
    return export_frame(filtered).to_csv(index=False, lineterminator="\n")


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"payments_{today.isoformat()}.csv"
