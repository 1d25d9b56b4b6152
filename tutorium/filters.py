from __future__ import annotations

import calendar
from dataclasses import asdict, dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

STATUS_OPTIONS: List[Tuple[str, str]] = [
    ("all", "All status"),
    ("paid", "Paid"),
    ("pending", "Pending"),
    ("failed", "Failed"),
]
CHANNEL_OPTIONS: List[Tuple[str, str]] = [
    ("all", "All channels"),
    ("card", "Card"),
    ("promptpay", "PromptPay"),
    ("bank_transfer", "Bank transfer"),
    ("other", "Other"),
]
TIME_PRESETS: List[Tuple[str, str]] = [
    ("all", "All time"),
    ("today", "Today"),
    ("7d", "Last 7 days"),
    ("30d", "Last 30 days"),
    ("month", "This month"),
]

# channels with their own option; anything else (null included) is "other"
KNOWN_CHANNELS = frozenset({"card", "promptpay", "bank_transfer"})

_STATUS_VALUES = {v for v, _ in STATUS_OPTIONS}
_CHANNEL_VALUES = {v for v, _ in CHANNEL_OPTIONS}
_PRESET_VALUES = {v for v, _ in TIME_PRESETS}


@dataclass(frozen=True)
class TransactionFilters:
    query: str = ""
    status: str = "all"
    channel: str = "all"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    preset: str = "all"

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["start_date"] = self.start_date.isoformat() if self.start_date else None
        out["end_date"] = self.end_date.isoformat() if self.end_date else None
        return out


def _as_date(value: object) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def _choice(value: object, allowed: set) -> str:
    s = str(value or "all").strip().lower()
    return s if s in allowed else "all"


def normalize_filters(raw: Optional[dict]) -> TransactionFilters:
    raw = raw or {}
    return TransactionFilters(
        query=str(raw.get("query") or "").strip(),
        status=_choice(raw.get("status"), _STATUS_VALUES),
        channel=_choice(raw.get("channel"), _CHANNEL_VALUES),
        start_date=_as_date(raw.get("start_date")),
        end_date=_as_date(raw.get("end_date")),
        preset=_choice(raw.get("preset"), _PRESET_VALUES),
    )


# ---------------- Presets ----------------
def preset_range(preset: str, today: Optional[date] = None) -> Tuple[Optional[date], Optional[date]]:
    """Inclusive local calendar bounds for a time preset."""
    today = today or date.today()
    if preset == "today":
        return today, today
    if preset == "7d":
        return today - timedelta(days=6), today
    if preset == "30d":
        return today - timedelta(days=29), today
    if preset == "month":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    return None, None


def with_preset(filters: TransactionFilters, preset: str, today: Optional[date] = None) -> TransactionFilters:
    preset = _choice(preset, _PRESET_VALUES)
    start, end = preset_range(preset, today)
    return replace(filters, preset=preset, start_date=start, end_date=end)


def with_start_date(filters: TransactionFilters, value: object) -> TransactionFilters:
    return replace(filters, start_date=_as_date(value), preset="all")


def with_end_date(filters: TransactionFilters, value: object) -> TransactionFilters:
    return replace(filters, end_date=_as_date(value), preset="all")


# ---------------- Draft / applied state ----------------
@dataclass(frozen=True)
class FilterState:
    """Table filter state owned by the UI.

    ``draft`` collects edits; only ``applied`` reaches the table.
    """

    draft: TransactionFilters = TransactionFilters()
    applied: TransactionFilters = TransactionFilters()
    page: int = 1


def edit_draft(state: FilterState, **changes: Any) -> FilterState:
    return replace(state, draft=replace(state.draft, **changes))


def apply_filters(state: FilterState) -> FilterState:
    return replace(state, applied=state.draft, page=1)


def reset_filters(state: FilterState) -> FilterState:
    return FilterState()


def go_to_page(state: FilterState, page: int) -> FilterState:
    return replace(state, page=int(page))
