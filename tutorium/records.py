"""Backend record shapes and their pandas frames.

All datetimes are compared on the local wall clock: values carrying an offset
are converted to the machine's zone and stored naive, naive values are taken
as already local. Unparsable values become ``None`` / ``NaT``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from datetime import date, datetime, time
from typing import Any, Iterable, List, Mapping, Optional, Type, TypeVar, Union

import pandas as pd

logger = logging.getLogger(__name__)

R = TypeVar("R")


def is_missing(value: object) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_truthy(value: object) -> bool:
    return not is_missing(value) and bool(value)


def optional_str(value: object) -> Optional[str]:
    if is_missing(value):
        return None
    return str(value)


def as_int(value: object, default: int = 0) -> int:
    if is_missing(value):
        return default
    try:
        return int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def parse_instant(value: object) -> Optional[datetime]:
    """Parse an ISO datetime into a naive local wall-clock datetime."""
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        ts = pd.Timestamp(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        ts = pd.to_datetime(text, format="ISO8601", errors="coerce")
    if pd.isna(ts):
        return None
    return to_local_naive(ts.to_pydatetime())


def to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def local_now(now: Optional[datetime] = None) -> datetime:
    """``now`` (default: the current time) on the naive local wall clock."""
    return to_local_naive(now if now is not None else datetime.now())


def parse_instant_series(values: pd.Series) -> pd.Series:
    parsed = values.map(parse_instant) if len(values) else pd.Series([], dtype=object)
    return pd.to_datetime(parsed, errors="coerce")


def start_of_day(value: Union[datetime, date]) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def end_of_day(value: Union[datetime, date]) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time(23, 59, 59, 999000))


def lower_text(values: pd.Series) -> pd.Series:
    """Lower-cased string view of a column; missing values become ""."""
    return values.map(lambda v: "" if is_missing(v) else str(v).lower())


# ---------------- Records ----------------
@dataclass(frozen=True)
class Report:
    report_status: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Report":
        return cls(report_status=optional_str(raw.get("report_status")))


@dataclass(frozen=True)
class BanRecord:
    """Shared shape of learner and teacher bans."""

    ban_start: Optional[str] = None
    ban_end: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "BanRecord":
        return cls(ban_start=optional_str(raw.get("ban_start")), ban_end=optional_str(raw.get("ban_end")))


@dataclass(frozen=True)
class Transaction:
    id: Any = None
    user_id: Any = None
    charge_id: Optional[str] = None
    amount_satang: int = 0
    currency: Optional[str] = None
    channel: Optional[str] = None
    status: Optional[str] = None
    failure_code: Optional[str] = None
    failure_message: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Transaction":
        return cls(
            id=raw.get("id"),
            user_id=raw.get("user_id"),
            charge_id=optional_str(raw.get("charge_id")),
            amount_satang=as_int(raw.get("amount_satang")),
            currency=optional_str(raw.get("currency")),
            channel=optional_str(raw.get("channel")),
            status=optional_str(raw.get("status")),
            failure_code=optional_str(raw.get("failure_code")),
            failure_message=optional_str(raw.get("failure_message")),
            created_at=optional_str(raw.get("created_at")),
        )


@dataclass(frozen=True)
class User:
    teacher_id: Any = None
    created_at: Optional[str] = None

    @property
    def is_teacher(self) -> bool:
        return is_truthy(self.teacher_id)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "User":
        return cls(teacher_id=raw.get("teacher_id"), created_at=optional_str(raw.get("created_at")))


# ---------------- Frames ----------------
def _records(values: Iterable[object], cls: Type[R]) -> List[R]:
    out: List[R] = []
    for v in values or []:
        if isinstance(v, cls):
            out.append(v)
        elif isinstance(v, Mapping):
            out.append(cls.from_dict(v))  # type: ignore[attr-defined]
        else:
            logger.warning("skipping %s record that is not an object: %r", cls.__name__, v)
    return out


def _frame(records: List[Any], cls: type) -> pd.DataFrame:
    columns = [f.name for f in fields(cls)]
    rows = [asdict(r) for r in records]
    # object dtype keeps integer ids as ints even when some are missing
    return pd.DataFrame(rows, columns=columns, dtype=object)


def reports_frame(values: Iterable[object]) -> pd.DataFrame:
    return _frame(_records(values, Report), Report)


def bans_frame(values: Iterable[object]) -> pd.DataFrame:
    df = _frame(_records(values, BanRecord), BanRecord)
    df["ban_start_ts"] = parse_instant_series(df["ban_start"])
    df["ban_end_ts"] = parse_instant_series(df["ban_end"])
    return df


def transactions_frame(values: Iterable[object]) -> pd.DataFrame:
    df = _frame(_records(values, Transaction), Transaction)
    df["amount_satang"] = pd.to_numeric(df["amount_satang"], errors="coerce").fillna(0).astype("int64")
    df["created_ts"] = parse_instant_series(df["created_at"])
    return df


def users_frame(values: Iterable[object]) -> pd.DataFrame:
    users = _records(values, User)
    df = _frame(users, User)
    df["is_teacher"] = pd.Series([u.is_teacher for u in users], index=df.index, dtype=bool)
    df["created_ts"] = parse_instant_series(df["created_at"])
    return df
