from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class TransactionFiltersModel(BaseModel):
    query: str = ""
    status: Literal["all", "paid", "pending", "failed"] = "all"
    channel: Literal["all", "card", "promptpay", "bank_transfer", "other"] = "all"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    preset: Literal["all", "today", "7d", "30d", "month"] = "all"
    # when true the preset's range replaces start_date/end_date
    resolve_preset: bool = False


class OptionModel(BaseModel):
    value: str
    label: str


class FilterOptionsResponse(BaseModel):
    statuses: List[OptionModel] = Field(default_factory=list)
    channels: List[OptionModel] = Field(default_factory=list)
    presets: List[OptionModel] = Field(default_factory=list)
    page_size: int
