"""
Shared fixtures.

Timestamps are written without an offset so they are read as local wall-clock
time and the suite does not depend on the machine's timezone.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List

import pytest

from tutorium.records import transactions_frame

NOW = datetime(2026, 10, 17, 12, 0, 0)


def iso(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%S")


def make_tx(tx_id: int, created_at: datetime, **overrides: Any) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "id": tx_id,
        "user_id": 100 + tx_id,
        "charge_id": f"chrg_test_{tx_id:03d}",
        "amount_satang": 10000,
        "currency": "THB",
        "channel": "card",
        "status": "paid",
        "failure_code": None,
        "failure_message": None,
        "created_at": iso(created_at),
    }
    row.update(overrides)
    return row


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def raw_transactions() -> List[Dict[str, Any]]:
    return [
        make_tx(1, NOW.replace(hour=9), status="Paid", amount_satang=15000),
        make_tx(2, NOW.replace(hour=10), status="failed", amount_satang=5000, channel="promptpay",
                failure_code="insufficient_fund", failure_message="Insufficient funds"),
        make_tx(3, NOW - timedelta(days=1), status="PAID", amount_satang=20000, channel="bank_transfer"),
        make_tx(4, NOW - timedelta(days=3), status="pending", amount_satang=7500, channel=None),
        make_tx(5, NOW - timedelta(days=20), status="paid", amount_satang=99900, channel="wallet"),
    ]


@pytest.fixture
def transactions(raw_transactions):
    return transactions_frame(raw_transactions)
