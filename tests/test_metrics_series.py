from datetime import timedelta, timezone

import pandas as pd
import pytest

from tests.conftest import NOW, make_tx
from tutorium.metrics_series import build_daily_series, compute_revenue_series
from tutorium.records import transactions_frame


def test_series_is_contiguous_and_ends_today(transactions):
    series = build_daily_series(transactions, 14, NOW)
    assert len(series) == 14
    assert series["date"].iloc[-1] == pd.Timestamp("2026-10-17")
    assert series["date"].iloc[0] == pd.Timestamp("2026-10-04")
    assert (series["date"].diff().dropna() == pd.Timedelta(days=1)).all()
    assert series["label"].iloc[-1] == "17/10"
    assert (series["value_thb"] >= 0).all()


def test_series_buckets_paid_amounts_by_local_day(transactions):
    series = build_daily_series(transactions, 14, NOW).set_index("label")
    # today: only the paid 150 THB row, the failed one is ignored
    assert series.loc["17/10", "value_thb"] == pytest.approx(150.0)
    assert series.loc["16/10", "value_thb"] == pytest.approx(200.0)
    # pending row three days ago does not count
    assert series.loc["14/10", "value_thb"] == 0.0
    # the paid row 20 days ago is outside the window
    assert series["value_thb"].sum() == pytest.approx(350.0)


def test_series_total_matches_window_aggregation():
    rows = [make_tx(i, NOW - timedelta(days=i, hours=3), amount_satang=1000 * (i + 1)) for i in range(10)]
    series = build_daily_series(transactions_frame(rows), 7, NOW)
    expected = sum(1000 * (i + 1) for i in range(7)) / 100
    assert series["value_thb"].sum() == pytest.approx(expected)


def test_series_with_no_transactions_is_all_zero():
    series = build_daily_series(transactions_frame([]), 5, NOW)
    assert len(series) == 5
    assert series["value_thb"].tolist() == [0.0] * 5


def test_series_rejects_empty_window(transactions):
    with pytest.raises(ValueError):
        build_daily_series(transactions, 0, NOW)


def test_compute_revenue_series_payload(transactions):
    payload = compute_revenue_series({"transactions": transactions}, 14, NOW)
    assert len(payload["points"]) == 14
    assert payload["points"][-1] == {"date": "2026-10-17", "label": "17/10", "value_thb": 150.0}
    assert payload["total_thb"] == pytest.approx(350.0)
    assert payload["chart"]["mark"]["type"] == "bar"


def test_series_ends_on_local_today_for_aware_now(transactions):
    series = build_daily_series(transactions, 3, NOW.astimezone(timezone.utc))
    assert series["date"].iloc[-1] == pd.Timestamp("2026-10-17")
