from datetime import date, datetime, timedelta

import pytest

from tests.conftest import NOW, make_tx
from tutorium.filters import TransactionFilters
from tutorium.records import transactions_frame
from tutorium.transactions import PAGE_SIZE, compute_transactions_page, filter_transactions, paginate, total_pages


def _ids(df):
    return df["id"].tolist()


def test_no_filters_returns_everything_newest_first(transactions):
    out = filter_transactions(transactions, TransactionFilters())
    assert _ids(out) == [2, 1, 3, 4, 5]


def test_status_filter_is_case_insensitive():
    txs = transactions_frame(
        [
            make_tx(1, NOW, status="PAID"),
            make_tx(2, NOW - timedelta(hours=1), status="PAID"),
            make_tx(3, NOW - timedelta(hours=2), status="failed"),
        ]
    )
    out = filter_transactions(txs, TransactionFilters(status="paid"))
    assert _ids(out) == [1, 2]


def test_other_channel_matches_unknown_and_missing_channels():
    txs = transactions_frame(
        [
            make_tx(1, NOW, channel=None),
            make_tx(2, NOW - timedelta(hours=1), channel="wallet"),
            make_tx(3, NOW - timedelta(hours=2), channel="card"),
            make_tx(4, NOW - timedelta(hours=3), channel=""),
        ]
    )
    assert _ids(filter_transactions(txs, TransactionFilters(channel="other"))) == [1, 2, 4]
    assert _ids(filter_transactions(txs, TransactionFilters(channel="card"))) == [3]


def test_query_matches_id_user_id_and_charge_id_case_insensitively():
    txs = transactions_frame(
        [
            make_tx(17, NOW, user_id=900, charge_id="chrg_ABC"),
            make_tx(2, NOW - timedelta(hours=1), user_id=175, charge_id="chrg_zzz"),
            make_tx(3, NOW - timedelta(hours=2), user_id=3, charge_id=None),
        ]
    )
    assert _ids(filter_transactions(txs, TransactionFilters(query="17"))) == [17, 2]
    assert _ids(filter_transactions(txs, TransactionFilters(query="abc"))) == [17]
    assert _ids(filter_transactions(txs, TransactionFilters(query="nothing"))) == []


def test_date_range_bounds_are_inclusive_local_days():
    txs = transactions_frame(
        [
            make_tx(1, datetime(2026, 10, 10, 0, 0, 0)),
            make_tx(2, datetime(2026, 10, 12, 23, 59, 59)),
            make_tx(3, datetime(2026, 10, 13, 0, 0, 0)),
            make_tx(4, datetime(2026, 10, 9, 23, 59, 59)),
            {"id": 5, "status": "paid", "created_at": "not a date"},
        ]
    )
    f = TransactionFilters(start_date=date(2026, 10, 10), end_date=date(2026, 10, 12))
    assert _ids(filter_transactions(txs, f)) == [2, 1]
    assert _ids(filter_transactions(txs, TransactionFilters(start_date=date(2026, 10, 13)))) == [3]
    assert _ids(filter_transactions(txs, TransactionFilters(end_date=date(2026, 10, 9)))) == [4]
    # without a range, a row with a bad date is kept and sorted last
    assert _ids(filter_transactions(txs, TransactionFilters()))[-1] == 5


def test_filters_combine_with_and(transactions):
    f = TransactionFilters(status="paid", channel="bank_transfer", start_date=date(2026, 10, 15))
    assert _ids(filter_transactions(transactions, f)) == [3]


def test_filtering_is_idempotent(transactions):
    f = TransactionFilters(status="paid", query="10")
    once = filter_transactions(transactions, f)
    twice = filter_transactions(once, f)
    assert _ids(once) == _ids(twice)


def test_filter_empty_frame():
    assert filter_transactions(transactions_frame([]), TransactionFilters(status="paid")).empty


def test_pagination_clamps_requested_page():
    rows = transactions_frame([make_tx(i, NOW - timedelta(minutes=i)) for i in range(25)])
    assert total_pages(25, PAGE_SIZE) == 3

    last = paginate(rows, 10)
    assert last.page == 3
    assert last.total_pages == 3
    assert len(last.items) == 5
    assert not last.has_next and last.has_prev

    first = paginate(rows, 0)
    assert first.page == 1
    assert len(first.items) == 10


def test_pagination_of_empty_result_has_one_page():
    page = paginate(transactions_frame([]), 5)
    assert (page.page, page.total_pages, page.total_count) == (1, 1, 0)
    assert page.items.empty


def test_paginate_rejects_bad_page_size(transactions):
    with pytest.raises(ValueError):
        paginate(transactions, 1, page_size=0)


def test_compute_transactions_page_payload(transactions):
    payload = compute_transactions_page(transactions, TransactionFilters(status="failed"), page=7)
    assert payload["page"] == 1
    assert payload["total_count"] == 1
    row = payload["rows"][0]
    assert row["id"] == 2
    assert row["amount_display"] == "฿50.00"
    assert row["channel_label"] == "Promptpay"
    assert (row["status_label"], row["status_tone"]) == ("failed", "red")
    assert row["failure_message"] == "Insufficient funds"
    assert row["created_display"] == "17/10/2026 10:00:00"
    assert payload["filters"]["status"] == "failed"
