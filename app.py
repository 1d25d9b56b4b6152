from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import Dict, Optional

import altair as alt
import pandas as pd
import streamlit as st

from tutorium.config import get_settings
from tutorium.data import load_dashboard_data, load_transactions
from tutorium.errors import DashboardLoadError
from tutorium.export import export_filename, transactions_to_csv
from tutorium.filters import (
    CHANNEL_OPTIONS,
    STATUS_OPTIONS,
    TIME_PRESETS,
    FilterState,
    apply_filters,
    go_to_page,
    reset_filters,
    with_end_date,
    with_preset,
    with_start_date,
)
from tutorium.formatting import format_thb
from tutorium.log_config import configure_logging
from tutorium.metrics_kpi import compute_kpis
from tutorium.metrics_series import compute_revenue_series
from tutorium.metrics_users import compute_user_composition
from tutorium.navigation import NAV_ITEMS, TRANSACTION_ITEMS, SidebarState, is_path_active, navigate, toggle_transaction_section
from tutorium.transactions import filter_transactions, paginate, table_rows

alt.data_transformers.disable_max_rows()
settings = get_settings()
configure_logging(level=settings.log_level, json_logs=settings.log_json)


# ---------- UI / layout helpers ----------
PAGE_CSS = """
<style>
.page-head {border-bottom: 1px solid #e5e7eb; margin-bottom: 12px; padding-bottom: 4px;}
.page-head small {color: #6b7280;}
.page-head h2 {margin: 0; padding: 0; font-size: 1.4rem; color: #111827;}
</style>
"""


def inject_base_styles():
    if not st.session_state.get("_page_css"):
        st.markdown(PAGE_CSS, unsafe_allow_html=True)
        st.session_state["_page_css"] = True


def page_heading(title: str, breadcrumb: str):
    st.markdown(f"<div class='page-head'><small>{breadcrumb}</small><h2>{title}</h2></div>", unsafe_allow_html=True)


@contextmanager
def card(title: str):
    with st.container(border=True):
        st.markdown(f"**{title}**")
        yield


def render_page_header(title: str, breadcrumb: str, cache_key: str, export_df: Optional[pd.DataFrame] = None):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        page_heading(title, breadcrumb)
    with c2:
        btn_cols = st.columns(2)
        if btn_cols[0].button("Refresh", key=f"refresh_{cache_key}"):
            st.session_state.pop(cache_key, None)
            st.rerun()
        if export_df is not None:
            btn_cols[1].download_button(
                "Export",
                data=transactions_to_csv(export_df).encode("utf-8"),
                file_name=export_filename(date.today()),
                mime="text/csv",
            )


def load_once(cache_key: str, loader):
    """Load a page's data once per session; a failure stops the page."""
    if cache_key not in st.session_state:
        try:
            st.session_state[cache_key] = loader()
        except DashboardLoadError as exc:
            st.error(f"Error: {exc}")
            st.stop()
    return st.session_state[cache_key]


# ---------- Session state ----------
st.set_page_config(page_title="KU Tutorium Admin", layout="wide")
inject_base_styles()

if "sidebar" not in st.session_state:
    st.session_state["sidebar"] = SidebarState()
if "filter_state" not in st.session_state:
    st.session_state["filter_state"] = FilterState()


def _go(path: str):
    st.session_state["sidebar"] = navigate(st.session_state["sidebar"], path)


def _toggle_transactions():
    st.session_state["sidebar"] = toggle_transaction_section(st.session_state["sidebar"])


# ----- Sidebar: navigation -----
with st.sidebar:
    st.markdown("### KUTutorium Admin")
    sidebar: SidebarState = st.session_state["sidebar"]
    for href, label in NAV_ITEMS:
        st.button(
            label,
            key=f"nav_{href}",
            on_click=_go,
            args=(href,),
            type="primary" if is_path_active(sidebar.path, href) else "secondary",
            use_container_width=True,
        )
    st.button(
        f"Transaction {'▾' if sidebar.transaction_open else '▸'}",
        key="nav_transaction_section",
        on_click=_toggle_transactions,
        use_container_width=True,
    )
    if sidebar.transaction_open:
        for href, label in TRANSACTION_ITEMS:
            _, sub = st.columns([1, 6])
            sub.button(
                label,
                key=f"nav_{href}_item",
                on_click=_go,
                args=(href,),
                type="primary" if is_path_active(sidebar.path, href) else "secondary",
                use_container_width=True,
            )


# ----- Page renderers -----
def render_dashboard_page():
    render_page_header("KU Tutorium Dashboard", "Home / Dashboard", "dashboard_ctx")
    data_ctx: Dict[str, pd.DataFrame] = load_once("dashboard_ctx", load_dashboard_data)

    kpis = compute_kpis(data_ctx)
    with card("Today"):
        cols = st.columns(4)
        cols[0].metric("Pending Reports", f"{kpis['pending_reports']}")
        cols[1].metric("Active Bans", f"{kpis['active_bans']}")
        cols[2].metric("Paid Volume (Today)", kpis["paid_today_display"])
        cols[3].metric("New Users (Today)", f"{kpis['new_users_today']}")

    chart_cols = st.columns([3, 2])
    with chart_cols[0]:
        with card(f"Paid volume, last {settings.revenue_window_days} days"):
            revenue = compute_revenue_series(data_ctx, settings.revenue_window_days)
            st.vega_lite_chart(revenue["chart"], use_container_width=True)
            st.caption(f"Total {format_thb(revenue['total_thb'])} over the window.")
    with chart_cols[1]:
        with card("Users"):
            composition = compute_user_composition(data_ctx)
            if composition["chart"] is None:
                st.info("No users yet.")
            else:
                st.vega_lite_chart(composition["chart"], use_container_width=True)


def render_filter_bar(state: FilterState) -> FilterState:
    draft = state.draft
    preset_values = [v for v, _ in TIME_PRESETS]
    status_values = [v for v, _ in STATUS_OPTIONS]
    channel_values = [v for v, _ in CHANNEL_OPTIONS]

    cols = st.columns([2, 2, 2, 2, 2, 4, 1, 1])
    start = cols[0].date_input("From", value=draft.start_date, format="YYYY-MM-DD")
    end = cols[1].date_input("to", value=draft.end_date, format="YYYY-MM-DD")
    preset = cols[2].selectbox(
        "Time", preset_values, index=preset_values.index(draft.preset), format_func=dict(TIME_PRESETS).get
    )
    status = cols[3].selectbox(
        "Status", status_values, index=status_values.index(draft.status), format_func=dict(STATUS_OPTIONS).get
    )
    channel = cols[4].selectbox(
        "Channel", channel_values, index=channel_values.index(draft.channel), format_func=dict(CHANNEL_OPTIONS).get
    )
    query = cols[5].text_input("Search", value=draft.query, placeholder="Search by transaction ID, user ID, charge ID")

    edited = replace(draft, status=status, channel=channel, query=query)
    if preset != draft.preset:
        edited = with_preset(edited, preset, date.today())
    elif start != draft.start_date:
        edited = with_start_date(edited, start)
    elif end != draft.end_date:
        edited = with_end_date(edited, end)
    new_state = replace(state, draft=edited)

    cols[6].markdown("<div style='height: 28px'></div>", unsafe_allow_html=True)
    cols[7].markdown("<div style='height: 28px'></div>", unsafe_allow_html=True)
    if cols[6].button("Apply", type="primary"):
        return apply_filters(new_state)
    if cols[7].button("Reset"):
        return reset_filters(new_state)
    return new_state


def render_pagination(page_no: int, pages: int) -> Optional[int]:
    cols = st.columns(pages + 2)
    target = None
    if cols[0].button("Prev", disabled=page_no <= 1):
        target = max(1, page_no - 1)
    for i in range(1, pages + 1):
        if cols[i].button(str(i), key=f"page_{i}", type="primary" if i == page_no else "secondary"):
            target = i
    if cols[-1].button("Next", disabled=page_no >= pages):
        target = min(pages, page_no + 1)
    return target


def render_payments_page():
    rows: pd.DataFrame = load_once("transactions_df", load_transactions)
    state: FilterState = st.session_state["filter_state"]
    filtered = filter_transactions(rows, state.applied)
    render_page_header("KU Tutorium Payment Transaction", "Home / Transaction / Payments", "transactions_df", export_df=filtered)

    new_state = render_filter_bar(state)
    if new_state != state:
        st.session_state["filter_state"] = new_state
        st.rerun()

    current = paginate(filtered, state.page)
    with card(f"Payments ({current.total_count})"):
        if current.items.empty:
            st.info("No transactions found")
        else:
            table = pd.DataFrame(table_rows(current.items))
            st.dataframe(
                table[["id", "user_id", "charge_id", "amount_display", "channel_label", "status_label", "created_display", "failure_message"]].rename(
                    columns={
                        "id": "ID",
                        "user_id": "User",
                        "charge_id": "Charge ID",
                        "amount_display": "Amount",
                        "channel_label": "Channel",
                        "status_label": "Status",
                        "created_display": "Created",
                        "failure_message": "Failure",
                    }
                ),
                use_container_width=True,
                hide_index=True,
            )
        target = render_pagination(current.page, current.total_pages)
        if target is not None and target != current.page:
            st.session_state["filter_state"] = go_to_page(state, target)
            st.rerun()


def render_placeholder_page(title: str, breadcrumb: str):
    inject_base_styles()
    page_heading(title, breadcrumb)
    st.info("This section is managed in the backend admin for now.")


current_path = st.session_state["sidebar"].path
if current_path == "/":
    render_dashboard_page()
elif is_path_active(current_path, "/transaction"):
    render_payments_page()
elif current_path == "/report":
    render_placeholder_page("Reports", "Home / Reports")
else:
    render_placeholder_page("Users", "Home / Users")
