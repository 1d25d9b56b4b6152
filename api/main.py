from __future__ import annotations

import logging
import math
from datetime import date

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import FilterOptionsResponse, OptionModel, TransactionFiltersModel
from tutorium.config import get_settings
from tutorium.data import load_dashboard_data, load_transactions
from tutorium.errors import DashboardLoadError
from tutorium.export import export_filename, transactions_to_csv
from tutorium.filters import (
    CHANNEL_OPTIONS,
    STATUS_OPTIONS,
    TIME_PRESETS,
    TransactionFilters,
    normalize_filters,
    with_preset,
)
from tutorium.log_config import configure_logging
from tutorium.metrics_kpi import compute_kpis
from tutorium.metrics_series import compute_revenue_series
from tutorium.metrics_users import compute_user_composition
from tutorium.transactions import PAGE_SIZE, compute_transactions_page, filter_transactions

settings = get_settings()
configure_logging(level=settings.log_level, json_logs=settings.log_json)

app = FastAPI(title="KU Tutorium Admin Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: TransactionFiltersModel) -> TransactionFilters:
    filters = normalize_filters(model.model_dump())
    if model.resolve_preset and filters.preset != "all":
        filters = with_preset(filters, filters.preset, date.today())
    return filters


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/filters")
def meta_filters():
    return FilterOptionsResponse(
        statuses=[OptionModel(value=value, label=label) for value, label in STATUS_OPTIONS],
        channels=[OptionModel(value=value, label=label) for value, label in CHANNEL_OPTIONS],
        presets=[OptionModel(value=value, label=label) for value, label in TIME_PRESETS],
        page_size=PAGE_SIZE,
    )


@app.get("/dashboard")
def dashboard(window_days: int = Query(default=settings.revenue_window_days, ge=1, le=366)):
    try:
        data_ctx = load_dashboard_data()
        return _json(
            {
                "kpis": compute_kpis(data_ctx),
                "revenue_series": compute_revenue_series(data_ctx, window_days),
                "user_composition": compute_user_composition(data_ctx),
            }
        )
    except DashboardLoadError as exc:
        return _error(exc, 502)
    except Exception as exc:
        logger.exception("dashboard failed")
        return _error(exc, 500)


@app.post("/transactions")
def transactions(filters: TransactionFiltersModel, page: int = Query(default=1)):
    try:
        rows = load_transactions()
        return _json(compute_transactions_page(rows, _filters_from_model(filters), page))
    except DashboardLoadError as exc:
        return _error(exc, 502)
    except Exception as exc:
        logger.exception("transactions failed")
        return _error(exc, 500)


@app.post("/export/transactions")
def export_transactions(filters: TransactionFiltersModel):
    try:
        rows = load_transactions()
        filtered = filter_transactions(rows, _filters_from_model(filters))
        csv_bytes = transactions_to_csv(filtered).encode("utf-8")
    except DashboardLoadError as exc:
        return _error(exc, 502)
    except Exception as exc:
        logger.exception("export failed")
        return _error(exc, 500)
    filename = export_filename(date.today())
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
